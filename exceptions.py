"""
Redsys Exception Hierarchy

Error codes for the signing and notification validation flows.
All errors use the redsys: prefix so callers can map them to responses.
"""
from typing import Any, Dict, Optional


class PaymentError(Exception):
    """
    Base exception for all Redsys payment errors.

    Every error is recoverable at the boundary: callers get a typed
    error, never a terminated process.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class UnsupportedCurrencyError(PaymentError):
    """
    Currency has no numeric code in the gateway table.

    Caller configuration error, not retryable.
    """

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(
            "redsys:currency:unsupported",
            f"Currency not supported: {currency}",
            {"currency": currency}
        )


class MalformedPayloadError(PaymentError):
    """
    Ds_MerchantParameters present but not decodable.

    Examples:
    - Not valid base64
    - Decoded bytes are not UTF-8 JSON
    - JSON is not an object
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("redsys:payload:malformed", message, details)


class InvalidSignatureError(PaymentError):
    """Recomputed signature does not match the received one."""

    def __init__(self, message: str = "Invalid signature", details: Optional[Dict[str, Any]] = None):
        super().__init__("redsys:signature:invalid", message, details)


class MissingFieldError(PaymentError):
    """A required transport or payload field was not received."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(
            "redsys:field:missing",
            f"Parameter not received: {field_name}",
            {"field": field_name}
        )


class InvalidOrderNumberError(PaymentError):
    """Order number cannot be sent to the gateway."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("redsys:order:invalid", message, details)


class PaymentOrderNotFoundError(PaymentError):
    """No order was available when a payment was requested."""

    def __init__(self, message: str = "Payment order not found"):
        super().__init__("redsys:order:not_found", message)


class InvalidCredentialsError(PaymentError):
    """Merchant credentials are missing or the secret is not base64."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("redsys:credentials:invalid", message, details)
