"""
Notification Validator.

Authenticates gateway notifications and classifies the transaction.
"""

import logging
import re
from typing import Any, Mapping, Optional

from exceptions import MalformedPayloadError
from models.credentials import MerchantCredentials
from models.outcome import RejectionReason, TransactionOutcome, ValidationResult
from models.payment import (
    DS_ORDER,
    DS_RESPONSE,
    MERCHANT_PARAMETERS_FIELD,
    SIGNATURE_FIELD,
    SIGNATURE_VERSION_FIELD,
    TRANSPORT_FIELDS,
    NotificationPayload,
)
from .codec import decode_parameters
from .signature_service import SignatureEngine

logger = logging.getLogger(__name__)

# Response codes 0-99 mean the payment was authorised
MIN_SUCCESS_RESPONSE = 0
MAX_SUCCESS_RESPONSE = 99

RESPONSE_CODE_PATTERN = re.compile(r'[+-]?[0-9]+')


def parse_response_code(value: Any) -> Optional[int]:
    """
    Parse Ds_Response as an integer.

    Only plain ASCII digits with an optional sign are accepted.

    Returns:
        The code, or None when it is missing or not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value)
    if not RESPONSE_CODE_PATTERN.fullmatch(text):
        return None
    return int(text)


def is_successful_response(response_code: Optional[int]) -> bool:
    """Check whether a gateway response code denotes success."""
    if response_code is None:
        return False
    return MIN_SUCCESS_RESPONSE <= response_code <= MAX_SUCCESS_RESPONSE


class NotificationValidator:
    """
    Validates notifications posted by the gateway.

    Each call is independent: the decoded parameters live only in the
    call that produced them.

    Steps:
    - Require the three transport fields
    - Decode Ds_MerchantParameters
    - Verify the signature over the received parameters string
    - Classify Ds_Response
    """

    def __init__(
        self,
        credentials: MerchantCredentials,
        signature_engine: Optional[SignatureEngine] = None
    ):
        """
        Initialize the validator.

        Args:
            credentials: Merchant account whose secret signs notifications
            signature_engine: Signing engine (default HMAC_SHA256_V1)
        """
        self.credentials = credentials
        self.signature_engine = signature_engine or SignatureEngine()

    def validate(self, fields: Mapping[str, Any]) -> ValidationResult:
        """
        Validate one notification.

        Args:
            fields: Form fields received from the gateway

        Returns:
            ValidationResult with the outcome and, when authenticated, the payload
        """
        for name in TRANSPORT_FIELDS:
            if fields.get(name) in (None, ''):
                logger.warning(f"Notification missing parameter {name}")
                return ValidationResult(outcome=TransactionOutcome.missing_field(name))

        version = fields[SIGNATURE_VERSION_FIELD]
        encoded = fields[MERCHANT_PARAMETERS_FIELD]
        received_signature = fields[SIGNATURE_FIELD]

        try:
            parameters = decode_parameters(encoded)
        except MalformedPayloadError as e:
            logger.warning(f"Malformed notification parameters: {e.message}")
            return ValidationResult(outcome=TransactionOutcome.malformed_payload(e.message))

        payload = NotificationPayload.from_parameters(parameters)

        if version != self.signature_engine.version:
            logger.warning(f"Unsupported signature version {version!r} for order {payload.order}")
            return ValidationResult(
                outcome=TransactionOutcome.malformed_signature(
                    f"Unsupported signature version: {version}"
                )
            )

        if payload.order is None:
            logger.warning("Notification parameters carry no order number")
            return ValidationResult(outcome=TransactionOutcome.missing_field(DS_ORDER))

        try:
            payload.order.encode('utf-8')
        except UnicodeEncodeError:
            logger.warning("Notification order number is not encodable")
            return ValidationResult(
                outcome=TransactionOutcome.malformed_payload("Order number is not valid UTF-8")
            )

        if not self.signature_engine.verify(
            received_signature,
            self.credentials.secret,
            payload.order,
            encoded
        ):
            logger.warning(f"Invalid signature on notification for order {payload.order}")
            return ValidationResult(
                outcome=TransactionOutcome.rejected(
                    RejectionReason.INVALID_SIGNATURE,
                    "Signature mismatch"
                )
            )

        response_code = parse_response_code(parameters.get(DS_RESPONSE))

        if is_successful_response(response_code):
            logger.info(f"Payment accepted for order {payload.order} (Ds_Response={response_code})")
            outcome = TransactionOutcome.accepted()
        else:
            logger.info(f"Payment declined for order {payload.order} (Ds_Response={payload.response})")
            outcome = TransactionOutcome.rejected(
                RejectionReason.GATEWAY_DECLINED,
                f"Gateway response {payload.response}"
            )

        return ValidationResult(
            outcome=outcome,
            payload=payload,
            response_code=response_code
        )
