"""
Payment data models.

Represents outbound payment requests, the signed envelope sent to the
gateway, and the decoded payload of inbound notifications.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union


# Transport fields (HTTP form, both directions)
SIGNATURE_VERSION_FIELD = 'Ds_SignatureVersion'
MERCHANT_PARAMETERS_FIELD = 'Ds_MerchantParameters'
SIGNATURE_FIELD = 'Ds_Signature'

TRANSPORT_FIELDS = (
    SIGNATURE_VERSION_FIELD,
    MERCHANT_PARAMETERS_FIELD,
    SIGNATURE_FIELD,
)

# Outbound parameter keys, spelled as the gateway expects them
DS_MERCHANT_AMOUNT = 'DS_MERCHANT_AMOUNT'
DS_MERCHANT_ORDER = 'DS_MERCHANT_ORDER'
DS_MERCHANT_MERCHANTCODE = 'DS_MERCHANT_MERCHANTCODE'
DS_MERCHANT_CURRENCY = 'DS_MERCHANT_CURRENCY'
DS_MERCHANT_TERMINAL = 'DS_MERCHANT_TERMINAL'
DS_MERCHANT_TRANSACTIONTYPE = 'DS_MERCHANT_TRANSACTIONTYPE'
DS_MERCHANT_MERCHANTURL = 'DS_MERCHANT_MERCHANTURL'
DS_MERCHANT_URLOK = 'DS_MERCHANT_URLOK'
DS_MERCHANT_URLKO = 'DS_MERCHANT_URLKO'

# Optional outbound keys, keyed by the extra-data name that enables them
OPTIONAL_MERCHANT_KEYS = {
    'product_description': 'Ds_Merchant_ProductDescription',
    'merchant_titular': 'Ds_Merchant_Titular',
    'merchant_name': 'Ds_Merchant_MerchantName',
}

# Inbound notification keys
DS_ORDER = 'Ds_Order'
DS_ORDER_FALLBACK = 'DS_ORDER'
DS_RESPONSE = 'Ds_Response'

DEFAULT_TRANSACTION_TYPE = '0'

ParameterValue = Union[str, int, float]
ParameterSet = Dict[str, ParameterValue]


@dataclass(frozen=True)
class PaymentUrls:
    """URLs the gateway uses to notify the merchant and return the customer."""

    merchant_url: str
    url_ok: str
    url_ko: str


@dataclass(frozen=True)
class PaymentOrder:
    """
    Order data supplied by the application for one payment attempt.

    The application owns order persistence; this is only the data the
    gateway request needs.
    """

    # Internal order id, used to build return URLs
    order_id: str

    # Order number sent to the gateway, before padding
    order_number: str

    # Amount in minor units (cents)
    amount: Union[int, str]

    # Alphabetic currency code (EUR, USD...)
    currency: str = 'EUR'

    # Optional keys: transaction_type, product_description,
    # merchant_titular, merchant_name
    extra_data: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaymentOrder':
        """
        Create PaymentOrder from a dictionary (e.g., a JSON body).

        Args:
            data: Dictionary with order data

        Returns:
            PaymentOrder instance
        """
        order_number = data.get('order_number') or data.get('order_id')
        return cls(
            order_id=str(data.get('order_id') or order_number),
            order_number=str(order_number),
            amount=data['amount'],
            currency=data.get('currency', 'EUR'),
            extra_data=dict(data.get('extra_data') or {})
        )


@dataclass(frozen=True)
class SignedEnvelope:
    """
    The three transport fields posted to the gateway.

    Contains the encoded parameters and the signature computed over
    them with a key diversified by the order number.
    """

    signature_version: str
    merchant_parameters: str
    signature: str

    def to_form_fields(self) -> Dict[str, str]:
        """Convert to the hidden form fields expected by the gateway."""
        return {
            SIGNATURE_VERSION_FIELD: self.signature_version,
            MERCHANT_PARAMETERS_FIELD: self.merchant_parameters,
            SIGNATURE_FIELD: self.signature
        }


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class NotificationPayload:
    """
    Decoded Ds_MerchantParameters of a gateway notification.

    Only trustworthy once the signature has been verified. Fields the
    gateway did not send are None; card type and merchant data default
    to an empty string.
    """

    response: Optional[str]
    amount: Optional[str]
    order: Optional[str]
    merchant_code: Optional[str]
    currency: Optional[str]
    date: Optional[str]
    hour: Optional[str]
    secure_payment: Optional[str]
    card_country: Optional[str]
    authorisation_code: Optional[str]
    consumer_language: Optional[str]
    card_type: str = ''
    merchant_data: str = ''

    # Everything that was decoded, unmodified
    raw: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def order_from_parameters(parameters: Mapping[str, Any]) -> Optional[str]:
        """
        Extract the order number, falling back to the upper-case key.

        Args:
            parameters: Decoded notification parameters

        Returns:
            Order number, or None if neither key carries a value
        """
        order = parameters.get(DS_ORDER)
        if order in (None, ''):
            order = parameters.get(DS_ORDER_FALLBACK)
        if order in (None, ''):
            return None
        return str(order)

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> 'NotificationPayload':
        """
        Create NotificationPayload from decoded notification parameters.

        Args:
            parameters: Dictionary decoded from Ds_MerchantParameters

        Returns:
            NotificationPayload instance
        """
        return cls(
            response=_optional_str(parameters.get(DS_RESPONSE)),
            amount=_optional_str(parameters.get('Ds_Amount')),
            order=cls.order_from_parameters(parameters),
            merchant_code=_optional_str(parameters.get('Ds_MerchantCode')),
            currency=_optional_str(parameters.get('Ds_Currency')),
            date=_optional_str(parameters.get('Ds_Date')),
            hour=_optional_str(parameters.get('Ds_Hour')),
            secure_payment=_optional_str(parameters.get('Ds_SecurePayment')),
            card_country=_optional_str(parameters.get('Ds_Card_Country')),
            authorisation_code=_optional_str(parameters.get('Ds_AuthorisationCode')),
            consumer_language=_optional_str(parameters.get('Ds_ConsumerLanguage')),
            card_type=_optional_str(parameters.get('Ds_Card_Type')) or '',
            merchant_data=_optional_str(parameters.get('Ds_MerchantData')) or '',
            raw=dict(parameters)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'response': self.response,
            'amount': self.amount,
            'order': self.order,
            'merchant_code': self.merchant_code,
            'currency': self.currency,
            'date': self.date,
            'hour': self.hour,
            'secure_payment': self.secure_payment,
            'card_country': self.card_country,
            'authorisation_code': self.authorisation_code,
            'consumer_language': self.consumer_language,
            'card_type': self.card_type,
            'merchant_data': self.merchant_data
        }
