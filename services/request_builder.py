"""
Payment Request Builder.

Assembles Ds_MerchantParameters for an order and signs them.
"""

import logging
from typing import Any, Mapping, Optional, Union

from exceptions import InvalidOrderNumberError
from models.credentials import MerchantCredentials
from models.payment import (
    DEFAULT_TRANSACTION_TYPE,
    DS_MERCHANT_AMOUNT,
    DS_MERCHANT_CURRENCY,
    DS_MERCHANT_MERCHANTCODE,
    DS_MERCHANT_MERCHANTURL,
    DS_MERCHANT_ORDER,
    DS_MERCHANT_TERMINAL,
    DS_MERCHANT_TRANSACTIONTYPE,
    DS_MERCHANT_URLKO,
    DS_MERCHANT_URLOK,
    OPTIONAL_MERCHANT_KEYS,
    ParameterSet,
    PaymentUrls,
    SignedEnvelope,
)
from .codec import encode_parameters
from .currency import to_numeric_code
from .signature_service import SignatureEngine

logger = logging.getLogger(__name__)

ORDER_MIN_LENGTH = 4
ORDER_MAX_LENGTH = 12


def format_order_number(order_number: Union[str, int]) -> str:
    """
    Left-pad an order number with zeros to the gateway minimum length.

    Longer order numbers are returned unchanged.
    """
    return str(order_number).rjust(ORDER_MIN_LENGTH, '0')


class RequestBuilder:
    """
    Builds signed payment requests for one merchant account.

    Holds only immutable credentials; every call works on its own
    parameter set, so a single builder can serve concurrent requests.
    """

    def __init__(
        self,
        credentials: MerchantCredentials,
        signature_engine: Optional[SignatureEngine] = None
    ):
        """
        Initialize the builder.

        Args:
            credentials: Merchant account
            signature_engine: Signing engine (default HMAC_SHA256_V1)
        """
        self.credentials = credentials
        self.signature_engine = signature_engine or SignatureEngine()

    def build_parameters(
        self,
        order: Union[str, int],
        amount: Union[int, str],
        currency: str,
        urls: PaymentUrls,
        extra: Optional[Mapping[str, Any]] = None
    ) -> ParameterSet:
        """
        Assemble the parameter set for one request.

        Args:
            order: Order number, padded if shorter than 4 characters
            amount: Amount in minor units
            currency: Alphabetic currency code
            urls: Notification and return URLs
            extra: Optional fields (transaction_type, product_description,
                merchant_titular, merchant_name)

        Returns:
            Fresh ordered parameter set

        Raises:
            UnsupportedCurrencyError: If the currency has no numeric code
            InvalidOrderNumberError: If the order number is longer than 12
        """
        extra = extra or {}
        order_number = format_order_number(order)

        if len(order_number) > ORDER_MAX_LENGTH:
            raise InvalidOrderNumberError(
                f"Order number longer than {ORDER_MAX_LENGTH} characters",
                {"order": order_number}
            )

        parameters: ParameterSet = {
            DS_MERCHANT_AMOUNT: amount,
            DS_MERCHANT_ORDER: order_number,
            DS_MERCHANT_MERCHANTCODE: self.credentials.merchant_code,
            DS_MERCHANT_CURRENCY: to_numeric_code(currency),
            DS_MERCHANT_TERMINAL: self.credentials.terminal,
            DS_MERCHANT_TRANSACTIONTYPE: extra.get('transaction_type', DEFAULT_TRANSACTION_TYPE),
        }

        for extra_key, parameter_key in OPTIONAL_MERCHANT_KEYS.items():
            if extra_key in extra:
                parameters[parameter_key] = extra[extra_key]

        parameters[DS_MERCHANT_MERCHANTURL] = urls.merchant_url
        parameters[DS_MERCHANT_URLOK] = urls.url_ok
        parameters[DS_MERCHANT_URLKO] = urls.url_ko

        return parameters

    def build(
        self,
        order: Union[str, int],
        amount: Union[int, str],
        currency: str,
        urls: PaymentUrls,
        extra: Optional[Mapping[str, Any]] = None
    ) -> SignedEnvelope:
        """
        Build the signed envelope for one payment request.

        The order number used as key diversifier is the exact string
        placed in DS_MERCHANT_ORDER.

        Returns:
            SignedEnvelope with version, encoded parameters and signature
        """
        parameters = self.build_parameters(order, amount, currency, urls, extra)
        encoded = encode_parameters(parameters)
        signature = self.signature_engine.compute_signature(
            self.credentials.secret,
            parameters[DS_MERCHANT_ORDER],
            encoded
        )

        logger.debug(f"Built payment request for order {parameters[DS_MERCHANT_ORDER]}")

        return SignedEnvelope(
            signature_version=self.signature_engine.version,
            merchant_parameters=encoded,
            signature=signature
        )
