"""
Redsys Payment Manager.

Coordinates request building, notification validation and lifecycle
events for one merchant integration.
"""

import logging
from typing import Any, Mapping, Optional

from exceptions import PaymentOrderNotFoundError
from models.credentials import MerchantCredentials
from models.outcome import ValidationResult
from models.payment import PaymentOrder, SignedEnvelope
from .lifecycle import (
    LifecycleDispatcher,
    LifecycleEvent,
    LifecycleEventType,
    events_for_result,
)
from .notification_validator import NotificationValidator
from .request_builder import RequestBuilder
from .signature_service import SignatureEngine
from .url_factory import UrlFactory

logger = logging.getLogger(__name__)


class PaymentManager:
    """
    Entry point for the two gateway flows.

    - process_payment: order -> signed envelope for the payment form
    - process_result: notification fields -> validated outcome

    All per-request data is local to each call; the manager only holds
    immutable configuration and the observer list.
    """

    def __init__(
        self,
        credentials: MerchantCredentials,
        url_factory: UrlFactory,
        gateway_url: str,
        dispatcher: Optional[LifecycleDispatcher] = None,
        signature_engine: Optional[SignatureEngine] = None
    ):
        """
        Initialize the manager.

        Args:
            credentials: Merchant account
            url_factory: Builds notification and return URLs
            gateway_url: Gateway endpoint the form posts to
            dispatcher: Lifecycle observers, optional
            signature_engine: Signing engine (default HMAC_SHA256_V1)
        """
        engine = signature_engine or SignatureEngine()
        self.credentials = credentials
        self.url_factory = url_factory
        self.gateway_url = gateway_url
        self.dispatcher = dispatcher or LifecycleDispatcher()
        self.request_builder = RequestBuilder(credentials, engine)
        self.validator = NotificationValidator(credentials, engine)

    @classmethod
    def from_config(cls, dispatcher: Optional[LifecycleDispatcher] = None) -> 'PaymentManager':
        """Create a manager from the global configuration."""
        from config import config

        return cls(
            credentials=MerchantCredentials.from_config(config.redsys),
            url_factory=UrlFactory.from_config(config.urls),
            gateway_url=config.redsys.gateway_url,
            dispatcher=dispatcher
        )

    def process_payment(self, order: Optional[PaymentOrder]) -> SignedEnvelope:
        """
        Build the signed envelope for an order.

        Args:
            order: Order to pay, None if the application could not load one

        Returns:
            SignedEnvelope to embed in the payment form

        Raises:
            PaymentOrderNotFoundError: If no order was supplied
            UnsupportedCurrencyError: If the order currency is not supported
            InvalidOrderNumberError: If the order number is too long
        """
        order_id = order.order_id if order else None
        self.dispatcher.dispatch([LifecycleEvent(LifecycleEventType.ORDER_LOAD, order_id)])

        if order is None:
            raise PaymentOrderNotFoundError()

        self.dispatcher.dispatch([LifecycleEvent(LifecycleEventType.ORDER_CREATED, order_id)])

        envelope = self.request_builder.build(
            order=order.order_number,
            amount=order.amount,
            currency=order.currency,
            urls=self.url_factory.urls_for(order.order_id),
            extra=order.extra_data
        )

        logger.info(f"Payment request ready for order {order.order_id}")
        return envelope

    def process_result(self, fields: Mapping[str, Any]) -> ValidationResult:
        """
        Validate a gateway notification and notify observers.

        Args:
            fields: Form fields posted by the gateway

        Returns:
            ValidationResult; declines are reported, not raised
        """
        result = self.validator.validate(fields)
        self.dispatcher.dispatch(events_for_result(result))
        return result
