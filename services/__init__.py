"""Services module for the Redsys payment gateway."""

from .lifecycle import LifecycleDispatcher, LifecycleEvent, LifecycleEventType
from .notification_validator import NotificationValidator
from .payment_manager import PaymentManager
from .request_builder import RequestBuilder, format_order_number
from .signature_service import SignatureEngine
from .url_factory import UrlFactory

__all__ = [
    'LifecycleDispatcher',
    'LifecycleEvent',
    'LifecycleEventType',
    'NotificationValidator',
    'PaymentManager',
    'RequestBuilder',
    'SignatureEngine',
    'UrlFactory',
    'format_order_number'
]
