"""Data models for the Redsys payment gateway."""

from .credentials import MerchantCredentials
from .outcome import OutcomeStatus, RejectionReason, TransactionOutcome, ValidationResult
from .payment import NotificationPayload, PaymentOrder, PaymentUrls, SignedEnvelope

__all__ = [
    'MerchantCredentials',
    'NotificationPayload',
    'OutcomeStatus',
    'PaymentOrder',
    'PaymentUrls',
    'RejectionReason',
    'SignedEnvelope',
    'TransactionOutcome',
    'ValidationResult'
]
