"""
Transaction outcome model.

Classifies what a notification means for the merchant.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .payment import NotificationPayload


class OutcomeStatus(str, Enum):
    """Result kinds of a notification validation."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    MALFORMED_SIGNATURE = "malformed_signature"
    MALFORMED_PAYLOAD = "malformed_payload"
    MISSING_FIELD = "missing_field"


class RejectionReason(str, Enum):
    """Why a notification was rejected."""
    INVALID_SIGNATURE = "invalid_signature"
    GATEWAY_DECLINED = "gateway_declined"


@dataclass(frozen=True)
class TransactionOutcome:
    """
    Outcome of validating one notification.

    Attributes:
        status: Outcome kind
        reason: Set only for REJECTED
        field_name: Set only for MISSING_FIELD
        detail: Human-readable detail for logs
    """

    status: OutcomeStatus
    reason: Optional[RejectionReason] = None
    field_name: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def accepted(cls) -> 'TransactionOutcome':
        return cls(status=OutcomeStatus.ACCEPTED)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: Optional[str] = None) -> 'TransactionOutcome':
        return cls(status=OutcomeStatus.REJECTED, reason=reason, detail=detail)

    @classmethod
    def missing_field(cls, field_name: str) -> 'TransactionOutcome':
        return cls(
            status=OutcomeStatus.MISSING_FIELD,
            field_name=field_name,
            detail=f"Parameter not received: {field_name}"
        )

    @classmethod
    def malformed_payload(cls, detail: Optional[str] = None) -> 'TransactionOutcome':
        return cls(status=OutcomeStatus.MALFORMED_PAYLOAD, detail=detail)

    @classmethod
    def malformed_signature(cls, detail: Optional[str] = None) -> 'TransactionOutcome':
        return cls(status=OutcomeStatus.MALFORMED_SIGNATURE, detail=detail)

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_declined(self) -> bool:
        """Authenticated notification reporting a failed payment."""
        return (
            self.status == OutcomeStatus.REJECTED
            and self.reason == RejectionReason.GATEWAY_DECLINED
        )

    @property
    def is_authenticated(self) -> bool:
        """True when the signature was verified (accepted or declined)."""
        return self.is_accepted or self.is_declined

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'status': self.status.value,
            'reason': self.reason.value if self.reason else None,
            'field_name': self.field_name,
            'detail': self.detail
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a notification plus its decoded payload.

    The payload is populated for authenticated notifications, including
    declined payments, so the attempt can be recorded. Unauthenticated
    payloads are never returned.
    """

    outcome: TransactionOutcome
    payload: Optional[NotificationPayload] = None
    response_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'outcome': self.outcome.to_dict(),
            'payload': self.payload.to_dict() if self.payload else None,
            'response_code': self.response_code
        }
