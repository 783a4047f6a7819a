"""
Payment lifecycle events.

Describes what happened to an order during a payment attempt and
delivers those events to registered observers.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

from models.outcome import ValidationResult
from models.payment import NotificationPayload

logger = logging.getLogger(__name__)


class LifecycleEventType(str, Enum):
    """Stages of a payment attempt."""
    ORDER_LOAD = "order_load"
    ORDER_CREATED = "order_created"
    ORDER_DONE = "order_done"
    ORDER_FAIL = "order_fail"
    ORDER_SUCCESS = "order_success"


@dataclass(frozen=True)
class LifecycleEvent:
    """
    A single lifecycle event.

    Attributes:
        event_type: Stage reached
        order_id: Order the event refers to, when known
        payload: Notification data, only for result events
    """

    event_type: LifecycleEventType
    order_id: Optional[str] = None
    payload: Optional[NotificationPayload] = None


def events_for_payment(order_id: Optional[str]) -> List[LifecycleEvent]:
    """Events of a payment request for an existing order."""
    return [
        LifecycleEvent(LifecycleEventType.ORDER_LOAD, order_id),
        LifecycleEvent(LifecycleEventType.ORDER_CREATED, order_id),
    ]


def events_for_result(result: ValidationResult) -> List[LifecycleEvent]:
    """
    Events of a processed notification.

    Only authenticated notifications produce events: done, then success
    or fail.
    """
    outcome = result.outcome
    if not outcome.is_authenticated or result.payload is None:
        return []

    order_id = result.payload.order
    final = (
        LifecycleEventType.ORDER_SUCCESS
        if outcome.is_accepted
        else LifecycleEventType.ORDER_FAIL
    )
    return [
        LifecycleEvent(LifecycleEventType.ORDER_DONE, order_id, result.payload),
        LifecycleEvent(final, order_id, result.payload),
    ]


LifecycleObserver = Callable[[LifecycleEvent], None]


class LifecycleDispatcher:
    """
    Delivers lifecycle events to observers in registration order.

    A failing observer is logged and does not prevent delivery to the
    others.
    """

    def __init__(self):
        self._observers: List[LifecycleObserver] = []

    def on_event(self, observer: LifecycleObserver) -> None:
        """
        Register an observer for lifecycle events.

        Args:
            observer: Function called with each LifecycleEvent
        """
        self._observers.append(observer)
        logger.debug(f"Registered lifecycle observer: {getattr(observer, '__name__', observer)}")

    def dispatch(self, events: Iterable[LifecycleEvent]) -> None:
        """Deliver each event to every observer."""
        for event in events:
            for observer in self._observers:
                try:
                    observer(event)
                except Exception as e:
                    logger.error(
                        f"Error in lifecycle observer for {event.event_type.value}: {e}",
                        exc_info=True
                    )

    @property
    def observer_count(self) -> int:
        return len(self._observers)
