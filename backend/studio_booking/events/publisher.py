"""Event publisher - writes domain events to the transactional outbox."""
from datetime import datetime
import logging
from typing import Any, Dict, Protocol

from ..repositories.event_outbox_repository import EventOutboxRepository

logger = logging.getLogger(__name__)


class Event(Protocol):
    """Protocol for event types."""

    def to_dict(self) -> Dict[str, Any]:
        ...

    def idempotency_key(self) -> str:
        ...


# Aggregate id is the first of these present in the payload
_CLASS_AGGREGATE_FIELDS = ("booking_id", "class_id")


class EventPublisher:
    """Publishes domain events into the outbox inside the caller's transaction."""

    def __init__(self, outbox_repository: EventOutboxRepository):
        self.outbox_repo = outbox_repository

    def publish(self, event: Event) -> None:
        """
        Enqueue an event; it commits or rolls back with the booking change.

        Delivery to users is handled by a separate dispatcher reading the outbox.
        """
        event_type = type(event).__name__
        payload = event.to_dict()

        # Convert datetime objects to ISO strings for JSON serialization
        for key, value in payload.items():
            if isinstance(value, datetime):
                payload[key] = value.isoformat()

        aggregate_id = next(
            (payload[field] for field in _CLASS_AGGREGATE_FIELDS if payload.get(field)), ""
        )
        self.outbox_repo.enqueue(
            event_type=event_type,
            aggregate_id=aggregate_id,
            payload=payload,
            idempotency_key=event.idempotency_key(),
        )
        logger.debug("Queued %s for %s", event_type, aggregate_id)
