# backend/studio_booking/services/waitlist_promoter.py
"""
Waitlist promotion.

Runs inside the transaction that freed the seat, so the seat is never
observable as open to a concurrent booker between the two steps.
"""

from datetime import datetime
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import BookingStatus
from ..core.exceptions import ClassNotFoundException
from ..core.timezone_utils import ensure_utc, utc_now
from ..events import EventPublisher, WaitlistPromoted
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .pass_ledger_service import PassLedgerService

logger = logging.getLogger(__name__)


class WaitlistPromoter(BaseService):
    """Moves the earliest payable waitlisted booking into a free seat."""

    def __init__(
        self,
        db: Session,
        ledger: Optional[PassLedgerService] = None,
        publisher: Optional[EventPublisher] = None,
    ):
        super().__init__(db)
        self.ledger = ledger or PassLedgerService(db)
        self.publisher = publisher or EventPublisher(
            RepositoryFactory.create_event_outbox_repository(db)
        )
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.class_repository = RepositoryFactory.create_class_repository(db)

    def promote_next(self, class_id: str, now: Optional[datetime] = None) -> Optional[Booking]:
        """
        Promote at most one waitlisted booking for ``class_id``.

        Walks the queue in FIFO order. A user whose pass cannot pay stays on
        the waitlist and the next user is tried. Returns the promoted booking,
        or None when the class is full, over, or nobody can pay.

        Must be called inside an open transaction.
        """
        current = ensure_utc(now) if now else utc_now()
        class_instance = self.class_repository.get_for_update(class_id)
        if class_instance is None:
            raise ClassNotFoundException(class_id)

        if class_instance.is_cancelled:
            return None
        if current >= class_instance.booking_closes_at(settings.booking_cutoff_minutes):
            return None
        if self.booking_repository.booked_count(class_id) >= class_instance.capacity:
            return None

        for candidate in self.booking_repository.waitlist_queue(class_id, for_update=True):
            user_pass = self.ledger.get_active_pass(candidate.user_id, current, lock=True)
            if user_pass is None or not user_pass.can_pay():
                self.logger.info(
                    "Skipping waitlisted booking without payable pass",
                    extra={"booking_id": candidate.id, "user_id": candidate.user_id},
                )
                prometheus_metrics.record_waitlist_promotion("skipped")
                continue

            self.ledger.debit(user_pass, booking=candidate)
            candidate.status = BookingStatus.BOOKED.value
            candidate.consumed_pass_id = user_pass.id
            candidate.promoted_at = current
            self.booking_repository.flush()

            self.publisher.publish(
                WaitlistPromoted(
                    booking_id=candidate.id,
                    user_id=candidate.user_id,
                    class_id=class_id,
                    pass_id=user_pass.id,
                    promoted_at=current,
                )
            )
            prometheus_metrics.record_waitlist_promotion("promoted")
            self.log_operation(
                "promote_waitlist", booking_id=candidate.id, class_id=class_id
            )
            return candidate

        return None
