# backend/studio_booking/repositories/booking_repository.py
"""
Booking Repository for the studio booking core.

Seat counts and the waitlist queue are always computed from booking rows;
there is no cached counter to drift from the ground truth.
"""

from datetime import date
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from ..core.enums import BookingStatus
from ..models.booking import Booking
from ..models.class_instance import ClassInstance
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_ACTIVE = [s.value for s in BookingStatus.active()]
_ROSTER = [BookingStatus.BOOKED.value, BookingStatus.ATTENDED.value, BookingStatus.NO_SHOW.value]


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    # Capacity tracking

    def booked_count(self, class_id: str) -> int:
        stmt = select(func.count(Booking.id)).where(
            Booking.class_id == class_id, Booking.status == BookingStatus.BOOKED.value
        )
        return int(self.db.execute(stmt).scalar_one())

    def status_counts(
        self, class_ids: Iterable[str], status: str = BookingStatus.BOOKED.value
    ) -> Dict[str, int]:
        """Per-class counts of bookings in ``status`` for many classes in one query."""
        ids = list(class_ids)
        if not ids:
            return {}
        stmt = (
            select(Booking.class_id, func.count(Booking.id))
            .where(Booking.class_id.in_(ids), Booking.status == status)
            .group_by(Booking.class_id)
        )
        counts = {class_id: int(count) for class_id, count in self.db.execute(stmt).all()}
        return {class_id: counts.get(class_id, 0) for class_id in ids}

    def waitlist_queue(self, class_id: str, *, for_update: bool = False) -> List[Booking]:
        """Waitlisted bookings in FIFO order (booked_at, then id)."""
        stmt = (
            select(Booking)
            .where(Booking.class_id == class_id, Booking.status == BookingStatus.WAITLIST.value)
            .order_by(Booking.booked_at.asc(), Booking.id.asc())
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return list(self.db.execute(stmt).scalars().all())

    def active_for_class(self, class_id: str, *, for_update: bool = False) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.class_id == class_id, Booking.status.in_(_ACTIVE))
            .order_by(Booking.booked_at.asc(), Booking.id.asc())
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return list(self.db.execute(stmt).scalars().all())

    def count_active_for_class(self, class_id: str) -> int:
        stmt = select(func.count(Booking.id)).where(
            Booking.class_id == class_id, Booking.status.in_(_ACTIVE)
        )
        return int(self.db.execute(stmt).scalar_one())

    def roster(self, class_id: str) -> List[Booking]:
        stmt = (
            select(Booking)
            .options(joinedload(Booking.user))
            .where(Booking.class_id == class_id, Booking.status.in_(_ROSTER))
            .order_by(Booking.booked_at.asc(), Booking.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    # Per-user lookups

    def get_active_for_user_class(self, user_id: str, class_id: str) -> Optional[Booking]:
        stmt = select(Booking).where(
            Booking.user_id == user_id,
            Booking.class_id == class_id,
            Booking.status.in_(_ACTIVE),
        )
        return self.db.execute(stmt).scalars().first()

    def get_booked_for_user_class(self, user_id: str, class_id: str) -> Optional[Booking]:
        stmt = (
            select(Booking)
            .where(
                Booking.user_id == user_id,
                Booking.class_id == class_id,
                Booking.status == BookingStatus.BOOKED.value,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalars().first()

    def list_for_user(
        self,
        user_id: str,
        statuses: Optional[Sequence[str]] = None,
        limit: int = 50,
    ) -> List[Booking]:
        stmt = (
            select(Booking)
            .options(joinedload(Booking.class_instance))
            .where(Booking.user_id == user_id)
        )
        if statuses:
            stmt = stmt.where(Booking.status.in_(list(statuses)))
        stmt = stmt.order_by(Booking.booked_at.desc(), Booking.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().unique().all())

    def active_for_user_from(self, user_id: str, from_date: date) -> List[Booking]:
        """Active bookings on classes dated ``from_date`` or later, soonest first."""
        stmt = (
            select(Booking)
            .join(ClassInstance, Booking.class_id == ClassInstance.id)
            .options(joinedload(Booking.class_instance))
            .where(
                Booking.user_id == user_id,
                Booking.status.in_(_ACTIVE),
                ClassInstance.class_date >= from_date,
            )
            .order_by(ClassInstance.class_date, ClassInstance.start_time, Booking.id)
        )
        return list(self.db.execute(stmt).scalars().unique().all())

    def statuses_for_user(self, user_id: str, class_ids: Iterable[str]) -> Dict[str, str]:
        """Map class id to the user's active booking status for those classes."""
        ids = list(class_ids)
        if not ids:
            return {}
        stmt = select(Booking.class_id, Booking.status).where(
            Booking.user_id == user_id,
            Booking.class_id.in_(ids),
            Booking.status.in_(_ACTIVE),
        )
        return {class_id: status for class_id, status in self.db.execute(stmt).all()}

    def attended_class_dates(self, user_id: str, since: Optional[date] = None) -> List[date]:
        """Class dates of attended bookings, newest first, one entry per booking."""
        stmt = (
            select(ClassInstance.class_date)
            .join(Booking, Booking.class_id == ClassInstance.id)
            .where(
                Booking.user_id == user_id,
                Booking.status == BookingStatus.ATTENDED.value,
            )
        )
        if since is not None:
            stmt = stmt.where(ClassInstance.class_date >= since)
        stmt = stmt.order_by(ClassInstance.class_date.desc())
        return list(self.db.execute(stmt).scalars().all())
