# backend/studio_booking/models/class_instance.py
"""
Scheduled class occurrence.

``class_date``/``start_time``/``end_time`` are wall-clock values in the studio
timezone; ``starts_at``/``ends_at`` give the matching UTC instants used for
every policy comparison.
"""

from datetime import datetime, timedelta

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import ClassStatus
from ..core.timezone_utils import studio_datetime_to_utc
from ..database import Base


class ClassInstance(Base):
    __tablename__ = "class_schedule"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    title = Column(String(120), nullable=False)
    instructor = Column(String(120), nullable=False)
    class_date = Column("date", Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    capacity = Column(Integer, nullable=False)
    duration_min = Column(Integer, nullable=False)

    level = Column(String(50), nullable=True)
    heat_c = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=ClassStatus.SCHEDULED.value, index=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("Booking", back_populates="class_instance")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_class_schedule_capacity_positive"),
        CheckConstraint("duration_min > 0", name="ck_class_schedule_duration_positive"),
        Index("ix_class_schedule_date_start", "date", "start_time"),
    )

    @property
    def starts_at(self) -> datetime:
        return studio_datetime_to_utc(self.class_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        end = studio_datetime_to_utc(self.class_date, self.end_time)
        if end <= self.starts_at:
            # end_time was left at or before start; fall back to duration
            return self.starts_at + timedelta(minutes=self.duration_min)
        return end

    @property
    def is_cancelled(self) -> bool:
        return self.status == ClassStatus.CANCELLED.value

    def booking_closes_at(self, cutoff_minutes: int = 0) -> datetime:
        """Bookings and waitlist promotions stop at this instant."""
        return self.starts_at - timedelta(minutes=cutoff_minutes)

    def __repr__(self) -> str:
        return f"<ClassInstance {self.id} {self.title} {self.class_date} {self.start_time}>"
