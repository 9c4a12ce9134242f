# backend/studio_booking/models/booking.py
"""
Booking model for the studio booking core.

A booking links one user to one class instance. Credits move only while a
booking is ``booked``; ``credits_debited``/``credits_refunded`` record how much
this booking took from ``consumed_pass_id`` so a refund can never exceed it.
"""

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import BookingStatus
from ..database import Base

_ACTIVE_STATUS_CLAUSE = text("status IN ('booked', 'waitlist')")


class Booking(Base):
    __tablename__ = "class_bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    class_id = Column(String(26), ForeignKey("class_schedule.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=BookingStatus.BOOKED.value, index=True)
    booked_at = Column(DateTime(timezone=True), nullable=False)

    # Credit accounting
    consumed_pass_id = Column(String(26), ForeignKey("user_passes.id"), nullable=True)
    credits_debited = Column(Integer, nullable=False, default=0)
    credits_refunded = Column(Integer, nullable=False, default=0)
    promoted_at = Column(DateTime(timezone=True), nullable=True)

    # Cancellation tracking
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(String(10), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    # Check-in
    checked_in = Column(Boolean, nullable=False, default=False)
    check_in_time = Column(DateTime(timezone=True), nullable=True)
    check_in_method = Column(String(10), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    class_instance = relationship("ClassInstance", back_populates="bookings")
    consumed_pass = relationship("UserPass")

    __table_args__ = (
        # One live reservation per user and class
        Index(
            "uq_class_bookings_active_user_class",
            "user_id",
            "class_id",
            unique=True,
            postgresql_where=_ACTIVE_STATUS_CLAUSE,
            sqlite_where=_ACTIVE_STATUS_CLAUSE,
        ),
        Index("ix_class_bookings_class_status_booked_at", "class_id", "status", "booked_at"),
        CheckConstraint(
            "credits_refunded <= credits_debited", name="ck_class_bookings_refund_within_debit"
        ),
        CheckConstraint(
            "status IN ('booked', 'waitlist', 'cancelled', 'attended', 'no_show')",
            name="ck_class_bookings_status",
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status in (BookingStatus.BOOKED.value, BookingStatus.WAITLIST.value)

    @property
    def refundable_credits(self) -> int:
        return max((self.credits_debited or 0) - (self.credits_refunded or 0), 0)

    @property
    def user_name(self) -> Optional[str]:
        return self.user.display_name if self.user else None

    def __repr__(self) -> str:
        return f"<Booking {self.id} user={self.user_id} class={self.class_id} status={self.status}>"
