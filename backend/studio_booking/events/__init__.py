"""Booking domain events and the outbox publisher."""

from .booking_events import (
    AttendanceMarked,
    BookingCancelled,
    BookingConfirmed,
    BookingWaitlisted,
    ClassCancelled,
    WaitlistPromoted,
)
from .publisher import EventPublisher

__all__ = [
    "AttendanceMarked",
    "BookingCancelled",
    "BookingConfirmed",
    "BookingWaitlisted",
    "ClassCancelled",
    "EventPublisher",
    "WaitlistPromoted",
]
