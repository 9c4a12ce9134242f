# backend/studio_booking/core/enums.py
"""
Core enums for the studio booking core.

All enums persisted to the database inherit from (str, Enum) so the stored
value is the lowercase string, not the member name.
"""

from enum import Enum


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    BOOKED = "booked"  # Holds a seat, credit debited
    WAITLIST = "waitlist"  # Queued for a seat, nothing debited
    CANCELLED = "cancelled"
    ATTENDED = "attended"
    NO_SHOW = "no_show"

    @classmethod
    def active(cls) -> tuple["BookingStatus", ...]:
        """Statuses that count as a live reservation for a user/class pair."""
        return (cls.BOOKED, cls.WAITLIST)

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CANCELLED, BookingStatus.ATTENDED, BookingStatus.NO_SHOW)


class PassType(str, Enum):
    PACK = "pack"
    UNLIMITED = "unlimited"


class PassStatus(str, Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    EXPIRED = "expired"


class ClassStatus(str, Enum):
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class CancelledBy(str, Enum):
    USER = "user"
    ADMIN = "admin"


class CheckInMethod(str, Enum):
    QR = "qr"
    MANUAL = "manual"


class LedgerEntryType(str, Enum):
    DEBIT = "debit"
    REFUND = "refund"
    TOP_UP = "top_up"


class AvailabilityLevel(str, Enum):
    """Seat availability label shown next to a class."""

    OPEN = "open"
    WARNING = "warning"
    CRITICAL = "critical"
    FULL = "full"


class BookingErrorCode(str, Enum):
    """Stable failure codes returned by the booking core."""

    INSUFFICIENT_CREDIT = "INSUFFICIENT_CREDIT"
    NO_ACTIVE_PASS = "NO_ACTIVE_PASS"
    CLASS_FULL = "CLASS_FULL"  # never returned; a full class yields a waitlist booking
    CLASS_ALREADY_STARTED = "CLASS_ALREADY_STARTED"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    WAIVER_NOT_SIGNED = "WAIVER_NOT_SIGNED"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    TRANSACTION_CONFLICT = "TRANSACTION_CONFLICT"
    CLASS_NOT_FOUND = "CLASS_NOT_FOUND"
    CLASS_CANCELLED = "CLASS_CANCELLED"
    CLASS_LOCKED = "CLASS_LOCKED"
    BOOKING_NOT_ACTIVE = "BOOKING_NOT_ACTIVE"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CHECK_IN_NOT_ALLOWED = "CHECK_IN_NOT_ALLOWED"
    INVALID_CHECK_IN_CODE = "INVALID_CHECK_IN_CODE"
    SERVICE_ERROR = "SERVICE_ERROR"
