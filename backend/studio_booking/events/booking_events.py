"""Booking domain events."""
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class BookingConfirmed:
    """Fired after a booking takes a seat at creation time."""

    booking_id: str
    user_id: str
    class_id: str
    pass_id: str
    booked_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def idempotency_key(self) -> str:
        return f"booking_confirmed:{self.booking_id}"


@dataclass
class BookingWaitlisted:
    """Fired after a booking joins a full class's waitlist."""

    booking_id: str
    user_id: str
    class_id: str
    booked_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def idempotency_key(self) -> str:
        return f"booking_waitlisted:{self.booking_id}"


@dataclass
class BookingCancelled:
    """Fired after a booking is cancelled."""

    booking_id: str
    user_id: str
    class_id: str
    cancelled_by: str  # 'user' or 'admin'
    cancelled_at: datetime
    previous_status: str
    refunded: bool = False
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def idempotency_key(self) -> str:
        return f"booking_cancelled:{self.booking_id}"


@dataclass
class WaitlistPromoted:
    """Fired when a waitlisted booking is moved into a freed seat."""

    booking_id: str
    user_id: str
    class_id: str
    pass_id: str
    promoted_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def idempotency_key(self) -> str:
        return f"waitlist_promoted:{self.booking_id}"


@dataclass
class ClassCancelled:
    """Fired after staff cancel a class instance."""

    class_id: str
    cancelled_at: datetime
    cancelled_count: int
    refunded_count: int
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def idempotency_key(self) -> str:
        return f"class_cancelled:{self.class_id}"


@dataclass
class AttendanceMarked:
    """Fired after a booking reaches attended or no_show."""

    booking_id: str
    user_id: str
    class_id: str
    status: str
    marked_at: datetime
    method: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def idempotency_key(self) -> str:
        return f"attendance_marked:{self.booking_id}"
