"""
Database models for the studio booking core.

- Users (local projection of the auth provider)
- Passes and the credit ledger
- Class schedule and bookings
- Favorites and weekly specials
- Event outbox
"""

from .booking import Booking
from .class_instance import ClassInstance
from .event_outbox import EventOutbox, EventOutboxStatus
from .favorite import UserFavorite
from .pass_ledger import PassLedgerEntry
from .user import User
from .user_pass import UserPass
from .weekly_special import WeeklySpecial

__all__ = [
    "Booking",
    "ClassInstance",
    "EventOutbox",
    "EventOutboxStatus",
    "PassLedgerEntry",
    "User",
    "UserFavorite",
    "UserPass",
    "WeeklySpecial",
]
