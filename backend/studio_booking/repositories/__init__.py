"""
Repository layer for the studio booking core.

Repositories encapsulate queries and row locking; they never commit.
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .class_repository import ClassRepository
from .event_outbox_repository import EventOutboxRepository
from .factory import RepositoryFactory
from .favorites_repository import FavoritesRepository
from .pass_ledger_repository import PassLedgerRepository
from .pass_repository import PassRepository
from .special_repository import SpecialRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "ClassRepository",
    "EventOutboxRepository",
    "FavoritesRepository",
    "PassLedgerRepository",
    "PassRepository",
    "RepositoryFactory",
    "SpecialRepository",
    "UserRepository",
]
