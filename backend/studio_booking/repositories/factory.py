# backend/studio_booking/repositories/factory.py
"""
Repository Factory for the studio booking core.

Provides centralized creation of repository instances so services share one
way of wiring their data access.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session


# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .class_repository import ClassRepository
    from .event_outbox_repository import EventOutboxRepository
    from .favorites_repository import FavoritesRepository
    from .pass_ledger_repository import PassLedgerRepository
    from .pass_repository import PassRepository
    from .special_repository import SpecialRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_pass_repository(db: Session) -> "PassRepository":
        from .pass_repository import PassRepository

        return PassRepository(db)

    @staticmethod
    def create_pass_ledger_repository(db: Session) -> "PassLedgerRepository":
        from .pass_ledger_repository import PassLedgerRepository

        return PassLedgerRepository(db)

    @staticmethod
    def create_class_repository(db: Session) -> "ClassRepository":
        from .class_repository import ClassRepository

        return ClassRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_favorites_repository(db: Session) -> "FavoritesRepository":
        from .favorites_repository import FavoritesRepository

        return FavoritesRepository(db)

    @staticmethod
    def create_special_repository(db: Session) -> "SpecialRepository":
        from .special_repository import SpecialRepository

        return SpecialRepository(db)

    @staticmethod
    def create_event_outbox_repository(db: Session) -> "EventOutboxRepository":
        from .event_outbox_repository import EventOutboxRepository

        return EventOutboxRepository(db)
