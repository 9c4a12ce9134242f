# backend/studio_booking/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each factory builds a service bound to the request's database session.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.booking_service import BookingService
from ...services.check_in_service import CheckInService
from ...services.class_capacity_service import ClassCapacityService
from ...services.favorites_service import FavoritesService
from ...services.pass_ledger_service import PassLedgerService
from ...services.schedule_service import ScheduleService
from ...services.specials_service import SpecialsService
from ...services.streak_service import StreakService
from .database import get_db

logger = logging.getLogger(__name__)


def get_pass_ledger_service(db: Session = Depends(get_db)) -> PassLedgerService:
    return PassLedgerService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    ledger: PassLedgerService = Depends(get_pass_ledger_service),
) -> BookingService:
    """Get BookingService instance sharing the request's ledger service."""
    return BookingService(db, ledger=ledger)


def get_check_in_service(
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
) -> CheckInService:
    return CheckInService(db, booking_service=booking_service)


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    return ScheduleService(db, capacity_service=ClassCapacityService(db))


def get_favorites_service(db: Session = Depends(get_db)) -> FavoritesService:
    return FavoritesService(db)


def get_streak_service(db: Session = Depends(get_db)) -> StreakService:
    return StreakService(db)


def get_specials_service(db: Session = Depends(get_db)) -> SpecialsService:
    return SpecialsService(db)
