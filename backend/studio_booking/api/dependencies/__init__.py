# backend/studio_booking/api/dependencies/__init__.py
"""
Central export point for all dependencies.
"""

from .auth import get_current_user, get_optional_user, require_admin
from .database import get_db
from .services import (
    get_booking_service,
    get_check_in_service,
    get_favorites_service,
    get_pass_ledger_service,
    get_schedule_service,
    get_specials_service,
    get_streak_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_optional_user",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_booking_service",
    "get_check_in_service",
    "get_favorites_service",
    "get_pass_ledger_service",
    "get_schedule_service",
    "get_specials_service",
    "get_streak_service",
]
