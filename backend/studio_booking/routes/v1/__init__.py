# backend/studio_booking/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import admin, bookings, favorites, passes, schedule, specials, streaks

__all__ = [
    "admin",
    "bookings",
    "favorites",
    "passes",
    "schedule",
    "specials",
    "streaks",
]
