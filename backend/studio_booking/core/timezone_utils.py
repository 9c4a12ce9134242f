"""
Timezone utilities for the studio schedule.

Class dates and times are published as studio wall-clock values; every
comparison in the booking core happens on timezone-aware UTC instants.
"""

from datetime import date, datetime, time, timezone
from typing import Optional

import pytz

from .config import settings


def get_studio_timezone(tz_name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Return the studio's timezone as a pytz timezone object."""
    return pytz.timezone(tz_name or settings.studio_timezone)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    SQLite hands back naive datetimes; those are stored as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def studio_datetime_to_utc(
    day: date, wall_time: time, tz_name: Optional[str] = None
) -> datetime:
    """Convert a studio wall-clock date/time to an aware UTC datetime."""
    studio_tz = get_studio_timezone(tz_name)
    local_dt = studio_tz.localize(datetime.combine(day, wall_time))
    return local_dt.astimezone(timezone.utc)


def get_studio_today(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> date:
    """Return 'today' in the studio timezone."""
    current = ensure_utc(now) if now else utc_now()
    return current.astimezone(get_studio_timezone(tz_name)).date()
