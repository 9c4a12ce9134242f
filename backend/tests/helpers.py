"""Shared constants and small helpers for the test suite."""

from datetime import date, datetime, time, timezone

# A fixed "now" six hours before the default class starts
NOW = datetime(2030, 1, 15, 12, 0, tzinfo=timezone.utc)
CLASS_DAY = date(2030, 1, 15)
CLASS_START = time(18, 0)
CLASS_END = time(19, 0)
CLASS_STARTS_AT = datetime(2030, 1, 15, 18, 0, tzinfo=timezone.utc)


def auth_headers(user) -> dict:
    return {"X-User-Id": user.id}
