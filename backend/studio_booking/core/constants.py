"""Application-wide constants for the studio booking core."""

from __future__ import annotations

BRAND_NAME = "Studio"

API_TITLE = f"{BRAND_NAME} Booking API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Class booking, pass ledger and waitlist engine for the studio."

# Credits moved by a single booking
CREDITS_PER_BOOKING = 1

# Class constraints
MIN_CLASS_DURATION = 15  # minutes
MAX_CLASS_DURATION = 240  # minutes
MAX_CLASS_CAPACITY = 200

# Text constraints
MAX_TITLE_LENGTH = 120
MAX_REASON_LENGTH = 255

# Query limits
DEFAULT_QUERY_LIMIT = 50
MAX_QUERY_LIMIT = 200

# Streak calculation window
STREAK_LOOKBACK_DAYS = 365
MAX_ACHIEVEMENTS_SHOWN = 3

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"
