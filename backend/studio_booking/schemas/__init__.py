# backend/studio_booking/schemas/__init__.py
"""
Pydantic schemas for the studio booking core.
"""

from .booking import (
    AttendanceRequest,
    BookingCreateRequest,
    BookingResponse,
    CancelRequest,
    CheckInRequest,
)
from .booking_results import (
    AdminCancelResult,
    AdminCancelSuccess,
    BookingResult,
    BookingSuccess,
    CancelResult,
    CancelSuccess,
    OperationFailure,
)
from .favorites import (
    FavoritedClass,
    FavoriteResponse,
    FavoritesList,
    FavoriteStatusResponse,
)
from .main_responses import HealthResponse
from .passes import (
    ExpirePassesResponse,
    PassPurchaseRequest,
    PassResponse,
    WalletSummaryResponse,
)
from .schedule import (
    AvailabilityResponse,
    CheckInCodeResponse,
    ClassCancelRequest,
    ClassResponse,
    ClassUpsertRequest,
    DayScheduleResponse,
    RosterEntryResponse,
    ScheduleEntryResponse,
    WeekScheduleResponse,
)
from .specials import (
    SpecialCreateRequest,
    SpecialResponse,
    SpecialUpdateRequest,
)
from .streaks import AchievementResponse, ActivityDay, StreakResponse

__all__ = [
    "AchievementResponse",
    "ActivityDay",
    "AdminCancelResult",
    "AdminCancelSuccess",
    "AttendanceRequest",
    "AvailabilityResponse",
    "BookingCreateRequest",
    "BookingResponse",
    "BookingResult",
    "BookingSuccess",
    "CancelRequest",
    "CancelResult",
    "CancelSuccess",
    "CheckInCodeResponse",
    "CheckInRequest",
    "ClassCancelRequest",
    "ClassResponse",
    "ClassUpsertRequest",
    "DayScheduleResponse",
    "ExpirePassesResponse",
    "FavoriteResponse",
    "FavoritedClass",
    "FavoritesList",
    "FavoriteStatusResponse",
    "HealthResponse",
    "OperationFailure",
    "PassPurchaseRequest",
    "PassResponse",
    "RosterEntryResponse",
    "ScheduleEntryResponse",
    "SpecialCreateRequest",
    "SpecialResponse",
    "SpecialUpdateRequest",
    "StreakResponse",
    "WalletSummaryResponse",
    "WeekScheduleResponse",
]
