# backend/studio_booking/routes/v1/schedule.py
"""
Schedule routes - API v1

Read-only class listings with live availability. Classes that have already
started are left out.

Endpoints:
    GET /day?date=YYYY-MM-DD           → One day's classes
    GET /week?start=YYYY-MM-DD         → Seven days starting at ``start``
    GET /classes/{class_id}            → One class with availability
"""

import asyncio
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from ...api.dependencies import get_optional_user, get_schedule_service
from ...core.constants import ULID_PATH_PATTERN
from ...core.timezone_utils import get_studio_today
from ...models.user import User
from ...schemas.schedule import (
    AvailabilityResponse,
    ClassResponse,
    DayScheduleResponse,
    ScheduleEntryResponse,
    WeekScheduleResponse,
)
from ...services.schedule_service import ScheduleEntry, ScheduleService

router = APIRouter(tags=["schedule-v1"])


def _entry_response(entry: ScheduleEntry) -> ScheduleEntryResponse:
    return ScheduleEntryResponse(
        class_info=ClassResponse.model_validate(entry.class_instance),
        availability=AvailabilityResponse.model_validate(entry.availability, from_attributes=True),
        my_status=entry.my_status,
        is_favorite=entry.is_favorite,
    )


@router.get("/day", response_model=DayScheduleResponse)
async def get_day_schedule(
    day: Optional[date] = Query(None, alias="date"),
    current_user: Optional[User] = Depends(get_optional_user),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> DayScheduleResponse:
    target = day or get_studio_today()
    entries = await asyncio.to_thread(
        schedule_service.get_day_schedule, target, current_user.id if current_user else None
    )
    return DayScheduleResponse(day=target, classes=[_entry_response(e) for e in entries])


@router.get("/week", response_model=WeekScheduleResponse)
async def get_week_schedule(
    start: Optional[date] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> WeekScheduleResponse:
    first_day = start or get_studio_today()
    week = await asyncio.to_thread(
        schedule_service.get_week_schedule, first_day, current_user.id if current_user else None
    )
    return WeekScheduleResponse(
        start=first_day,
        days=[
            DayScheduleResponse(day=day, classes=[_entry_response(e) for e in entries])
            for day, entries in sorted(week.items())
        ],
    )


@router.get("/classes/{class_id}", response_model=ScheduleEntryResponse)
async def get_class(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Optional[User] = Depends(get_optional_user),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleEntryResponse:
    entry = await asyncio.to_thread(
        schedule_service.get_class, class_id, current_user.id if current_user else None
    )
    return _entry_response(entry)
