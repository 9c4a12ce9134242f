"""
Pydantic schemas for the class schedule.
"""

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.constants import (
    MAX_CLASS_CAPACITY,
    MAX_CLASS_DURATION,
    MAX_REASON_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_CLASS_DURATION,
)
from ..core.enums import AvailabilityLevel, BookingStatus, ClassStatus
from .base import StandardizedModel, StrictModel


def _minutes_between(start: time, end: time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


class ClassUpsertRequest(BaseModel):
    """Create or replace a class instance (staff only)."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    instructor: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    class_date: date = Field(..., alias="date")
    start_time: time
    end_time: time
    capacity: int = Field(..., gt=0, le=MAX_CLASS_CAPACITY)
    duration_min: Optional[int] = Field(None, ge=MIN_CLASS_DURATION, le=MAX_CLASS_DURATION)
    level: Optional[str] = Field(None, max_length=50)
    heat_c: Optional[int] = Field(None, ge=0, le=60)
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @model_validator(mode="after")
    def _check_times(self) -> "ClassUpsertRequest":
        span = _minutes_between(self.start_time, self.end_time)
        if span <= 0:
            raise ValueError("end_time must be after start_time")
        if self.duration_min is None:
            if not MIN_CLASS_DURATION <= span <= MAX_CLASS_DURATION:
                raise ValueError(
                    f"Class length must be between {MIN_CLASS_DURATION} and {MAX_CLASS_DURATION} minutes"
                )
            self.duration_min = span
        return self


class ClassCancelRequest(StrictModel):
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class AvailabilityResponse(StandardizedModel):
    capacity: int
    booked: int
    spots_left: int
    waitlist_count: int
    level: AvailabilityLevel


class ClassResponse(StandardizedModel):
    id: str
    title: str
    instructor: str
    class_date: date = Field(..., serialization_alias="date")
    start_time: time
    end_time: time
    starts_at: datetime
    capacity: int
    duration_min: int
    level: Optional[str] = None
    heat_c: Optional[int] = None
    notes: Optional[str] = None
    status: ClassStatus

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)


class ScheduleEntryResponse(StandardizedModel):
    class_info: ClassResponse = Field(..., serialization_alias="class")
    availability: AvailabilityResponse
    my_status: Optional[BookingStatus] = None
    is_favorite: bool = False


class DayScheduleResponse(StandardizedModel):
    day: date = Field(..., serialization_alias="date")
    classes: List[ScheduleEntryResponse]


class WeekScheduleResponse(StandardizedModel):
    start: date
    days: List[DayScheduleResponse]


class RosterEntryResponse(StandardizedModel):
    booking_id: str
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    status: BookingStatus
    checked_in: bool
    check_in_time: Optional[datetime] = None
    check_in_method: Optional[str] = None


class CheckInCodeResponse(StandardizedModel):
    class_id: str
    code: str
    expires_at: datetime
