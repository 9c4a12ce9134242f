"""
Pydantic schemas for booking requests and responses.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict, Field

from ..core.constants import MAX_REASON_LENGTH
from ..core.enums import BookingStatus
from .base import StandardizedModel, StrictModel
from .schedule import ClassResponse


class BookingCreateRequest(StrictModel):
    """Book a seat (or a waitlist spot) in a class."""

    class_id: str = Field(..., min_length=26, max_length=26, description="Class instance ULID")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"example": {"class_id": "01K2K8CVN3A55280PFKJD9YHKV"}},
    )


class CancelRequest(StrictModel):
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class AttendanceRequest(StrictModel):
    """Staff close-out of a booked seat."""

    status: Literal["attended", "no_show"]


class CheckInRequest(StrictModel):
    code: str = Field(..., min_length=1, max_length=255, description="Scanned class check-in code")


class BookingResponse(StandardizedModel):
    id: str
    user_id: str
    class_id: str
    status: BookingStatus
    booked_at: datetime
    consumed_pass_id: Optional[str] = None
    promoted_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    cancellation_reason: Optional[str] = None
    checked_in: bool = False
    check_in_time: Optional[datetime] = None
    check_in_method: Optional[str] = None
    class_info: Optional[ClassResponse] = Field(
        None, validation_alias="class_instance", serialization_alias="class"
    )

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)
