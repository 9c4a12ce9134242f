"""
Result variants returned by the public booking operations.

Each operation returns either its success model or ``OperationFailure``; the
``success`` literal tells them apart.
"""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import Field

from ..core.enums import BookingErrorCode, BookingStatus
from .base import StandardizedModel


class OperationFailure(StandardizedModel):
    success: Literal[False] = False
    error: BookingErrorCode
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class BookingSuccess(StandardizedModel):
    success: Literal[True] = True
    booking_id: str
    status: BookingStatus
    new_balance: Optional[int] = Field(
        None, description="Remaining pack credits; null for unlimited passes"
    )


class CancelSuccess(StandardizedModel):
    success: Literal[True] = True
    booking_id: str
    new_balance: Optional[int] = None
    refunded: bool = False
    promoted_booking_id: Optional[str] = None


class AdminCancelSuccess(StandardizedModel):
    success: Literal[True] = True
    class_id: str
    cancelled_count: int
    refunded_count: int = 0


BookingResult = Union[BookingSuccess, OperationFailure]
CancelResult = Union[CancelSuccess, OperationFailure]
AdminCancelResult = Union[AdminCancelSuccess, OperationFailure]
