# backend/studio_booking/routes/v1/bookings.py
"""
Booking routes - API v1

Endpoints:
    POST /                             → Book a class (or join its waitlist)
    GET /                              → Current user's bookings, newest first
    GET /upcoming                      → Booked/waitlisted bookings still ahead
    GET /{booking_id}                  → One of the current user's bookings
    POST /{booking_id}/cancel          → Cancel a booking
    POST /{booking_id}/check-in        → Check in with a scanned class code
"""

import asyncio
import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Body, Depends, Path, Query, status
from fastapi.responses import JSONResponse

from ...api.dependencies import get_booking_service, get_check_in_service, get_current_user
from ...api.responses import result_response
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT, ULID_PATH_PATTERN
from ...models.user import User
from ...schemas.booking import BookingCreateRequest, BookingResponse, CancelRequest, CheckInRequest
from ...schemas.booking_results import BookingSuccess, CancelSuccess, OperationFailure
from ...services.booking_service import BookingService
from ...services.check_in_service import CheckInService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])

_FAILURE_RESPONSES = {
    400: {"model": OperationFailure},
    403: {"model": OperationFailure},
    404: {"model": OperationFailure},
    409: {"model": OperationFailure},
    422: {"model": OperationFailure},
}


@router.post(
    "",
    response_model=BookingSuccess,
    status_code=status.HTTP_201_CREATED,
    responses=_FAILURE_RESPONSES,
)
async def create_booking(
    payload: BookingCreateRequest,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Union[BookingSuccess, JSONResponse]:
    """
    Book a seat in a class.

    A full class puts the booking on the waitlist (``status: waitlist``) and
    charges nothing until a seat frees up.
    """
    result = await asyncio.to_thread(
        booking_service.create_booking, current_user.id, payload.class_id
    )
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    bookings = await asyncio.to_thread(
        booking_service.list_user_bookings, current_user.id, limit
    )
    return [BookingResponse.model_validate(b) for b in bookings]


@router.get("/upcoming", response_model=List[BookingResponse])
async def upcoming_bookings(
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    bookings = await asyncio.to_thread(booking_service.get_upcoming_bookings, current_user.id)
    return [BookingResponse.model_validate(b) for b in bookings]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = await asyncio.to_thread(
        booking_service.get_booking, booking_id, current_user.id
    )
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/cancel", response_model=CancelSuccess, responses=_FAILURE_RESPONSES)
async def cancel_booking(
    booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    payload: Optional[CancelRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Union[CancelSuccess, JSONResponse]:
    """
    Cancel one of the current user's bookings.

    Booked seats are refunded when cancelled at least the configured cutoff
    before class start; later cancellations keep the credit.
    """
    result = await asyncio.to_thread(
        booking_service.cancel_booking,
        booking_id,
        actor_id=current_user.id,
        reason=payload.reason if payload else None,
    )
    return result_response(result)


@router.post("/{booking_id}/check-in", response_model=BookingResponse)
async def check_in(
    payload: CheckInRequest,
    booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    check_in_service: CheckInService = Depends(get_check_in_service),
) -> BookingResponse:
    booking = await asyncio.to_thread(
        check_in_service.check_in_booking_with_code,
        booking_id,
        payload.code,
        current_user.id,
    )
    return BookingResponse.model_validate(booking)
