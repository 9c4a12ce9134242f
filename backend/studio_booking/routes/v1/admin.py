# backend/studio_booking/routes/v1/admin.py
"""
Studio staff routes - API v1

Every endpoint requires ``users.is_admin``.

Endpoints:
    POST /classes                              → Create a class
    PUT /classes/{class_id}                    → Replace a class's details
    POST /classes/{class_id}/cancel            → Cancel a class, refunding everyone
    GET /classes/{class_id}/roster             → Booked and checked-in attendees
    POST /classes/{class_id}/check-in-code     → Issue a signed QR check-in code
    POST /bookings/{booking_id}/attendance     → Mark attended / no_show
    POST /bookings/{booking_id}/check-in       → Front-desk check-in
    POST /passes/purchases                     → Apply a confirmed pass purchase
    POST /passes/expire                        → Expire lapsed passes
    GET|POST /specials, PATCH|DELETE /specials/{special_id}
"""

import asyncio
import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Body, Depends, Path, Response, status
from fastapi.responses import JSONResponse

from ...api.dependencies import (
    get_booking_service,
    get_check_in_service,
    get_pass_ledger_service,
    get_schedule_service,
    get_specials_service,
    require_admin,
)
from ...api.responses import result_response
from ...core.constants import ULID_PATH_PATTERN
from ...core.enums import BookingStatus, PassType
from ...models.user import User
from ...schemas.booking import AttendanceRequest, BookingResponse
from ...schemas.booking_results import AdminCancelSuccess, OperationFailure
from ...schemas.passes import ExpirePassesResponse, PassPurchaseRequest, PassResponse
from ...schemas.schedule import (
    CheckInCodeResponse,
    ClassCancelRequest,
    ClassResponse,
    ClassUpsertRequest,
    RosterEntryResponse,
)
from ...schemas.specials import SpecialCreateRequest, SpecialResponse, SpecialUpdateRequest
from ...services.booking_service import BookingService
from ...services.check_in_service import CheckInService
from ...services.pass_ledger_service import PassLedgerService
from ...services.schedule_service import ScheduleService
from ...services.specials_service import SpecialsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"], dependencies=[Depends(require_admin)])


# Classes


@router.post("/classes", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    payload: ClassUpsertRequest,
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> ClassResponse:
    class_instance = await asyncio.to_thread(schedule_service.upsert_class, payload)
    return ClassResponse.model_validate(class_instance)


@router.put("/classes/{class_id}", response_model=ClassResponse)
async def update_class(
    payload: ClassUpsertRequest,
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> ClassResponse:
    """Replace a class's details; rejected with 409 while it has active bookings."""
    class_instance = await asyncio.to_thread(
        schedule_service.upsert_class, payload, class_id=class_id
    )
    return ClassResponse.model_validate(class_instance)


@router.post(
    "/classes/{class_id}/cancel",
    response_model=AdminCancelSuccess,
    responses={404: {"model": OperationFailure}, 409: {"model": OperationFailure}},
)
async def cancel_class(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    payload: Optional[ClassCancelRequest] = Body(None),
    booking_service: BookingService = Depends(get_booking_service),
) -> Union[AdminCancelSuccess, JSONResponse]:
    result = await asyncio.to_thread(
        booking_service.admin_cancel_class,
        class_id,
        reason=payload.reason if payload else None,
    )
    return result_response(result)


@router.get("/classes/{class_id}/roster", response_model=List[RosterEntryResponse])
async def get_roster(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    check_in_service: CheckInService = Depends(get_check_in_service),
) -> List[RosterEntryResponse]:
    bookings = await asyncio.to_thread(check_in_service.get_roster, class_id)
    return [
        RosterEntryResponse(
            booking_id=b.id,
            user_id=b.user_id,
            user_name=b.user_name,
            user_email=b.user.email if b.user else None,
            status=b.status,
            checked_in=bool(b.checked_in),
            check_in_time=b.check_in_time,
            check_in_method=b.check_in_method,
        )
        for b in bookings
    ]


@router.post("/classes/{class_id}/check-in-code", response_model=CheckInCodeResponse)
async def create_check_in_code(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    check_in_service: CheckInService = Depends(get_check_in_service),
) -> CheckInCodeResponse:
    code = await asyncio.to_thread(check_in_service.generate_class_code, class_id)
    return CheckInCodeResponse(class_id=code.class_id, code=code.code, expires_at=code.expires_at)


# Bookings


@router.post("/bookings/{booking_id}/attendance", response_model=BookingResponse)
async def mark_attendance(
    payload: AttendanceRequest,
    booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = await asyncio.to_thread(
        booking_service.mark_attendance, booking_id, BookingStatus(payload.status)
    )
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/check-in", response_model=BookingResponse)
async def manual_check_in(
    booking_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    check_in_service: CheckInService = Depends(get_check_in_service),
) -> BookingResponse:
    booking = await asyncio.to_thread(check_in_service.manual_check_in, booking_id)
    return BookingResponse.model_validate(booking)


# Passes


@router.post(
    "/passes/purchases", response_model=PassResponse, status_code=status.HTTP_201_CREATED
)
async def apply_purchase(
    payload: PassPurchaseRequest,
    ledger: PassLedgerService = Depends(get_pass_ledger_service),
) -> PassResponse:
    """Apply a purchase the payment provider has confirmed. Idempotent on ``reference``."""
    user_pass = await asyncio.to_thread(
        lambda: ledger.apply_purchase(
            user_id=payload.user_id,
            pass_type=PassType(payload.pass_type),
            pass_name=payload.pass_name,
            credits=payload.credits,
            duration_days=payload.duration_days,
            reference=payload.reference,
        )
    )
    return PassResponse.model_validate(user_pass)


@router.post("/passes/expire", response_model=ExpirePassesResponse)
async def expire_passes(
    ledger: PassLedgerService = Depends(get_pass_ledger_service),
) -> ExpirePassesResponse:
    expired = await asyncio.to_thread(ledger.expire_passes)
    return ExpirePassesResponse(expired=expired)


# Specials


@router.get("/specials", response_model=List[SpecialResponse])
async def list_specials(
    specials_service: SpecialsService = Depends(get_specials_service),
) -> List[SpecialResponse]:
    specials = await asyncio.to_thread(specials_service.list_specials)
    return [SpecialResponse.model_validate(s) for s in specials]


@router.post("/specials", response_model=SpecialResponse, status_code=status.HTTP_201_CREATED)
async def create_special(
    payload: SpecialCreateRequest,
    current_user: User = Depends(require_admin),
    specials_service: SpecialsService = Depends(get_specials_service),
) -> SpecialResponse:
    special = await asyncio.to_thread(specials_service.create_special, payload, current_user.id)
    return SpecialResponse.model_validate(special)


@router.patch("/specials/{special_id}", response_model=SpecialResponse)
async def update_special(
    payload: SpecialUpdateRequest,
    special_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    specials_service: SpecialsService = Depends(get_specials_service),
) -> SpecialResponse:
    special = await asyncio.to_thread(specials_service.update_special, special_id, payload)
    return SpecialResponse.model_validate(special)


@router.delete("/specials/{special_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_special(
    special_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    specials_service: SpecialsService = Depends(get_specials_service),
) -> Response:
    await asyncio.to_thread(specials_service.delete_special, special_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
