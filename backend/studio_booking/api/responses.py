# backend/studio_booking/api/responses.py
"""
HTTP rendering for booking results and domain errors.

Failures share one body shape: ``{"success": false, "error", "message", "details"}``.
"""

from typing import Any, Dict, Union

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.enums import BookingErrorCode
from ..core.exceptions import ERROR_STATUS_CODES, DomainException
from ..schemas.booking_results import OperationFailure


def failure_body(code: str, message: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": False, "error": code, "message": message, "details": details}


def result_response(
    result: BaseModel, success_status: int = status.HTTP_200_OK
) -> Union[JSONResponse, BaseModel]:
    """Return successes as-is; render an OperationFailure with its mapped status."""
    if not isinstance(result, OperationFailure):
        if success_status == status.HTTP_200_OK:
            return result
        return JSONResponse(status_code=success_status, content=result.model_dump(mode="json"))

    status_code = ERROR_STATUS_CODES.get(
        BookingErrorCode(result.error), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=failure_body(exc.code, exc.message, exc.details),
    )
