# backend/studio_booking/core/exceptions.py
"""
Domain-specific exceptions for the studio booking core.

Services raise these internally; the booking boundary converts them into
failure results, and routes convert the rest into HTTP errors.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .enums import BookingErrorCode

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def __init__(
        self,
        message: str = "An error occurred processing your request",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code or BookingErrorCode.SERVICE_ERROR.value, details)


# Booking core failures


class InsufficientCreditException(BusinessRuleException):
    def __init__(self, pass_id: str, remaining: int, required: int = 1):
        super().__init__(
            message="Not enough credit on your pass to book this class",
            code=BookingErrorCode.INSUFFICIENT_CREDIT.value,
            details={"pass_id": pass_id, "remaining_credits": remaining, "required": required},
        )


class NoActivePassException(BusinessRuleException):
    def __init__(self, user_id: str):
        super().__init__(
            message="You need an active pass to book a class",
            code=BookingErrorCode.NO_ACTIVE_PASS.value,
            details={"user_id": user_id},
        )


class ClassAlreadyStartedException(BusinessRuleException):
    def __init__(self, class_id: str):
        super().__init__(
            message="This class has already started",
            code=BookingErrorCode.CLASS_ALREADY_STARTED.value,
            details={"class_id": class_id},
        )


class ClassCancelledException(BusinessRuleException):
    def __init__(self, class_id: str):
        super().__init__(
            message="This class has been cancelled",
            code=BookingErrorCode.CLASS_CANCELLED.value,
            details={"class_id": class_id},
        )


class ClassLockedException(ConflictException):
    def __init__(self, class_id: str, active_bookings: int):
        super().__init__(
            message="Class details cannot change while bookings exist",
            code=BookingErrorCode.CLASS_LOCKED.value,
            details={"class_id": class_id, "active_bookings": active_bookings},
        )


class ClassNotFoundException(NotFoundException):
    def __init__(self, class_id: str):
        super().__init__(
            message="Class not found",
            code=BookingErrorCode.CLASS_NOT_FOUND.value,
            details={"class_id": class_id},
        )


class DuplicateBookingException(ConflictException):
    def __init__(self, user_id: str, class_id: str, existing_booking_id: Optional[str] = None):
        super().__init__(
            message="You already have a booking for this class",
            code=BookingErrorCode.DUPLICATE_BOOKING.value,
            details={
                "user_id": user_id,
                "class_id": class_id,
                "existing_booking_id": existing_booking_id,
            },
        )


class WaiverNotSignedException(ForbiddenException):
    def __init__(self, user_id: str):
        super().__init__(
            message="Please sign the studio waiver before booking",
            code=BookingErrorCode.WAIVER_NOT_SIGNED.value,
            details={"user_id": user_id},
        )


class UserNotFoundException(NotFoundException):
    def __init__(self, user_id: str):
        super().__init__(
            message="User not found",
            code=BookingErrorCode.USER_NOT_FOUND.value,
            details={"user_id": user_id},
        )


class BookingNotFoundException(NotFoundException):
    def __init__(self, booking_id: str):
        super().__init__(
            message="Booking not found",
            code=BookingErrorCode.BOOKING_NOT_FOUND.value,
            details={"booking_id": booking_id},
        )


class BookingNotActiveException(ConflictException):
    def __init__(self, booking_id: str, current_status: str):
        super().__init__(
            message=f"Booking is already {current_status}",
            code=BookingErrorCode.BOOKING_NOT_ACTIVE.value,
            details={"booking_id": booking_id, "status": current_status},
        )


class CheckInNotAllowedException(BusinessRuleException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=BookingErrorCode.CHECK_IN_NOT_ALLOWED.value,
            details=details or {},
        )


class InvalidCheckInCodeException(ValidationException):
    def __init__(self, reason: str):
        super().__init__(
            message="Check-in code is invalid or expired",
            code=BookingErrorCode.INVALID_CHECK_IN_CODE.value,
            details={"reason": reason},
        )


class TransactionConflictException(ConflictException):
    """Transient write conflict; retried by the service before surfacing."""

    def __init__(self, operation: str, attempts: int = 1):
        super().__init__(
            message="The booking system is busy, please try again",
            code=BookingErrorCode.TRANSACTION_CONFLICT.value,
            details={"operation": operation, "attempts": attempts},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as query failures or
    constraint violations.
    """


# HTTP status for each failure code returned by the booking operations
ERROR_STATUS_CODES: Dict[BookingErrorCode, int] = {
    BookingErrorCode.INSUFFICIENT_CREDIT: HTTP_422_UNPROCESSABLE,
    BookingErrorCode.NO_ACTIVE_PASS: HTTP_422_UNPROCESSABLE,
    BookingErrorCode.CLASS_FULL: status.HTTP_409_CONFLICT,
    BookingErrorCode.CLASS_ALREADY_STARTED: HTTP_422_UNPROCESSABLE,
    BookingErrorCode.DUPLICATE_BOOKING: status.HTTP_409_CONFLICT,
    BookingErrorCode.WAIVER_NOT_SIGNED: status.HTTP_403_FORBIDDEN,
    BookingErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingErrorCode.TRANSACTION_CONFLICT: status.HTTP_409_CONFLICT,
    BookingErrorCode.CLASS_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingErrorCode.CLASS_CANCELLED: HTTP_422_UNPROCESSABLE,
    BookingErrorCode.CLASS_LOCKED: status.HTTP_409_CONFLICT,
    BookingErrorCode.BOOKING_NOT_ACTIVE: status.HTTP_409_CONFLICT,
    BookingErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingErrorCode.CHECK_IN_NOT_ALLOWED: HTTP_422_UNPROCESSABLE,
    BookingErrorCode.INVALID_CHECK_IN_CODE: status.HTTP_400_BAD_REQUEST,
    BookingErrorCode.SERVICE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}
