"""Class check-in: signed QR codes, staff check-in and the class roster."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import hashlib
import hmac
import secrets
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import CheckInMethod
from ..core.exceptions import (
    CheckInNotAllowedException,
    ClassCancelledException,
    ClassNotFoundException,
    InvalidCheckInCodeException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .booking_service import BookingService


@dataclass(frozen=True)
class CheckInCode:
    code: str
    class_id: str
    expires_at: datetime


class CheckInService(BaseService):
    """
    Issues and verifies class check-in codes.

    Code format: ``<class_id>.<expires_epoch>.<signature>`` where the signature
    is an HMAC-SHA256 over the first two parts.
    """

    def __init__(self, db: Session, booking_service: Optional[BookingService] = None):
        super().__init__(db)
        self.booking_service = booking_service or BookingService(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.class_repository = RepositoryFactory.create_class_repository(db)
        self._secret = settings.check_in_secret.get_secret_value().encode("utf-8")

    @BaseService.measure_operation("generate_check_in_code")
    def generate_class_code(self, class_id: str, now: Optional[datetime] = None) -> CheckInCode:
        current = ensure_utc(now) if now else utc_now()
        class_instance = self.class_repository.get_by_id(class_id)
        if class_instance is None:
            raise ClassNotFoundException(class_id)
        if class_instance.is_cancelled:
            raise ClassCancelledException(class_id)

        expires_at = current + timedelta(minutes=settings.check_in_code_ttl_minutes)
        expires_epoch = int(expires_at.timestamp())
        signature = self._sign(class_id, expires_epoch)
        return CheckInCode(
            code=f"{class_id}.{expires_epoch}.{signature}",
            class_id=class_id,
            expires_at=datetime.fromtimestamp(expires_epoch, tz=timezone.utc),
        )

    def verify_code(self, code: str, now: Optional[datetime] = None) -> str:
        """Return the class id encoded in ``code`` or raise InvalidCheckInCodeException."""
        current = ensure_utc(now) if now else utc_now()
        parts = (code or "").strip().split(".")
        if len(parts) != 3 or not all(parts):
            raise InvalidCheckInCodeException("invalid_format")

        class_id, expires_raw, signature = parts
        try:
            expires_epoch = int(expires_raw)
        except ValueError as exc:
            raise InvalidCheckInCodeException("invalid_format") from exc

        if not secrets.compare_digest(self._sign(class_id, expires_epoch), signature):
            raise InvalidCheckInCodeException("invalid_signature")
        if current.timestamp() > expires_epoch:
            raise InvalidCheckInCodeException("expired")
        return class_id

    @BaseService.measure_operation("check_in_with_code")
    def check_in_with_code(
        self, code: str, user_id: str, now: Optional[datetime] = None
    ) -> Booking:
        class_id = self.verify_code(code, now)
        booking = self.booking_repository.get_active_for_user_class(user_id, class_id)
        if booking is None:
            raise CheckInNotAllowedException(
                "You have no booking for this class", details={"class_id": class_id}
            )
        return self.booking_service.check_in(
            booking.id, CheckInMethod.QR, user_id=user_id, now=now
        )

    def check_in_booking_with_code(
        self, booking_id: str, code: str, user_id: str, now: Optional[datetime] = None
    ) -> Booking:
        """Check in a specific booking; the code must belong to that booking's class."""
        booking = self.booking_service.get_booking(booking_id, user_id=user_id)
        if self.verify_code(code, now) != booking.class_id:
            raise InvalidCheckInCodeException("class_mismatch")
        return self.booking_service.check_in(
            booking.id, CheckInMethod.QR, user_id=user_id, now=now
        )

    def manual_check_in(self, booking_id: str, now: Optional[datetime] = None) -> Booking:
        return self.booking_service.check_in(booking_id, CheckInMethod.MANUAL, now=now)

    def get_roster(self, class_id: str) -> List[Booking]:
        if self.class_repository.get_by_id(class_id) is None:
            raise ClassNotFoundException(class_id)
        return self.booking_repository.roster(class_id)

    def _sign(self, class_id: str, expires_epoch: int) -> str:
        message = f"{class_id}.{expires_epoch}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()[:32]
