# backend/studio_booking/services/booking_service.py
"""
Booking Service for the studio booking core.

The booking state machine:

    booked   -> cancelled | attended | no_show
    waitlist -> booked (promotion) | cancelled

Every state change runs as one transaction that locks the class row first and
the pass row second. The public operations (create_booking, cancel_booking,
admin_cancel_class) never raise domain errors; they return a success model or
an OperationFailure carrying a stable error code.
"""

from datetime import datetime, timedelta
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import (
    BookingErrorCode,
    BookingStatus,
    CancelledBy,
    CheckInMethod,
    ClassStatus,
)
from ..core.exceptions import (
    BookingNotActiveException,
    BookingNotFoundException,
    CheckInNotAllowedException,
    ClassAlreadyStartedException,
    ClassCancelledException,
    ClassNotFoundException,
    DomainException,
    DuplicateBookingException,
    InsufficientCreditException,
    NoActivePassException,
    UserNotFoundException,
    ValidationException,
    WaiverNotSignedException,
)
from ..core.timezone_utils import ensure_utc, get_studio_today, utc_now
from ..events import (
    AttendanceMarked,
    BookingCancelled,
    BookingConfirmed,
    BookingWaitlisted,
    ClassCancelled,
    EventPublisher,
)
from ..models.booking import Booking
from ..models.class_instance import ClassInstance
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.booking_results import (
    AdminCancelResult,
    AdminCancelSuccess,
    BookingResult,
    BookingSuccess,
    CancelResult,
    CancelSuccess,
    OperationFailure,
)
from .base import BaseService
from .cancellation_policy import CancellationPolicy
from .pass_ledger_service import PassLedgerService
from .waitlist_promoter import WaitlistPromoter

logger = logging.getLogger(__name__)


def _failure(exc: DomainException) -> OperationFailure:
    try:
        code = BookingErrorCode(exc.code)
    except ValueError:
        code = BookingErrorCode.SERVICE_ERROR
    return OperationFailure(error=code, message=exc.message, details=exc.details)


class BookingService(BaseService):
    """Creates, cancels and closes out class bookings."""

    def __init__(
        self,
        db: Session,
        ledger: Optional[PassLedgerService] = None,
        policy: Optional[CancellationPolicy] = None,
        publisher: Optional[EventPublisher] = None,
    ):
        super().__init__(db)
        self.ledger = ledger or PassLedgerService(db)
        self.policy = policy or CancellationPolicy()
        self.publisher = publisher or EventPublisher(
            RepositoryFactory.create_event_outbox_repository(db)
        )
        self.promoter = WaitlistPromoter(db, ledger=self.ledger, publisher=self.publisher)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.class_repository = RepositoryFactory.create_class_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    # Public operations

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self, user_id: str, class_id: str, now: Optional[datetime] = None
    ) -> BookingResult:
        """
        Reserve a seat, or a waitlist spot when the class is full.

        With a free seat one credit is debited from the active pass in the
        same transaction as the insert. Waitlisted bookings are not charged
        until promoted. When two users race for the last seat, the first to
        commit gets it and the other is waitlisted.

        ``booked_at`` is read from the clock on each attempt, so a retried
        booking queues behind whoever took the lock before it.
        """
        try:
            booking, balance = self.run_atomic(
                "create_booking",
                lambda: self._create_booking_tx(
                    user_id, class_id, ensure_utc(now) if now else utc_now()
                ),
            )
        except DomainException as exc:
            self.logger.info(
                "Booking rejected",
                extra={"user_id": user_id, "class_id": class_id, "code": exc.code},
            )
            prometheus_metrics.record_booking_outcome("create_booking", exc.code)
            return _failure(exc)

        prometheus_metrics.record_booking_outcome("create_booking", booking.status)
        self.log_operation(
            "create_booking",
            booking_id=booking.id,
            user_id=user_id,
            class_id=class_id,
            status=booking.status,
        )
        return BookingSuccess(
            booking_id=booking.id, status=BookingStatus(booking.status), new_balance=balance
        )

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self,
        booking_id: str,
        actor_id: Optional[str] = None,
        now: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> CancelResult:
        """
        Cancel an active booking on behalf of its owner.

        A booked seat is refunded when the cancellation policy allows it, then
        the freed seat goes to the waitlist in the same transaction. A
        waitlisted booking is simply cancelled; nothing was charged.

        ``actor_id`` restricts the cancellation to the booking's owner.
        """
        current = ensure_utc(now) if now else utc_now()
        try:
            result = self.run_atomic(
                "cancel_booking",
                lambda: self._cancel_booking_tx(booking_id, actor_id, current, reason),
            )
        except DomainException as exc:
            prometheus_metrics.record_booking_outcome("cancel_booking", exc.code)
            return _failure(exc)

        prometheus_metrics.record_booking_outcome(
            "cancel_booking", "refunded" if result.refunded else "forfeited"
        )
        return result

    @BaseService.measure_operation("admin_cancel_class")
    def admin_cancel_class(
        self, class_id: str, reason: Optional[str] = None, now: Optional[datetime] = None
    ) -> AdminCancelResult:
        """
        Cancel a class on behalf of the studio.

        Every booked or waitlisted booking is cancelled and every booked one
        is refunded regardless of timing. Nobody is promoted.
        """
        current = ensure_utc(now) if now else utc_now()
        try:
            result = self.run_atomic(
                "admin_cancel_class", lambda: self._admin_cancel_class_tx(class_id, reason, current)
            )
        except DomainException as exc:
            prometheus_metrics.record_booking_outcome("admin_cancel_class", exc.code)
            return _failure(exc)

        prometheus_metrics.record_booking_outcome("admin_cancel_class", "cancelled")
        self.log_operation(
            "admin_cancel_class",
            class_id=class_id,
            cancelled_count=result.cancelled_count,
            refunded_count=result.refunded_count,
        )
        return result

    # Attendance (raise domain errors; callers are staff routes and check-in)

    @BaseService.measure_operation("mark_attendance")
    def mark_attendance(
        self, booking_id: str, status: BookingStatus, now: Optional[datetime] = None
    ) -> Booking:
        """
        Close out a booked seat as attended or no_show.

        No credit moves. A no-show frees the seat, so the waitlist gets a
        chance at it while the class has not started.
        """
        if status not in (BookingStatus.ATTENDED, BookingStatus.NO_SHOW):
            raise ValidationException(
                "Attendance must be attended or no_show", details={"status": str(status)}
            )
        current = ensure_utc(now) if now else utc_now()

        def _mark() -> Booking:
            booking, class_instance = self._lock_booking(booking_id)
            if booking.status != BookingStatus.BOOKED.value:
                raise BookingNotActiveException(booking.id, booking.status)

            booking.status = status.value
            if status == BookingStatus.ATTENDED:
                booking.checked_in = True
                booking.check_in_time = current
                booking.check_in_method = CheckInMethod.MANUAL.value
            self.booking_repository.flush()

            self.publisher.publish(
                AttendanceMarked(
                    booking_id=booking.id,
                    user_id=booking.user_id,
                    class_id=booking.class_id,
                    status=status.value,
                    marked_at=current,
                    method=booking.check_in_method,
                )
            )
            if status == BookingStatus.NO_SHOW:
                self.promoter.promote_next(class_instance.id, current)
            return booking

        booking = self.run_atomic("mark_attendance", _mark)
        self.log_operation("mark_attendance", booking_id=booking_id, status=status.value)
        return booking

    @BaseService.measure_operation("check_in")
    def check_in(
        self,
        booking_id: str,
        method: CheckInMethod,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Booking:
        """
        Record arrival for a booked seat (booked -> attended).

        Allowed from the configured window before start until the class ends.
        """
        current = ensure_utc(now) if now else utc_now()

        def _check_in() -> Booking:
            booking, class_instance = self._lock_booking(booking_id, owner_id=user_id)
            if booking.status == BookingStatus.ATTENDED.value:
                raise CheckInNotAllowedException(
                    "Already checked in", details={"booking_id": booking.id}
                )
            if booking.status != BookingStatus.BOOKED.value:
                raise BookingNotActiveException(booking.id, booking.status)

            opens_at = class_instance.starts_at - timedelta(
                minutes=settings.check_in_opens_minutes
            )
            if current < opens_at or current > class_instance.ends_at:
                raise CheckInNotAllowedException(
                    "Check-in is not open for this class",
                    details={
                        "class_id": class_instance.id,
                        "opens_at": opens_at.isoformat(),
                        "closes_at": class_instance.ends_at.isoformat(),
                    },
                )

            booking.status = BookingStatus.ATTENDED.value
            booking.checked_in = True
            booking.check_in_time = current
            booking.check_in_method = method.value
            self.booking_repository.flush()

            self.publisher.publish(
                AttendanceMarked(
                    booking_id=booking.id,
                    user_id=booking.user_id,
                    class_id=booking.class_id,
                    status=BookingStatus.ATTENDED.value,
                    marked_at=current,
                    method=method.value,
                )
            )
            return booking

        booking = self.run_atomic("check_in", _check_in)
        self.log_operation("check_in", booking_id=booking_id, method=method.value)
        return booking

    # Reads

    def get_booking(self, booking_id: str, user_id: Optional[str] = None) -> Booking:
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None or (user_id is not None and booking.user_id != user_id):
            raise BookingNotFoundException(booking_id)
        return booking

    def list_user_bookings(self, user_id: str, limit: int = 50) -> List[Booking]:
        return self.booking_repository.list_for_user(user_id, limit=limit)

    def get_upcoming_bookings(self, user_id: str, now: Optional[datetime] = None) -> List[Booking]:
        """Active bookings whose class has not ended yet, soonest first."""
        current = ensure_utc(now) if now else utc_now()
        candidates = self.booking_repository.active_for_user_from(
            user_id, get_studio_today(current)
        )
        return [b for b in candidates if b.class_instance.ends_at > current]

    # Transaction bodies

    def _create_booking_tx(
        self, user_id: str, class_id: str, now: datetime
    ) -> Tuple[Booking, Optional[int]]:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException(user_id)
        if not user.waiver_signed:
            raise WaiverNotSignedException(user_id)

        class_instance = self.class_repository.get_for_update(class_id)
        if class_instance is None:
            raise ClassNotFoundException(class_id)
        if class_instance.is_cancelled:
            raise ClassCancelledException(class_id)
        if now >= class_instance.booking_closes_at(settings.booking_cutoff_minutes):
            raise ClassAlreadyStartedException(class_id)

        existing = self.booking_repository.get_active_for_user_class(user_id, class_id)
        if existing is not None:
            raise DuplicateBookingException(user_id, class_id, existing.id)

        user_pass = self.ledger.get_active_pass(user_id, now, lock=True)
        if user_pass is None:
            exhausted = self.ledger.get_exhausted_pass(user_id, now)
            if exhausted is not None:
                raise InsufficientCreditException(exhausted.id, exhausted.remaining_credits)
            raise NoActivePassException(user_id)

        if not user_pass.can_pay():
            raise InsufficientCreditException(user_pass.id, user_pass.remaining_credits)

        has_seat = self.booking_repository.booked_count(class_id) < class_instance.capacity
        status = BookingStatus.BOOKED if has_seat else BookingStatus.WAITLIST

        try:
            booking = self.booking_repository.create(
                user_id=user_id,
                class_id=class_id,
                status=status.value,
                booked_at=now,
            )
        except IntegrityError as exc:
            raise DuplicateBookingException(user_id, class_id) from exc

        if status == BookingStatus.BOOKED:
            balance = self.ledger.debit(user_pass, booking=booking)
            booking.consumed_pass_id = user_pass.id
            self.booking_repository.flush()
            self.publisher.publish(
                BookingConfirmed(
                    booking_id=booking.id,
                    user_id=user_id,
                    class_id=class_id,
                    pass_id=user_pass.id,
                    booked_at=now,
                )
            )
        else:
            balance = user_pass.balance
            self.publisher.publish(
                BookingWaitlisted(
                    booking_id=booking.id, user_id=user_id, class_id=class_id, booked_at=now
                )
            )
        return booking, balance

    def _cancel_booking_tx(
        self,
        booking_id: str,
        actor_id: Optional[str],
        now: datetime,
        reason: Optional[str],
    ) -> CancelSuccess:
        booking, class_instance = self._lock_booking(booking_id, owner_id=actor_id)
        if not booking.is_active:
            raise BookingNotActiveException(booking.id, booking.status)

        previous_status = booking.status
        self._mark_cancelled(booking, CancelledBy.USER, now, reason)

        refunded = False
        promoted: Optional[Booking] = None
        balance: Optional[int] = None

        if previous_status == BookingStatus.BOOKED.value:
            decision = self.policy.evaluate(class_instance.starts_at, now, CancelledBy.USER)
            consumed = (
                self.ledger.get_pass_for_update(booking.consumed_pass_id)
                if booking.consumed_pass_id
                else None
            )
            if consumed is not None:
                if decision.refund_eligible:
                    balance = self.ledger.refund(consumed, booking=booking)
                    refunded = True
                else:
                    balance = consumed.balance
            self.logger.info(
                "Cancellation policy applied",
                extra={"booking_id": booking.id, **decision.to_payload()},
            )
            promoted = self.promoter.promote_next(class_instance.id, now)
        else:
            active = self.ledger.get_active_pass(booking.user_id, now)
            balance = active.balance if active is not None else None

        self.publisher.publish(
            BookingCancelled(
                booking_id=booking.id,
                user_id=booking.user_id,
                class_id=booking.class_id,
                cancelled_by=CancelledBy.USER.value,
                cancelled_at=now,
                previous_status=previous_status,
                refunded=refunded,
                reason=reason,
            )
        )
        self.log_operation(
            "cancel_booking",
            booking_id=booking.id,
            previous_status=previous_status,
            refunded=refunded,
            promoted_booking_id=promoted.id if promoted else None,
        )
        return CancelSuccess(
            booking_id=booking.id,
            new_balance=balance,
            refunded=refunded,
            promoted_booking_id=promoted.id if promoted else None,
        )

    def _admin_cancel_class_tx(
        self, class_id: str, reason: Optional[str], now: datetime
    ) -> AdminCancelSuccess:
        class_instance = self.class_repository.get_for_update(class_id)
        if class_instance is None:
            raise ClassNotFoundException(class_id)

        bookings = self.booking_repository.active_for_class(class_id, for_update=True)
        if class_instance.is_cancelled and not bookings:
            return AdminCancelSuccess(class_id=class_id, cancelled_count=0, refunded_count=0)

        class_instance.status = ClassStatus.CANCELLED.value
        class_instance.cancelled_at = now
        class_instance.cancellation_reason = reason

        refunded_count = 0
        for booking in bookings:
            previous_status = booking.status
            self._mark_cancelled(booking, CancelledBy.ADMIN, now, reason)
            refunded = False
            if previous_status == BookingStatus.BOOKED.value and booking.consumed_pass_id:
                consumed = self.ledger.get_pass_for_update(booking.consumed_pass_id)
                if consumed is not None:
                    self.ledger.refund(consumed, booking=booking)
                    refunded = True
                    refunded_count += 1
            self.publisher.publish(
                BookingCancelled(
                    booking_id=booking.id,
                    user_id=booking.user_id,
                    class_id=class_id,
                    cancelled_by=CancelledBy.ADMIN.value,
                    cancelled_at=now,
                    previous_status=previous_status,
                    refunded=refunded,
                    reason=reason,
                )
            )

        self.class_repository.flush()
        self.publisher.publish(
            ClassCancelled(
                class_id=class_id,
                cancelled_at=now,
                cancelled_count=len(bookings),
                refunded_count=refunded_count,
                reason=reason,
            )
        )
        return AdminCancelSuccess(
            class_id=class_id, cancelled_count=len(bookings), refunded_count=refunded_count
        )

    # Helpers

    def _lock_booking(
        self, booking_id: str, owner_id: Optional[str] = None
    ) -> Tuple[Booking, ClassInstance]:
        """
        Lock the booking's class, then the booking, and return both.

        The class lock comes first so every writer for a class queues in the
        same order.
        """
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None or (owner_id is not None and booking.user_id != owner_id):
            raise BookingNotFoundException(booking_id)

        class_instance = self.class_repository.get_for_update(booking.class_id)
        if class_instance is None:
            raise ClassNotFoundException(booking.class_id)
        locked = self.booking_repository.get_by_id(booking_id, for_update=True)
        if locked is None:
            raise BookingNotFoundException(booking_id)
        return locked, class_instance

    def _mark_cancelled(
        self,
        booking: Booking,
        cancelled_by: CancelledBy,
        now: datetime,
        reason: Optional[str],
    ) -> None:
        booking.status = BookingStatus.CANCELLED.value
        booking.cancelled_at = now
        booking.cancelled_by = cancelled_by.value
        booking.cancellation_reason = reason
        self.booking_repository.flush()
