# backend/studio_booking/services/pass_ledger_service.py
"""
Pass ledger: the single source of truth for a user's bookable credit.

``debit`` and ``refund`` run inside the caller's transaction on a pass row the
caller has already locked; every counter change writes a ledger entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import LedgerEntryType, PassStatus, PassType
from ..core.exceptions import (
    InsufficientCreditException,
    UserNotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..models.user_pass import UserPass
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletSummary:
    active_pass: Optional[UserPass]
    balance: Optional[int]
    is_unlimited: bool
    low_credit: bool
    days_remaining: Optional[int]


class PassLedgerService(BaseService):
    """Owns pass selection, debits, refunds and purchase top-ups."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.pass_repository = RepositoryFactory.create_pass_repository(db)
        self.ledger_repository = RepositoryFactory.create_pass_ledger_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("get_active_pass")
    def get_active_pass(
        self, user_id: str, now: Optional[datetime] = None, *, lock: bool = False
    ) -> Optional[UserPass]:
        """
        Return the pass a booking would be charged to, or None.

        Qualifying passes are active, flagged ``is_active`` and not past
        ``valid_until``; the latest ``valid_until`` wins.
        """
        current = ensure_utc(now) if now else utc_now()
        return self.pass_repository.get_active_for_user(user_id, current, for_update=lock)

    def get_pass_for_update(self, pass_id: str) -> Optional[UserPass]:
        return self.pass_repository.get_by_id(pass_id, for_update=True)

    def get_exhausted_pass(self, user_id: str, now: datetime) -> Optional[UserPass]:
        """Pack pass that is still valid but has run out of credits."""
        return self.pass_repository.get_exhausted_for_user(user_id, ensure_utc(now))


    def list_passes(self, user_id: str) -> List[UserPass]:
        return self.pass_repository.list_for_user(user_id)

    def debit(
        self, user_pass: UserPass, *, booking: Booking, amount: int = 1
    ) -> Optional[int]:
        """
        Take ``amount`` credits from ``user_pass`` for ``booking``.

        Unlimited passes always succeed without touching the counter. Returns
        the new balance (None for unlimited).

        Raises:
            InsufficientCreditException: pack pass holds fewer than ``amount``
        """
        if amount <= 0:
            raise ValidationException("Debit amount must be positive", details={"amount": amount})

        if user_pass.is_unlimited:
            self.ledger_repository.record(
                pass_id=user_pass.id,
                user_id=user_pass.user_id,
                booking_id=booking.id,
                entry_type=LedgerEntryType.DEBIT.value,
                amount=0,
                balance_after=None,
                note="unlimited pass",
            )
            return None

        if user_pass.remaining_credits < amount:
            raise InsufficientCreditException(user_pass.id, user_pass.remaining_credits, amount)

        user_pass.remaining_credits -= amount
        if user_pass.remaining_credits == 0:
            user_pass.status = PassStatus.EXHAUSTED.value
        booking.credits_debited = (booking.credits_debited or 0) + amount

        self.ledger_repository.record(
            pass_id=user_pass.id,
            user_id=user_pass.user_id,
            booking_id=booking.id,
            entry_type=LedgerEntryType.DEBIT.value,
            amount=-amount,
            balance_after=user_pass.remaining_credits,
        )
        prometheus_metrics.inc_ledger_movement(LedgerEntryType.DEBIT.value, amount)
        return user_pass.remaining_credits

    def refund(
        self, user_pass: UserPass, *, booking: Booking, amount: int = 1
    ) -> Optional[int]:
        """
        Return credit taken for ``booking`` to ``user_pass``.

        Never returns more than the booking still has outstanding, so a
        booking cannot be refunded twice. An exhausted pass becomes active
        again; an expired pass gets the credit back and stays expired.
        """
        if user_pass.is_unlimited:
            return None

        refundable = min(amount, booking.refundable_credits)
        if refundable <= 0:
            self.logger.info(
                "Nothing left to refund",
                extra={"booking_id": booking.id, "pass_id": user_pass.id},
            )
            return user_pass.remaining_credits

        user_pass.remaining_credits += refundable
        booking.credits_refunded = (booking.credits_refunded or 0) + refundable
        if user_pass.status == PassStatus.EXHAUSTED.value:
            user_pass.status = PassStatus.ACTIVE.value

        self.ledger_repository.record(
            pass_id=user_pass.id,
            user_id=user_pass.user_id,
            booking_id=booking.id,
            entry_type=LedgerEntryType.REFUND.value,
            amount=refundable,
            balance_after=user_pass.remaining_credits,
        )
        prometheus_metrics.inc_ledger_movement(LedgerEntryType.REFUND.value, refundable)
        return user_pass.remaining_credits

    @BaseService.measure_operation("apply_purchase")
    def apply_purchase(
        self,
        *,
        user_id: str,
        pass_type: PassType,
        pass_name: str,
        credits: int,
        duration_days: int,
        reference: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> UserPass:
        """
        Issue or top up a pass after the payment collaborator confirms a purchase.

        - pack, same-name usable pass exists: add credits, reset validity
        - unlimited, usable pass exists: extend from max(valid_until, now)
        - otherwise: create a new pass

        A repeated ``reference`` returns the pass from the first application.
        """
        if duration_days <= 0:
            raise ValidationException("Pass duration must be positive")
        if pass_type == PassType.PACK and credits <= 0:
            raise ValidationException("Pack passes need at least one credit")

        current = ensure_utc(now) if now else utc_now()

        def _apply() -> UserPass:
            if reference:
                existing_entry = self.ledger_repository.get_by_reference(reference)
                if existing_entry is not None:
                    self.logger.info(
                        "Purchase already applied", extra={"reference": reference}
                    )
                    return existing_entry.user_pass

            if self.user_repository.get_by_id(user_id) is None:
                raise UserNotFoundException(user_id)

            new_valid_until = current + timedelta(days=duration_days)
            target = self.pass_repository.find_renewable(
                user_id,
                pass_type.value,
                pass_name if pass_type == PassType.PACK else None,
                current,
            )
            added = credits if pass_type == PassType.PACK else 0

            if target is not None and pass_type == PassType.PACK:
                target.remaining_credits += credits
                target.valid_until = new_valid_until
                target.status = PassStatus.ACTIVE.value
                action = "topped_up"
            elif target is not None:
                base = max(ensure_utc(target.valid_until), current)
                target.valid_until = base + timedelta(days=duration_days)
                target.status = PassStatus.ACTIVE.value
                action = "extended"
            else:
                target = self.pass_repository.create(
                    user_id=user_id,
                    pass_type=pass_type.value,
                    pass_name=pass_name,
                    remaining_credits=added,
                    valid_from=current,
                    valid_until=new_valid_until,
                    status=PassStatus.ACTIVE.value,
                    is_active=True,
                )
                action = "created"

            self.pass_repository.flush()
            self.ledger_repository.record(
                pass_id=target.id,
                user_id=user_id,
                entry_type=LedgerEntryType.TOP_UP.value,
                amount=added,
                balance_after=target.balance,
                reference=reference,
                note=f"{action}: {pass_name}",
            )
            if added:
                prometheus_metrics.inc_ledger_movement(LedgerEntryType.TOP_UP.value, added)
            self.log_operation(
                "apply_purchase",
                user_id=user_id,
                pass_id=target.id,
                pass_action=action,
                credits=added,
            )
            return target

        return self.run_atomic("apply_purchase", _apply)

    @BaseService.measure_operation("expire_passes")
    def expire_passes(self, now: Optional[datetime] = None) -> int:
        """Mark passes past ``valid_until`` as expired. Returns the number changed."""
        current = ensure_utc(now) if now else utc_now()
        count = self.run_atomic("expire_passes", lambda: self.pass_repository.expire_lapsed(current))
        if count:
            self.log_operation("expire_passes", expired=count)
        return count

    def get_wallet_summary(self, user_id: str, now: Optional[datetime] = None) -> WalletSummary:
        current = ensure_utc(now) if now else utc_now()
        active = self.get_active_pass(user_id, current)
        if active is None:
            return WalletSummary(
                active_pass=None,
                balance=None,
                is_unlimited=False,
                low_credit=False,
                days_remaining=None,
            )

        days_remaining = max((ensure_utc(active.valid_until) - current).days, 0)
        low_credit = (
            not active.is_unlimited and active.remaining_credits <= settings.low_credit_threshold
        )
        return WalletSummary(
            active_pass=active,
            balance=active.balance,
            is_unlimited=active.is_unlimited,
            low_credit=low_credit,
            days_remaining=days_remaining,
        )
