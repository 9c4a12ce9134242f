"""Cancellation refund policy for class bookings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.config import settings
from ..core.enums import CancelledBy
from ..core.timezone_utils import ensure_utc

DEFAULT_CANCEL_CUTOFF = timedelta(hours=2)


def is_refund_eligible(
    class_start: datetime, now: datetime, cutoff: timedelta = DEFAULT_CANCEL_CUTOFF
) -> bool:
    """A cancellation is refunded when made at or before ``class_start - cutoff``."""
    return ensure_utc(now) <= ensure_utc(class_start) - cutoff


@dataclass(frozen=True)
class CancellationDecision:
    refund_eligible: bool
    reason: str
    class_start: datetime
    evaluated_at: datetime
    cutoff: timedelta

    @property
    def minutes_before_start(self) -> int:
        return int((self.class_start - self.evaluated_at).total_seconds() // 60)

    def to_payload(self) -> dict[str, object]:
        return {
            "refund_eligible": self.refund_eligible,
            "reason": self.reason,
            "class_start": self.class_start.isoformat(),
            "evaluated_at": self.evaluated_at.isoformat(),
            "cutoff_minutes": int(self.cutoff.total_seconds() // 60),
            "minutes_before_start": self.minutes_before_start,
        }


class CancellationPolicy:
    """Decides whether a cancellation returns the booking's credit."""

    def __init__(self, cutoff: Optional[timedelta] = None):
        self.cutoff = (
            cutoff if cutoff is not None else timedelta(minutes=settings.cancel_cutoff_minutes)
        )

    def evaluate(
        self,
        class_start: datetime,
        now: datetime,
        cancelled_by: CancelledBy = CancelledBy.USER,
    ) -> CancellationDecision:
        start = ensure_utc(class_start)
        current = ensure_utc(now)

        if cancelled_by == CancelledBy.ADMIN:
            return CancellationDecision(
                refund_eligible=True,
                reason="Studio cancellations are always refunded",
                class_start=start,
                evaluated_at=current,
                cutoff=self.cutoff,
            )

        if is_refund_eligible(start, current, self.cutoff):
            reason = "Cancelled before the refund cutoff"
            eligible = True
        else:
            reason = "Cancelled inside the refund cutoff; credit forfeited"
            eligible = False

        return CancellationDecision(
            refund_eligible=eligible,
            reason=reason,
            class_start=start,
            evaluated_at=current,
            cutoff=self.cutoff,
        )
