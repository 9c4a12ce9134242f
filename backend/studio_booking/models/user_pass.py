# backend/studio_booking/models/user_pass.py
"""
Pass model: a credit grant owned by one user.

Pack passes carry a remaining credit counter; unlimited passes ignore it and
are bounded only by their validity window.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import PassStatus, PassType
from ..core.timezone_utils import ensure_utc
from ..database import Base


class UserPass(Base):
    __tablename__ = "user_passes"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    pass_type = Column(String(20), nullable=False, default=PassType.PACK.value)
    pass_name = Column(String(100), nullable=False, default="Class Pack")
    remaining_credits = Column(Integer, nullable=False, default=0)
    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default=PassStatus.ACTIVE.value)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="passes")
    ledger_entries = relationship(
        "PassLedgerEntry", back_populates="user_pass", order_by="PassLedgerEntry.created_at"
    )

    __table_args__ = (
        CheckConstraint("remaining_credits >= 0", name="ck_user_passes_credits_non_negative"),
        CheckConstraint("pass_type IN ('pack', 'unlimited')", name="ck_user_passes_type"),
        Index("ix_user_passes_user_status", "user_id", "status", "is_active"),
    )

    @property
    def is_unlimited(self) -> bool:
        return self.pass_type == PassType.UNLIMITED.value

    @property
    def balance(self) -> Optional[int]:
        """Bookable balance; None for unlimited passes."""
        return None if self.is_unlimited else self.remaining_credits

    def is_usable_at(self, now: datetime) -> bool:
        return (
            bool(self.is_active)
            and self.status == PassStatus.ACTIVE.value
            and ensure_utc(self.valid_until) >= ensure_utc(now)
        )

    def can_pay(self, amount: int = 1) -> bool:
        return self.is_unlimited or self.remaining_credits >= amount

    def __repr__(self) -> str:
        return (
            f"<UserPass {self.id} user={self.user_id} type={self.pass_type} "
            f"credits={self.remaining_credits} status={self.status}>"
        )
