# backend/studio_booking/models/pass_ledger.py
"""
Credit ledger entries.

One row per credit movement on a pass, written in the same transaction as the
counter change so the audit trail and the balance cannot disagree.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class PassLedgerEntry(Base):
    __tablename__ = "pass_ledger_entries"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    pass_id = Column(String(26), ForeignKey("user_passes.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(String(26), ForeignKey("class_bookings.id"), nullable=True, index=True)
    entry_type = Column(String(20), nullable=False)
    amount = Column(Integer, nullable=False)
    # Null for unlimited passes, which have no counter
    balance_after = Column(Integer, nullable=True)
    # Purchase reference from the payment collaborator; makes top-ups idempotent
    reference = Column(String(255), nullable=True, unique=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user_pass = relationship("UserPass", back_populates="ledger_entries")

    def __repr__(self) -> str:
        return f"<PassLedgerEntry {self.entry_type} {self.amount} pass={self.pass_id}>"
