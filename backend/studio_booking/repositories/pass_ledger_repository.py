"""Repository for credit ledger entries."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.pass_ledger import PassLedgerEntry
from .base_repository import BaseRepository


class PassLedgerRepository(BaseRepository[PassLedgerEntry]):
    def __init__(self, db: Session):
        super().__init__(db, PassLedgerEntry)

    def record(
        self,
        *,
        pass_id: str,
        user_id: str,
        entry_type: str,
        amount: int,
        balance_after: Optional[int],
        booking_id: Optional[str] = None,
        reference: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PassLedgerEntry:
        return self.create(
            pass_id=pass_id,
            user_id=user_id,
            booking_id=booking_id,
            entry_type=entry_type,
            amount=amount,
            balance_after=balance_after,
            reference=reference,
            note=note,
        )

    def get_by_reference(self, reference: str) -> Optional[PassLedgerEntry]:
        stmt = select(PassLedgerEntry).where(PassLedgerEntry.reference == reference)
        return self.db.execute(stmt).scalars().first()

    def list_for_pass(self, pass_id: str) -> List[PassLedgerEntry]:
        stmt = (
            select(PassLedgerEntry)
            .where(PassLedgerEntry.pass_id == pass_id)
            .order_by(PassLedgerEntry.created_at.asc(), PassLedgerEntry.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())
