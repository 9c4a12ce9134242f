# backend/studio_booking/repositories/pass_repository.py
"""
Repository for user passes.

Selection of the single bookable pass lives here so every caller orders the
candidates the same way.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.enums import PassStatus
from ..models.user_pass import UserPass
from .base_repository import BaseRepository


class PassRepository(BaseRepository[UserPass]):
    def __init__(self, db: Session):
        super().__init__(db, UserPass)

    def get_active_for_user(
        self, user_id: str, now: datetime, *, for_update: bool = False
    ) -> Optional[UserPass]:
        """
        Return the user's bookable pass, latest ``valid_until`` first.

        Ties on ``valid_until`` fall back to the id so the pick is stable.
        """
        stmt = (
            select(UserPass)
            .where(
                UserPass.user_id == user_id,
                UserPass.is_active.is_(True),
                UserPass.status == PassStatus.ACTIVE.value,
                UserPass.valid_until >= now,
            )
            .order_by(UserPass.valid_until.desc(), UserPass.id.desc())
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalars().first()

    def get_exhausted_for_user(self, user_id: str, now: datetime) -> Optional[UserPass]:
        """A pack pass still inside its validity window but out of credit."""
        stmt = (
            select(UserPass)
            .where(
                UserPass.user_id == user_id,
                UserPass.is_active.is_(True),
                UserPass.status == PassStatus.EXHAUSTED.value,
                UserPass.valid_until >= now,
            )
            .order_by(UserPass.valid_until.desc(), UserPass.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def find_renewable(
        self, user_id: str, pass_type: str, pass_name: Optional[str], now: datetime
    ) -> Optional[UserPass]:
        """Existing usable pass a purchase of the same kind should top up."""
        stmt = select(UserPass).where(
            UserPass.user_id == user_id,
            UserPass.pass_type == pass_type,
            UserPass.is_active.is_(True),
            UserPass.status.in_([PassStatus.ACTIVE.value, PassStatus.EXHAUSTED.value]),
            UserPass.valid_until >= now,
        )
        if pass_name is not None:
            stmt = stmt.where(UserPass.pass_name == pass_name)
        stmt = (
            stmt.order_by(UserPass.valid_until.desc(), UserPass.id.desc())
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalars().first()

    def list_for_user(self, user_id: str) -> List[UserPass]:
        stmt = (
            select(UserPass)
            .where(UserPass.user_id == user_id)
            .order_by(UserPass.valid_until.desc(), UserPass.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def expire_lapsed(self, now: datetime) -> int:
        """Flip active/exhausted passes past their validity window to expired."""
        stmt = (
            update(UserPass)
            .where(
                UserPass.status.in_([PassStatus.ACTIVE.value, PassStatus.EXHAUSTED.value]),
                UserPass.valid_until < now,
            )
            .values(status=PassStatus.EXPIRED.value)
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(stmt)
        return int(result.rowcount or 0)
