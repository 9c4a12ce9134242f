"""Repository for weekly specials."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.weekly_special import WeeklySpecial
from .base_repository import BaseRepository


class SpecialRepository(BaseRepository[WeeklySpecial]):
    def __init__(self, db: Session):
        super().__init__(db, WeeklySpecial)

    def get_current(self, today: date) -> Optional[WeeklySpecial]:
        """Most recently created active special whose date window covers ``today``."""
        stmt = (
            select(WeeklySpecial)
            .where(
                WeeklySpecial.is_active.is_(True),
                WeeklySpecial.valid_from <= today,
                WeeklySpecial.valid_until >= today,
            )
            .order_by(WeeklySpecial.created_at.desc(), WeeklySpecial.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def list_all(self) -> List[WeeklySpecial]:
        stmt = select(WeeklySpecial).order_by(
            WeeklySpecial.created_at.desc(), WeeklySpecial.id.desc()
        )
        return list(self.db.execute(stmt).scalars().all())
