"""Repository for scheduled class instances."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.enums import ClassStatus
from ..models.class_instance import ClassInstance
from .base_repository import BaseRepository


class ClassRepository(BaseRepository[ClassInstance]):
    def __init__(self, db: Session):
        super().__init__(db, ClassInstance)

    def get_for_update(self, class_id: str) -> Optional[ClassInstance]:
        """Lock the class row; every booking write for a class serializes on it."""
        return self.get_by_id(class_id, for_update=True)

    def list_between(
        self, start: date, end: date, *, include_cancelled: bool = False
    ) -> List[ClassInstance]:
        """Classes with ``start <= date <= end`` ordered by date then start time."""
        stmt = select(ClassInstance).where(
            ClassInstance.class_date >= start, ClassInstance.class_date <= end
        )
        if not include_cancelled:
            stmt = stmt.where(ClassInstance.status == ClassStatus.SCHEDULED.value)
        stmt = stmt.order_by(ClassInstance.class_date, ClassInstance.start_time, ClassInstance.id)
        return list(self.db.execute(stmt).scalars().all())
