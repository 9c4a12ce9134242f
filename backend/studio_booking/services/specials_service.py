"""
Weekly specials.

The current special is always read from the weekly_specials table; nothing is
kept in process memory between requests.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import get_studio_today
from ..models.weekly_special import WeeklySpecial
from ..repositories.factory import RepositoryFactory
from ..schemas.specials import SpecialCreateRequest, SpecialUpdateRequest
from .base import BaseService


class SpecialsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.special_repository = RepositoryFactory.create_special_repository(db)

    def get_current_special(self, today: Optional[date] = None) -> Optional[WeeklySpecial]:
        return self.special_repository.get_current(today or get_studio_today())

    def list_specials(self) -> List[WeeklySpecial]:
        return self.special_repository.list_all()

    @BaseService.measure_operation("create_special")
    def create_special(self, data: SpecialCreateRequest, created_by: Optional[str]) -> WeeklySpecial:
        special = self.run_atomic(
            "create_special",
            lambda: self.special_repository.create(
                title=data.title,
                description=data.description,
                discount_percentage=data.discount_percentage,
                valid_from=data.valid_from,
                valid_until=data.valid_until,
                is_active=data.is_active,
                created_by=created_by,
            ),
        )
        self.log_operation("create_special", special_id=special.id)
        return special

    @BaseService.measure_operation("update_special")
    def update_special(self, special_id: str, data: SpecialUpdateRequest) -> WeeklySpecial:
        changes = data.model_dump(exclude_unset=True)

        def _update() -> WeeklySpecial:
            special = self.special_repository.get_by_id(special_id, for_update=True)
            if special is None:
                raise NotFoundException("Special not found", details={"special_id": special_id})
            for key, value in changes.items():
                setattr(special, key, value)
            if special.valid_until < special.valid_from:
                raise ValidationException("valid_until must not be before valid_from")
            self.special_repository.flush()
            return special

        special = self.run_atomic("update_special", _update)
        self.log_operation("update_special", special_id=special_id, fields=sorted(changes))
        return special

    @BaseService.measure_operation("delete_special")
    def delete_special(self, special_id: str) -> None:
        deleted = self.run_atomic(
            "delete_special", lambda: self.special_repository.delete(special_id)
        )
        if not deleted:
            raise NotFoundException("Special not found", details={"special_id": special_id})
        self.log_operation("delete_special", special_id=special_id)
