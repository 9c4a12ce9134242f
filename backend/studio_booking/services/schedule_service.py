"""
Schedule read model and class catalog management.

The user-facing schedule hides classes that have already started; booking
still re-checks start time on its own.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ClassStatus
from ..core.exceptions import ClassLockedException, ClassNotFoundException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.class_instance import ClassInstance
from ..repositories.factory import RepositoryFactory
from ..schemas.schedule import ClassUpsertRequest
from .base import BaseService
from .class_capacity_service import Availability, ClassCapacityService


@dataclass(frozen=True)
class ScheduleEntry:
    class_instance: ClassInstance
    availability: Availability
    my_status: Optional[str] = None
    is_favorite: bool = False


class ScheduleService(BaseService):
    def __init__(self, db: Session, capacity_service: Optional[ClassCapacityService] = None):
        super().__init__(db)
        self.capacity_service = capacity_service or ClassCapacityService(db)
        self.class_repository = RepositoryFactory.create_class_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.favorites_repository = RepositoryFactory.create_favorites_repository(db)

    @BaseService.measure_operation("get_day_schedule")
    def get_day_schedule(
        self, day: date, user_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> List[ScheduleEntry]:
        return self._entries_between(day, day, user_id, now)

    @BaseService.measure_operation("get_week_schedule")
    def get_week_schedule(
        self, start: date, user_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> Dict[date, List[ScheduleEntry]]:
        """Seven days starting at ``start``; days without classes map to an empty list."""
        end = start + timedelta(days=6)
        week: Dict[date, List[ScheduleEntry]] = {
            start + timedelta(days=offset): [] for offset in range(7)
        }
        for entry in self._entries_between(start, end, user_id, now):
            week[entry.class_instance.class_date].append(entry)
        return week

    def get_class(self, class_id: str, user_id: Optional[str] = None) -> ScheduleEntry:
        class_instance = self.class_repository.get_by_id(class_id)
        if class_instance is None:
            raise ClassNotFoundException(class_id)
        my_status = None
        is_favorite = False
        if user_id:
            my_status = self.booking_repository.statuses_for_user(user_id, [class_id]).get(class_id)
            is_favorite = self.favorites_repository.is_favorited(user_id, class_id)
        return ScheduleEntry(
            class_instance=class_instance,
            availability=self.capacity_service.availability_for(class_instance),
            my_status=my_status,
            is_favorite=is_favorite,
        )

    @BaseService.measure_operation("upsert_class")
    def upsert_class(
        self, data: ClassUpsertRequest, class_id: Optional[str] = None
    ) -> ClassInstance:
        """
        Create a class, or replace an existing one's details.

        A class with active bookings is frozen; it can only be cancelled.
        """
        fields = dict(
            title=data.title.strip(),
            instructor=data.instructor.strip(),
            class_date=data.class_date,
            start_time=data.start_time,
            end_time=data.end_time,
            capacity=data.capacity,
            duration_min=data.duration_min,
            level=data.level,
            heat_c=data.heat_c,
            notes=data.notes,
        )

        def _upsert() -> ClassInstance:
            if class_id is None:
                return self.class_repository.create(status=ClassStatus.SCHEDULED.value, **fields)

            class_instance = self.class_repository.get_for_update(class_id)
            if class_instance is None:
                raise ClassNotFoundException(class_id)
            active = self.booking_repository.count_active_for_class(class_id)
            if active:
                raise ClassLockedException(class_id, active)
            for key, value in fields.items():
                setattr(class_instance, key, value)
            self.class_repository.flush()
            return class_instance

        class_instance = self.run_atomic("upsert_class", _upsert)
        self.log_operation(
            "upsert_class", class_id=class_instance.id, is_new=class_id is None
        )
        return class_instance

    def _entries_between(
        self, start: date, end: date, user_id: Optional[str], now: Optional[datetime]
    ) -> List[ScheduleEntry]:
        current = ensure_utc(now) if now else utc_now()
        classes = [
            c for c in self.class_repository.list_between(start, end) if c.starts_at > current
        ]
        if not classes:
            return []

        class_ids = [c.id for c in classes]
        availability = self.capacity_service.availability_many(classes)
        statuses: Dict[str, str] = {}
        favorites: set = set()
        if user_id:
            statuses = self.booking_repository.statuses_for_user(user_id, class_ids)
            favorites = {
                f.class_id
                for f in self.favorites_repository.list_for_user(user_id)
                if f.class_id in availability
            }

        return [
            ScheduleEntry(
                class_instance=c,
                availability=availability[c.id],
                my_status=statuses.get(c.id),
                is_favorite=c.id in favorites,
            )
            for c in classes
        ]
