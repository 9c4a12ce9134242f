"""Seat availability for class instances, computed from booking rows."""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import AvailabilityLevel, BookingStatus
from ..core.exceptions import ClassNotFoundException
from ..models.booking import Booking
from ..models.class_instance import ClassInstance
from ..repositories.factory import RepositoryFactory
from .base import BaseService


@dataclass(frozen=True)
class Availability:
    class_id: str
    capacity: int
    booked: int
    spots_left: int
    waitlist_count: int
    level: AvailabilityLevel


def availability_level(spots_left: int) -> AvailabilityLevel:
    if spots_left <= 0:
        return AvailabilityLevel.FULL
    if spots_left <= settings.capacity_critical_threshold:
        return AvailabilityLevel.CRITICAL
    if spots_left <= settings.capacity_warning_threshold:
        return AvailabilityLevel.WARNING
    return AvailabilityLevel.OPEN


class ClassCapacityService(BaseService):
    """
    Answers "is there a free seat" for a class.

    There is no mutation API: capacity changes only as booking statuses change.
    """

    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.class_repository = RepositoryFactory.create_class_repository(db)

    def booked_count(self, class_id: str) -> int:
        return self.booking_repository.booked_count(class_id)

    def has_capacity(self, class_instance: ClassInstance) -> bool:
        return self.booked_count(class_instance.id) < class_instance.capacity

    def waitlist_queue(self, class_id: str) -> List[Booking]:
        return self.booking_repository.waitlist_queue(class_id)

    def availability(self, class_id: str) -> Availability:
        class_instance = self.class_repository.get_by_id(class_id)
        if class_instance is None:
            raise ClassNotFoundException(class_id)
        return self.availability_for(class_instance)

    def availability_for(self, class_instance: ClassInstance) -> Availability:
        booked = self.booked_count(class_instance.id)
        waitlisted = len(self.waitlist_queue(class_instance.id))
        return self._build(class_instance, booked, waitlisted)

    def availability_many(self, classes: Iterable[ClassInstance]) -> Dict[str, Availability]:
        """Availability for a page of classes using grouped count queries."""
        class_list = list(classes)
        ids = [c.id for c in class_list]
        booked = self.booking_repository.status_counts(ids, BookingStatus.BOOKED.value)
        waitlisted = self.booking_repository.status_counts(ids, BookingStatus.WAITLIST.value)
        return {
            c.id: self._build(c, booked.get(c.id, 0), waitlisted.get(c.id, 0)) for c in class_list
        }

    @staticmethod
    def _build(class_instance: ClassInstance, booked: int, waitlisted: int) -> Availability:
        spots_left = max(class_instance.capacity - booked, 0)
        return Availability(
            class_id=class_instance.id,
            capacity=class_instance.capacity,
            booked=booked,
            spots_left=spots_left,
            waitlist_count=waitlisted,
            level=availability_level(spots_left),
        )
