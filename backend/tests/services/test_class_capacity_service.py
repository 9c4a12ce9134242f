from datetime import timedelta

import pytest

from studio_booking.core.enums import AvailabilityLevel, BookingStatus
from studio_booking.core.exceptions import ClassNotFoundException
from studio_booking.services.class_capacity_service import (
    ClassCapacityService,
    availability_level,
)
from tests.helpers import NOW


@pytest.fixture
def capacity_service(db):
    return ClassCapacityService(db)


def test_only_booked_rows_take_seats(capacity_service, create_user, create_class, create_booking):
    class_instance = create_class(capacity=3)
    create_booking(create_user(), class_instance, status=BookingStatus.BOOKED)
    create_booking(create_user(), class_instance, status=BookingStatus.WAITLIST)
    create_booking(create_user(), class_instance, status=BookingStatus.CANCELLED)
    create_booking(create_user(), class_instance, status=BookingStatus.ATTENDED)

    assert capacity_service.booked_count(class_instance.id) == 1
    assert capacity_service.has_capacity(class_instance) is True


def test_full_class_has_no_capacity(capacity_service, create_user, create_class, create_booking):
    class_instance = create_class(capacity=1)
    create_booking(create_user(), class_instance)

    assert capacity_service.has_capacity(class_instance) is False
    availability = capacity_service.availability(class_instance.id)
    assert availability.spots_left == 0
    assert availability.level == AvailabilityLevel.FULL


def test_waitlist_queue_is_fifo_by_booked_at(
    capacity_service, create_user, create_class, create_booking
):
    class_instance = create_class(capacity=1)
    create_booking(create_user(), class_instance)
    second = create_booking(
        create_user(), class_instance, status=BookingStatus.WAITLIST, booked_at=NOW
    )
    first = create_booking(
        create_user(),
        class_instance,
        status=BookingStatus.WAITLIST,
        booked_at=NOW - timedelta(minutes=5),
    )

    queue = capacity_service.waitlist_queue(class_instance.id)

    assert [b.id for b in queue] == [first.id, second.id]


def test_availability_many_matches_single_lookups(
    capacity_service, create_user, create_class, create_booking
):
    busy = create_class(capacity=2, title="Power Flow")
    quiet = create_class(capacity=20, title="Yin")
    create_booking(create_user(), busy)
    create_booking(create_user(), busy, status=BookingStatus.BOOKED)
    create_booking(create_user(), busy, status=BookingStatus.WAITLIST)

    many = capacity_service.availability_many([busy, quiet])

    assert many[busy.id] == capacity_service.availability_for(busy)
    assert many[busy.id].waitlist_count == 1
    assert many[quiet.id].spots_left == 20
    assert many[quiet.id].level == AvailabilityLevel.OPEN


def test_unknown_class_raises(capacity_service):
    with pytest.raises(ClassNotFoundException):
        capacity_service.availability("01K2K8CVN3A55280PFKJD9YHKV")


@pytest.mark.parametrize(
    "spots_left,level",
    [
        (0, AvailabilityLevel.FULL),
        (1, AvailabilityLevel.CRITICAL),
        (2, AvailabilityLevel.CRITICAL),
        (5, AvailabilityLevel.WARNING),
        (6, AvailabilityLevel.OPEN),
    ],
)
def test_availability_levels(spots_left, level):
    assert availability_level(spots_left) == level
