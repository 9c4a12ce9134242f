from datetime import time, timedelta
import logging

import pytest

from studio_booking.core.enums import AvailabilityLevel, BookingStatus
from studio_booking.core.exceptions import ClassLockedException, ClassNotFoundException
from studio_booking.schemas.schedule import ClassUpsertRequest
from studio_booking.services.schedule_service import ScheduleService
from tests.helpers import CLASS_DAY, NOW


@pytest.fixture
def schedule_service(db):
    return ScheduleService(db)


def _upsert_payload(**overrides):
    payload = {
        "title": "Power Flow",
        "instructor": "Lee",
        "date": CLASS_DAY.isoformat(),
        "start_time": "07:00",
        "end_time": "08:00",
        "capacity": 12,
    }
    payload.update(overrides)
    return ClassUpsertRequest.model_validate(payload)


class TestScheduleReads:
    def test_day_schedule_hides_started_classes(self, schedule_service, create_class):
        create_class(start_time=time(9, 0), end_time=time(10, 0), title="Morning")
        evening = create_class(title="Evening")

        entries = schedule_service.get_day_schedule(CLASS_DAY, now=NOW)

        assert [e.class_instance.id for e in entries] == [evening.id]

    def test_day_schedule_is_ordered_by_start(self, schedule_service, create_class):
        late = create_class(start_time=time(20, 0), end_time=time(21, 0))
        early = create_class(start_time=time(13, 0), end_time=time(14, 0))

        entries = schedule_service.get_day_schedule(CLASS_DAY, now=NOW)

        assert [e.class_instance.id for e in entries] == [early.id, late.id]

    def test_week_schedule_has_seven_days(self, schedule_service, create_class):
        create_class(class_date=CLASS_DAY + timedelta(days=2))

        week = schedule_service.get_week_schedule(CLASS_DAY, now=NOW)

        assert list(week) == [CLASS_DAY + timedelta(days=i) for i in range(7)]
        assert len(week[CLASS_DAY + timedelta(days=2)]) == 1
        assert week[CLASS_DAY + timedelta(days=1)] == []

    def test_entries_carry_user_status_and_favorite(
        self, db, schedule_service, member, create_class, create_booking
    ):
        booked = create_class(title="Booked")
        plain = create_class(title="Plain", start_time=time(20, 0), end_time=time(21, 0))
        create_booking(member, booked)
        schedule_service.favorites_repository.add_favorite(member.id, plain.id)
        db.commit()

        entries = {
            e.class_instance.id: e
            for e in schedule_service.get_day_schedule(CLASS_DAY, user_id=member.id, now=NOW)
        }

        assert entries[booked.id].my_status == BookingStatus.BOOKED.value
        assert entries[booked.id].is_favorite is False
        assert entries[plain.id].my_status is None
        assert entries[plain.id].is_favorite is True

    def test_entries_carry_availability(
        self, schedule_service, member, create_class, create_booking
    ):
        class_instance = create_class(capacity=1)
        create_booking(member, class_instance)

        (entry,) = schedule_service.get_day_schedule(CLASS_DAY, now=NOW)

        assert entry.availability.spots_left == 0
        assert entry.availability.level == AvailabilityLevel.FULL

    def test_get_class_unknown(self, schedule_service):
        with pytest.raises(ClassNotFoundException):
            schedule_service.get_class("01K2K8CVN3A55280PFKJD9YHKV")


class TestUpsertClass:
    def test_create_derives_duration(self, schedule_service):
        created = schedule_service.upsert_class(_upsert_payload())

        assert created.id
        assert created.duration_min == 60
        assert created.status == "scheduled"

    def test_update_without_bookings(self, schedule_service, create_class):
        class_instance = create_class()

        updated = schedule_service.upsert_class(
            _upsert_payload(title="  Renamed  ", capacity=20), class_id=class_instance.id
        )

        assert updated.id == class_instance.id
        assert updated.title == "Renamed"
        assert updated.capacity == 20

    def test_upsert_logs_whether_class_is_new(self, schedule_service, create_class, caplog):
        class_instance = create_class()

        with caplog.at_level(logging.INFO, logger="ScheduleService"):
            created = schedule_service.upsert_class(_upsert_payload())
            schedule_service.upsert_class(_upsert_payload(), class_id=class_instance.id)

        records = [r for r in caplog.records if getattr(r, "operation", None) == "upsert_class"]
        assert [(r.class_id, r.is_new) for r in records] == [
            (created.id, True),
            (class_instance.id, False),
        ]

    def test_update_with_active_bookings_is_locked(
        self, schedule_service, member, create_class, create_booking
    ):
        class_instance = create_class()
        create_booking(member, class_instance)

        with pytest.raises(ClassLockedException):
            schedule_service.upsert_class(_upsert_payload(), class_id=class_instance.id)

    def test_update_unknown_class(self, schedule_service):
        with pytest.raises(ClassNotFoundException):
            schedule_service.upsert_class(_upsert_payload(), class_id="01K2K8CVN3A55280PFKJD9YHKV")

    def test_end_before_start_is_invalid(self):
        with pytest.raises(ValueError):
            _upsert_payload(start_time="09:00", end_time="08:00")
