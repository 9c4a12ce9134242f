"""
Races for the last seat against a file-backed SQLite database.

Each worker uses its own connection, so the BEGIN IMMEDIATE lock is what
decides the winner.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
import threading

import pytest
from sqlalchemy.orm import sessionmaker

from studio_booking.core.enums import BookingStatus
from studio_booking.database import Base, build_engine
from studio_booking.models import Booking, ClassInstance, User, UserPass
from studio_booking.services.booking_service import BookingService
from tests.helpers import CLASS_DAY, CLASS_END, CLASS_START, NOW

pytestmark = pytest.mark.integration


@pytest.fixture
def file_sessionmaker(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


def _seed(Session, capacity, users):
    with Session() as session:
        class_instance = ClassInstance(
            title="Sunrise Flow",
            instructor="Maya",
            class_date=CLASS_DAY,
            start_time=CLASS_START,
            end_time=CLASS_END,
            capacity=capacity,
            duration_min=60,
        )
        session.add(class_instance)
        user_ids = []
        for i in range(users):
            user = User(email=f"racer{i}@example.com", waiver_signed=True)
            session.add(user)
            session.flush()
            session.add(
                UserPass(
                    user_id=user.id,
                    pass_name="5 Class Pack",
                    remaining_credits=5,
                    valid_from=NOW - timedelta(days=1),
                    valid_until=NOW + timedelta(days=30),
                )
            )
            user_ids.append(user.id)
        session.commit()
        return class_instance.id, user_ids


def _race(Session, class_id, user_ids):
    barrier = threading.Barrier(len(user_ids))

    def book(user_id):
        with Session() as session:
            barrier.wait()
            return BookingService(session).create_booking(user_id, class_id, now=NOW)

    with ThreadPoolExecutor(max_workers=len(user_ids)) as pool:
        return list(pool.map(book, user_ids))


def test_last_seat_goes_to_exactly_one_booker(file_sessionmaker):
    class_id, user_ids = _seed(file_sessionmaker, capacity=1, users=2)

    results = _race(file_sessionmaker, class_id, user_ids)

    assert all(r.success for r in results)
    assert sorted(r.status for r in results) == [
        BookingStatus.BOOKED.value,
        BookingStatus.WAITLIST.value,
    ]
    with file_sessionmaker() as session:
        booked = (
            session.query(Booking)
            .filter(Booking.class_id == class_id, Booking.status == BookingStatus.BOOKED.value)
            .count()
        )
        assert booked == 1
        balances = sorted(p.remaining_credits for p in session.query(UserPass).all())
        assert balances == [4, 5]


def test_capacity_holds_under_many_bookers(file_sessionmaker):
    class_id, user_ids = _seed(file_sessionmaker, capacity=3, users=6)

    results = _race(file_sessionmaker, class_id, user_ids)

    statuses = [r.status for r in results]
    assert statuses.count(BookingStatus.BOOKED.value) == 3
    assert statuses.count(BookingStatus.WAITLIST.value) == 3
