# backend/tests/conftest.py
"""
Pytest configuration for the studio booking core.

Every test gets a fresh in-memory SQLite database configured the same way as
production SQLite (BEGIN IMMEDIATE, foreign keys on).
"""

import os

# Set test configuration BEFORE any studio_booking imports
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ["STUDIO_TIMEZONE"] = "UTC"
os.environ.setdefault("CHECK_IN_SECRET", "test-check-in-secret")
os.environ.setdefault("CANCEL_CUTOFF_MINUTES", "120")

from datetime import date, datetime, time, timedelta
import itertools
from typing import Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studio_booking.api.dependencies.database import get_db
from studio_booking.core.enums import BookingStatus, ClassStatus, PassStatus, PassType
from studio_booking.database import Base, configure_sqlite_engine
from studio_booking.main import app
from studio_booking.models import Booking, ClassInstance, User, UserPass
from tests.helpers import CLASS_DAY, CLASS_END, CLASS_START, NOW

_email_counter = itertools.count(1)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(db_engine) -> Session:
    TestingSessionLocal = sessionmaker(
        bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def create_user(db):
    def _create(
        *,
        email: Optional[str] = None,
        full_name: str = "Test Member",
        waiver_signed: bool = True,
        is_admin: bool = False,
    ) -> User:
        user = User(
            email=email or f"member{next(_email_counter)}@example.com",
            full_name=full_name,
            waiver_signed=waiver_signed,
            is_admin=is_admin,
        )
        db.add(user)
        db.commit()
        return user

    return _create


@pytest.fixture
def create_pass(db):
    def _create(
        user: User,
        *,
        credits: int = 10,
        pass_type: PassType = PassType.PACK,
        pass_name: str = "10 Class Pack",
        valid_from: datetime = NOW - timedelta(days=10),
        valid_until: datetime = NOW + timedelta(days=30),
        status: Optional[PassStatus] = None,
        is_active: bool = True,
    ) -> UserPass:
        if status is None:
            status = (
                PassStatus.EXHAUSTED
                if pass_type == PassType.PACK and credits == 0
                else PassStatus.ACTIVE
            )
        user_pass = UserPass(
            user_id=user.id,
            pass_type=pass_type.value,
            pass_name=pass_name,
            remaining_credits=credits,
            valid_from=valid_from,
            valid_until=valid_until,
            status=status.value,
            is_active=is_active,
        )
        db.add(user_pass)
        db.commit()
        return user_pass

    return _create


@pytest.fixture
def create_class(db):
    def _create(
        *,
        capacity: int = 10,
        class_date: date = CLASS_DAY,
        start_time: time = CLASS_START,
        end_time: time = CLASS_END,
        title: str = "Hot Vinyasa",
        instructor: str = "Maya",
        status: ClassStatus = ClassStatus.SCHEDULED,
    ) -> ClassInstance:
        duration = (end_time.hour * 60 + end_time.minute) - (
            start_time.hour * 60 + start_time.minute
        )
        class_instance = ClassInstance(
            title=title,
            instructor=instructor,
            class_date=class_date,
            start_time=start_time,
            end_time=end_time,
            capacity=capacity,
            duration_min=duration,
            level="all",
            heat_c=38,
            status=status.value,
        )
        db.add(class_instance)
        db.commit()
        return class_instance

    return _create


@pytest.fixture
def create_booking(db):
    """Insert a booking row directly, bypassing the booking service."""

    def _create(
        user: User,
        class_instance: ClassInstance,
        *,
        status: BookingStatus = BookingStatus.BOOKED,
        booked_at: datetime = NOW - timedelta(days=1),
        consumed_pass: Optional[UserPass] = None,
    ) -> Booking:
        booking = Booking(
            user_id=user.id,
            class_id=class_instance.id,
            status=status.value,
            booked_at=booked_at,
            consumed_pass_id=consumed_pass.id if consumed_pass else None,
            credits_debited=1 if consumed_pass and not consumed_pass.is_unlimited else 0,
        )
        db.add(booking)
        db.commit()
        return booking

    return _create


@pytest.fixture
def member(create_user, create_pass):
    """A waiver-signed user holding a 10-credit pack."""
    user = create_user(full_name="Ava Member")
    create_pass(user, credits=10)
    return user


@pytest.fixture
def admin_user(create_user):
    return create_user(full_name="Front Desk", is_admin=True)


# ============================================================================
# HTTP client
# ============================================================================


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
