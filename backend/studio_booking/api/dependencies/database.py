# backend/studio_booking/api/dependencies/database.py
"""
Request-scoped database session.

Routes depend on this wrapper rather than ``database.get_db`` so tests can
swap the session in one place via ``app.dependency_overrides``.
"""

from typing import Generator

from sqlalchemy.orm import Session

from ... import database


def get_db() -> Generator[Session, None, None]:
    yield from database.get_db()
