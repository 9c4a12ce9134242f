"""
Database engine, session factory, and metadata shared across the booking core.
"""

from __future__ import annotations

from datetime import datetime
import logging
import random
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from ..core.config import settings

logger = logging.getLogger(__name__)

# Postgres SQLSTATEs for serialization failure and deadlock
_CONFLICT_PGCODES = {"40001", "40P01"}
_CONFLICT_ERROR_SNIPPETS = (
    "database is locked",
    "could not serialize access",
    "deadlock detected",
)

_DEFAULT_POOL_KWARGS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 5,
    "pool_recycle": 300,
    "pool_pre_ping": True,
    "future": True,
}


def configure_sqlite_engine(sqlite_engine: Engine) -> Engine:
    """
    Make SQLite transactions take the write lock up front.

    pysqlite defers BEGIN until the first write, which lets two sessions read
    the same seat count before either writes. BEGIN IMMEDIATE serializes
    writers so the first to commit wins.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _sqlite_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        connection_record.info["connect_time"] = datetime.now()

    @event.listens_for(sqlite_engine, "begin")
    def _sqlite_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return sqlite_engine


def build_engine(db_url: str, *, echo: bool = False) -> Engine:
    """Create an engine for ``db_url`` with dialect-appropriate settings."""
    if db_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            db_url,
            echo=echo,
            future=True,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        return configure_sqlite_engine(sqlite_engine)

    pg_engine = create_engine(db_url, echo=echo, **_DEFAULT_POOL_KWARGS)

    @event.listens_for(pg_engine, "connect")
    def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
        connection_record.info["connect_time"] = datetime.now()
        logger.debug("Database connection established")

    return pg_engine


engine: Engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def is_write_conflict_error(exc: BaseException) -> bool:
    """True when ``exc`` is a transient lock/serialization failure worth retrying."""
    if not isinstance(exc, DBAPIError):
        return False
    pgcode = getattr(getattr(exc, "orig", None), "pgcode", None)
    if pgcode in _CONFLICT_PGCODES:
        return True
    message = str(exc).lower()
    return any(snippet in message for snippet in _CONFLICT_ERROR_SNIPPETS)


def retry_delay(attempt: int) -> float:
    base = 0.1 * (2 ** (attempt - 1))
    return base + random.uniform(0, 0.05 * attempt)


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "configure_sqlite_engine",
    "engine",
    "get_db",
    "is_write_conflict_error",
    "retry_delay",
]
