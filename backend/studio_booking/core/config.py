# backend/studio_booking/core/config.py
import logging
import os
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Storage
    database_url: str = Field(
        default="sqlite+pysqlite:///./studio_booking.db",
        alias="DATABASE_URL",
        description="SQLAlchemy URL for the booking database",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements to the log")

    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        alias="ENVIRONMENT",
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Studio schedule
    studio_timezone: str = Field(
        default="UTC",
        alias="STUDIO_TIMEZONE",
        description="Time zone in which class dates and start times are published",
    )

    # Booking policy
    cancel_cutoff_minutes: int = Field(
        default=120,
        ge=0,
        description="Cancellations at least this many minutes before start are refunded",
    )
    booking_cutoff_minutes: int = Field(
        default=0,
        ge=0,
        description="Bookings close this many minutes before class start",
    )
    transaction_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a booking transaction before a conflict is surfaced",
    )

    # Availability / wallet display thresholds
    capacity_warning_threshold: int = Field(default=5, ge=0)
    capacity_critical_threshold: int = Field(default=2, ge=0)
    low_credit_threshold: int = Field(default=2, ge=0)
    monthly_class_goal: int = Field(default=25, ge=1)

    # Check-in
    check_in_secret: SecretStr = Field(
        default=SecretStr("dev-check-in-secret-change-me"),
        alias="CHECK_IN_SECRET",
        description="HMAC key used to sign class check-in codes",
    )
    check_in_code_ttl_minutes: int = Field(default=90, ge=1)
    check_in_opens_minutes: int = Field(
        default=30,
        ge=0,
        description="How many minutes before start check-in becomes possible",
    )

    # API
    api_prefix: str = "/api/v1"
    auth_user_header: str = Field(
        default="X-User-Id",
        description="Header carrying the authenticated user id from the auth gateway",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("studio_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        import pytz

        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown studio timezone: {value}") from exc
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
logger.info(
    "[CONFIG] %s booking core: environment=%s timezone=%s cancel_cutoff=%sm",
    BRAND_NAME,
    settings.environment,
    settings.studio_timezone,
    settings.cancel_cutoff_minutes,
)
