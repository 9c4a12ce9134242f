"""Response schemas for the app-level endpoints."""

from pydantic import ConfigDict, Field

from .base import StrictModel


class HealthResponse(StrictModel):
    """Response for health check endpoint."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    status: str = Field(description="Health status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    database: str = Field(description="Database connectivity")
