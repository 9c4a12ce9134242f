"""Pydantic schemas for weekly specials."""

from datetime import date, datetime
from typing import Optional

from pydantic import ConfigDict, Field, model_validator

from ..core.constants import MAX_TITLE_LENGTH
from .base import StandardizedModel, StrictModel


class SpecialCreateRequest(StrictModel):
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    discount_percentage: Optional[int] = Field(None, ge=0, le=100)
    valid_from: date
    valid_until: date
    is_active: bool = True

    @model_validator(mode="after")
    def _check_window(self) -> "SpecialCreateRequest":
        if self.valid_until < self.valid_from:
            raise ValueError("valid_until must not be before valid_from")
        return self


class SpecialUpdateRequest(StrictModel):
    title: Optional[str] = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    discount_percentage: Optional[int] = Field(None, ge=0, le=100)
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    is_active: Optional[bool] = None


class SpecialResponse(StandardizedModel):
    id: str
    title: str
    description: Optional[str] = None
    discount_percentage: Optional[int] = None
    valid_from: date
    valid_until: date
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
