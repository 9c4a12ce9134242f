"""Pydantic schemas for attendance streaks."""

from datetime import date
from typing import List

from pydantic import ConfigDict, Field

from .base import StandardizedModel


class AchievementResponse(StandardizedModel):
    id: str
    name: str
    description: str
    achieved_on: date

    model_config = ConfigDict(from_attributes=True)


class ActivityDay(StandardizedModel):
    day: date = Field(..., validation_alias="date", serialization_alias="date")
    count: int


class StreakResponse(StandardizedModel):
    current_streak: int
    best_streak: int
    total_classes: int
    this_month_classes: int
    monthly_goal: int
    achievements: List[AchievementResponse]
    activity_calendar: List[ActivityDay]

    model_config = ConfigDict(from_attributes=True)
