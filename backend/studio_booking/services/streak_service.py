"""Attendance streaks and achievements built from attended bookings."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import MAX_ACHIEVEMENTS_SHOWN, STREAK_LOOKBACK_DAYS
from ..core.timezone_utils import get_studio_today
from ..repositories.factory import RepositoryFactory
from .base import BaseService

CALENDAR_TIMEFRAMES: Dict[str, int] = {
    "weekly": 7,
    "monthly": 30,
    "3_months": 90,
    "yearly": 365,
}

WEEK_WARRIOR_CLASSES = 7
CONSISTENCY_STREAK_DAYS = 10
CENTURY_CLUB_CLASSES = 100


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    achieved_on: date


@dataclass(frozen=True)
class StreakStats:
    current_streak: int
    best_streak: int
    total_classes: int
    this_month_classes: int
    monthly_goal: int
    achievements: List[Achievement] = field(default_factory=list)
    activity_calendar: List[Dict[str, object]] = field(default_factory=list)


def current_streak(days: set, today: date) -> int:
    """Consecutive days with a class ending today."""
    streak = 0
    cursor = today
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def best_streak(days: set, today: date, lookback_days: int = STREAK_LOOKBACK_DAYS) -> int:
    best = run = 0
    for offset in range(lookback_days - 1, -1, -1):
        if today - timedelta(days=offset) in days:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best


class StreakService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("get_streaks")
    def get_streaks(
        self,
        user_id: str,
        today: Optional[date] = None,
        timeframe: str = "3_months",
    ) -> StreakStats:
        today = today or get_studio_today()
        class_dates = [d for d in self.booking_repository.attended_class_dates(user_id) if d <= today]
        per_day = Counter(class_dates)
        days = set(per_day)

        current = current_streak(days, today)
        best = max(best_streak(days, today), current)
        total = len(class_dates)
        this_month = sum(
            1 for d in class_dates if d.year == today.year and d.month == today.month
        )
        monthly_goal = settings.monthly_class_goal

        achievements: List[Achievement] = []
        week_start = today - timedelta(days=7)
        if sum(1 for d in class_dates if d >= week_start) >= WEEK_WARRIOR_CLASSES:
            achievements.append(
                Achievement(
                    "week_warrior",
                    "Week Warrior",
                    f"Completed {WEEK_WARRIOR_CLASSES} classes in a week",
                    today,
                )
            )
        if current >= CONSISTENCY_STREAK_DAYS:
            achievements.append(
                Achievement(
                    "consistency_king",
                    "Consistency King",
                    f"{current}-day streak achieved",
                    today,
                )
            )
        if total >= CENTURY_CLUB_CLASSES:
            achievements.append(
                Achievement(
                    "century_club",
                    "Century Club",
                    f"Completed {CENTURY_CLUB_CLASSES} total classes",
                    today,
                )
            )
        if total == 1:
            achievements.append(
                Achievement("first_timer", "First Timer", "Completed your first class", class_dates[0])
            )
        if this_month >= monthly_goal:
            achievements.append(
                Achievement(
                    "monthly_goal",
                    "Monthly Goal",
                    f"Completed {monthly_goal} classes this month",
                    today,
                )
            )

        window = CALENDAR_TIMEFRAMES.get(timeframe, CALENDAR_TIMEFRAMES["3_months"])
        calendar = [
            {"date": day, "count": per_day.get(day, 0)}
            for day in (today - timedelta(days=offset) for offset in range(window - 1, -1, -1))
        ]

        return StreakStats(
            current_streak=current,
            best_streak=best,
            total_classes=total,
            this_month_classes=this_month,
            monthly_goal=monthly_goal,
            achievements=achievements[:MAX_ACHIEVEMENTS_SHOWN],
            activity_calendar=calendar,
        )
