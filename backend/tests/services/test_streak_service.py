from datetime import date, time, timedelta

import pytest

from studio_booking.core.enums import BookingStatus
from studio_booking.services.streak_service import (
    StreakService,
    best_streak,
    current_streak,
)

TODAY = date(2030, 3, 20)


@pytest.fixture
def attend(member, create_class, create_booking):
    def _attend(*days_ago: int, status: BookingStatus = BookingStatus.ATTENDED):
        for offset in days_ago:
            class_instance = create_class(
                class_date=TODAY - timedelta(days=offset),
                start_time=time(7, 0),
                end_time=time(8, 0),
            )
            create_booking(member, class_instance, status=status)

    return _attend


def test_current_streak_counts_back_from_today():
    days = {TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2), TODAY - timedelta(days=4)}
    assert current_streak(days, TODAY) == 3


def test_current_streak_is_zero_without_class_today():
    assert current_streak({TODAY - timedelta(days=1)}, TODAY) == 0


def test_best_streak_finds_longest_run():
    days = {TODAY - timedelta(days=d) for d in (0, 5, 6, 7, 8, 20)}
    assert best_streak(days, TODAY) == 4


def test_streaks_from_attended_bookings(db, member, attend):
    attend(0, 1, 2, 10, 11, 12, 13)
    attend(3, status=BookingStatus.NO_SHOW)

    stats = StreakService(db).get_streaks(member.id, today=TODAY)

    assert stats.current_streak == 3
    assert stats.best_streak == 4
    assert stats.total_classes == 7
    assert stats.this_month_classes == 7


def test_first_timer_achievement(db, member, attend):
    attend(2)

    stats = StreakService(db).get_streaks(member.id, today=TODAY)

    assert [a.id for a in stats.achievements] == ["first_timer"]
    assert stats.achievements[0].achieved_on == TODAY - timedelta(days=2)


def test_week_warrior_and_consistency(db, member, attend):
    attend(*range(10))

    stats = StreakService(db).get_streaks(member.id, today=TODAY)

    ids = [a.id for a in stats.achievements]
    assert ids[:2] == ["week_warrior", "consistency_king"]


def test_future_bookings_are_ignored(db, member, attend):
    attend(-1)

    stats = StreakService(db).get_streaks(member.id, today=TODAY)

    assert stats.total_classes == 0
    assert stats.achievements == []


@pytest.mark.parametrize("timeframe,length", [("weekly", 7), ("monthly", 30), ("yearly", 365), ("bogus", 90)])
def test_activity_calendar_window(db, member, attend, timeframe, length):
    attend(0)

    stats = StreakService(db).get_streaks(member.id, today=TODAY, timeframe=timeframe)

    assert len(stats.activity_calendar) == length
    assert stats.activity_calendar[-1] == {"date": TODAY, "count": 1}
    assert stats.activity_calendar[0]["date"] == TODAY - timedelta(days=length - 1)
