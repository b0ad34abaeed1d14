from datetime import datetime, timedelta

from painkiller.core.models import HabitStatus
from painkiller.core.streaks import calculate_current_streak, calculate_longest_streak

from .conftest import TODAY


def day(offset):
    return (TODAY - timedelta(days=offset)).isoformat()


def test_unset_today_starts_from_yesterday():
    logs = {day(1): HabitStatus.SUCCESS, day(2): HabitStatus.SUCCESS}
    assert calculate_current_streak(logs, TODAY) == 2


def test_partial_keeps_streak_alive():
    logs = {day(0): HabitStatus.PARTIAL, day(1): HabitStatus.SUCCESS, day(2): HabitStatus.FAIL}
    assert calculate_current_streak(logs, TODAY) == 2


def test_fail_today_breaks_streak():
    logs = {day(0): HabitStatus.FAIL, day(1): HabitStatus.SUCCESS}
    assert calculate_current_streak(logs, TODAY) == 0


def test_gap_stops_the_walk():
    logs = {day(0): HabitStatus.SUCCESS, day(2): HabitStatus.SUCCESS}
    assert calculate_current_streak(logs, TODAY) == 1


def test_empty_logs():
    assert calculate_current_streak({}, TODAY) == 0
    assert calculate_longest_streak({}) == 0


def test_time_of_day_is_ignored():
    logs = {day(0): HabitStatus.SUCCESS}
    assert calculate_current_streak(logs, datetime(2024, 3, 15, 23, 59)) == 1


def test_longest_streak_across_history():
    logs = {
        "2024-01-01": HabitStatus.SUCCESS,
        "2024-01-02": HabitStatus.PARTIAL,
        "2024-01-03": HabitStatus.SUCCESS,
        "2024-01-04": HabitStatus.FAIL,
        "2024-02-28": HabitStatus.SUCCESS,
        "2024-02-29": HabitStatus.SUCCESS,
    }
    assert calculate_longest_streak(logs) == 3
