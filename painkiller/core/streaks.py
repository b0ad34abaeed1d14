# -*- coding: utf-8 -*-
"""
Painkiller Habits - Streak calculation

Success and Partial days both keep a streak alive; Fail or a missing record
ends it. An unset "today" does not break the streak: counting then starts
from yesterday.
"""

from datetime import date, datetime, timedelta
from typing import Mapping

from painkiller.core.models import HabitStatus

ONE_DAY = timedelta(days=1)


def calculate_current_streak(logs: Mapping[str, HabitStatus], today: date) -> int:
    """Length of the unbroken run of qualifying days ending today or yesterday"""
    if isinstance(today, datetime):
        today = today.date()

    cursor = today
    if logs.get(today.isoformat(), HabitStatus.NONE) == HabitStatus.NONE:
        cursor = today - ONE_DAY

    streak = 0
    while logs.get(cursor.isoformat(), HabitStatus.NONE).counts_toward_streak:
        streak += 1
        cursor -= ONE_DAY
    return streak


def calculate_longest_streak(logs: Mapping[str, HabitStatus]) -> int:
    """Longest run of consecutive qualifying days anywhere in the history"""
    qualifying = sorted(
        date.fromisoformat(key) for key, status in logs.items()
        if status.counts_toward_streak
    )
    if not qualifying:
        return 0

    max_streak = 1
    current_streak = 1
    for i in range(1, len(qualifying)):
        if qualifying[i] == qualifying[i - 1] + ONE_DAY:
            current_streak += 1
            max_streak = max(max_streak, current_streak)
        else:
            current_streak = 1

    return max_streak
