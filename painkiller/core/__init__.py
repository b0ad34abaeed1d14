#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Core package
Habit state, streaks, calendar grid and advisory service
"""

from .models import (
    HabitStatus,
    HabitCategory,
    HabitDefinition,
    UserHabit,
    ValidationError,
    toggle_status,
    apply_status_toggle,
)

from .streaks import (
    calculate_current_streak,
    calculate_longest_streak,
)

from .heatmap import (
    DayCell,
    MonthGrid,
    build_calendar,
)

from .database import (
    DatabaseError,
    DatabaseCorruptionError,
    JSONFileStorage,
    HabitRepository,
    create_repository,
)

__all__ = [
    # Models
    'HabitStatus',
    'HabitCategory',
    'HabitDefinition',
    'UserHabit',
    'ValidationError',
    'toggle_status',
    'apply_status_toggle',

    # Derived views
    'calculate_current_streak',
    'calculate_longest_streak',
    'DayCell',
    'MonthGrid',
    'build_calendar',

    # Storage
    'DatabaseError',
    'DatabaseCorruptionError',
    'JSONFileStorage',
    'HabitRepository',
    'create_repository',
]
