# -*- coding: utf-8 -*-
"""
Painkiller Habits - Predefined habit catalog
"""

from collections import OrderedDict
from typing import Dict, List, Optional

from painkiller.core.models import HabitCategory, HabitDefinition


def _define(habit_id: str, name: str, category: HabitCategory) -> HabitDefinition:
    return HabitDefinition(id=habit_id, name=name, category=category)


PREDEFINED_HABITS: List[HabitDefinition] = [
    # Quitting / detox
    _define('quit-porn', 'Quit Porn', HabitCategory.QUITTING),
    _define('quit-vaping', 'Quit Vaping', HabitCategory.QUITTING),
    _define('quit-smoking', 'Quit Smoking', HabitCategory.QUITTING),
    _define('quit-alcohol', 'Quit Alcohol', HabitCategory.QUITTING),
    _define('quit-weed', 'Quit Weed', HabitCategory.QUITTING),
    _define('quit-caffeine', 'Quit Caffeine', HabitCategory.QUITTING),
    _define('quit-overspending', 'Quit Overspending', HabitCategory.QUITTING),
    _define('stop-social-media', 'Stop Social Media', HabitCategory.QUITTING),
    _define('addiction-counter', 'General Addiction Counter', HabitCategory.QUITTING),
    _define('detox-counter', 'Detox Counter', HabitCategory.QUITTING),

    # Health & fitness
    _define('fasting', 'Fasting', HabitCategory.HEALTH),
    _define('ranked-gym', 'Ranked Gym', HabitCategory.HEALTH),
    _define('weight-loss', 'Weight Loss', HabitCategory.HEALTH),
    _define('muscle-gain', 'Muscle Gain', HabitCategory.HEALTH),
    _define('healthy-eating', 'Healthy Eating', HabitCategory.HEALTH),
    _define('ranked-testo', 'Ranked Testo Maxing', HabitCategory.HEALTH),

    # Mental health
    _define('anxiety-relief', 'Anxiety Relief', HabitCategory.MENTAL),
    _define('depression', 'Manage Depression', HabitCategory.MENTAL),
    _define('mens-mental-health', "Men's Mental Health", HabitCategory.MENTAL),
    _define('mindfulness', 'Mindfulness & Meditation', HabitCategory.MENTAL),
    _define('gratitude', 'Gratitude Journal', HabitCategory.MENTAL),
    _define('self-love', 'Self-Love & Confidence', HabitCategory.MENTAL),
    _define('stress-relief', 'Stress Relief', HabitCategory.MENTAL),

    # Productivity
    _define('procrastination', 'Beat Procrastination', HabitCategory.PRODUCTIVITY),
    _define('build-discipline', 'Build Discipline', HabitCategory.PRODUCTIVITY),
    _define('focus-deep-work', 'Focus & Deep Work', HabitCategory.PRODUCTIVITY),
    _define('study-habits', 'Study Habits', HabitCategory.PRODUCTIVITY),

    # Lifestyle
    _define('pregnancy', 'Pregnancy Tracker', HabitCategory.LIFESTYLE),
    _define('daily-motivation', 'Daily Motivation', HabitCategory.LIFESTYLE),
    _define('morning-routine', 'Morning Routine', HabitCategory.LIFESTYLE),
    _define('night-routine', 'Night Routine', HabitCategory.LIFESTYLE),
    _define('relationship', 'Relationship Goals', HabitCategory.LIFESTYLE),
]

_BY_ID: Dict[str, HabitDefinition] = {definition.id: definition for definition in PREDEFINED_HABITS}


def get_definition(habit_id: str) -> Optional[HabitDefinition]:
    return _BY_ID.get(habit_id)


def habits_by_category() -> "OrderedDict[HabitCategory, List[HabitDefinition]]":
    """Catalog grouped by category, categories in first-seen order"""
    grouped: "OrderedDict[HabitCategory, List[HabitDefinition]]" = OrderedDict()
    for definition in PREDEFINED_HABITS:
        grouped.setdefault(definition.category, []).append(definition)
    return grouped
