#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Core Data Models
Daily status values, habit definitions and tracked habits
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union
import logging

from painkiller.utils.datetime_utils import DateLike, now, to_date_key
from painkiller.utils.validators import ValidationError, validate_text

logger = logging.getLogger(__name__)

# ===== ENUMS =====


class HabitStatus(Enum):
    """Outcome recorded for a habit on one day"""
    NONE = 0
    SUCCESS = 1
    PARTIAL = 2
    FAIL = 3

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def counts_toward_streak(self) -> bool:
        return self in (HabitStatus.SUCCESS, HabitStatus.PARTIAL)

    @classmethod
    def coerce(cls, value: Union["HabitStatus", int, str]) -> "HabitStatus":
        """Accept an enum member, its integer code or its name"""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValidationError(f"Unknown status: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValidationError(f"Unknown status code: {value}")
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValidationError(f"Unknown status: {value!r}")
        raise ValidationError(f"Unknown status: {value!r}")


_STATUS_LABELS = {
    HabitStatus.NONE: "No record",
    HabitStatus.SUCCESS: "Success",
    HabitStatus.PARTIAL: "Partial Success",
    HabitStatus.FAIL: "Fail",
}


class HabitCategory(Enum):
    """Catalog categories"""
    QUITTING = "quitting"
    HEALTH = "health"
    MENTAL = "mental"
    PRODUCTIVITY = "productivity"
    LIFESTYLE = "lifestyle"


# ===== TOGGLE RULE =====

def toggle_status(current: HabitStatus, requested: HabitStatus) -> HabitStatus:
    """Selecting the status a day already has clears it"""
    if current == requested:
        return HabitStatus.NONE
    return requested


def apply_status_toggle(habit: "UserHabit", day: DateLike,
                        requested: Union[HabitStatus, int, str]) -> "UserHabit":
    """Return a new habit snapshot with the toggle applied to one day"""
    key = to_date_key(day)
    result = toggle_status(habit.status_on(key), HabitStatus.coerce(requested))

    logs = dict(habit.logs)
    if result == HabitStatus.NONE:
        logs.pop(key, None)
    else:
        logs[key] = result
    return replace(habit, logs=logs)


# ===== MODELS =====

@dataclass(frozen=True)
class HabitDefinition:
    """Catalog entry a tracked habit can be created from"""
    id: str
    name: str
    category: HabitCategory

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "category": self.category.value}


@dataclass(frozen=True)
class UserHabit:
    """A tracked habit with its daily outcomes and notes.

    ``logs`` never holds ``HabitStatus.NONE``: a missing date means no record.
    Instances are snapshots; every change produces a new object.
    """
    id: str
    name: str
    logs: Dict[str, HabitStatus] = field(default_factory=dict)
    notes: Dict[str, str] = field(default_factory=dict)
    created_at: str = field(default_factory=lambda: now().isoformat())

    def status_on(self, day: DateLike) -> HabitStatus:
        return self.logs.get(to_date_key(day), HabitStatus.NONE)

    def note_on(self, day: DateLike) -> Optional[str]:
        return self.notes.get(to_date_key(day))

    def with_note(self, day: DateLike, text: str) -> "UserHabit":
        if not isinstance(text, str):
            raise ValidationError("note must be a string")
        notes = dict(self.notes)
        notes[to_date_key(day)] = text
        return replace(self, notes=notes)

    # ===== SERIALIZATION =====

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "logs": {key: status.value for key, status in sorted(self.logs.items())},
            "notes": dict(sorted(self.notes.items())),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserHabit":
        if not isinstance(data, dict):
            raise ValidationError(f"Habit record must be an object, got {type(data).__name__}")

        try:
            habit_id = data["id"]
            name = data["name"]
            created_at = data["createdAt"]
        except KeyError as e:
            raise ValidationError(f"Habit record is missing field {e}")

        if not isinstance(habit_id, str) or not habit_id:
            raise ValidationError("id must be a non-empty string")
        if not isinstance(created_at, str):
            raise ValidationError("createdAt must be a string")

        raw_logs = data.get("logs") or {}
        raw_notes = data.get("notes") or {}
        if not isinstance(raw_logs, dict) or not isinstance(raw_notes, dict):
            raise ValidationError("logs and notes must be objects")

        logs = {}
        for key, code in raw_logs.items():
            status = HabitStatus.coerce(code)
            if status != HabitStatus.NONE:
                logs[to_date_key(key)] = status

        notes = {}
        for key, text in raw_notes.items():
            if not isinstance(text, str):
                raise ValidationError(f"Note for {key} must be a string")
            notes[to_date_key(key)] = text

        return cls(
            id=habit_id,
            name=validate_text(name, max_length=200, field_name="name"),
            logs=logs,
            notes=notes,
            created_at=created_at,
        )

    @classmethod
    def create(cls, name: str, created_at: Optional[datetime] = None) -> "UserHabit":
        """New habit with a fresh id and empty history"""
        return cls(
            id=str(uuid.uuid4()),
            name=validate_text(name, max_length=200, field_name="name"),
            created_at=(created_at or now()).isoformat(),
        )


__all__ = [
    'HabitStatus',
    'HabitCategory',
    'HabitDefinition',
    'UserHabit',
    'ValidationError',
    'toggle_status',
    'apply_status_toggle',
]
