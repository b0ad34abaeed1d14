#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Habit repository
Owns the tracked habit collection and persists it as a whole after every change
"""

import json
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
import logging

from painkiller.config import config
from painkiller.core.models import (
    HabitDefinition,
    HabitStatus,
    UserHabit,
    ValidationError,
    apply_status_toggle,
)
from painkiller.utils.datetime_utils import DateLike, now
from painkiller.utils.validators import validate_text

logger = logging.getLogger(__name__)

# ===== EXCEPTIONS =====


class DatabaseError(Exception):
    """Base class for storage errors"""
    pass


class DatabaseCorruptionError(DatabaseError):
    """Stored data cannot be read back"""
    pass


# ===== HELPER CLASSES =====

@dataclass
class DatabaseStats:
    """Repository counters"""
    total_habits: int = 0
    total_logs: int = 0
    total_notes: int = 0
    last_save: Optional[str] = None
    save_count: int = 0
    load_count: int = 0
    error_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_habits': self.total_habits,
            'total_logs': self.total_logs,
            'total_notes': self.total_notes,
            'last_save': self.last_save,
            'save_count': self.save_count,
            'load_count': self.load_count,
            'error_count': self.error_count,
        }


class JSONFileStorage:
    """A single durable slot backed by one JSON file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[Any]:
        """Parsed slot content, or None when nothing has been stored yet"""
        if not self.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DatabaseCorruptionError(f"Cannot parse {self.path}: {e}")

    def save(self, data: Any) -> None:
        """Replace the slot content atomically via a temporary file"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_name(self.path.name + '.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)

            # Check that what was written parses back
            with open(temp_file, 'r', encoding='utf-8') as f:
                json.load(f)

            temp_file.replace(self.path)
        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def quarantine(self) -> Optional[Path]:
        """Copy the current file aside so a later save cannot destroy it"""
        if not self.exists():
            return None
        target = self.path.with_name(self.path.name + '.corrupt')
        shutil.copy2(self.path, target)
        return target


class DatabaseMigration:
    """Stored document versioning"""

    VERSION_KEY = "__database_version__"
    CURRENT_VERSION = "2"

    @classmethod
    def get_version(cls, data: Any) -> str:
        # The browser app stored a bare list of habits
        if isinstance(data, list):
            return "1"
        if isinstance(data, dict):
            return str(data.get(cls.VERSION_KEY, "1"))
        raise DatabaseCorruptionError(f"Unexpected document type {type(data).__name__}")

    @classmethod
    def needs_migration(cls, data: Any) -> bool:
        return cls.get_version(data) != cls.CURRENT_VERSION

    @classmethod
    def migrate(cls, data: Any) -> Dict[str, Any]:
        version = cls.get_version(data)
        logger.info(f"Migrating habit store from version {version} to {cls.CURRENT_VERSION}")

        if version == "1":
            data = cls._migrate_from_1(data)
        else:
            raise DatabaseCorruptionError(f"Unknown store version {version}")

        return data

    @classmethod
    def _migrate_from_1(cls, data: Any) -> Dict[str, Any]:
        records = data if isinstance(data, list) else data.get("habits")
        if not isinstance(records, list):
            raise DatabaseCorruptionError("Legacy store does not contain a habit list")

        migrated = []
        for record in records:
            if not isinstance(record, dict):
                raise DatabaseCorruptionError("Legacy habit record is not an object")
            record = dict(record)
            record.setdefault("notes", {})
            logs = record.get("logs") or {}
            if isinstance(logs, dict):
                # Explicit "no record" entries were written by older clients
                record["logs"] = {key: code for key, code in logs.items() if code not in (0, None)}
            migrated.append(record)

        return {cls.VERSION_KEY: cls.CURRENT_VERSION, "habits": migrated}


# ===== REPOSITORY =====

class HabitRepository:
    """Ordered collection of tracked habits.

    Every effective mutation is followed by a full save of the collection.
    No-ops (duplicate name, unknown id) leave the collection and the stored
    file untouched.
    """

    def __init__(self, storage: Optional[JSONFileStorage] = None,
                 clock: Callable[[], datetime] = now):
        self.storage = storage or JSONFileStorage(config.storage.path)
        self.clock = clock
        self.stats = DatabaseStats()
        self.is_first_run = False
        self._habits: List[UserHabit] = []

        self.load()

    # ===== PERSISTENCE =====

    def load(self) -> None:
        """Read the whole collection; corrupt data resets it to empty"""
        self.stats.load_count += 1
        try:
            data = self.storage.load()
            if data is None:
                logger.info("No stored habits found, starting first run")
                self.is_first_run = True
                self._habits = []
                return

            self.is_first_run = False
            if DatabaseMigration.needs_migration(data):
                data = DatabaseMigration.migrate(data)

            records = data.get("habits")
            if not isinstance(records, list):
                raise DatabaseCorruptionError("Stored document has no habit list")

            self._habits = self._deserialize(records)
            logger.info(f"Loaded {len(self._habits)} habits from {self.storage.path}")

        except (DatabaseCorruptionError, ValidationError) as e:
            logger.error(f"Habit store is corrupted, continuing with an empty collection: {e}")
            self.stats.error_count += 1
            self.is_first_run = False
            self._habits = []
            self._quarantine()

        self._update_stats()

    def _deserialize(self, records: List[Any]) -> List[UserHabit]:
        habits = []
        seen_ids = set()
        seen_names = set()
        for record in records:
            habit = UserHabit.from_dict(record)
            if habit.id in seen_ids:
                raise ValidationError(f"Duplicate habit id {habit.id}")
            if habit.name in seen_names:
                raise ValidationError(f"Duplicate habit name {habit.name!r}")
            seen_ids.add(habit.id)
            seen_names.add(habit.name)
            habits.append(habit)
        return habits

    def _quarantine(self) -> None:
        try:
            backup = self.storage.quarantine()
            if backup:
                logger.warning(f"Corrupted habit store preserved at {backup}")
        except OSError as e:
            logger.warning(f"Could not preserve corrupted habit store: {e}")

    def serialize(self) -> Dict[str, Any]:
        return {
            DatabaseMigration.VERSION_KEY: DatabaseMigration.CURRENT_VERSION,
            "habits": [habit.to_dict() for habit in self._habits],
        }

    def save(self) -> None:
        self.storage.save(self.serialize())
        self.is_first_run = False
        self.stats.save_count += 1
        self.stats.last_save = self.clock().isoformat()
        self._update_stats()
        logger.debug(f"Saved {len(self._habits)} habits")

    def _update_stats(self) -> None:
        self.stats.total_habits = len(self._habits)
        self.stats.total_logs = sum(len(h.logs) for h in self._habits)
        self.stats.total_notes = sum(len(h.notes) for h in self._habits)

    # ===== PUBLIC API =====

    def list(self) -> List[UserHabit]:
        return list(self._habits)

    def get(self, habit_id: str) -> Optional[UserHabit]:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        return None

    def find_by_name(self, name: str) -> Optional[UserHabit]:
        for habit in self._habits:
            if habit.name == name:
                return habit
        return None

    def add(self, definition: HabitDefinition) -> Optional[UserHabit]:
        """Start tracking a catalog habit; a name already tracked is ignored"""
        name = validate_text(definition.name, max_length=200, field_name="name")
        if self.find_by_name(name) is not None:
            logger.debug(f"Habit {name!r} already tracked, skipping")
            return None

        habit = UserHabit.create(name, created_at=self.clock())
        self._habits.append(habit)
        self.save()
        logger.info(f"Added habit {habit.name!r} ({habit.id})")
        return habit

    def remove(self, habit_id: str) -> bool:
        """Delete a habit with all its records. Callers must confirm first."""
        remaining = [habit for habit in self._habits if habit.id != habit_id]
        if len(remaining) == len(self._habits):
            return False

        self._habits = remaining
        self.save()
        logger.info(f"Removed habit {habit_id}")
        return True

    def set_day_status(self, habit_id: str, day: DateLike,
                       status: Union[HabitStatus, int, str]) -> Optional[UserHabit]:
        """Toggle a day's status; choosing the current status clears it"""
        return self._replace(habit_id, lambda habit: apply_status_toggle(habit, day, status))

    def set_day_note(self, habit_id: str, day: DateLike, text: str) -> Optional[UserHabit]:
        """Store a note for a day; an empty note is kept as written"""
        return self._replace(habit_id, lambda habit: habit.with_note(day, text))

    def _replace(self, habit_id: str,
                 change: Callable[[UserHabit], UserHabit]) -> Optional[UserHabit]:
        for index, habit in enumerate(self._habits):
            if habit.id == habit_id:
                updated = change(habit)
                self._habits[index] = updated
                self.save()
                return updated
        return None

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.to_dict()


def create_repository(path: Optional[Union[str, Path]] = None) -> HabitRepository:
    """Repository over the configured (or given) JSON file"""
    return HabitRepository(JSONFileStorage(path or config.storage.path))


__all__ = [
    'DatabaseError',
    'DatabaseCorruptionError',
    'DatabaseStats',
    'DatabaseMigration',
    'JSONFileStorage',
    'HabitRepository',
    'create_repository',
]
