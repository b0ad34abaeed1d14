from datetime import date
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from painkiller.core.ai_service import AdvisoryCoordinator
from painkiller.core.catalog import get_definition, habits_by_category
from painkiller.core.database import HabitRepository
from painkiller.core.heatmap import build_calendar
from painkiller.core.models import HabitCategory, HabitDefinition, UserHabit, ValidationError
from painkiller.core.streaks import calculate_current_streak, calculate_longest_streak
from painkiller.utils.datetime_utils import to_date_key
from painkiller.utils.validators import validate_text

from ..dependencies import get_coordinator, get_repository, get_today, require_habit
from ..schemas import CalendarOut, DayNoteUpdate, DayStatusUpdate, HabitCreate, HabitOut

router = APIRouter(prefix="/api", tags=["habits"])


def habit_summary(habit: UserHabit, today: date) -> Dict[str, Any]:
    data = habit.to_dict()
    data.update({
        "todayStatus": habit.status_on(today).value,
        "currentStreak": calculate_current_streak(habit.logs, today),
        "longestStreak": calculate_longest_streak(habit.logs),
    })
    return data


def resolve_definition(payload: HabitCreate) -> HabitDefinition:
    if payload.definition_id:
        definition = get_definition(payload.definition_id)
        if definition is None:
            raise HTTPException(status_code=404, detail=f"Unknown catalog habit {payload.definition_id}")
        return definition

    if payload.name is None:
        raise ValidationError("definition_id or name is required")

    name = validate_text(payload.name, max_length=200, field_name="name")
    try:
        category = HabitCategory(payload.category)
    except ValueError:
        raise ValidationError(f"Unknown category {payload.category!r}")
    return HabitDefinition(id=f"custom-{name.lower().replace(' ', '-')}", name=name, category=category)


@router.get("/catalog")
async def get_catalog():
    """Predefined habits grouped by category"""
    return {
        category.value: [definition.to_dict() for definition in definitions]
        for category, definitions in habits_by_category().items()
    }


@router.get("/habits")
async def list_habits(
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    return {
        "firstRun": repository.is_first_run,
        "habits": [habit_summary(habit, today) for habit in repository.list()],
    }


@router.post("/habits")
async def add_habit(
    payload: HabitCreate,
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    """Start tracking a habit; an already tracked name is left as is"""
    definition = resolve_definition(payload)
    habit = repository.add(definition)
    if habit is None:
        return {"created": False, "habit": habit_summary(repository.find_by_name(definition.name), today)}
    return {"created": True, "habit": habit_summary(habit, today)}


@router.get("/habits/{habit_id}", response_model=HabitOut)
async def get_habit(
    habit_id: str,
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    return habit_summary(require_habit(repository, habit_id), today)


@router.delete("/habits/{habit_id}")
async def remove_habit(
    habit_id: str,
    confirm: bool = Query(False, description="Must be true: removal deletes all history"),
    repository: HabitRepository = Depends(get_repository),
    coordinator: AdvisoryCoordinator = Depends(get_coordinator),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Removal must be confirmed with confirm=true")
    removed = repository.remove(habit_id)
    if removed and coordinator is not None:
        coordinator.reset(habit_id)
    return {"removed": removed}


@router.put("/habits/{habit_id}/days", response_model=HabitOut)
async def set_day_status(
    habit_id: str,
    payload: DayStatusUpdate,
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    """Toggle a day's status; sending the current status clears the day"""
    habit = repository.set_day_status(habit_id, payload.date, payload.status)
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Habit {habit_id} not found")
    return habit_summary(habit, today)


@router.put("/habits/{habit_id}/notes", response_model=HabitOut)
async def set_day_note(
    habit_id: str,
    payload: DayNoteUpdate,
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    habit = repository.set_day_note(habit_id, payload.date, payload.text)
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Habit {habit_id} not found")
    return habit_summary(habit, today)


@router.get("/habits/{habit_id}/days/{day}")
async def get_day(
    habit_id: str,
    day: str,
    repository: HabitRepository = Depends(get_repository),
):
    habit = require_habit(repository, habit_id)
    key = to_date_key(day)
    status = habit.status_on(key)
    return {"date": key, "status": status.value, "label": status.label, "note": habit.note_on(key)}


@router.get("/habits/{habit_id}/calendar", response_model=CalendarOut)
async def get_calendar(
    habit_id: str,
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    habit = require_habit(repository, habit_id)
    return {
        "habitId": habit.id,
        "today": today.isoformat(),
        "months": [month.to_dict() for month in build_calendar(habit.logs, today)],
    }


@router.get("/habits/{habit_id}/streak")
async def get_streak(
    habit_id: str,
    repository: HabitRepository = Depends(get_repository),
    today: date = Depends(get_today),
):
    habit = require_habit(repository, habit_id)
    return {
        "habitId": habit.id,
        "current": calculate_current_streak(habit.logs, today),
        "longest": calculate_longest_streak(habit.logs),
        "todayStatus": habit.status_on(today).value,
        "todayLabel": habit.status_on(today).label,
    }
