from datetime import date

from fastapi import HTTPException, Request

from painkiller.core.ai_service import AdvisoryCoordinator
from painkiller.core.database import HabitRepository
from painkiller.core.models import UserHabit
from painkiller.utils.datetime_utils import today


def get_repository(request: Request) -> HabitRepository:
    return request.app.state.repository


def get_coordinator(request: Request) -> AdvisoryCoordinator:
    return request.app.state.coordinator


def get_today() -> date:
    return today()


def require_habit(repository: HabitRepository, habit_id: str) -> UserHabit:
    habit = repository.get(habit_id)
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Habit {habit_id} not found")
    return habit
