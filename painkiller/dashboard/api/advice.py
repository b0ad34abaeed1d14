from datetime import date

from fastapi import APIRouter, Depends

from painkiller.core.ai_service import AdvisoryCoordinator
from painkiller.core.database import HabitRepository

from ..dependencies import get_coordinator, get_repository, get_today, require_habit
from ..schemas import AdviceOut

router = APIRouter(prefix="/api/habits", tags=["advice"])


@router.post("/{habit_id}/advice", response_model=AdviceOut)
async def request_advice(
    habit_id: str,
    repository: HabitRepository = Depends(get_repository),
    coordinator: AdvisoryCoordinator = Depends(get_coordinator),
    today: date = Depends(get_today),
):
    """Ask for a motivational message based on the last seven days"""
    habit = require_habit(repository, habit_id)
    await coordinator.request(habit, today)
    return coordinator.state_for(habit.id).to_dict()


@router.get("/{habit_id}/advice", response_model=AdviceOut)
async def get_advice(
    habit_id: str,
    repository: HabitRepository = Depends(get_repository),
    coordinator: AdvisoryCoordinator = Depends(get_coordinator),
):
    habit = require_habit(repository, habit_id)
    return coordinator.state_for(habit.id).to_dict()
