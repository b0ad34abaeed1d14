from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class HabitCreate(BaseModel):
    """Either a catalog id or a custom name"""
    definition_id: Optional[str] = None
    name: Optional[str] = Field(None, max_length=200)
    category: str = "lifestyle"


class DayStatusUpdate(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    status: Union[int, str] = Field(..., description="0-3 or none|success|partial|fail")


class DayNoteUpdate(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    text: str = Field("", max_length=2000)


class HabitOut(BaseModel):
    id: str
    name: str
    logs: Dict[str, int]
    notes: Dict[str, str]
    createdAt: str
    todayStatus: int
    currentStreak: int
    longestStreak: int


class CalendarOut(BaseModel):
    habitId: str
    today: str
    months: List[Dict[str, Any]]


class AdviceOut(BaseModel):
    habitId: str
    loading: bool
    text: Optional[str] = None
    requestId: int


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    storage: Dict[str, Any]
    advisory: Dict[str, Any]
