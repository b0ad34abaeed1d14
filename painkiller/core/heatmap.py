# -*- coding: utf-8 -*-
"""
Painkiller Habits - Calendar heatmap grid

Builds the rolling twelve-month grid shown as a habit's history. Weeks start
on Sunday; each month is padded with leading placeholders so that its first
day falls in the right column.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from painkiller.core.models import HabitStatus
from painkiller.utils.datetime_utils import shift_month

MONTHS_SHOWN = 12
DAYS_PER_WEEK = 7

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class DayCell:
    date: date
    date_str: str
    status: HabitStatus
    is_future: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date_str,
            "status": self.status.value,
            "label": self.status.label,
            "isFuture": self.is_future,
        }


@dataclass
class MonthGrid:
    """One month of cells; ``None`` entries are leading placeholders"""
    name: str
    year: int
    month: int
    days: List[Optional[DayCell]] = field(default_factory=list)

    @property
    def leading_blanks(self) -> int:
        count = 0
        for cell in self.days:
            if cell is not None:
                break
            count += 1
        return count

    @property
    def cells(self) -> List[DayCell]:
        return [cell for cell in self.days if cell is not None]

    def weeks(self) -> List[List[Optional[DayCell]]]:
        """Rows of seven, the last row padded with placeholders"""
        rows = [self.days[i:i + DAYS_PER_WEEK] for i in range(0, len(self.days), DAYS_PER_WEEK)]
        if rows and len(rows[-1]) < DAYS_PER_WEEK:
            rows[-1] = rows[-1] + [None] * (DAYS_PER_WEEK - len(rows[-1]))
        return rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "year": self.year,
            "month": self.month,
            "days": [cell.to_dict() if cell else None for cell in self.days],
        }


def sunday_first_weekday(day: date) -> int:
    """0 for Sunday through 6 for Saturday"""
    return (day.weekday() + 1) % DAYS_PER_WEEK


def build_month(logs: Mapping[str, HabitStatus], year: int, month: int, today: date) -> MonthGrid:
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]

    grid = MonthGrid(name=MONTH_NAMES[month - 1], year=year, month=month)
    grid.days.extend([None] * sunday_first_weekday(first))

    for day_number in range(1, days_in_month + 1):
        current = date(year, month, day_number)
        date_str = current.isoformat()
        is_future = current > today
        status = HabitStatus.NONE if is_future else logs.get(date_str, HabitStatus.NONE)
        grid.days.append(DayCell(date=current, date_str=date_str, status=status, is_future=is_future))

    return grid


def build_calendar(logs: Mapping[str, HabitStatus], today: date,
                   months: int = MONTHS_SHOWN) -> List[MonthGrid]:
    """Grid for the current month and the preceding ones, oldest first"""
    if isinstance(today, datetime):
        today = today.date()

    result = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        result.append(build_month(logs, year, month, today))
    return result
