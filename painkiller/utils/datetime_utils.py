from datetime import date, datetime
from typing import Optional, Tuple, Union

import pytz

from painkiller.config import config
from painkiller.utils.validators import ValidationError, is_valid_date_key

DATE_KEY_FORMAT = "%Y-%m-%d"

DateLike = Union[date, str]


def now(tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    return datetime.now(tz or config.timezone)


def today(tz: Optional[pytz.BaseTzInfo] = None) -> date:
    """Current calendar day in the configured time zone"""
    return now(tz).date()


def parse_date_key(value: str) -> date:
    if not is_valid_date_key(value):
        raise ValidationError(f"Invalid date key: {value!r}")
    try:
        return datetime.strptime(value, DATE_KEY_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date key: {value!r}")


def to_date_key(value: DateLike) -> str:
    """Canonical YYYY-MM-DD key for a date or a date string"""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return parse_date_key(value).isoformat()


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """(year, month) moved by delta months"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
