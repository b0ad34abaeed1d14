from datetime import date, datetime
from types import SimpleNamespace

import pytest
import pytz

from painkiller.core.database import HabitRepository, JSONFileStorage
from painkiller.core.models import HabitCategory, HabitDefinition

TODAY = date(2024, 3, 15)


def fixed_clock():
    return datetime(2024, 3, 15, 9, 30, tzinfo=pytz.UTC)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "habits.json"


@pytest.fixture
def repository(store_path):
    return HabitRepository(JSONFileStorage(store_path), clock=fixed_clock)


@pytest.fixture
def smoking():
    return HabitDefinition(id="quit-smoking", name="Quit Smoking", category=HabitCategory.QUITTING)


@pytest.fixture
def gym():
    return HabitDefinition(id="ranked-gym", name="Ranked Gym", category=HabitCategory.HEALTH)


def make_completion(content, total_tokens=42):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


class FakeCompletions:
    """Stands in for client.chat.completions; replays queued results"""

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def make_client(*results):
    completions = FakeCompletions(results)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions
