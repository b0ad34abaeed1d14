import asyncio
from datetime import date

import httpx
import openai
import pytest

from painkiller.config import config
from painkiller.core.ai_service import (
    FALLBACK_EMPTY,
    FALLBACK_ERROR,
    FALLBACK_NO_API_KEY,
    AdvisoryCoordinator,
    AdvisoryService,
    build_history,
    format_prompt,
)
from painkiller.core.models import HabitStatus, UserHabit

from .conftest import TODAY, make_client, make_completion


@pytest.fixture
def habit():
    return UserHabit(
        id="h1",
        name="Quit Smoking",
        logs={
            "2024-03-15": HabitStatus.SUCCESS,
            "2024-03-14": HabitStatus.FAIL,
            "2024-03-12": HabitStatus.PARTIAL,
            "2024-03-01": HabitStatus.SUCCESS,
        },
        notes={},
        created_at="2024-03-01T00:00:00+00:00",
    )


@pytest.fixture(autouse=True)
def fast_retries(monkeypatch):
    monkeypatch.setattr(config.ai, "retry_delay", 0)
    monkeypatch.setattr(config.ai, "max_retries", 2)


def test_history_covers_last_seven_days_most_recent_first(habit):
    history = build_history(habit.logs, TODAY)

    assert len(history) == 7
    assert history[0] == ("2024-03-15", "Success")
    assert history[1] == ("2024-03-14", "Fail")
    assert history[2] == ("2024-03-13", "No record")
    assert history[3] == ("2024-03-12", "Partial Success")
    assert history[-1] == ("2024-03-09", "No record")


def test_prompt_names_habit_and_lists_history(habit):
    prompt = format_prompt(habit.name, build_history(habit.logs, TODAY))

    assert '"Quit Smoking"' in prompt
    assert "2024-03-15: Success" in prompt
    assert "2024-03-01" not in prompt


def test_missing_api_key_returns_fixed_message(habit, monkeypatch):
    monkeypatch.setattr(config.ai, "openai_api_key", None)
    service = AdvisoryService()

    assert not service.enabled
    assert asyncio.run(service.get_motivation(habit, TODAY)) == FALLBACK_NO_API_KEY
    assert service.stats.fallback_responses == 1


def test_successful_response_is_returned(habit):
    client, completions = make_client(make_completion("  Stay strong. Tomorrow counts too.  "))
    service = AdvisoryService(client=client)

    text = asyncio.run(service.get_motivation(habit, TODAY))

    assert text == "Stay strong. Tomorrow counts too."
    assert len(completions.calls) == 1
    assert "2024-03-14: Fail" in completions.calls[0]["messages"][0]["content"]
    assert service.stats.successful_requests == 1
    assert service.stats.total_tokens_used == 42


def test_empty_response_uses_fallback(habit):
    client, _ = make_client(make_completion(""))
    service = AdvisoryService(client=client)

    assert asyncio.run(service.get_motivation(habit, TODAY)) == FALLBACK_EMPTY


def test_unexpected_error_uses_fallback(habit):
    client, completions = make_client(RuntimeError("boom"))
    service = AdvisoryService(client=client)

    assert asyncio.run(service.get_motivation(habit, TODAY)) == FALLBACK_ERROR
    assert len(completions.calls) == 1
    assert service.stats.failed_requests == 1


def test_provider_error_is_retried():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client, completions = make_client(
        openai.APIConnectionError(request=request),
        make_completion("Second time lucky."),
    )
    service = AdvisoryService(client=client)
    habit = UserHabit.create("Ranked Gym")

    assert asyncio.run(service.get_motivation(habit, TODAY)) == "Second time lucky."
    assert len(completions.calls) == 2


def test_provider_error_after_all_retries_uses_fallback():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client, completions = make_client(
        openai.APIConnectionError(request=request),
        openai.APIConnectionError(request=request),
    )
    service = AdvisoryService(client=client)

    assert asyncio.run(service.get_motivation(UserHabit.create("Ranked Gym"), TODAY)) == FALLBACK_ERROR
    assert len(completions.calls) == 2


class GatedService:
    """Answers each call only once its gate is opened"""

    def __init__(self):
        self.gates = []

    async def get_motivation(self, habit, today=None):
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return f"answer {len(self.gates)}" if gate is self.gates[-1] else "stale answer"


def test_coordinator_discards_stale_response(habit):
    service = GatedService()
    coordinator = AdvisoryCoordinator(service)

    async def scenario():
        first = asyncio.ensure_future(coordinator.request(habit, TODAY))
        await asyncio.sleep(0)
        assert coordinator.state_for(habit.id).loading

        second = asyncio.ensure_future(coordinator.request(habit, TODAY))
        await asyncio.sleep(0)

        service.gates[1].set()
        await second
        service.gates[0].set()
        await first

    asyncio.run(scenario())

    state = coordinator.state_for(habit.id)
    assert state.text == "answer 2"
    assert not state.loading
    assert state.request_id == 2


def test_cancelled_request_clears_loading(habit):
    service = GatedService()
    coordinator = AdvisoryCoordinator(service)

    async def scenario():
        pending = asyncio.ensure_future(coordinator.request(habit, TODAY))
        await asyncio.sleep(0)
        assert coordinator.state_for(habit.id).loading

        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

    asyncio.run(scenario())

    state = coordinator.state_for(habit.id)
    assert not state.loading
    assert state.text is None


class BrokenService:
    async def get_motivation(self, habit, today=None):
        raise RuntimeError("service down")


def test_failed_request_clears_loading(habit):
    coordinator = AdvisoryCoordinator(BrokenService())

    with pytest.raises(RuntimeError):
        asyncio.run(coordinator.request(habit, TODAY))

    assert not coordinator.state_for(habit.id).loading


def test_coordinator_reset_drops_state(habit):
    client, _ = make_client(make_completion("Keep at it."))
    coordinator = AdvisoryCoordinator(AdvisoryService(client=client))

    asyncio.run(coordinator.request(habit, date(2024, 3, 15)))
    assert coordinator.state_for(habit.id).text == "Keep at it."

    coordinator.reset(habit.id)
    assert coordinator.state_for(habit.id).text is None
