#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Advisory service
Short motivational messages generated from a habit's last seven days
"""

import asyncio
import itertools
import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

import openai
from openai import AsyncOpenAI

from painkiller.config import config
from painkiller.core.models import HabitStatus, UserHabit
from painkiller.utils.datetime_utils import today as current_day
from painkiller.utils.decorators import retry_on_exception

logger = logging.getLogger(__name__)

HISTORY_DAYS = 7

FALLBACK_NO_API_KEY = "API Key not configured. Please set the API Key to get AI insights."
FALLBACK_EMPTY = "Keep pushing forward. You got this."
FALLBACK_ERROR = "Consistency is key. Keep logging your progress."

MOTIVATION_PROMPT = """I am tracking a habit called "{habit_name}".
Here is my performance for the last {days} days (most recent first):
{history}

Act as a tough but encouraging coach.
Based on this data, give me a 2-sentence specific motivational message or piece of advice.
If I am failing, be stern. If I am winning, challenge me to keep going.
Do not use markdown. Just plain text."""

# ===== EXCEPTIONS =====


class AIServiceError(Exception):
    """Base class for advisory errors"""
    pass


class AIProviderError(AIServiceError):
    """The model provider failed"""
    pass


# ===== DATA CLASSES =====

@dataclass
class AIStats:
    """Advisory counters"""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    fallback_responses: int = 0
    total_tokens_used: int = 0
    average_response_time_ms: float = 0.0

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_requests': self.total_requests,
            'successful_requests': self.successful_requests,
            'failed_requests': self.failed_requests,
            'fallback_responses': self.fallback_responses,
            'total_tokens_used': self.total_tokens_used,
            'average_response_time_ms': round(self.average_response_time_ms, 2),
            'success_rate': round(self.success_rate, 2),
        }


@dataclass
class AdvisoryState:
    """What a caller shows for one habit's advice"""
    habit_id: str
    loading: bool = False
    text: Optional[str] = None
    request_id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'habitId': self.habit_id,
            'loading': self.loading,
            'text': self.text,
            'requestId': self.request_id,
        }


# ===== HISTORY =====

def build_history(logs: Mapping[str, HabitStatus], today: date,
                  days: int = HISTORY_DAYS) -> List[Tuple[str, str]]:
    """(date, label) pairs for the days ending today, most recent first"""
    history = []
    for offset in range(days):
        day_key = (today - timedelta(days=offset)).isoformat()
        history.append((day_key, logs.get(day_key, HabitStatus.NONE).label))
    return history


def format_prompt(habit_name: str, history: List[Tuple[str, str]]) -> str:
    lines = "\n".join(f"{day_key}: {label}" for day_key, label in history)
    return MOTIVATION_PROMPT.format(habit_name=habit_name, days=len(history), history=lines)


# ===== MAIN SERVICE =====

class AdvisoryService:
    """Requests motivation from the model and never lets an error through"""

    def __init__(self, client: Optional[Any] = None, api_key: Optional[str] = None,
                 model: Optional[str] = None):
        self.model = model or config.ai.openai_model
        self.max_tokens = config.ai.openai_max_tokens
        self.timeout = config.ai.request_timeout
        self.stats = AIStats()

        self.client = client
        if self.client is None:
            self.client = self._initialize_openai(api_key or config.ai.openai_api_key)
        self.enabled = self.client is not None

        logger.info(f"Advisory service initialized - OpenAI: {'enabled' if self.enabled else 'disabled'}")

    def _initialize_openai(self, api_key: Optional[str]) -> Optional[AsyncOpenAI]:
        if not api_key:
            logger.warning("OpenAI API key not configured")
            return None

        try:
            return AsyncOpenAI(api_key=api_key, timeout=self.timeout)
        except Exception as e:
            logger.error(f"Failed to initialize OpenAI client: {e}")
            return None

    async def get_motivation(self, habit: UserHabit, today: Optional[date] = None) -> str:
        """Motivational text for a habit; always non-empty"""
        start_time = time.time()
        self.stats.total_requests += 1

        if not self.enabled:
            self.stats.fallback_responses += 1
            return FALLBACK_NO_API_KEY

        history = build_history(habit.logs, today or current_day())
        prompt = format_prompt(habit.name, history)

        try:
            content = await self._complete(prompt)
        except Exception as e:
            logger.error(f"Advisory request for {habit.name!r} failed: {e}")
            self.stats.failed_requests += 1
            self.stats.fallback_responses += 1
            return FALLBACK_ERROR

        self.stats.successful_requests += 1
        self._update_average_response_time(int((time.time() - start_time) * 1000))

        if not content:
            self.stats.fallback_responses += 1
            return FALLBACK_EMPTY
        return content

    async def _complete(self, prompt: str) -> str:
        @retry_on_exception(retries=config.ai.max_retries, delay=config.ai.retry_delay,
                            exceptions=(openai.APIError, asyncio.TimeoutError))
        async def request() -> str:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=0.7,
            )
            if response.usage:
                self.stats.total_tokens_used += response.usage.total_tokens
            if not response.choices:
                return ""
            return (response.choices[0].message.content or "").strip()

        try:
            return await request()
        except openai.APIError as e:
            raise AIProviderError(f"OpenAI API failed: {e}")

    def _update_average_response_time(self, response_time_ms: int) -> None:
        total_time = self.stats.average_response_time_ms * (self.stats.successful_requests - 1)
        self.stats.average_response_time_ms = (total_time + response_time_ms) / self.stats.successful_requests

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.to_dict()

    def get_health_status(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'model': self.model,
            'stats': self.get_stats(),
        }


class AdvisoryCoordinator:
    """Tracks in-flight advice per habit.

    Each request gets a new token; a response is applied only while its token
    is still the newest for that habit, so an older request finishing late
    cannot overwrite a newer answer.
    """

    def __init__(self, service: AdvisoryService):
        self.service = service
        self._states: Dict[str, AdvisoryState] = {}
        self._tokens = itertools.count(1)

    def state_for(self, habit_id: str) -> AdvisoryState:
        return self._states.setdefault(habit_id, AdvisoryState(habit_id=habit_id))

    def reset(self, habit_id: str) -> None:
        self._states.pop(habit_id, None)

    async def request(self, habit: UserHabit, today: Optional[date] = None) -> str:
        token = next(self._tokens)
        state = self.state_for(habit.id)
        state.request_id = token
        state.loading = True
        state.text = None

        text = None
        try:
            text = await self.service.get_motivation(habit, today)
        finally:
            current = self._states.get(habit.id)
            if current is not None and current.request_id == token:
                current.text = text
                current.loading = False
            elif text is not None:
                logger.debug(f"Discarding stale advice for {habit.id} (request {token})")
        return text


__all__ = [
    'AIServiceError',
    'AIProviderError',
    'AIStats',
    'AdvisoryState',
    'AdvisoryService',
    'AdvisoryCoordinator',
    'build_history',
    'format_prompt',
    'FALLBACK_NO_API_KEY',
    'FALLBACK_EMPTY',
    'FALLBACK_ERROR',
]
