"""
Shared test fixtures for StudyFlow.

This module provides common fixtures used across all test modules:
- Environment setup (no real API key, development mode)
- StubModel: scripted stand-in for the generative model
- Deterministic clock and task-id factory
- SessionStore, CountdownTimer and StudySession wired with manual ticks

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

import itertools
import os
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# 1. Environment setup -- must run before any application imports
# ---------------------------------------------------------------------------

os.environ.setdefault("STUDYFLOW_ENVIRONMENT", "development")
os.environ.pop("GEMINI_API_KEY", None)

# ---------------------------------------------------------------------------
# Application imports (after env vars are set)
# ---------------------------------------------------------------------------

from src.services.chat_service import ChatQueryService  # noqa: E402
from src.services.plan_service import PlanRequestService  # noqa: E402
from src.services.session_store import SessionStore  # noqa: E402
from src.services.study_session import StudySession  # noqa: E402

FIXED_NOW = datetime(2024, 5, 6, 14, 30, tzinfo=UTC)


# ---------------------------------------------------------------------------
# 2. StubModel -- returns scripted responses, records every prompt
# ---------------------------------------------------------------------------


class StubModel:
    """
    Stand-in for GeminiClient.

    Each call pops the next scripted response. A response that is an
    exception instance is raised instead of returned.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses: list[Any] = list(responses)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def queue_plan(self, *items: tuple[str, Any, str | None]) -> None:
        """Queue a plan payload built from (subject, durationMinutes, note) tuples."""
        self.queue(plan_response(*items))

    async def generate(self, prompt: str, response_schema: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((prompt, response_schema))
        if not self.responses:
            raise AssertionError("StubModel called with no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def plan_response(*items: tuple[str, Any, str | None]) -> dict[str, Any]:
    """Build a model plan payload from (subject, durationMinutes, note) tuples."""
    return {
        "plan": [
            {"subject": subject, "durationMinutes": minutes, "note": note}
            for subject, minutes, note in items
        ]
    }


@pytest.fixture()
def stub_model() -> StubModel:
    return StubModel()


# ---------------------------------------------------------------------------
# 3. Deterministic clock and ids
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"task-{next(counter)}"


@pytest.fixture()
def store(clock, id_factory) -> SessionStore:
    return SessionStore(clock=clock, id_factory=id_factory)


# ---------------------------------------------------------------------------
# 4. StudySession with manual ticks
# ---------------------------------------------------------------------------


@pytest.fixture()
def session(stub_model, store) -> StudySession:
    """StudySession over a StubModel; the timer only moves when tests call tick()."""
    return StudySession(
        plan_service=PlanRequestService(stub_model),
        chat_service=ChatQueryService(stub_model),
        store=store,
        scheduler=None,
    )
