"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the environment so settings never come from a developer's .env file.
"""

import asyncio
import os

# CRITICAL: Set this before any imports that might load settings
os.environ["CALLGATE_ENV"] = "testing"

os.environ.setdefault("LIMITER_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "INFO")

import pytest  # noqa: E402


class FakeClock:
    """Deterministic clock and sleep pair for driving a limiter.

    ``sleep`` yields to the event loop once and then moves the clock to the
    deadline computed when the sleep started, so coroutines sleeping over the
    same interval wake at the same instant instead of stacking their delays.
    """

    def __init__(self, start: float = 1_000.0) -> None:
        self.start = start
        self.current = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds

    @property
    def elapsed(self) -> float:
        return self.current - self.start

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        deadline = self.current + seconds
        await asyncio.sleep(0)
        self.current = max(self.current, deadline)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def clock_factory() -> type[FakeClock]:
    """Build additional independent clocks within one test."""
    return FakeClock
