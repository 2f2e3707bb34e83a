"""In-memory lazy-window limiter.

Notes:
- Per-process only: every limiter instance enforces its own budget.
- Single event loop: admission state is mutated without locks. The
  check-and-increment path has no await point unless the limiter is
  saturated, so concurrent coroutines cannot interleave inside it.
- The window resets lazily, when an admission finds it elapsed. There is no
  background timer.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
import time
import uuid
from typing import Awaitable, Callable, TypeVar

from callgate.core.errors import InvalidConfigurationError
from callgate.core.logging import clear_call_id, set_call_id
from callgate.limiter.base import AbstractLimiter, LimiterSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def _validate_limit(limit: object) -> int:
    """Return ``limit`` if it is a positive int (bools rejected).

    Raises:
        InvalidConfigurationError: If limit is not a positive integer.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidConfigurationError(
            code="invalid_configuration",
            message="limit must be a positive integer",
            details={"field": "limit", "context": {"value": repr(limit)}},
        )
    return limit


def _validate_window(window_seconds: object) -> float:
    """Return ``window_seconds`` as a float if it is positive and finite.

    Raises:
        InvalidConfigurationError: If the window is not a positive, finite number.
    """
    if (
        isinstance(window_seconds, bool)
        or not isinstance(window_seconds, (int, float))
        or not math.isfinite(window_seconds)
        or window_seconds <= 0
    ):
        raise InvalidConfigurationError(
            code="invalid_configuration",
            message="window_seconds must be a positive, finite number",
            details={"field": "window_seconds", "context": {"value": repr(window_seconds)}},
        )
    return float(window_seconds)


class WindowLimiter(AbstractLimiter):
    """Admit at most ``limit`` calls per window of ``window_seconds``.

    Calls over the limit are delayed, never rejected. Once the window is
    saturated a caller sleeps for one full window (not just the time left in
    the current one) and the window then restarts from the moment it woke up.
    Each saturated caller performs its own wait; waiters do not share a reset
    point.

    A task that raises still consumes its slot.
    """

    def __init__(
        self,
        *,
        limit: int = 15,
        window_seconds: float = 60.0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of admissions per window.
            window_seconds: Window length in seconds.
            clock: Time source returning seconds; must never go backwards.
            sleep: Awaitable delay used while saturated.

        Raises:
            InvalidConfigurationError: If limit or window_seconds are invalid.
        """
        self._limit = _validate_limit(limit)
        self._window_seconds = _validate_window(window_seconds)
        self._clock = clock
        self._sleep = sleep

        self._admitted = 0
        self._window_start = clock()

        self._total_admitted = 0
        self._total_delayed = 0
        self._total_failed = 0

    def __repr__(self) -> str:
        return (
            f"WindowLimiter(limit={self._limit}, window_seconds={self._window_seconds}, "
            f"admitted={self._admitted}, total_admitted={self._total_admitted}, "
            f"total_delayed={self._total_delayed}, total_failed={self._total_failed})"
        )

    @property
    def limit(self) -> int:
        """Maximum admissions per window."""
        return self._limit

    @property
    def window_seconds(self) -> float:
        """Window length in seconds."""
        return self._window_seconds

    def _restart_window(self, now: float) -> None:
        """Start a new, empty window at ``now``.

        Args:
            now: Clock reading the window starts from.
        """
        self._admitted = 0
        self._window_start = now

    async def acquire(self) -> float:
        """Wait for a slot in the current window and consume it.

        Returns:
            Seconds spent waiting (0.0 when a slot was free).
        """

        now = self._clock()

        if now - self._window_start >= self._window_seconds:
            logger.debug(
                "limiter.window_rollover",
                extra={
                    "admitted": self._admitted,
                    "elapsed_s": round(now - self._window_start, 3),
                },
            )
            self._restart_window(now)

        waited = 0.0
        if self._admitted >= self._limit:
            logger.warning(
                "limiter.saturated",
                extra={
                    "limit": self._limit,
                    "window_s": self._window_seconds,
                    "wait_s": math.ceil(self._window_seconds),
                },
            )
            await self._sleep(self._window_seconds)

            woke_at = self._clock()
            waited = woke_at - now
            self._restart_window(woke_at)
            self._total_delayed += 1

        self._admitted += 1
        self._total_admitted += 1

        logger.debug(
            "limiter.admitted",
            extra={
                "admitted": self._admitted,
                "limit": self._limit,
                "waited_s": round(waited, 3),
            },
        )
        return waited

    async def execute(self, task: Callable[[], Awaitable[T]]) -> T:
        """Admit ``task`` once capacity allows, run it and return its result.

        The task's exception, if any, is re-raised unchanged. A plain
        (non-awaitable) return value is passed through as-is.

        Args:
            task: Zero-argument callable returning an awaitable.

        Returns:
            The task's result.
        """

        token = set_call_id(uuid.uuid4().hex[:16])
        try:
            await self.acquire()
            try:
                result = task()
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                self._total_failed += 1
                logger.debug(
                    "limiter.task_failed",
                    extra={"error_type": type(exc).__name__},
                )
                raise
            return result
        finally:
            clear_call_id(token)

    def snapshot(self) -> LimiterSnapshot:
        """Return the current admission state.

        Reading a snapshot never rolls the window over; an elapsed window is
        only detected by the next admission.
        """
        return LimiterSnapshot(
            limit=self._limit,
            window_seconds=self._window_seconds,
            admitted=self._admitted,
            remaining=max(0, self._limit - self._admitted),
            window_start=self._window_start,
            saturated=self._admitted >= self._limit,
            total_admitted=self._total_admitted,
            total_delayed=self._total_delayed,
            total_failed=self._total_failed,
        )
