"""Limiter interfaces.

Callers should depend on this abstraction (not the concrete implementation)
so the admission policy can be swapped without touching call sites.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LimiterSnapshot:
    """Point-in-time view of a limiter's admission state.

    Attributes:
        limit: Max admissions per window.
        window_seconds: Window length in seconds.
        admitted: Admissions granted since window_start.
        remaining: Admissions left before saturation (0 when saturated).
        window_start: Clock reading at which the current window started.
        saturated: Whether the next admission would have to wait.
        total_admitted: Admissions granted over the limiter's lifetime.
        total_delayed: Admissions that had to wait for a window.
        total_failed: Admitted tasks that raised.
    """

    limit: int
    window_seconds: float
    admitted: int
    remaining: int
    window_start: float
    saturated: bool
    total_admitted: int
    total_delayed: int
    total_failed: int


class AbstractLimiter(ABC):
    """Interface for admission limiters."""

    @abstractmethod
    async def acquire(self) -> float:
        """Wait until a slot is available and consume it.

        Returns:
            Seconds spent waiting for admission (0.0 when admitted immediately).
        """
        raise NotImplementedError

    @abstractmethod
    async def execute(self, task: Callable[[], Awaitable[T]]) -> T:
        """Admit ``task`` once capacity allows, run it and return its result.

        Args:
            task: Zero-argument callable returning an awaitable.

        Returns:
            Whatever the task's awaitable resolves to.

        Raises:
            Exception: Any exception raised by the task, unchanged.
        """
        raise NotImplementedError

    @abstractmethod
    def snapshot(self) -> LimiterSnapshot:
        """Return the current admission state without mutating it."""
        raise NotImplementedError

    def wrap(self, func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        """Return an async callable that routes every call of ``func`` through execute().

        Usable as a decorator::

            @limiter.wrap
            async def fetch(url): ...
        """

        @functools.wraps(func)
        async def _limited(*args: Any, **kwargs: Any) -> T:
            return await self.execute(functools.partial(func, *args, **kwargs))

        return _limited
