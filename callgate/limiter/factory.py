"""Factory functions for creating limiter instances."""

from __future__ import annotations

from callgate.core.config import LimiterSettings, settings
from callgate.limiter.base import AbstractLimiter
from callgate.limiter.window import Clock, Sleep, WindowLimiter


def create_limiter(
    limit: int = 15,
    window_seconds: float = 60.0,
    *,
    clock: Clock | None = None,
    sleep: Sleep | None = None,
) -> AbstractLimiter:
    """Create a limiter admitting ``limit`` calls per ``window_seconds``.

    Args:
        limit: Maximum number of admissions per window (default 15).
        window_seconds: Window length in seconds (default one minute).
        clock: Optional time source; defaults to ``time.monotonic``.
        sleep: Optional awaitable delay; defaults to ``asyncio.sleep``.

    Returns:
        AbstractLimiter: A fresh limiter with its own, unshared state.

    Raises:
        InvalidConfigurationError: If limit or window_seconds are not positive.
    """
    kwargs = {}
    if clock is not None:
        kwargs["clock"] = clock
    if sleep is not None:
        kwargs["sleep"] = sleep

    return WindowLimiter(limit=limit, window_seconds=window_seconds, **kwargs)


def create_limiter_from_settings(
    limiter_settings: LimiterSettings | None = None,
) -> AbstractLimiter:
    """Create a limiter from configuration.

    Reads ``settings.limiter`` (LIMITER_LIMIT / LIMITER_WINDOW_SECONDS) unless
    explicit settings are passed.
    """
    cfg = limiter_settings or settings.limiter
    return create_limiter(cfg.limit, cfg.window_seconds)
