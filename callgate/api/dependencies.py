"""Limiter dependency for FastAPI routes.

This module wires a shared limiter into the HTTP layer. Unlike a rejecting
rate limit, requests over the budget are held until the limiter admits them;
clients see added latency, never a 429.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Swap-friendly: routes see AbstractLimiter, not the concrete class.
- Configurable: disabled via LIMITER_ENABLED=false.
"""

from __future__ import annotations

import logging

from fastapi import Request

from callgate.core.config import settings
from callgate.limiter.base import AbstractLimiter
from callgate.limiter.factory import create_limiter_from_settings

logger = logging.getLogger(__name__)


_limiter: AbstractLimiter | None = None
_limiter_config: tuple[int, float] | None = None


def get_limiter() -> AbstractLimiter:
    """Return the process-wide limiter instance.

    The instance is cached in-module to preserve admission state across
    requests. If configuration changes (primarily in tests), the limiter is
    rebuilt with fresh state.

    Returns:
        AbstractLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (settings.limiter.limit, settings.limiter.window_seconds)

    if _limiter is None or _limiter_config != config:
        _limiter = create_limiter_from_settings(settings.limiter)
        _limiter_config = config

    return _limiter


def reset_limiter() -> None:
    """Drop the cached limiter so the next request builds a fresh one."""

    global _limiter, _limiter_config
    _limiter = None
    _limiter_config = None


async def throttle_request(request: Request) -> None:
    """FastAPI dependency holding requests until the shared limiter admits them.

    The wait (in seconds) is stored on ``request.state.throttle_wait_seconds``
    so handlers or middleware can expose it.

    Args:
        request: FastAPI request.
    """

    if not settings.limiter.enabled:
        request.state.throttle_wait_seconds = 0.0
        return

    limiter = get_limiter()
    waited = await limiter.acquire()
    request.state.throttle_wait_seconds = waited

    snapshot = limiter.snapshot()
    logger.info(
        "limiter.request_admitted",
        extra={
            "route": request.url.path,
            "limit": snapshot.limit,
            "remaining": snapshot.remaining,
            "window_s": snapshot.window_seconds,
            "waited_s": round(waited, 3),
        },
    )
