"""Limiter implementations.

Call sites depend on ``AbstractLimiter``; ``WindowLimiter`` is the in-memory,
single-process implementation.
"""

from callgate.limiter.base import AbstractLimiter, LimiterSnapshot
from callgate.limiter.factory import create_limiter, create_limiter_from_settings
from callgate.limiter.window import WindowLimiter

__all__ = [
    "AbstractLimiter",
    "LimiterSnapshot",
    "WindowLimiter",
    "create_limiter",
    "create_limiter_from_settings",
]
