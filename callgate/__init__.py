"""Window-based admission limiter for asyncio call streams."""

from callgate.core.errors import AppError, InvalidConfigurationError, ValidationAppError
from callgate.limiter import (
    AbstractLimiter,
    LimiterSnapshot,
    WindowLimiter,
    create_limiter,
    create_limiter_from_settings,
)

__all__ = [
    "AbstractLimiter",
    "AppError",
    "InvalidConfigurationError",
    "LimiterSnapshot",
    "ValidationAppError",
    "WindowLimiter",
    "create_limiter",
    "create_limiter_from_settings",
]
