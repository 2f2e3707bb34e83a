"""FastAPI integration for routing requests through a shared limiter."""

from callgate.api.dependencies import get_limiter, reset_limiter, throttle_request

__all__ = ["get_limiter", "reset_limiter", "throttle_request"]
