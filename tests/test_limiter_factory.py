"""Tests for limiter construction and configuration."""

import pytest
from pydantic import ValidationError

from callgate.core.config import LimiterSettings, settings
from callgate.core.errors import InvalidConfigurationError
from callgate.limiter import WindowLimiter, create_limiter, create_limiter_from_settings


class TestCreateLimiter:
    def test_defaults(self) -> None:
        limiter = create_limiter()

        assert isinstance(limiter, WindowLimiter)
        snapshot = limiter.snapshot()
        assert snapshot.limit == 15
        assert snapshot.window_seconds == 60.0

    def test_instances_do_not_share_state(self, fake_clock) -> None:
        first = create_limiter(1, 5, clock=fake_clock.time, sleep=fake_clock.sleep)
        second = create_limiter(1, 5, clock=fake_clock.time, sleep=fake_clock.sleep)

        assert first is not second
        assert first.snapshot() == second.snapshot()

    @pytest.mark.asyncio
    async def test_injected_clock_and_sleep_are_used(self, fake_clock) -> None:
        limiter = create_limiter(1, 2, clock=fake_clock.time, sleep=fake_clock.sleep)

        await limiter.acquire()
        waited = await limiter.acquire()

        assert waited == 2.0
        assert fake_clock.sleeps == [2.0]

    def test_invalid_arguments_raise(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            create_limiter(0, 60)

        with pytest.raises(InvalidConfigurationError):
            create_limiter(15, 0)


class TestSettings:
    def test_from_explicit_settings(self) -> None:
        limiter = create_limiter_from_settings(LimiterSettings(limit=4, window_seconds=2.5))

        snapshot = limiter.snapshot()
        assert snapshot.limit == 4
        assert snapshot.window_seconds == 2.5

    def test_from_global_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.limiter, "limit", 7)
        monkeypatch.setattr(settings.limiter, "window_seconds", 3.0)

        snapshot = create_limiter_from_settings().snapshot()

        assert snapshot.limit == 7
        assert snapshot.window_seconds == 3.0

    def test_env_vars_populate_limiter_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LIMITER_LIMIT", "30")
        monkeypatch.setenv("LIMITER_WINDOW_SECONDS", "1.5")
        monkeypatch.setenv("LIMITER_ENABLED", "false")

        cfg = LimiterSettings()

        assert cfg.limit == 30
        assert cfg.window_seconds == 1.5
        assert cfg.enabled is False

    @pytest.mark.parametrize("window_seconds", [float("inf"), float("nan")])
    def test_non_finite_window_rejected_by_settings(self, window_seconds: float) -> None:
        with pytest.raises(ValidationError):
            LimiterSettings(window_seconds=window_seconds)

    @pytest.mark.parametrize(
        "env",
        [
            {"LIMITER_LIMIT": "0"},
            {"LIMITER_WINDOW_SECONDS": "0"},
            {"LIMITER_WINDOW_SECONDS": "-1"},
            {"LIMITER_WINDOW_SECONDS": "inf"},
            {"LIMITER_WINDOW_SECONDS": "nan"},
        ],
    )
    def test_invalid_env_values_rejected(
        self, monkeypatch: pytest.MonkeyPatch, env: dict[str, str]
    ) -> None:
        for key, value in env.items():
            monkeypatch.setenv(key, value)

        with pytest.raises(ValidationError):
            LimiterSettings()
