"""Tests for environment-based configuration."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from retrykit.foundation.config import LoggingSettings, RetrySettings, clear_settings_cache, get_settings
from retrykit.runtime.retry import RetryCoordinator, RetryPolicy


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for var in ("RETRYKIT_RETRY_MAX_ATTEMPTS", "RETRYKIT_RETRY_INITIAL_DELAY", "RETRYKIT_RETRY_JITTER_LOW",
                "RETRYKIT_RETRY_JITTER_HIGH", "RETRYKIT_LOG_LEVEL", "RETRYKIT_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults_match_default_policy() -> None:
    retry = get_settings().retry

    assert RetryPolicy.from_settings(retry) == RetryPolicy.default()
    assert (retry.jitter_low, retry.jitter_high) == (0.8, 1.2)
    assert retry.log_attempts is True


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYKIT_RETRY_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("RETRYKIT_RETRY_INITIAL_DELAY", "0.5")
    monkeypatch.setenv("RETRYKIT_LOG_LEVEL", "debug")
    monkeypatch.setenv("RETRYKIT_LOG_FORMAT", "json")
    clear_settings_cache()

    settings = get_settings()

    assert settings.retry.max_attempts == 5
    assert settings.retry.initial_delay == 0.5
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"


def test_coordinator_default_policy_follows_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYKIT_RETRY_MAX_ATTEMPTS", "4")
    clear_settings_cache()

    assert RetryCoordinator.from_settings().default_policy.max_attempts == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"initial_delay": 5.0, "max_delay": 1.0},
        {"multiplier": 0.9},
        {"jitter_low": 1.3},
        {"jitter_low": -0.1},
    ],
)
def test_invalid_retry_settings(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        RetrySettings(**kwargs)


def test_invalid_log_format_rejected() -> None:
    with pytest.raises(ValidationError):
        LoggingSettings(format="xml")


@pytest.mark.asyncio
async def test_log_settings_drive_observer_output(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("RETRYKIT_LOG_FORMAT", "json")
    monkeypatch.setenv("RETRYKIT_LOG_LEVEL", "debug")
    clear_settings_cache()
    calls = {"n": 0}

    async def no_sleep(delay: float) -> None:
        await asyncio.sleep(0)

    async def sync_profile() -> str:
        calls["n"] += 1
        if calls["n"] == 1:
            raise ConnectionResetError("connection reset by peer")
        return "synced"

    coordinator = RetryCoordinator.from_settings(sleep=no_sleep)
    assert await coordinator.run(None, sync_profile, name="profile-sync") == "synced"

    records = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert [r["event"] for r in records] == [
        "attempt started",
        "attempt failed",
        "retry scheduled",
        "attempt started",
        "operation succeeded after retries",
    ]
    assert {r["logger"] for r in records} == {"retrykit.retry"}
    assert records[1]["operation"] == "profile-sync"
