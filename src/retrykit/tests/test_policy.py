"""Tests for RetryPolicy validation, presets, and backoff delay bounds."""

from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from retrykit.foundation.config import RetrySettings
from retrykit.runtime.retry import (
    AGGRESSIVE_POLICY,
    CONSERVATIVE_POLICY,
    DEFAULT_POLICY,
    Backoff,
    JitteredBackoff,
    NoJitterBackoff,
    RetryPolicy,
)


# ═════════════════════════════════════════════════════════════════════════════
# Policy
# ═════════════════════════════════════════════════════════════════════════════


def test_preset_values() -> None:
    assert (DEFAULT_POLICY.max_attempts, DEFAULT_POLICY.initial_delay,
            DEFAULT_POLICY.max_delay, DEFAULT_POLICY.multiplier) == (3, 1.0, 10.0, 2.0)
    assert (AGGRESSIVE_POLICY.max_attempts, AGGRESSIVE_POLICY.initial_delay,
            AGGRESSIVE_POLICY.max_delay, AGGRESSIVE_POLICY.multiplier) == (5, 0.5, 15.0, 2.0)


def test_conservative_is_alias_of_default() -> None:
    assert CONSERVATIVE_POLICY is DEFAULT_POLICY
    assert RetryPolicy.conservative() is RetryPolicy.default()


def test_named_entry_points() -> None:
    assert RetryPolicy.default() is DEFAULT_POLICY
    assert RetryPolicy.aggressive() is AGGRESSIVE_POLICY
    assert RetryPolicy.preset("Aggressive") is AGGRESSIVE_POLICY
    assert RetryPolicy.preset("conservative") is CONSERVATIVE_POLICY

    with pytest.raises(ValueError, match="Unknown retry preset"):
        RetryPolicy.preset("reckless")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"initial_delay": -0.1},
        {"initial_delay": 5.0, "max_delay": 1.0},
        {"multiplier": 0.5},
        {"jitter": True},
    ],
)
def test_invalid_policies_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(**kwargs)


def test_policy_is_immutable_and_hashable() -> None:
    with pytest.raises(ValidationError):
        DEFAULT_POLICY.max_attempts = 10  # type: ignore[misc]
    assert {DEFAULT_POLICY, RetryPolicy()} == {DEFAULT_POLICY}


def test_delay_after_grows_and_caps() -> None:
    policy = RetryPolicy(initial_delay=1.0, max_delay=5.0, multiplier=3.0)

    assert policy.delay_after(1.0) == 3.0
    assert policy.delay_after(3.0) == 5.0
    assert policy.delay_after(5.0) == 5.0


def test_from_settings() -> None:
    policy = RetryPolicy.from_settings(RetrySettings(max_attempts=7, initial_delay=0.25, max_delay=4.0, multiplier=1.5))

    assert policy == RetryPolicy(max_attempts=7, initial_delay=0.25, max_delay=4.0, multiplier=1.5)


# ═════════════════════════════════════════════════════════════════════════════
# Backoff
# ═════════════════════════════════════════════════════════════════════════════


def test_backoffs_satisfy_protocol() -> None:
    assert isinstance(JitteredBackoff(), Backoff)
    assert isinstance(NoJitterBackoff(), Backoff)


@pytest.mark.parametrize("policy", [DEFAULT_POLICY, AGGRESSIVE_POLICY, RetryPolicy(initial_delay=0.0, max_delay=0.0)])
def test_jittered_delay_within_bounds(policy: RetryPolicy) -> None:
    backoff = JitteredBackoff(rng=random.Random(1234))
    current = policy.initial_delay

    for _ in range(200):
        delay = backoff.next_delay(current, policy)
        assert 0.0 <= delay <= policy.max_delay
        assert delay <= current * 1.2 + 1e-9
        assert delay >= min(current * 0.8, policy.max_delay) - 1e-9
        current = policy.delay_after(current)


@pytest.mark.parametrize("factor", [0.8, 1.2])
def test_jitter_extremes_respect_cap(factor: float) -> None:
    backoff = JitteredBackoff(low=factor, high=factor)
    policy = RetryPolicy(initial_delay=1.0, max_delay=10.0)

    assert backoff.next_delay(1.0, policy) == pytest.approx(factor)
    assert backoff.next_delay(10.0, policy) == pytest.approx(min(10.0 * factor, 10.0))


def test_jitter_applies_to_current_delay_not_grown_delay() -> None:
    backoff = JitteredBackoff(low=1.0, high=1.0)
    assert backoff.next_delay(2.0, RetryPolicy(multiplier=4.0, max_delay=100.0)) == 2.0


def test_seeded_jitter_is_reproducible() -> None:
    a = JitteredBackoff(rng=random.Random(7))
    b = JitteredBackoff(rng=random.Random(7))

    assert [a.next_delay(1.0, DEFAULT_POLICY) for _ in range(5)] == [b.next_delay(1.0, DEFAULT_POLICY) for _ in range(5)]


@pytest.mark.parametrize(("low", "high"), [(-0.1, 1.0), (1.2, 0.8)])
def test_invalid_jitter_bounds(low: float, high: float) -> None:
    with pytest.raises(ValueError, match="Invalid jitter bounds"):
        JitteredBackoff(low=low, high=high)


def test_no_jitter_backoff_caps() -> None:
    assert NoJitterBackoff().next_delay(50.0, DEFAULT_POLICY) == 10.0
    assert NoJitterBackoff().next_delay(0.3, DEFAULT_POLICY) == 0.3
