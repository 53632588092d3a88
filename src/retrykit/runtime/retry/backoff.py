"""Backoff delay calculation.

The coordinator grows the base delay between attempts; a Backoff only turns the
current base delay into the concrete delay to sleep, applying jitter and the
policy cap. Jitter decorrelates callers that fail at the same moment.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .policy import RetryPolicy


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation."""

    def next_delay(self, current_delay: float, policy: RetryPolicy) -> float:
        """Delay in seconds before the next attempt.

        Args:
            current_delay: Base delay for the upcoming retry
            policy: Policy supplying the delay cap

        Returns:
            Delay in seconds, within [0, policy.max_delay]
        """
        ...


@dataclass(frozen=True, slots=True)
class JitteredBackoff:
    """Multiplicative jitter with cap.

    Delay = min(current_delay * uniform(low, high), max_delay), never negative.

    Attributes:
        low: Lower jitter factor (default: 0.8)
        high: Upper jitter factor (default: 1.2)
        rng: Random source; module-level random when None
    """

    low: float = 0.8
    high: float = 1.2
    rng: random.Random | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.low < 0 or self.high < self.low:
            raise ValueError(f"Invalid jitter bounds: low={self.low}, high={self.high}")

    def jitter(self) -> float:
        return (self.rng or random).uniform(self.low, self.high)

    def next_delay(self, current_delay: float, policy: RetryPolicy) -> float:
        return min(max(current_delay * self.jitter(), 0.0), policy.max_delay)


@dataclass(frozen=True, slots=True)
class NoJitterBackoff:
    """Deterministic backoff: the capped base delay, unchanged."""

    def next_delay(self, current_delay: float, policy: RetryPolicy) -> float:
        return min(max(current_delay, 0.0), policy.max_delay)
