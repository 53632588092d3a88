"""Retry policy configuration.

A RetryPolicy is an immutable value describing the retry budget and delay
envelope. Three named presets are part of the configuration surface:

    default       3 attempts, 1.0s initial, 10.0s cap, x2.0
    aggressive    5 attempts, 0.5s initial, 15.0s cap, x2.0
    conservative  alias of default
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveInt, model_validator

if TYPE_CHECKING:
    from retrykit.foundation.config import RetrySettings

PresetName = Literal["default", "aggressive", "conservative"]


class RetryPolicy(BaseModel):
    """Retry budget and delay envelope for one kind of operation.

    Attributes:
        max_attempts: Total attempts including the first (>= 1)
        initial_delay: Base delay before the first retry, in seconds
        max_delay: Cap for any delay, in seconds (>= initial_delay)
        multiplier: Growth factor applied to the base delay between attempts

    Example:
        >>> policy = RetryPolicy(max_attempts=4, initial_delay=0.25, max_delay=2.0)
        >>> policy.delay_after(0.25)
        0.5
    """

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
        json_schema_extra={
            "title": "Retry Policy",
            "description": "Retry budget and backoff envelope",
            "examples": [{"max_attempts": 3, "initial_delay": 1.0, "max_delay": 10.0, "multiplier": 2.0}],
        },
    )

    max_attempts: PositiveInt = 3
    initial_delay: NonNegativeFloat = 1.0
    max_delay: NonNegativeFloat = 10.0
    multiplier: Annotated[float, Field(ge=1.0)] = 2.0

    @model_validator(mode="after")
    def _check_envelope(self) -> RetryPolicy:
        if self.max_delay < self.initial_delay:
            raise ValueError(f"max_delay ({self.max_delay}) must be >= initial_delay ({self.initial_delay})")
        return self

    def delay_after(self, current_delay: float) -> float:
        """Base delay for the attempt following one that used `current_delay`."""
        return min(current_delay * self.multiplier, self.max_delay)

    @classmethod
    def default(cls) -> RetryPolicy:
        return DEFAULT_POLICY

    @classmethod
    def aggressive(cls) -> RetryPolicy:
        return AGGRESSIVE_POLICY

    @classmethod
    def conservative(cls) -> RetryPolicy:
        return CONSERVATIVE_POLICY

    @classmethod
    def preset(cls, name: PresetName | str) -> RetryPolicy:
        """Look up a named preset. Raises ValueError for unknown names."""
        try:
            return PRESETS[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown retry preset: {name!r}. Use one of {sorted(PRESETS)}") from None

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryPolicy:
        """Build a policy from environment configuration."""
        return cls(
            max_attempts=settings.max_attempts,
            initial_delay=settings.initial_delay,
            max_delay=settings.max_delay,
            multiplier=settings.multiplier,
        )


DEFAULT_POLICY = RetryPolicy(max_attempts=3, initial_delay=1.0, max_delay=10.0, multiplier=2.0)
AGGRESSIVE_POLICY = RetryPolicy(max_attempts=5, initial_delay=0.5, max_delay=15.0, multiplier=2.0)
# Same values as default; kept as a distinct entry point for upload-style callers
CONSERVATIVE_POLICY = DEFAULT_POLICY

PRESETS: dict[str, RetryPolicy] = {
    "default": DEFAULT_POLICY,
    "aggressive": AGGRESSIVE_POLICY,
    "conservative": CONSERVATIVE_POLICY,
}
