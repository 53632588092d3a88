"""Observer hooks for the retry loop.

Observers receive attempt lifecycle events from RetryCoordinator. They are
purely informational: hooks are synchronous, their return values are ignored,
and an observer that raises is logged and skipped without affecting the outcome.

Example:
    >>> coordinator = RetryCoordinator(observer=CompositeObserver((LoggingObserver(), metrics_observer)))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from retrykit.foundation.errors import error_from_exception

from .logging import BoundLogger, get_logger

if TYPE_CHECKING:
    from retrykit.runtime.retry.classifier import ErrorClass
    from retrykit.runtime.retry.coordinator import AttemptState

logger = logging.getLogger("retrykit.retry")


@runtime_checkable
class RetryObserver(Protocol):
    """Receives retry loop events. All methods must return quickly."""

    def on_attempt_start(self, state: AttemptState) -> None: ...
    def on_attempt_failure(self, state: AttemptState, error: BaseException, error_class: ErrorClass) -> None: ...
    def on_retry_scheduled(self, state: AttemptState, delay: float) -> None: ...
    def on_attempt_success(self, state: AttemptState, value: object) -> None: ...
    def on_exhausted(self, state: AttemptState, error: BaseException) -> None: ...


class NullObserver:
    """Observer that ignores every event."""

    __slots__ = ()

    def on_attempt_start(self, state: AttemptState) -> None: pass
    def on_attempt_failure(self, state: AttemptState, error: BaseException, error_class: ErrorClass) -> None: pass
    def on_retry_scheduled(self, state: AttemptState, delay: float) -> None: pass
    def on_attempt_success(self, state: AttemptState, value: object) -> None: pass
    def on_exhausted(self, state: AttemptState, error: BaseException) -> None: pass


@dataclass(slots=True)
class LoggingObserver:
    """Writes retry events through the structured logger.

    Successes on the first attempt are logged at debug; a success after retries,
    each failure, and exhaustion are logged at info/warning/error.
    """

    log: BoundLogger = field(default_factory=lambda: get_logger("retrykit.retry"))

    def _bound(self, state: AttemptState) -> BoundLogger:
        ctx = {"attempt": state.attempt, "max_attempts": state.max_attempts}
        if state.operation:
            ctx["operation"] = state.operation
        return self.log.bind(**ctx)

    def on_attempt_start(self, state: AttemptState) -> None:
        self._bound(state).debug("attempt started")

    def on_attempt_failure(self, state: AttemptState, error: BaseException, error_class: ErrorClass) -> None:
        op_error = error_from_exception(error)
        self._bound(state).warning(
            "attempt failed", domain=op_error.domain, code=op_error.code,
            classification=error_class.value, error=str(error),
        )

    def on_retry_scheduled(self, state: AttemptState, delay: float) -> None:
        self._bound(state).info("retry scheduled", delay=round(delay, 3), remaining=state.remaining)

    def on_attempt_success(self, state: AttemptState, value: object) -> None:
        if state.attempt > 1:
            self._bound(state).info("operation succeeded after retries")
        else:
            self._bound(state).debug("operation succeeded")

    def on_exhausted(self, state: AttemptState, error: BaseException) -> None:
        self._bound(state).error("retry attempts exhausted", error=str(error))


@dataclass(frozen=True, slots=True)
class CompositeObserver:
    """Fans each event out to several observers, in order.

    A raising observer is logged and skipped; the observers after it still see the event.
    """

    observers: tuple[RetryObserver, ...] = ()

    def _fan_out(self, hook: str, *args: object) -> None:
        for o in self.observers:
            try:
                getattr(o, hook)(*args)
            except Exception:
                logger.exception("Retry observer %s failed in %s", type(o).__name__, hook)

    def on_attempt_start(self, state: AttemptState) -> None:
        self._fan_out("on_attempt_start", state)

    def on_attempt_failure(self, state: AttemptState, error: BaseException, error_class: ErrorClass) -> None:
        self._fan_out("on_attempt_failure", state, error, error_class)

    def on_retry_scheduled(self, state: AttemptState, delay: float) -> None:
        self._fan_out("on_retry_scheduled", state, delay)

    def on_attempt_success(self, state: AttemptState, value: object) -> None:
        self._fan_out("on_attempt_success", state, value)

    def on_exhausted(self, state: AttemptState, error: BaseException) -> None:
        self._fan_out("on_exhausted", state, error)
