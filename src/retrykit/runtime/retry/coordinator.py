"""Retry coordinator: the attempt loop.

Runs a fallible async operation under a RetryPolicy. Each failure is classified;
transient failures are retried after a jittered, capped, exponentially growing
delay until the attempt budget is spent. The outcome is always the operation's
value or the most recent error, re-raised unchanged.

Example:
    >>> coordinator = RetryCoordinator(observer=LoggingObserver())
    >>> profile = await coordinator.run(AGGRESSIVE_POLICY, lambda: client.fetch_profile(user_id))
    >>>
    >>> # Outcome value instead of raising
    >>> outcome = await coordinator.run_result(DEFAULT_POLICY, save_avatar)
    >>> if outcome.is_err():
    ...     show_error(outcome.unwrap_err())
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar, Union

from retrykit.foundation.errors import Err, Ok, RetryOutcome
from retrykit.runtime.observability import LoggingObserver, NullObserver, RetryObserver, configure_logging

from .backoff import Backoff, JitteredBackoff
from .classifier import DEFAULT_CLASSIFIER, ErrorClassifier
from .policy import AGGRESSIVE_POLICY, CONSERVATIVE_POLICY, DEFAULT_POLICY, RetryPolicy

if TYPE_CHECKING:
    from retrykit.foundation.config import RetrykitSettings

T = TypeVar("T")

Operation = Callable[[], Union[Awaitable[T], T]]
OutcomeCallback = Callable[[RetryOutcome[T]], object]
Sleep = Callable[[float], Awaitable[object]]

logger = logging.getLogger("retrykit.retry")


@dataclass(frozen=True, slots=True)
class AttemptState:
    """Progress of one run() invocation. Never shared between invocations.

    Attributes:
        attempt: Current attempt, 1-based
        max_attempts: Attempt budget from the policy
        current_delay: Base delay for the next retry (before jitter)
        last_error: Most recent failure, if any
        operation: Optional label for observability
    """

    attempt: int
    max_attempts: int
    current_delay: float
    last_error: BaseException | None = None
    operation: str | None = None

    @property
    def remaining(self) -> int:
        return self.max_attempts - self.attempt

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    def failed(self, error: BaseException) -> AttemptState:
        return replace(self, last_error=error)

    def advance(self, next_delay: float) -> AttemptState:
        return replace(self, attempt=self.attempt + 1, current_delay=next_delay)


class RetryCoordinator:
    """Re-executes operations on transient failure.

    Stateless apart from its injected collaborators, so one instance can serve
    any number of concurrent runs.

    Args:
        classifier: Maps failures to ErrorClass (default: DEFAULT_CLASSIFIER)
        backoff: Computes the concrete delay (default: JitteredBackoff 0.8-1.2)
        observer: Receives attempt events (default: NullObserver)
        sleep: Suspension primitive; must honour task cancellation (default: asyncio.sleep)
        default_policy: Policy used when run() is given None
    """

    __slots__ = ("_classifier", "_backoff", "_observer", "_sleep", "_default_policy")

    def __init__(
        self,
        classifier: ErrorClassifier | None = None,
        backoff: Backoff | None = None,
        observer: RetryObserver | None = None,
        sleep: Sleep = asyncio.sleep,
        default_policy: RetryPolicy = DEFAULT_POLICY,
    ) -> None:
        self._classifier = classifier if classifier is not None else DEFAULT_CLASSIFIER
        self._backoff = backoff if backoff is not None else JitteredBackoff()
        self._observer = observer if observer is not None else NullObserver()
        self._sleep = sleep
        self._default_policy = default_policy

    @classmethod
    def from_settings(cls, settings: RetrykitSettings | None = None, **overrides: object) -> RetryCoordinator:
        """Build a coordinator from environment configuration.

        Applies the logging settings (RETRYKIT_LOG_FORMAT, RETRYKIT_LOG_LEVEL) through
        configure_logging() before building the observer, so LoggingObserver output
        follows them.
        """
        from retrykit.foundation.config import get_settings
        settings = settings or get_settings()
        configure_logging(settings.logging.format, settings.logging.level)
        retry = settings.retry
        kwargs: dict[str, object] = {
            "backoff": JitteredBackoff(low=retry.jitter_low, high=retry.jitter_high),
            "observer": LoggingObserver() if retry.log_attempts else NullObserver(),
            "default_policy": RetryPolicy.from_settings(retry),
        }
        return cls(**{**kwargs, **overrides})  # type: ignore[arg-type]

    @property
    def classifier(self) -> ErrorClassifier:
        return self._classifier

    @property
    def default_policy(self) -> RetryPolicy:
        return self._default_policy

    # ─── Core loop ────────────────────────────────────────────────────

    async def run(self, policy: RetryPolicy | None, operation: Operation[T], *, name: str | None = None) -> T:
        """Run `operation` until it succeeds, fails fatally, or the budget is spent.

        Args:
            policy: Retry budget and delay envelope (None = coordinator default)
            operation: Zero-argument callable returning an awaitable (or a plain value)
            name: Optional label passed to observers

        Returns:
            The operation's value

        Raises:
            The last exception raised by `operation`, unchanged.
            asyncio.CancelledError if the calling task is cancelled.
        """
        if policy is None:
            policy = self._default_policy
        state = AttemptState(attempt=1, max_attempts=policy.max_attempts,
                             current_delay=policy.initial_delay, operation=name)

        while True:
            self._notify("on_attempt_start", state)
            try:
                value = operation()
                if inspect.isawaitable(value):
                    value = await value
            except Exception as exc:
                state = state.failed(exc)
                error_class = self._classifier.classify(exc)
                self._notify("on_attempt_failure", state, exc, error_class)
                if not error_class.retryable:
                    raise
                if state.exhausted:
                    self._notify("on_exhausted", state, exc)
                    raise
                delay = min(max(self._backoff.next_delay(state.current_delay, policy), 0.0), policy.max_delay)
            else:
                self._notify("on_attempt_success", state, value)
                return value

            self._notify("on_retry_scheduled", state, delay)
            await self._sleep(delay)
            state = state.advance(policy.delay_after(state.current_delay))

    async def run_result(
        self, policy: RetryPolicy | None, operation: Operation[T], *, name: str | None = None,
    ) -> RetryOutcome[T]:
        """Like run(), but returns Ok(value) or Err(last_error). Cancellation still propagates."""
        try:
            return Ok(await self.run(policy, operation, name=name))
        except Exception as exc:
            return Err(exc)

    def run_with_callback(
        self,
        policy: RetryPolicy | None,
        operation: Operation[T],
        callback: OutcomeCallback[T],
        *,
        name: str | None = None,
    ) -> asyncio.Task[RetryOutcome[T]]:
        """Schedule the retry loop on the running loop and report through `callback`.

        The callback is invoked exactly once with Ok(value) or Err(error); a
        cancelled task reports Err(CancelledError). Must be called with an event
        loop running in the current thread.
        """
        task = asyncio.get_running_loop().create_task(
            self.run_result(policy, operation, name=name), name=f"retry:{name}" if name else None,
        )

        def _deliver(t: asyncio.Task[RetryOutcome[T]]) -> None:
            if t.cancelled():
                callback(Err(asyncio.CancelledError()))
            elif (exc := t.exception()) is not None:
                callback(Err(exc))
            else:
                callback(t.result())

        task.add_done_callback(_deliver)
        return task

    def run_blocking(self, policy: RetryPolicy | None, operation: Operation[T], *, name: str | None = None) -> T:
        """Synchronous form of run() for callers without an event loop of their own.

        Drives the retry loop on a fresh event loop via asyncio.run(). Backoff sleeps
        block the calling thread, so calling this from a running event loop raises
        RuntimeError instead of stalling the loop; await run() there.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.run(policy, operation, name=name))
        raise RuntimeError("run_blocking() called from a running event loop; use 'await coordinator.run(...)'")

    # ─── Category conveniences ───────────────────────────────────────

    async def retry_network_operation(self, operation: Operation[T], *, name: str | None = None) -> T:
        return await self.run(AGGRESSIVE_POLICY, operation, name=name)

    async def retry_database_operation(self, operation: Operation[T], *, name: str | None = None) -> T:
        return await self.run(DEFAULT_POLICY, operation, name=name)

    async def retry_upload_operation(self, operation: Operation[T], *, name: str | None = None) -> T:
        return await self.run(CONSERVATIVE_POLICY, operation, name=name)

    # ─── Helpers ──────────────────────────────────────────────────────

    def _notify(self, hook: str, *args: object) -> None:
        """Invoke an observer hook; observer failures never reach the retry loop."""
        try:
            getattr(self._observer, hook)(*args)
        except Exception:
            logger.exception("Retry observer hook %s failed", hook)

    def __repr__(self) -> str:
        return f"RetryCoordinator(backoff={self._backoff!r}, observer={type(self._observer).__name__})"
