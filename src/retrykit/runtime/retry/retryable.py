"""Mixin giving service classes a perform_with_retry() helper.

Example:
    >>> class AvatarStore(Retryable):
    ...     def __init__(self, coordinator: RetryCoordinator) -> None:
    ...         self.retry_coordinator = coordinator
    ...
    ...     async def save(self, blob: bytes) -> str:
    ...         return await self.perform_with_retry(lambda: self._upload(blob), CONSERVATIVE_POLICY)
"""

from __future__ import annotations

from typing import TypeVar

from .coordinator import Operation, RetryCoordinator
from .policy import RetryPolicy

T = TypeVar("T")


class Retryable:
    """Adds perform_with_retry() using the instance's `retry_coordinator`.

    Instances without a `retry_coordinator` attribute get their own default
    coordinator on first use.
    """

    retry_coordinator: RetryCoordinator

    def _coordinator(self) -> RetryCoordinator:
        try:
            return self.retry_coordinator
        except AttributeError:
            self.retry_coordinator = RetryCoordinator()
            return self.retry_coordinator

    async def perform_with_retry(
        self, operation: Operation[T], policy: RetryPolicy | None = None, *, name: str | None = None,
    ) -> T:
        """Run `operation` under `policy` (coordinator default when None)."""
        return await self._coordinator().run(policy, operation, name=name or type(self).__name__)
