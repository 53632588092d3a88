"""Retry-with-backoff coordination.

Re-executes fallible async operations on transient failure, with exponential
backoff, jitter, bounded attempts, and error classification.

Example:
    >>> from retrykit.runtime.retry import RetryCoordinator, AGGRESSIVE_POLICY
    >>> coordinator = RetryCoordinator()
    >>> user = await coordinator.run(AGGRESSIVE_POLICY, lambda: api.get_user(user_id))
"""

from .backoff import Backoff, JitteredBackoff, NoJitterBackoff
from .classifier import (
    CONNECTIVITY_RULE,
    DEFAULT_CLASSIFIER,
    SERVICE_RULE,
    TRANSPORT_RULE,
    DomainRule,
    ErrorClass,
    ErrorClassifier,
)
from .coordinator import AttemptState, Operation, RetryCoordinator
from .policy import AGGRESSIVE_POLICY, CONSERVATIVE_POLICY, DEFAULT_POLICY, PRESETS, RetryPolicy
from .retryable import Retryable

__all__ = [
    # Backoff
    "Backoff", "JitteredBackoff", "NoJitterBackoff",
    # Classification
    "ErrorClass", "ErrorClassifier", "DomainRule",
    "DEFAULT_CLASSIFIER", "CONNECTIVITY_RULE", "SERVICE_RULE", "TRANSPORT_RULE",
    # Policy
    "RetryPolicy", "DEFAULT_POLICY", "AGGRESSIVE_POLICY", "CONSERVATIVE_POLICY", "PRESETS",
    # Execution
    "RetryCoordinator", "AttemptState", "Operation", "Retryable",
]
