"""retrykit - Retry-with-backoff coordination for fallible async operations.

Re-executes an operation on transient failure using exponential backoff with
jitter, a bounded attempt budget, and a classification step that separates
retryable errors from fatal ones. The operation is opaque: a network call,
a storage write, a database read.

Quick Start:
    >>> from retrykit import RetryCoordinator, AGGRESSIVE_POLICY
    >>>
    >>> coordinator = RetryCoordinator()
    >>> profile = await coordinator.run(AGGRESSIVE_POLICY, lambda: client.fetch_profile(uid))

Structured Errors (raise at the failure boundary):
    >>> from retrykit import OperationException, ServiceCode
    >>> raise OperationException.create("storage", ServiceCode.UNAVAILABLE, "bucket offline")

Observability:
    >>> from retrykit import LoggingObserver, configure_logging
    >>> configure_logging(format="json")
    >>> coordinator = RetryCoordinator(observer=LoggingObserver())

Callback and blocking forms:
    >>> coordinator.run_with_callback(DEFAULT_POLICY, save, lambda outcome: print(outcome))
    >>> coordinator.run_blocking(DEFAULT_POLICY, save)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors & outcomes
from .foundation.errors import (
    ConnectivityCode,
    Err,
    ErrorDomain,
    Ok,
    OperationError,
    OperationException,
    Result,
    RetryOutcome,
    ServiceCode,
    TransportSignal,
    error_from_exception,
)

# Config
from .foundation.config import RetrykitSettings, clear_settings_cache, get_settings

# Retry
from .runtime.retry import (
    AGGRESSIVE_POLICY,
    CONSERVATIVE_POLICY,
    DEFAULT_CLASSIFIER,
    DEFAULT_POLICY,
    AttemptState,
    Backoff,
    DomainRule,
    ErrorClass,
    ErrorClassifier,
    JitteredBackoff,
    NoJitterBackoff,
    RetryCoordinator,
    RetryPolicy,
    Retryable,
)

# Observability
from .runtime.observability import (
    CompositeObserver,
    LoggingObserver,
    NullObserver,
    RetryObserver,
    configure_logging,
    get_logger,
)

__all__ = [
    # Version
    "__version__",
    # Errors & outcomes
    "OperationError", "OperationException", "error_from_exception",
    "ErrorDomain", "ConnectivityCode", "ServiceCode", "TransportSignal",
    "Result", "Ok", "Err", "RetryOutcome",
    # Config
    "RetrykitSettings", "get_settings", "clear_settings_cache",
    # Retry
    "RetryPolicy", "DEFAULT_POLICY", "AGGRESSIVE_POLICY", "CONSERVATIVE_POLICY",
    "Backoff", "JitteredBackoff", "NoJitterBackoff",
    "ErrorClass", "ErrorClassifier", "DomainRule", "DEFAULT_CLASSIFIER",
    "RetryCoordinator", "AttemptState", "Retryable",
    # Observability
    "RetryObserver", "NullObserver", "LoggingObserver", "CompositeObserver",
    "configure_logging", "get_logger",
]
