"""Runtime - Execution flow, control, and monitoring.

Contains: retry, observability.
"""

from __future__ import annotations

__all__ = [
    # Retry
    "Backoff", "JitteredBackoff", "NoJitterBackoff",
    "ErrorClass", "ErrorClassifier", "DomainRule", "DEFAULT_CLASSIFIER",
    "RetryPolicy", "DEFAULT_POLICY", "AGGRESSIVE_POLICY", "CONSERVATIVE_POLICY",
    "RetryCoordinator", "AttemptState", "Retryable",
    # Observability
    "RetryObserver", "NullObserver", "LoggingObserver", "CompositeObserver",
    "configure_logging", "get_logger",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("Backoff", "JitteredBackoff", "NoJitterBackoff",
                "ErrorClass", "ErrorClassifier", "DomainRule", "DEFAULT_CLASSIFIER",
                "RetryPolicy", "DEFAULT_POLICY", "AGGRESSIVE_POLICY", "CONSERVATIVE_POLICY",
                "RetryCoordinator", "AttemptState", "Retryable"):
        from . import retry
        return getattr(retry, name)

    if name in ("RetryObserver", "NullObserver", "LoggingObserver", "CompositeObserver",
                "configure_logging", "get_logger"):
        from . import observability
        return getattr(observability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
