"""Observability: retry observer hooks and structured logging."""

from .logging import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
)
from .observer import CompositeObserver, LoggingObserver, NullObserver, RetryObserver

__all__ = [
    # Observers
    "RetryObserver", "NullObserver", "LoggingObserver", "CompositeObserver",
    # Logging
    "BoundLogger", "LogEntry", "LogRenderer", "ConsoleRenderer", "JsonRenderer", "NoOpRenderer",
    "configure_logging", "get_logger",
]
