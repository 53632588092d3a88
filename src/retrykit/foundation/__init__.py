"""Foundation - Core building blocks for retrykit.

Contains: structured errors, outcome values, config.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "OperationError", "OperationException", "ErrorCodeValue", "error_from_exception",
    "ErrorDomain", "ConnectivityCode", "ServiceCode", "TransportSignal",
    "Result", "Ok", "Err", "RetryOutcome",
    # Config
    "RetrykitSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("OperationError", "OperationException", "ErrorCodeValue", "error_from_exception",
                "ErrorDomain", "ConnectivityCode", "ServiceCode", "TransportSignal",
                "Result", "Ok", "Err", "RetryOutcome"):
        from . import errors
        return getattr(errors, name)

    if name in ("RetrykitSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
