"""Error model for retrykit.

- OperationError/OperationException: structured failure (domain + code + message)
- ErrorDomain, ConnectivityCode, ServiceCode, TransportSignal: well-known codes
- error_from_exception: boundary mapping from built-in exceptions
- Result/Ok/Err/RetryOutcome: success-or-failure outcome values
"""

from .errors import (
    ConnectivityCode,
    ErrorCodeValue,
    ErrorDomain,
    OperationError,
    OperationException,
    ServiceCode,
    TransportSignal,
    error_from_exception,
)
from .result import Err, Ok, Result, RetryOutcome

__all__ = [
    # Structured errors
    "OperationError", "OperationException", "ErrorCodeValue", "error_from_exception",
    # Codes
    "ErrorDomain", "ConnectivityCode", "ServiceCode", "TransportSignal",
    # Outcomes
    "Result", "Ok", "Err", "RetryOutcome",
]
