"""Structured errors for retried operations.

Operations report failures as OperationError values (domain tag + code + message)
so retry decisions never depend on runtime introspection of arbitrary exceptions.
Exceptions that do not carry one are mapped at the boundary by error_from_exception.
"""

from __future__ import annotations

import errno
import socket
import ssl
from enum import IntEnum, StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorDomain(StrEnum):
    """Well-known error domains. Custom domains are plain strings."""
    CONNECTIVITY = "connectivity"
    SERVICE = "service"
    STORAGE = "storage"
    DATABASE = "database"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ConnectivityCode(IntEnum):
    """Connection-layer failure codes."""
    TIMED_OUT = -1001
    CANNOT_FIND_HOST = -1003
    CANNOT_CONNECT_TO_HOST = -1004
    NETWORK_CONNECTION_LOST = -1005
    DNS_LOOKUP_FAILED = -1006
    RESOURCE_UNAVAILABLE = -1008
    NOT_CONNECTED_TO_INTERNET = -1009
    SECURE_CONNECTION_FAILED = -1200
    SERVER_CERTIFICATE_HAS_BAD_DATE = -1201
    SERVER_CERTIFICATE_UNTRUSTED = -1202


class ServiceCode(IntEnum):
    """Managed backend (cloud, storage, database) status codes."""
    CANCELLED = 1
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    ABORTED = 10
    INTERNAL = 13
    UNAVAILABLE = 14
    UNAUTHENTICATED = 16
    UNKNOWN = -13000
    RETRY_LIMIT_EXCEEDED = -13010


class TransportSignal(StrEnum):
    """Symbolic codes for generic transport failures."""
    TIMED_OUT = "timed_out"
    HOST_UNREACHABLE = "host_unreachable"
    CONNECTION_LOST = "connection_lost"


ErrorCodeValue = int | str


class OperationError(BaseModel):
    """Structured failure of an operation.

    Attributes:
        domain: Category tag of the failing layer (see ErrorDomain)
        code: Numeric or symbolic code within the domain
        message: Human-readable description
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="forbid",
        revalidate_instances="never",
        json_schema_extra={
            "title": "Operation Error",
            "examples": [{"domain": "connectivity", "code": -1001, "message": "The request timed out."}],
        },
    )

    domain: Annotated[str, Field(min_length=1, description="Category tag of the failing layer")]
    code: ErrorCodeValue = Field(description="Numeric or symbolic code within the domain")
    message: str = Field(default="", description="Human-readable error message")

    @field_validator("domain", mode="before")
    @classmethod
    def _normalize_domain(cls, v: str) -> str:
        """Domains compare case-insensitively."""
        return v.lower() if isinstance(v, str) else v

    @field_validator("code", mode="before")
    @classmethod
    def _plain_code(cls, v: ErrorCodeValue) -> ErrorCodeValue:
        """Store enum members as their plain int/str value."""
        if isinstance(v, IntEnum):
            return int(v)
        return str(v) if isinstance(v, StrEnum) else v

    @computed_field
    @property
    def key(self) -> str:
        """Stable `domain:code` identifier for logs and metrics."""
        return f"{self.domain}:{self.code}"

    @classmethod
    def create(cls, domain: str, code: ErrorCodeValue, message: str = "") -> Self:
        """Factory method for construction."""
        return cls(domain=domain, code=code, message=message)

    def __str__(self) -> str:
        return f"[{self.key}] {self.message}" if self.message else f"[{self.key}]"


class OperationException(Exception):
    """Exception wrapping an OperationError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: OperationError) -> None:
        self.error = error
        super().__init__(error.message or error.key)

    @classmethod
    def create(cls, domain: str, code: ErrorCodeValue, message: str = "") -> Self:
        """Create from domain/code/message."""
        return cls(OperationError.create(domain, code, message))

    @property
    def domain(self) -> str:
        return self.error.domain

    @property
    def code(self) -> ErrorCodeValue:
        return self.error.code


# ─────────────────────────────────────────────────────────────────────────────
# Boundary mapping: built-in exceptions → OperationError
# ─────────────────────────────────────────────────────────────────────────────

_ERRNO_CODES: dict[int, ConnectivityCode] = {
    errno.ENETUNREACH: ConnectivityCode.NOT_CONNECTED_TO_INTERNET,
    errno.ENETDOWN: ConnectivityCode.NOT_CONNECTED_TO_INTERNET,
    errno.EHOSTUNREACH: ConnectivityCode.CANNOT_FIND_HOST,
    errno.EAGAIN: ConnectivityCode.RESOURCE_UNAVAILABLE,
}

# Ordered by exception specificity (subclasses before bases)
_TYPE_CODES: tuple[tuple[type[BaseException], ConnectivityCode], ...] = (
    (TimeoutError, ConnectivityCode.TIMED_OUT),
    (socket.gaierror, ConnectivityCode.DNS_LOOKUP_FAILED),
    (ssl.SSLCertVerificationError, ConnectivityCode.SERVER_CERTIFICATE_UNTRUSTED),
    (ssl.SSLError, ConnectivityCode.SECURE_CONNECTION_FAILED),
    (ConnectionRefusedError, ConnectivityCode.CANNOT_CONNECT_TO_HOST),
    (ConnectionResetError, ConnectivityCode.NETWORK_CONNECTION_LOST),
    (ConnectionAbortedError, ConnectivityCode.NETWORK_CONNECTION_LOST),
    (BrokenPipeError, ConnectivityCode.NETWORK_CONNECTION_LOST),
)

# Flattened pattern -> signal mapping, ordered for priority
_PATTERN_SIGNALS: dict[str, TransportSignal] = {
    "timed out": TransportSignal.TIMED_OUT,
    "timeout": TransportSignal.TIMED_OUT,
    "unreachable": TransportSignal.HOST_UNREACHABLE,
    "cannot find host": TransportSignal.HOST_UNREACHABLE,
    "cannot connect": TransportSignal.HOST_UNREACHABLE,
    "connection lost": TransportSignal.CONNECTION_LOST,
    "connection reset": TransportSignal.CONNECTION_LOST,
    "connection closed": TransportSignal.CONNECTION_LOST,
}
_PATTERN_KEYS = tuple(_PATTERN_SIGNALS.keys())

# Class-name fragments of third-party transport errors (httpx.ConnectTimeout, aiohttp.ServerDisconnectedError)
_TRANSPORT_NAME_HINTS = ("timeout", "connect", "network", "transport", "socket", "unreachable", "url", "http", "proxy")


@lru_cache(maxsize=256)
def _signal_cached(exc_key: str) -> TransportSignal | None:
    """Cached transport signal lookup by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_SIGNALS[pattern]
    return None


@lru_cache(maxsize=256)
def _transport_named(type_name: str) -> bool:
    lowered = type_name.lower()
    return any(hint in lowered for hint in _TRANSPORT_NAME_HINTS)


def _is_transport_family(exc: BaseException) -> bool:
    """Only OS-level and transport-named exceptions may carry a transport signal in their message."""
    return isinstance(exc, OSError) or _transport_named(type(exc).__name__)


def _connectivity_code(exc: BaseException) -> ConnectivityCode | None:
    for exc_type, code in _TYPE_CODES:
        if isinstance(exc, exc_type):
            return code
    if isinstance(exc, OSError) and exc.errno is not None:
        return _ERRNO_CODES.get(exc.errno)
    return None


def error_from_exception(exc: BaseException) -> OperationError:
    """Map any exception to a structured OperationError.

    OperationException passes its error through unchanged; known socket/SSL/OS
    failures map to connectivity codes; remaining OSErrors and transport-named
    exceptions whose name or message carries a timeout/unreachable/connection-lost
    signal map to the transport domain. Everything else, including a KeyError or
    ValueError that merely mentions "timeout", lands in the "unknown" domain keyed
    by type name.
    """
    if isinstance(exc, OperationException):
        return exc.error
    message = str(exc) or type(exc).__name__
    if (code := _connectivity_code(exc)) is not None:
        return OperationError.model_construct(domain=ErrorDomain.CONNECTIVITY.value, code=int(code), message=message)
    if _is_transport_family(exc) and (signal := _signal_cached(f"{type(exc).__name__} {exc}")) is not None:
        return OperationError.model_construct(domain=ErrorDomain.TRANSPORT.value, code=signal.value, message=message)
    return OperationError.model_construct(domain=ErrorDomain.UNKNOWN.value, code=type(exc).__name__, message=message)
