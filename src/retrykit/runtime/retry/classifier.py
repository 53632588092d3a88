"""Error classification for retry decisions.

Maps a structured error (domain + code) to an ErrorClass. Classification is a
pure table lookup with no I/O and no state. The default table retries only
codes that describe a transient condition and fails fast on anything unfamiliar.

Example:
    >>> from retrykit.foundation.errors import ConnectivityCode, OperationError
    >>> DEFAULT_CLASSIFIER.classify(OperationError.create("connectivity", ConnectivityCode.TIMED_OUT))
    <ErrorClass.TRANSIENT_RETRYABLE: 'transient_retryable'>
    >>> # Register a new domain without touching the coordinator
    >>> classifier = DEFAULT_CLASSIFIER.extend(DomainRule(domains=frozenset({"payments"}), transient=frozenset({429})))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from retrykit.foundation.errors import (
    ConnectivityCode,
    ErrorCodeValue,
    ErrorDomain,
    OperationError,
    ServiceCode,
    TransportSignal,
    error_from_exception,
)


class ErrorClass(StrEnum):
    """Retry eligibility of an error."""
    TRANSIENT_RETRYABLE = "transient_retryable"
    NON_RETRYABLE = "non_retryable"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        """Only transient errors are retried; UNKNOWN fails fast."""
        return self is ErrorClass.TRANSIENT_RETRYABLE


def _codes(*codes: ErrorCodeValue) -> frozenset[ErrorCodeValue]:
    """Normalize enum members to plain values so lookups match OperationError.code."""
    return frozenset(c.value if isinstance(c, (ConnectivityCode, ServiceCode, TransportSignal)) else c for c in codes)


@dataclass(frozen=True, slots=True)
class DomainRule:
    """Classification rule for a family of error domains.

    Attributes:
        domains: Domain tags this rule matches (case-insensitive)
        transient: Codes classified TRANSIENT_RETRYABLE
        fatal: Codes explicitly NON_RETRYABLE, checked before transient
        fallback: Class for codes in neither set
    """

    domains: frozenset[str]
    transient: frozenset[ErrorCodeValue] = frozenset()
    fatal: frozenset[ErrorCodeValue] = frozenset()
    fallback: ErrorClass = ErrorClass.NON_RETRYABLE

    def __post_init__(self) -> None:
        object.__setattr__(self, "domains", frozenset(d.lower() for d in self.domains))
        object.__setattr__(self, "transient", _codes(*self.transient))
        object.__setattr__(self, "fatal", _codes(*self.fatal))

    def matches(self, domain: str) -> bool:
        return domain.lower() in self.domains

    def classify(self, code: ErrorCodeValue) -> ErrorClass:
        if code in self.fatal:
            return ErrorClass.NON_RETRYABLE
        if code in self.transient:
            return ErrorClass.TRANSIENT_RETRYABLE
        return self.fallback


CONNECTIVITY_RULE = DomainRule(
    domains=frozenset({ErrorDomain.CONNECTIVITY}),
    transient=_codes(
        ConnectivityCode.TIMED_OUT,
        ConnectivityCode.CANNOT_FIND_HOST,
        ConnectivityCode.CANNOT_CONNECT_TO_HOST,
        ConnectivityCode.NETWORK_CONNECTION_LOST,
        ConnectivityCode.DNS_LOOKUP_FAILED,
        ConnectivityCode.RESOURCE_UNAVAILABLE,
        ConnectivityCode.SECURE_CONNECTION_FAILED,
        ConnectivityCode.SERVER_CERTIFICATE_HAS_BAD_DATE,
        ConnectivityCode.SERVER_CERTIFICATE_UNTRUSTED,
    ),
    # No network path at all: retrying cannot help
    fatal=_codes(ConnectivityCode.NOT_CONNECTED_TO_INTERNET),
)

SERVICE_RULE = DomainRule(
    domains=frozenset({ErrorDomain.SERVICE, ErrorDomain.STORAGE, ErrorDomain.DATABASE}),
    transient=_codes(
        ServiceCode.UNAVAILABLE,
        ServiceCode.DEADLINE_EXCEEDED,
        ServiceCode.ABORTED,
        ServiceCode.INTERNAL,
        ServiceCode.UNKNOWN,
    ),
    # Upstream already spent its retry budget
    fatal=_codes(ServiceCode.RETRY_LIMIT_EXCEEDED),
)

TRANSPORT_RULE = DomainRule(
    domains=frozenset({ErrorDomain.TRANSPORT}),
    transient=_codes(TransportSignal.TIMED_OUT, TransportSignal.HOST_UNREACHABLE, TransportSignal.CONNECTION_LOST),
)


@dataclass(frozen=True, slots=True)
class ErrorClassifier:
    """Ordered, immutable set of DomainRules. First matching rule wins.

    Errors in a domain no rule covers classify as UNKNOWN.
    """

    rules: tuple[DomainRule, ...] = ()
    _index: dict[str, DomainRule] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, DomainRule] = {}
        for rule in self.rules:
            for domain in rule.domains:
                index.setdefault(domain, rule)
        object.__setattr__(self, "_index", index)

    def rule_for(self, domain: str) -> DomainRule | None:
        return self._index.get(domain.lower())

    def classify(self, error: OperationError | BaseException) -> ErrorClass:
        """Classify an error. Exceptions are normalized via error_from_exception."""
        if not isinstance(error, OperationError):
            error = error_from_exception(error)
        if (rule := self.rule_for(error.domain)) is None:
            return ErrorClass.UNKNOWN
        return rule.classify(error.code)

    def is_retryable(self, error: OperationError | BaseException) -> bool:
        return self.classify(error).retryable

    def extend(self, *rules: DomainRule) -> ErrorClassifier:
        """New classifier where `rules` take precedence over the existing ones."""
        return ErrorClassifier((*rules, *self.rules))


DEFAULT_CLASSIFIER = ErrorClassifier((CONNECTIVITY_RULE, SERVICE_RULE, TRANSPORT_RULE))
