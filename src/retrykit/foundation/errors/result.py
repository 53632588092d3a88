"""Result type for retry outcomes.

A discriminated union of success (Ok) or failure (Err). RetryOutcome[T] is
Result[T, BaseException]: the operation's value, or the last error seen.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")

_OK = True
_ERR = False


class Result(Generic[T, E]):
    """Success or failure, never both.

    Examples:
        >>> Ok(42).map(lambda x: x * 2).unwrap()
        84
        >>> Err(TimeoutError("slow")).is_err()
        True
    """

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | E, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def unwrap(self) -> T:
        """Extract Ok value. Raises RuntimeError on Err."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap() on Err: {self._value!r}")

    def unwrap_err(self) -> E:
        """Extract Err value. Raises RuntimeError on Ok."""
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap_err() on Ok: {self._value!r}")

    def unwrap_or(self, default: T) -> T:
        return self._value if self._is_ok else default  # type: ignore[return-value]

    def ok(self) -> T | None:
        return self._value if self._is_ok else None  # type: ignore[return-value]

    def err(self) -> E | None:
        return self._value if not self._is_ok else None  # type: ignore[return-value]

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Apply f to Ok value."""
        return Result(f(self._value), _OK) if self._is_ok else Result(self._value, _ERR)  # type: ignore[arg-type]

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Apply f to Err value."""
        return Result(f(self._value), _ERR) if not self._is_ok else Result(self._value, _OK)  # type: ignore[arg-type]

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Exhaustive pattern match. Forces handling both Ok and Err."""
        return ok(self._value) if self._is_ok else err(self._value)  # type: ignore[arg-type]

    def raise_or_unwrap(self) -> T:
        """Return the Ok value or re-raise the Err exception as-is."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        if isinstance(self._value, BaseException):
            raise self._value
        raise RuntimeError(f"raise_or_unwrap() on non-exception Err: {self._value!r}")

    __bool__ = lambda self: self._is_ok  # noqa: E731
    __repr__ = lambda self: f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"  # noqa: E731
    __str__ = __repr__

    def __hash__(self) -> int:
        return hash((self._is_ok, id(self._value) if isinstance(self._value, BaseException) else self._value))

    def __eq__(self, other: object) -> bool:
        return self._is_ok == other._is_ok and self._value == other._value if isinstance(other, Result) else NotImplemented

    def __iter__(self) -> Iterator[T]:
        """Yields the value if Ok, nothing if Err."""
        if self._is_ok:
            yield self._value  # type: ignore[misc]


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    """Construct Ok variant (success)."""
    return Result(value, _OK)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    """Construct Err variant (failure)."""
    return Result(error, _ERR)


# Generic alias: RetryOutcome[int] is Result[int, BaseException]
RetryOutcome = Result[T, BaseException]
