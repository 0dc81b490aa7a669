"""
Success/failure values used instead of exceptions throughout the decoder.
"""
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

__all__ = [
    "FailureKind",
    "Result",
    "Success",
    "Failure",
    "ResultError",
    "sequence",
]


class FailureKind(Enum):
    NOTHING_TO_DECODE = "nothing to decode"
    END_OF_INPUT = "end of input"
    UNKNOWN_MARKER = "unknown marker"
    CONSUME_MISMATCH = "consume mismatch"
    MALFORMED_INTEGER = "malformed integer"
    MISSING_TERMINATOR = "missing terminator"
    INVALID_LENGTH = "invalid length"
    NESTING_TOO_DEEP = "nesting too deep"
    TRAILING_DATA = "trailing data"
    MISSING_ATTRIBUTE = "missing attribute"
    TYPE_MISMATCH = "type mismatch"
    PORT_OVERFLOW = "port overflow"
    INTERVAL_OVERFLOW = "interval overflow"
    WRONG_SHAPE = "wrong shape"
    TRACKER_FAILURE = "tracker failure"


class ResultError(Exception):
    """Raised by unwrap() when called on a Failure."""
    def __init__(self, failure: "Failure"):
        super().__init__(str(failure))
        self.failure = failure


class Result:
    """Base class for Success and Failure."""
    __slots__ = ()

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def map(self, fn: Callable[[Any], Any]) -> "Result":
        raise NotImplementedError

    def flat_map(self, fn: Callable[[Any], "Result"]) -> "Result":
        raise NotImplementedError

    def map_failure(self, message: Union[str, Callable[[], str]],
                    kind: Optional[FailureKind] = None) -> "Result":
        """
        Wraps a failure with context. `message` may be a zero-argument callable,
        which is then only called on failure.
        """
        raise NotImplementedError

    def get_or_else(self, default):
        raise NotImplementedError

    def unwrap(self):
        raise NotImplementedError

    def fanout(self, other: Callable[[], "Result"]) -> "Result":
        """
        Pairs this value with the value of `other()`.
        `other` is only evaluated when this result is a success.
        """
        return self.flat_map(lambda first: other().map(lambda second: (first, second)))


class Success(Result):
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def map(self, fn):
        return Success(fn(self.value))

    def flat_map(self, fn):
        return fn(self.value)

    def map_failure(self, message, kind=None):
        return self

    def get_or_else(self, default):
        return self.value

    def unwrap(self):
        return self.value

    def __eq__(self, other):
        return isinstance(other, Success) and self.value == other.value

    def __hash__(self):
        return hash(("success", self.value))

    def __repr__(self):
        return f"Success({self.value!r})"


class Failure(Result):
    __slots__ = ("kind", "message", "cause", "details")

    def __init__(self, kind: FailureKind, message: str, cause: Optional["Failure"] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self.message = message
        self.cause = cause
        self.details = details or {}

    def map(self, fn):
        return self

    def flat_map(self, fn):
        return self

    def map_failure(self, message, kind=None):
        if callable(message):
            message = message()
        # the wrapped failure stays reachable through .cause
        return Failure(kind or self.kind, message, cause=self, details=self.details)

    def get_or_else(self, default):
        return default

    def unwrap(self):
        raise ResultError(self)

    def causes(self) -> Iterator["Failure"]:
        """Walks the failure chain, outermost first."""
        failure = self
        while failure is not None:
            yield failure
            failure = failure.cause

    @property
    def root_cause(self) -> "Failure":
        *_, root = self.causes()
        return root

    def __eq__(self, other):
        return (
            isinstance(other, Failure)
            and self.kind == other.kind
            and self.message == other.message
            and self.details == other.details
            and self.cause == other.cause
        )

    def __hash__(self):
        return hash((self.kind, self.message, self.cause))

    def __str__(self):
        return ": ".join(f.message for f in self.causes())

    def __repr__(self):
        if self.cause is None:
            return f"Failure({self.kind.name}, {self.message!r})"
        return f"Failure({self.kind.name}, {self.message!r}, cause={self.cause!r})"


def sequence(results: Iterable[Result]) -> Result:
    """
    Turns an iterable of results into a result of a list.
    Stops at the first failure; later items are never pulled from the iterable.
    """
    values: List[Any] = []
    for result in results:
        if isinstance(result, Failure):
            return result
        values.append(result.value)
    return Success(values)
