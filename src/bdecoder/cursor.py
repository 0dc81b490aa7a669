"""
Single-pass lookahead cursor over an in-memory byte buffer.
"""
from typing import Callable, Union

from .result import Failure, FailureKind, Result, Success

Input = Union[bytes, bytearray, memoryview, str]


class Cursor:
    """
    Reads one byte at a time from `data`.
    Every "character" handed out is a length-1 bytes object.
    """
    def __init__(self, data: Input):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self._i = 0  # cursor index

    @property
    def position(self) -> int:
        return self._i

    def has_next(self) -> bool:
        return self._i < len(self._data)

    def remaining(self) -> int:
        return len(self._data) - self._i

    def peek(self) -> Result:
        if not self.has_next():
            return self._end_of_input(1)
        return Success(self._data[self._i:self._i + 1])

    def next(self) -> Result:
        if not self.has_next():
            return self._end_of_input(1)
        ch = self._data[self._i:self._i + 1]
        self._i += 1
        return Success(ch)

    def read_while(self, predicate: Callable[[bytes], bool]) -> bytes:
        start = self._i
        while self._i < len(self._data) and predicate(self._data[self._i:self._i + 1]):
            self._i += 1
        return self._data[start:self._i]

    def consume(self, expected: bytes) -> Result:
        """Advances past `expected` only if it is the next byte."""
        def check(ch):
            if ch != expected:
                return Failure(
                    FailureKind.CONSUME_MISMATCH,
                    f"could not consume {expected!r} at index {self._i}, found {ch!r}",
                    details={"expected": expected, "found": ch, "position": self._i},
                )
            self._i += 1
            return Success(ch)

        return self.peek().flat_map(check)

    def read_exactly(self, n: int) -> Result:
        if n < 0:
            return Failure(
                FailureKind.INVALID_LENGTH,
                f"cannot read {n} byte(s) at index {self._i}",
                details={"length": n, "position": self._i},
            )
        if n > self.remaining():
            return self._end_of_input(n)
        chunk = self._data[self._i:self._i + n]
        self._i += n
        return Success(chunk)

    def read_until(self, terminator: bytes) -> Result:
        """Reads up to `terminator` and consumes it; the terminator is not returned."""
        text = self.read_while(lambda ch: ch != terminator)
        return (
            self.consume(terminator)
            .map(lambda _: text)
            .map_failure(lambda: f"failed reading until {terminator!r}")
        )

    def _end_of_input(self, wanted: int) -> Failure:
        return Failure(
            FailureKind.END_OF_INPUT,
            f"wanted {wanted} byte(s) at index {self._i}, {self.remaining()} left",
            details={"wanted": wanted, "remaining": self.remaining(), "position": self._i},
        )
