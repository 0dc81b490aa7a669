"""
Bencode decoder for BitTorrent metainfo and tracker responses.

Decoding never raises: every entry point returns a Result holding either
the decoded tree or a Failure describing what went wrong.
"""
import logging
import re

from .cursor import Cursor, Input
from .result import Failure, FailureKind, Result, Success
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString

logger = logging.getLogger(__name__)

INTEGER_MARKER = b"i"
LIST_MARKER = b"l"
DICT_MARKER = b"d"
END_MARKER = b"e"
SEPARATOR = b":"

# Python's int() also takes whitespace, "+" and "_"; Bencode does not.
_INTEGER_RE = re.compile(rb"-?[0-9]+")

# Each nesting level costs a handful of Python frames.
MAX_DEPTH = 100


def _is_digit(ch: bytes) -> bool:
    return b"0" <= ch <= b"9"


class BencodeDecoder:
    """
    Decodes one Bencoded value from the front of `data`.
    A decoder owns its cursor; use a fresh decoder for every input.
    """
    def __init__(self, data: Input):
        self.cursor = Cursor(data)
        self._depth = 0

    def decode(self) -> Result:
        """Decodes the next value, dispatching on its leading marker."""
        if not self.cursor.has_next():
            return Failure(FailureKind.NOTHING_TO_DECODE, "nothing to decode")

        if self._depth >= MAX_DEPTH:
            return Failure(
                FailureKind.NESTING_TOO_DEEP,
                f"nesting deeper than {MAX_DEPTH} levels at index {self.cursor.position}",
            )

        self._depth += 1
        try:
            return self._parse_value()
        finally:
            self._depth -= 1

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self) -> Result:
        ch = self.cursor.peek().unwrap()

        if _is_digit(ch):  # strings start with their length
            return self._parse_string()

        if ch == INTEGER_MARKER:
            return self._parse_int()

        if ch == LIST_MARKER:
            return self._parse_list()

        if ch == DICT_MARKER:
            return self._parse_dict()

        return Failure(
            FailureKind.UNKNOWN_MARKER,
            f"unknown marker {ch!r} at index {self.cursor.position}",
            details={"character": ch, "position": self.cursor.position},
        )

    def _parse_int(self) -> Result:
        start = self.cursor.position
        return (
            self.cursor.consume(INTEGER_MARKER)
            .flat_map(lambda _: self.cursor.read_until(END_MARKER))
            .flat_map(_to_integer)
            .map(BencodeInt)
            .map_failure(lambda: f"failed decoding integer at index {start}")
        )

    def _parse_string(self) -> Result:
        start = self.cursor.position
        length_text = self.cursor.read_while(_is_digit)
        return (
            self.cursor.consume(SEPARATOR)
            .flat_map(lambda _: self.cursor.read_exactly(int(length_text)))
            .map(BencodeString)
            .map_failure(lambda: f"failed decoding byte string of length {length_text.decode()} at index {start}")
        )

    def _parse_list(self) -> Result:
        start = self.cursor.position
        self.cursor.next()  # skip 'l'
        items = []

        while not self._at_end():
            if not self.cursor.has_next():
                return self._missing_terminator("list", start)

            item = self.decode()
            if item.is_failure:
                return item.map_failure(f"failed decoding item {len(items)} of list at index {start}")
            items.append(item.value)

        return Success(BencodeList(items))

    def _parse_dict(self) -> Result:
        start = self.cursor.position
        self.cursor.next()  # skip 'd'
        entries = {}

        while not self._at_end():
            if not self.cursor.has_next():
                return self._missing_terminator("dictionary", start)

            pair = self.decode().fanout(self.decode)
            if pair.is_failure:
                return pair.map_failure(f"failed decoding entry {len(entries)} of dictionary at index {start}")
            key, value = pair.value
            entries[key] = value

        return Success(BencodeDict(entries))

    # --------------------------
    # Helpers
    # --------------------------

    def _at_end(self) -> bool:
        return self.cursor.consume(END_MARKER).is_success

    def _missing_terminator(self, what: str, start: int) -> Failure:
        return Failure(
            FailureKind.MISSING_TERMINATOR,
            f"{what} at index {start} is missing its {END_MARKER!r} terminator",
        )


def _to_integer(text: bytes) -> Result:
    if not _INTEGER_RE.fullmatch(text):
        return Failure(FailureKind.MALFORMED_INTEGER, f"malformed integer {text!r}", details={"text": text})
    return Success(int(text))


def decode(data: Input) -> Result:
    """
    Convenience function to decode Bencoded data.
    Only the first value is decoded; anything after it is ignored.
    """
    result = BencodeDecoder(data).decode()
    if result.is_failure:
        logger.debug("Bencode decoding failed: %s", result)
    return result


def decode_all(data: Input) -> Result:
    """Like decode(), but fails if bytes remain after the first value."""
    decoder = BencodeDecoder(data)

    def check_trailing(value):
        if decoder.cursor.has_next():
            return Failure(
                FailureKind.TRAILING_DATA,
                f"{decoder.cursor.remaining()} byte(s) left after index {decoder.cursor.position}",
            )
        return Success(value)

    result = decoder.decode().flat_map(check_trailing)
    if result.is_failure:
        logger.debug("Bencode decoding failed: %s", result)
    return result
