"""
Data structures for representing Bencoded types.

Every value is immutable and hashable once built, so any of them can be
used as a dictionary key.
"""
from types import MappingProxyType
from typing import Mapping, Sequence, Union

__all__ = [
    "Bencode",
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
]


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("value",)
    kind = "bencode"

    def __init__(self, value):
        object.__setattr__(self, "value", value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ()
    kind = "integer"

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        super().__init__(value)


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()
    kind = "byte string"

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        super().__init__(bytes(value))

    @property
    def text(self) -> str:
        """Printable rendering; bytes that are not UTF-8 come out backslash-escaped."""
        return self.value.decode("utf-8", errors="backslashreplace")


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ()
    kind = "list"

    def __init__(self, value: Sequence["Bencode"]):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        super().__init__(tuple(value))

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    Keys may be any Bencode value and keep their insertion order. Canonical
    Bencode wants sorted byte string keys; that is not checked here.
    """
    __slots__ = ()
    kind = "dictionary"

    def __init__(self, value: Mapping["Bencode", "Bencode"]):
        if not isinstance(value, Mapping):
            raise TypeError("BencodeDict requires a dict.")
        super().__init__(MappingProxyType(dict(value)))

    def __eq__(self, other):
        return isinstance(other, BencodeDict) and dict(self.value) == dict(other.value)

    def __hash__(self):
        return hash(("BencodeDict", frozenset(self.value.items())))

    def __len__(self):
        return len(self.value)

    def __repr__(self):
        return f"BencodeDict({dict(self.value)!r})"


Bencode = Union[BencodeInt, BencodeString, BencodeList, BencodeDict]
