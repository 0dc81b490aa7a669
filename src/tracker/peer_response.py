"""
Typed extraction of a tracker announce response from a decoded Bencode tree.

Every function returns a Result; a PeerResponse only comes out when the
whole response was read successfully.
"""
from typing import Iterable, NamedTuple, Tuple, Type, Union

from bdecoder import (
    Bencode,
    BencodeDict,
    BencodeInt,
    BencodeList,
    BencodeString,
    BencodeType,
    Failure,
    FailureKind,
    Result,
    Success,
    decode,
    sequence,
)

MAX_PORT = 0xFFFF
MAX_INTERVAL = 2 ** 31 - 1


class Peer(NamedTuple):
    ip: str
    peer_id: bytes
    port: int

    def __str__(self):
        return f"{self.ip}:{self.port} [{_display(self.peer_id)}]"


class PeerResponse(NamedTuple):
    interval: int
    peers: Tuple[Peer, ...]


def _display(raw: bytes) -> str:
    return BencodeString(raw).text


def _kind_of(value) -> str:
    return getattr(value, "kind", type(value).__name__)


def _type_mismatch(name: str, expected: Type[BencodeType], actual) -> Failure:
    return Failure(
        FailureKind.TYPE_MISMATCH,
        f"expected {expected.kind} for {name!r}, got {_kind_of(actual)}",
        details={"key": name, "expected": expected.kind, "actual": _kind_of(actual)},
    )


def _narrow(value: int, upper: int, kind: FailureKind, name: str) -> Result:
    """Checked conversion of an unbounded integer into [0, upper]."""
    if 0 <= value <= upper:
        return Success(value)
    return Failure(kind, f"{name} {value} does not fit in [0, {upper}]", details={"value": value, "upper": upper})


def get_attr(dictionary: BencodeDict, key: Union[str, bytes], expected: Type[BencodeType]) -> Result:
    """
    Looks up `key` and checks that its value is an `expected` variant.

    On success the payload is unwrapped: int for BencodeInt, bytes for
    BencodeString, a tuple for BencodeList and a read-only mapping for
    BencodeDict.
    """
    raw_key = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    name = _display(raw_key)

    value = dictionary.value.get(BencodeString(raw_key))
    if value is None:
        return Failure(FailureKind.MISSING_ATTRIBUTE, f"missing attribute {name!r}", details={"key": name})
    if not isinstance(value, expected):
        return _type_mismatch(name, expected, value)
    return Success(value.value)


def get_peer(peer: BencodeDict) -> Result:
    def build(fields):
        ip, peer_id, port = fields
        return Peer(_display(ip), peer_id, port)

    fields = sequence([
        get_attr(peer, "ip", BencodeString),
        get_attr(peer, "peer id", BencodeString),
        get_attr(peer, "port", BencodeInt).flat_map(
            lambda port: _narrow(port, MAX_PORT, FailureKind.PORT_OVERFLOW, "port")
        ),
    ])
    return fields.map(build).map_failure("failed reading peer")


def get_peers(items: Iterable[Bencode]) -> Result:
    """Reads every peer dictionary in order; the first bad entry fails the lot."""
    def to_peer(index, item):
        if not isinstance(item, BencodeDict):
            return _type_mismatch(f"peers[{index}]", BencodeDict, item)
        return get_peer(item).map_failure(lambda: f"failed reading peers[{index}]")

    return sequence(to_peer(i, item) for i, item in enumerate(items)).map(tuple)


def get_peer_response(response: BencodeDict) -> Result:
    reason = get_attr(response, "failure reason", BencodeString)
    if reason.is_success:
        return Failure(
            FailureKind.TRACKER_FAILURE,
            f"tracker replied with failure: {_display(reason.value)}",
            details={"reason": _display(reason.value)},
        )

    interval = get_attr(response, "interval", BencodeInt).flat_map(
        lambda value: _narrow(value, MAX_INTERVAL, FailureKind.INTERVAL_OVERFLOW, "interval")
    )
    return (
        interval
        .fanout(lambda: get_attr(response, "peers", BencodeList).flat_map(get_peers))
        .map(lambda pair: PeerResponse(*pair))
        .map_failure("failed reading peer response")
    )


def convert_to_peer_response(tree: Bencode) -> Result:
    """Entry point: the decoded top-level value must be a dictionary."""
    if not isinstance(tree, BencodeDict):
        return Failure(
            FailureKind.WRONG_SHAPE,
            f"peer response should be a dictionary, got {_kind_of(tree)}",
        )
    return get_peer_response(tree)


def decode_peer_response(data) -> Result:
    return decode(data).flat_map(convert_to_peer_response)
