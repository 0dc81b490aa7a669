"""
Bencode decoding for BitTorrent metainfo and tracker responses.
"""
from .cursor import Cursor
from .decoder import BencodeDecoder, decode, decode_all
from .result import Failure, FailureKind, Result, ResultError, Success, sequence
from .structure import Bencode, BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType

__all__ = [
    'decode', 'decode_all', 'BencodeDecoder', 'Cursor',
    'Bencode', 'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'Result', 'Success', 'Failure', 'FailureKind', 'ResultError', 'sequence',
]
