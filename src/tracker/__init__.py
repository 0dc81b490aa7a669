"""
Tracker package: peer list extraction and the HTTP announce client.
"""
from .http_tracker import HTTPTrackerClient, TrackerError
from .peer_response import (
    Peer,
    PeerResponse,
    convert_to_peer_response,
    decode_peer_response,
    get_attr,
    get_peer,
    get_peer_response,
    get_peers,
)

__all__ = [
    'HTTPTrackerClient', 'TrackerError',
    'Peer', 'PeerResponse',
    'get_attr', 'get_peer', 'get_peers', 'get_peer_response',
    'convert_to_peer_response', 'decode_peer_response',
]
