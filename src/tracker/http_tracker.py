import logging
from typing import List, Tuple

import aiohttp

from bdecoder import Failure, Result
from .peer_response import decode_peer_response

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6881
REQUEST_TIMEOUT_SECONDS = 10


class TrackerError(Exception):
    """Raised when a tracker reply cannot be turned into a peer list."""
    def __init__(self, url: str, failure: Failure):
        super().__init__(f"{url}: {failure}")
        self.url = url
        self.failure = failure


def pct_encode(b: bytes) -> str:
    """Percent-encodes every byte as %HH, which is what trackers expect for binary fields."""
    return ''.join(f'%{byte:02X}' for byte in b)


class HTTPTrackerClient:
    def __init__(self, torrent_meta, peer_id: bytes, port=DEFAULT_PORT, url: str = None,
                 timeout: float = REQUEST_TIMEOUT_SECONDS):
        self.meta = torrent_meta
        self.peer_id = peer_id  # MUST be 20 bytes
        self.port = port
        self.url = url if url else torrent_meta.announce
        self.timeout = timeout

        if not self.url:
            raise ValueError("No announce URL provided for HTTPTrackerClient")

    def announce_url(self) -> str:
        params = {
            "info_hash": self.meta.info_hash,
            "peer_id": self.peer_id,
            "port": self.port,
            "uploaded": 0,
            "downloaded": 0,
            "left": self.meta.total_length,
            # dictionary peer model; compact peer strings are not read
            "compact": 0,
            "event": "started",
        }

        encoded = {}
        for k, v in params.items():
            if isinstance(v, bytes):
                encoded[k] = pct_encode(v)
            else:
                encoded[k] = str(v)

        query = "&".join(f"{k}={v}" for k, v in encoded.items())
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{query}"

    async def announce(self) -> Result:
        """
        Sends a `started` announce and decodes the reply.
        Network errors propagate as aiohttp exceptions; everything about the
        reply body comes back as a Result holding a PeerResponse.
        """
        full_url = self.announce_url()
        logger.debug("Announcing to %s", full_url)

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(full_url) as resp:
                data = await resp.read()

        logger.debug("Tracker %s replied with %d bytes", self.url, len(data))
        result = decode_peer_response(data)
        if result.is_failure:
            logger.warning("Tracker %s sent an unusable reply: %s", self.url, result)
        else:
            logger.info("Tracker %s returned %d peers", self.url, len(result.value.peers))
        return result

    async def peers(self) -> List[Tuple[str, int]]:
        result = await self.announce()
        if result.is_failure:
            raise TrackerError(self.url, result)
        return [(peer.ip, peer.port) for peer in result.value.peers]
