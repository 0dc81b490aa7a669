import aiohttp
import pytest

from bdecoder.result import FailureKind
from tracker.http_tracker import HTTPTrackerClient, TrackerError, pct_encode
from tracker.peer_response import Peer

PEERS_REPLY = (
    b"d8:intervali1800e5:peersl"
    b"d2:ip7:1.2.3.47:peer id20:ABCDEFGHIJKLMNOPQRST4:porti6881ee"
    b"ee"
)


class FakeResp:
    def __init__(self, body):
        self.body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc, val, tb):
        pass

    async def read(self):
        return self.body


class FakeSession:
    def __init__(self, body, seen_urls):
        self.body = body
        self.seen_urls = seen_urls

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc, val, tb):
        pass

    def get(self, url, **kwargs):
        self.seen_urls.append(url)
        return FakeResp(self.body)


class DummyMeta:
    info_hash = b"A" * 20
    total_length = 100
    announce = "http://fake/announce"


def fake_tracker(monkeypatch, body):
    seen_urls = []
    monkeypatch.setattr(aiohttp, "ClientSession", lambda **kwargs: FakeSession(body, seen_urls))
    return seen_urls


@pytest.mark.asyncio
async def test_tracker_mock(monkeypatch):
    seen_urls = fake_tracker(monkeypatch, PEERS_REPLY)

    tc = HTTPTrackerClient(DummyMeta, peer_id=b"B" * 20)
    result = await tc.announce()

    assert result.is_success
    assert result.value.interval == 1800
    assert result.value.peers == (Peer("1.2.3.4", b"ABCDEFGHIJKLMNOPQRST", 6881),)

    url = seen_urls[0]
    assert url.startswith("http://fake/announce?")
    assert "info_hash=" + "%41" * 20 in url
    assert "compact=0" in url


@pytest.mark.asyncio
async def test_tracker_peers(monkeypatch):
    fake_tracker(monkeypatch, PEERS_REPLY)

    tc = HTTPTrackerClient(DummyMeta, peer_id=b"B" * 20)
    peers = await tc.peers()

    assert peers == [("1.2.3.4", 6881)]


@pytest.mark.asyncio
async def test_tracker_failure_reason(monkeypatch):
    fake_tracker(monkeypatch, b"d14:failure reason12:unregisterede")

    tc = HTTPTrackerClient(DummyMeta, peer_id=b"B" * 20)
    result = await tc.announce()
    assert result.kind is FailureKind.TRACKER_FAILURE

    with pytest.raises(TrackerError) as excinfo:
        await tc.peers()
    assert excinfo.value.failure.kind is FailureKind.TRACKER_FAILURE
    assert "unregistered" in str(excinfo.value)


@pytest.mark.asyncio
async def test_tracker_garbage(monkeypatch):
    fake_tracker(monkeypatch, b"<html>502 Bad Gateway</html>")

    tc = HTTPTrackerClient(DummyMeta, peer_id=b"B" * 20)
    result = await tc.announce()
    assert result.kind is FailureKind.UNKNOWN_MARKER


def test_announce_url_with_existing_query():
    tc = HTTPTrackerClient(DummyMeta, peer_id=b"B" * 20, url="http://fake/announce?passkey=x")
    assert tc.announce_url().startswith("http://fake/announce?passkey=x&info_hash=")


def test_missing_announce_url():
    class NoAnnounce(DummyMeta):
        announce = None

    with pytest.raises(ValueError):
        HTTPTrackerClient(NoAnnounce, peer_id=b"B" * 20)


def test_pct_encode():
    assert pct_encode(b"\x00\xffA") == "%00%FF%41"
