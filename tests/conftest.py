"""
Pytest configuration and fixtures for quickly-http tests.
"""

import io
import threading
import time

import pytest
import requests
import responses as responses_lib
from requests.structures import CaseInsensitiveDict

from quickly_http.core.http_client import Client


class RecordingLogger:
    """Logger double: keeps (level, message, fields) of every call."""

    def __init__(self):
        self.records = []

    def _record(self, level, message, fields):
        self.records.append((level, message, fields))

    def debug(self, message, **fields):
        self._record("DEBUG", message, fields)

    def info(self, message, **fields):
        self._record("INFO", message, fields)

    def warning(self, message, **fields):
        self._record("WARNING", message, fields)

    def error(self, message, **fields):
        self._record("ERROR", message, fields)

    def messages(self, level=None):
        return [m for lvl, m, _ in self.records if level is None or lvl == level]


class FakeRaw:
    """
    Transport response double.

    Counts how many times the body stream is read and closed.
    """

    def __init__(self, body=b"", status_code=200, reason="OK", headers=None,
                 url="https://api.example.com/", read_error=None, read_delay=None):
        self._body = body
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict(headers or {})
        self.url = url
        self.cookies = requests.cookies.RequestsCookieJar()
        self.read_error = read_error
        self.read_delay = read_delay
        self.content_reads = 0
        self.close_calls = 0

    @property
    def content(self):
        self.content_reads += 1
        if self.read_delay is not None:
            time.sleep(self.read_delay)
        if self.read_error is not None:
            raise self.read_error
        return self._body

    def close(self):
        self.close_calls += 1


class FakeTransport:
    """
    Transport double that replays outcomes in order.

    An outcome is either an exception (raised) or a raw response
    (returned). The last outcome repeats.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [FakeRaw()]
        self.wires = []
        self.payloads = []
        self.closed = False
        self._lock = threading.Lock()

    def send(self, wire):
        with self._lock:
            self.wires.append(wire)
            self.payloads.append(wire.body.read())
            outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True

    @property
    def calls(self):
        return len(self.wires)


def make_raw(body=b"", status_code=200, reason="OK", headers=None, url="https://api.example.com/"):
    """Real requests.Response over an in-memory stream."""
    raw = requests.Response()
    raw.status_code = status_code
    raw.reason = reason
    raw.headers = CaseInsensitiveDict(headers or {})
    raw.url = url
    raw.raw = io.BytesIO(body)
    return raw


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def client(base_url, recording_logger):
    """Client over the real requests transport with a recording logger."""
    client = Client(base_url=base_url, timeout=10, logger=recording_logger)
    yield client
    client.close()


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def fake_client(base_url, recording_logger, fake_transport):
    """Client over FakeTransport."""
    return Client(base_url=base_url, transport=fake_transport, logger=recording_logger)


@pytest.fixture
def fake_raw():
    """Factory for FakeRaw responses."""
    return FakeRaw


@pytest.fixture
def transport_factory():
    """Factory for FakeTransport with given outcomes."""
    return FakeTransport


@pytest.fixture
def raw_response():
    """Factory for real requests.Response objects."""
    return make_raw
