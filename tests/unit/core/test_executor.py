"""
Tests for the bounded-retry executor.

All tests run over FakeTransport: no network, attempts are counted exactly.
"""

import threading

import pytest

from quickly_http.core.exceptions import (
    ConfigurationError,
    ConnectionError,
    InvalidURLError,
    RequestCancelledError,
    TimeoutError,
    TooManyRetriesError,
)
from quickly_http.core.http_client import Client
from quickly_http.core.logging.filters import get_correlation_id
from quickly_http.core.transport import RequestsTransport


@pytest.fixture
def make_client(base_url, recording_logger):
    def _make(transport, **kwargs):
        return Client(base_url=base_url, transport=transport, logger=recording_logger, **kwargs)
    return _make


class TestRetryLoop:
    """Retry only on transport errors."""

    def test_first_success_returns(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(fake_raw(b"ok"))
        response = make_client(transport).r().execute("/ping")

        assert transport.calls == 1
        assert response.body() == b"ok"

    def test_server_error_not_retried(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(fake_raw(b"boom", status_code=500, reason="Internal Server Error"))
        response = make_client(transport).r().execute("/ping")

        assert transport.calls == 1
        assert response.status_code == 500
        assert response.is_server_error()

    def test_client_error_not_retried(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(fake_raw(status_code=404, reason="Not Found"))
        response = make_client(transport).r().execute("/missing")

        assert transport.calls == 1
        assert response.status == "404 Not Found"

    def test_transport_error_then_success(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(
            ConnectionError("refused"),
            TimeoutError("Request timeout", timeout_type="read"),
            fake_raw(b"ok"),
        )
        response = make_client(transport).r().execute("/ping")

        assert transport.calls == 3
        assert response.text() == "ok"

    def test_exhaustion_after_retry_max(self, make_client, transport_factory):
        error = ConnectionError("refused", "https://api.example.com/ping")
        transport = transport_factory(error)
        client = make_client(transport).set_retry_max(3)

        with pytest.raises(TooManyRetriesError) as exc_info:
            client.r().execute("/ping")

        assert transport.calls == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is error
        assert exc_info.value.__cause__ is error
        assert exc_info.value.url == "https://api.example.com/ping"

    def test_default_retry_max_is_five(self, make_client, transport_factory):
        transport = transport_factory(ConnectionError("refused"))

        with pytest.raises(TooManyRetriesError):
            make_client(transport).r().execute("/ping")

        assert transport.calls == 5

    @pytest.mark.parametrize("retry_max", [0, -1, -100])
    def test_retry_max_clamped_to_one(self, make_client, transport_factory, retry_max):
        transport = transport_factory(ConnectionError("refused"))
        client = make_client(transport).set_retry_max(retry_max)

        with pytest.raises(TooManyRetriesError):
            client.r().execute("/ping")

        assert client.retry_max == 1
        assert transport.calls == 1

    def test_none_response_counts_as_attempt(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(None, fake_raw(b"ok"))
        response = make_client(transport).r().execute("/ping")

        assert transport.calls == 2
        assert response.body() == b"ok"

    def test_retry_resends_full_body(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(ConnectionError("reset"), ConnectionError("reset"), fake_raw())
        make_client(transport).r().set_method("POST").set_body("payload").execute("/upload")

        assert transport.payloads == [b"payload", b"payload", b"payload"]

    def test_retry_reopens_caller_supplier(self, make_client, transport_factory, fake_raw):
        import io

        opened = []

        def supplier():
            opened.append(1)
            return io.BytesIO(b"chunk")

        transport = transport_factory(ConnectionError("reset"), fake_raw())
        make_client(transport).r().set_method("PUT").set_body_supplier(supplier).execute("/x")

        assert transport.payloads == [b"chunk", b"chunk"]
        assert len(opened) == 2

    def test_same_wire_for_every_attempt(self, make_client, transport_factory, fake_raw):
        transport = transport_factory(ConnectionError("reset"), fake_raw())
        request = make_client(transport).r()
        request.execute("/x")

        assert transport.wires[0] is transport.wires[1] is request.wire


class TestAssemblyErrors:
    """Assembly errors are raised once and never retried."""

    def test_missing_method(self, make_client, transport_factory, recording_logger):
        transport = transport_factory()

        with pytest.raises(ConfigurationError):
            make_client(transport).r().set_method("").execute("/x")

        assert transport.calls == 0
        assert "Failed to build HTTP request" in recording_logger.messages("ERROR")

    def test_malformed_url(self, make_client, transport_factory):
        transport = transport_factory()
        client = make_client(transport).set_base_url("http://host:notaport")

        with pytest.raises(InvalidURLError):
            client.r().execute("/x")

        assert transport.calls == 0

    def test_url_rejected_by_transport_logged(self, make_client, transport_factory, recording_logger):
        transport = transport_factory(InvalidURLError("Invalid URL", "https://api.example.com/x"))

        with pytest.raises(InvalidURLError):
            make_client(transport).r().execute("/x")

        assert transport.calls == 1
        errors = [fields for level, message, fields in recording_logger.records
                  if level == "ERROR" and message == "Request failed"]
        assert errors[0]["error_type"] == "InvalidURLError"
        assert errors[0]["attempt"] == 1


class TestRequestHook:
    """Request transform hook."""

    def test_hook_runs_once_per_execute(self, make_client, transport_factory, fake_raw):
        calls = []

        def hook(wire):
            calls.append(wire)
            wire.headers["X-Signed"] = "yes"
            return wire

        transport = transport_factory(ConnectionError("reset"), ConnectionError("reset"), fake_raw())
        make_client(transport).set_request_hook(hook).r().execute("/x")

        assert len(calls) == 1
        assert all(wire.headers["X-Signed"] == "yes" for wire in transport.wires)

    def test_hook_may_replace_wire(self, make_client, transport_factory, fake_raw):
        import dataclasses

        transport = transport_factory(fake_raw())
        client = make_client(transport).set_request_hook(
            lambda wire: dataclasses.replace(wire, url="https://mirror.example.com/x")
        )
        client.r().execute("/x")

        assert transport.wires[0].url == "https://mirror.example.com/x"

    def test_none_hook_ignored(self, make_client, transport_factory):
        def hook(wire):
            return wire

        client = make_client(transport_factory()).set_request_hook(hook).set_request_hook(None)
        assert client.request_hook is hook


class TestCancellation:
    """Cancelled context with the real transport."""

    def test_cancelled_context_exhausts_attempts(self, make_client, mock_responses):
        event = threading.Event()
        event.set()
        client = make_client(RequestsTransport()).set_retry_max(2)

        with pytest.raises(TooManyRetriesError) as exc_info:
            client.r().set_context(event).execute("/x")

        assert isinstance(exc_info.value.last_error, RequestCancelledError)
        assert len(mock_responses.calls) == 0


class TestLogging:
    """Failure notices and debug dumps."""

    def test_transport_failure_logged_as_warning(self, make_client, transport_factory, fake_raw, recording_logger):
        transport = transport_factory(ConnectionError("refused"), fake_raw())
        make_client(transport).r().execute("/x")

        warnings = [fields for level, message, fields in recording_logger.records if level == "WARNING"]
        assert len(warnings) == 1
        assert warnings[0]["attempt"] == 1
        assert warnings[0]["error_type"] == "ConnectionError"

    def test_exhaustion_logged_as_error(self, make_client, transport_factory, recording_logger):
        transport = transport_factory(ConnectionError("refused"))

        with pytest.raises(TooManyRetriesError):
            make_client(transport).set_retry_max(2).r().execute("/x")

        assert "Request failed after all attempts" in recording_logger.messages("ERROR")

    def test_no_dump_without_debug(self, make_client, transport_factory, recording_logger):
        make_client(transport_factory()).r().execute("/x")
        assert recording_logger.records == []

    def test_debug_dumps_request_and_response(self, make_client, transport_factory, fake_raw, recording_logger):
        transport = transport_factory(fake_raw(b'{"ok": true}', headers={"Content-Type": "application/json"}))
        (
            make_client(transport)
            .set_debug(True)
            .r()
            .set_query_param("q", "1")
            .set_cookie("sid=abc")
            .execute("/x")
        )

        info = {message: fields for level, message, fields in recording_logger.records if level == "INFO"}
        assert info["Performing request"]["url"] == "https://api.example.com/x?q=1"
        assert info["Performing request"]["query_params"] == {"q": "1"}
        assert info["Performing request"]["cookies"] == ["sid=abc"]
        assert info["Received response"]["status_code"] == 200
        assert info["Received response"]["body"] == '{"ok": true}'

    def test_debug_dump_masks_secret_headers(self, make_client, transport_factory, fake_raw, recording_logger):
        transport = transport_factory(fake_raw(headers={"Set-Cookie": "sid=server", "Server": "test"}))
        make_client(transport).set_debug(True).set_auth_token("secret").r().execute("/x")

        info = {message: fields for level, message, fields in recording_logger.records if level == "INFO"}
        assert info["Performing request"]["headers"]["Authorization"] == "***REDACTED***"
        assert info["Received response"]["headers"]["Set-Cookie"] == "***REDACTED***"
        assert info["Received response"]["headers"]["Server"] == "test"

    def test_debug_dump_after_failed_attempt(self, make_client, transport_factory, fake_raw, recording_logger):
        transport = transport_factory(ConnectionError("refused"), fake_raw())
        make_client(transport).set_debug(True).r().execute("/x")

        assert recording_logger.messages("INFO").count("Performing request") == 2

    def test_correlation_id_cleared_after_execute(self, make_client, transport_factory):
        make_client(transport_factory()).r().execute("/x")
        assert get_correlation_id() is None


def test_backoff_between_attempts(make_client, transport_factory, fake_raw, monkeypatch):
    """Задержка между попытками берётся из RetryConfig."""
    from quickly_http.core.config import RetryConfig
    from quickly_http.core import retry_engine

    sleeps = []
    monkeypatch.setattr(retry_engine.time, "sleep", sleeps.append)

    transport = transport_factory(ConnectionError("a"), ConnectionError("b"), fake_raw())
    client = make_client(transport).set_retry(
        RetryConfig(max_attempts=3, backoff_base=0.5, backoff_jitter=False)
    )
    client.r().execute("/x")

    assert sleeps == [0.5, 1.0]
