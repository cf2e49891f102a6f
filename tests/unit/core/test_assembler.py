"""Тесты сборки WireRequest."""

import io
import threading

import pytest

from quickly_http.core.assembler import BACKGROUND, assemble, basic_auth_value, build_url
from quickly_http.core.config import CONTENT_TYPE_FORM
from quickly_http.core.exceptions import ConfigurationError, InvalidURLError


class TestBuildURL:
    """URL composition."""

    def test_joins_base_and_path(self):
        assert build_url("http://example.com/api", "/v1/users", {}) == "http://example.com/api/v1/users"

    def test_path_without_leading_slash(self):
        assert build_url("http://example.com", "users", {}) == "http://example.com/users"

    def test_query_string_appended(self):
        url = build_url("http://example.com", "/search", {"q": "a b", "page": "2"})
        assert url == "http://example.com/search?page=2&q=a+b"

    def test_query_added_to_existing_query(self):
        url = build_url("http://example.com", "/search?x=1", {"y": "2"})
        assert url == "http://example.com/search?x=1&y=2"

    def test_empty_port_removed(self):
        assert build_url("http://example.com:", "/x", {}) == "http://example.com/x"

    def test_explicit_port_kept(self):
        assert build_url("http://example.com:8080", "/x", {}) == "http://example.com:8080/x"

    def test_absolute_path_ignores_base(self):
        assert build_url("http://example.com", "https://other.org/x", {}) == "https://other.org/x"

    def test_invalid_port(self):
        with pytest.raises(InvalidURLError):
            build_url("http://example.com:abc", "/x", {})

    def test_relative_url_rejected(self):
        with pytest.raises(InvalidURLError, match="absolute"):
            build_url("", "/users", {})


class TestAssemble:
    """assemble(request)."""

    def test_basic_get(self, fake_client):
        wire = assemble(fake_client.r().set_header("Accept", "application/json"))

        assert wire.method == "GET"
        assert wire.url == "https://api.example.com/"
        assert wire.protocol == "HTTP/1.1"
        assert wire.headers["accept"] == "application/json"
        assert wire.context is BACKGROUND
        assert wire.body.read() == b""

    def test_method_is_required(self, fake_client):
        request = fake_client.r().set_method("")
        with pytest.raises(ConfigurationError, match="HTTP method is not set"):
            assemble(request)

    def test_method_uppercased(self, fake_client):
        assert assemble(fake_client.r().set_method("post")).method == "POST"

    def test_raw_body(self, fake_client):
        wire = assemble(fake_client.r().set_method("POST").set_body("hello"))
        assert wire.body.read() == b"hello"
        assert wire.content_length == 5

    def test_form_params_win_over_body(self, fake_client):
        request = (
            fake_client.r()
            .set_method("POST")
            .set_body("ignored")
            .set_form_param("b", "2")
            .add_form_param("a", "1")
            .add_form_param("a", "3")
        )
        wire = assemble(request)

        assert wire.body.read() == b"a=1&a=3&b=2"
        assert wire.headers["Content-Type"] == CONTENT_TYPE_FORM

    def test_explicit_content_type_kept_for_form(self, fake_client):
        request = fake_client.r().set_form_param("a", "1").set_header("Content-Type", "text/plain")
        assert assemble(request).headers["Content-Type"] == "text/plain"

    def test_supplier_installed_and_reopenable(self, fake_client):
        request = fake_client.r().set_method("POST").set_body("payload")
        wire = assemble(request)

        assert wire.body.read() == b"payload"
        assert wire.body.read() == b""
        wire.reopen_body()
        assert wire.body.read() == b"payload"
        assert request.get_body is wire.get_body

    def test_caller_supplier_takes_precedence(self, fake_client):
        request = (
            fake_client.r()
            .set_method("PUT")
            .set_body("ignored")
            .set_body_supplier(lambda: io.BytesIO(b"streamed"))
        )
        wire = assemble(request)

        assert wire.body.read() == b"streamed"
        assert wire.content_length == 0

    def test_multiple_header_values_joined(self, fake_client):
        request = fake_client.r().add_header("Accept", "a/b").add_header("Accept", "c/d")
        assert assemble(request).headers["Accept"] == "a/b, c/d"

    def test_cookies_attached_to_wire(self, fake_client):
        wire = assemble(fake_client.r().set_cookie("a=1; b=2"))

        assert "Cookie" not in wire.headers
        assert [(c.name, c.value) for c in wire.cookies] == [("a", "1"), ("b", "2")]

    def test_cookies_appended_to_explicit_cookie_header(self, fake_client):
        request = fake_client.r().set_header("Cookie", "sid=abc").set_cookie("a=1")

        wire = assemble(request)

        assert wire.headers["Cookie"] == "sid=abc; a=1"

    def test_context_passed_through(self, fake_client):
        event = threading.Event()
        assert assemble(fake_client.r().set_context(event)).context is event

    def test_timeout_from_client(self, fake_client):
        fake_client.set_timeout((2, 7))
        assert assemble(fake_client.r()).timeout == (2, 7)

    def test_invalid_url(self, fake_client):
        fake_client.set_base_url("http://host:port")
        with pytest.raises(InvalidURLError):
            assemble(fake_client.r())


class TestAuth:
    """Authorization header."""

    def test_token_auth(self, fake_client):
        fake_client.set_auth_token("abc123")
        assert assemble(fake_client.r()).headers["Authorization"] == "Bearer abc123"

    def test_custom_scheme_and_header(self, fake_client):
        fake_client.set_auth_token("abc").set_auth_scheme("Token").set_authorization_header("X-Auth")
        wire = assemble(fake_client.r())

        assert wire.headers["X-Auth"] == "Token abc"
        assert "Authorization" not in wire.headers

    def test_blank_token_not_sent(self, fake_client):
        fake_client.set_auth_token("   ")
        assert "Authorization" not in assemble(fake_client.r()).headers

    def test_basic_auth_wins_over_token(self, fake_client):
        fake_client.set_auth_token("abc").set_basic_auth("alice", "secret")
        assert assemble(fake_client.r()).headers["Authorization"] == "Basic YWxpY2U6c2VjcmV0"

    def test_basic_auth_value(self):
        assert basic_auth_value("alice", "secret") == "Basic YWxpY2U6c2VjcmV0"
