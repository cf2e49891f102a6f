"""
Tests for module level shortcuts.
"""

import json
import logging

import responses

import quickly_http
from quickly_http import Response


def _client_loggers():
    """Names and handler counts of registered quickly_http.* loggers."""
    return {
        name: len(logger.handlers)
        for name, logger in list(logging.Logger.manager.loggerDict.items())
        if name.startswith("quickly_http.") and isinstance(logger, logging.Logger)
    }


class TestShortcuts:
    """quickly_http.get/head/post/post_form/post_json."""

    def test_get(self, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/users", json={"users": []})

        response = quickly_http.get("https://api.example.com/users", params={"page": "1"})

        assert isinstance(response, Response)
        assert response.to_map() == {"users": []}
        assert mock_responses.calls[0].request.url == "https://api.example.com/users?page=1"

    def test_body_available_after_client_closed(self, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/text", body="hello")

        response = quickly_http.get("https://api.example.com/text")

        assert response.text() == "hello"

    def test_head(self, mock_responses):
        mock_responses.add(responses.HEAD, "https://api.example.com/ping", status=204)
        assert quickly_http.head("https://api.example.com/ping").status_code == 204

    def test_post(self, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/x", status=201)

        response = quickly_http.post("https://api.example.com/x", headers={"X-Req": "1"})

        assert response.status_code == 201
        assert mock_responses.calls[0].request.headers["X-Req"] == "1"

    def test_post_form(self, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/login")

        quickly_http.post_form("https://api.example.com/login", {"user": "alice"})

        assert mock_responses.calls[0].request.body == b"user=alice"

    def test_post_json(self, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/users")

        quickly_http.post_json("https://api.example.com/users", {"name": "alice"})

        assert json.loads(mock_responses.calls[0].request.body) == {"name": "alice"}

    def test_shortcuts_independent(self, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/a")
        mock_responses.add(responses.GET, "https://api.example.com/b")

        quickly_http.post("https://api.example.com/a")
        quickly_http.get("https://api.example.com/b")

        assert [call.request.method for call in mock_responses.calls] == ["POST", "GET"]

    def test_shortcuts_leave_no_loggers_behind(self, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/ping")
        before = _client_loggers()

        for _ in range(20):
            quickly_http.get("https://api.example.com/ping")

        assert _client_loggers() == before
        assert len(mock_responses.calls) == 20


def test_version():
    assert isinstance(quickly_http.__version__, str)
