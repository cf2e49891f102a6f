"""
One-line helpers that do not need a client.

Each call builds a throwaway Client, executes one request, reads the body
into the response cache and closes the client with its default logger.

Example:
    >>> import quickly_http
    >>> response = quickly_http.get("https://httpbin.org/get", params={"q": "1"})
    >>> response.to_map()["args"]
    {'q': '1'}
"""

from typing import Any, Callable, Mapping, Optional

from .core.http_client import Client
from .core.response import Response


def _call(action: Callable[[Client], Response]) -> Response:
    with Client() as client:
        response = action(client)
        # Read before the transport closes its sessions
        response.body()
        return response


def get(
    url: str,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    return _call(lambda client: client.get(url, params, headers))


def head(
    url: str,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    return _call(lambda client: client.head(url, params, headers))


def post(
    url: str,
    params: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    return _call(lambda client: client.post(url, params, headers))


def post_form(
    url: str,
    data: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """POST с form данными без создания клиента."""
    return _call(lambda client: client.post_form(url, data, headers))


def post_json(
    url: str,
    data: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """POST с JSON телом без создания клиента."""
    return _call(lambda client: client.post_json(url, data, headers))
