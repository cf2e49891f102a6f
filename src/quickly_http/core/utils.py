"""
Utility functions for request assembly.

Includes:
- Cookie string parsing
- Host normalization (RFC 3986)
- JSON shape check for raw body strings
"""

from http.cookiejar import Cookie
from typing import List

from requests.cookies import create_cookie


def is_blank(value: str) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def looks_like_json(text: str) -> bool:
    """
    Cheap JSON shape check: bracket-balanced object or array.

    Examples:
        >>> looks_like_json('{"a": 1}')
        True
        >>> looks_like_json(' [1, 2] ')
        True
        >>> looks_like_json('hello')
        False
    """
    text = text.strip()
    return (
        (text.startswith("{") and text.endswith("}"))
        or (text.startswith("[") and text.endswith("]"))
    )


def parse_cookies(raw: str) -> List[Cookie]:
    """
    Parse a "k=v; k2=v2" cookie string.

    Each part is split on the first '='. Empty parts and parts without
    '=' are skipped.

    Examples:
        >>> [(c.name, c.value) for c in parse_cookies("a=1; b=2")]
        [('a', '1'), ('b', '2')]
        >>> [(c.name, c.value) for c in parse_cookies("token=a=b; junk;")]
        [('token', 'a=b')]
    """
    result = []
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        name, sep, value = part.partition("=")
        if sep:
            result.append(create_cookie(name, value))
    return result


def remove_empty_port(host: str) -> str:
    """
    Strip an empty port ("host:" -> "host") as mandated by RFC 3986 §6.2.3.

    Examples:
        >>> remove_empty_port("example.com:")
        'example.com'
        >>> remove_empty_port("example.com:8080")
        'example.com:8080'
    """
    if host.endswith(":"):
        return host[:-1]
    return host
