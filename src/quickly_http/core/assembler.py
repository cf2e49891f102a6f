"""
Request assembly: Request descriptor -> WireRequest.

Assembly runs exactly once per ``execute`` call, before the retry loop, so
every error raised here is a configuration error and is never retried.
"""

import base64
import io
from dataclasses import dataclass, field
from http.cookiejar import Cookie
from typing import IO, Callable, List, Optional, Tuple, TYPE_CHECKING
from urllib.parse import urlencode, urlsplit, urlunsplit

from requests.structures import CaseInsensitiveDict

from .config import CONTENT_TYPE_FORM
from .exceptions import ConfigurationError, InvalidURLError
from .utils import is_blank, remove_empty_port

if TYPE_CHECKING:
    from .request import Request

BodySupplier = Callable[[], IO[bytes]]


class _BackgroundContext:
    """Cancellation context that is never cancelled."""

    def is_set(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<background context>"


BACKGROUND = _BackgroundContext()


@dataclass
class WireRequest:
    """
    Fully resolved request, ready for the transport.

    Attributes:
        method: HTTP method
        url: Absolute URL with query string
        headers: Final header set (one value per name, multiple values joined)
        cookies: Request cookies; the transport merges them with its own jar
        body: Body stream for the next dispatch
        get_body: Re-opens the body; used before every retry attempt
        content_length: Body length, 0 when a caller-provided supplier is used
        context: Cancellation context (``is_set()`` -> cancelled)
        timeout: (connect, read) timeout for the transport
        protocol: Always "HTTP/1.1"
    """
    method: str
    url: str
    headers: CaseInsensitiveDict
    body: IO[bytes]
    get_body: BodySupplier
    content_length: int = 0
    cookies: List[Cookie] = field(default_factory=list)
    context: object = BACKGROUND
    timeout: Optional[Tuple[float, float]] = None
    protocol: str = "HTTP/1.1"

    def reopen_body(self) -> None:
        """Replace the consumed body stream with a fresh one from the supplier."""
        self.body = self.get_body()


def build_url(base_url: str, path: str, query_params: dict) -> str:
    """
    Строит полный URL из base_url, path и query параметров.

    Абсолютный URL в path используется как есть, без base_url: так один
    клиент может обратиться к другому хосту (например, по ссылке из ответа).

    Raises:
        InvalidURLError: URL не разбирается или в нём нет схемы/хоста

    Example:
        >>> build_url("http://example.com/api", "/v1/users", {"id": "5"})
        'http://example.com/api/v1/users?id=5'
    """
    if path.startswith(("http://", "https://")):
        raw = path
    else:
        raw = f"{base_url}/{path.lstrip('/')}"

    if query_params:
        separator = "&" if "?" in raw else "?"
        raw += separator + urlencode(sorted(query_params.items()))

    try:
        parts = urlsplit(raw)
        # .port raises ValueError for a non-numeric port
        parts.port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL ({e})", raw) from e

    if not parts.scheme or not parts.netloc:
        raise InvalidURLError("URL must be absolute", raw)

    return urlunsplit(parts._replace(netloc=remove_empty_port(parts.netloc)))


def _resolve_body(request: 'Request') -> bytes:
    if request.form_params:
        return urlencode(
            sorted(request.form_params.items()), doseq=True
        ).encode("ascii")
    return request.body.encode("utf-8", errors="surrogateescape")


def _cookie_header(existing: str, cookies: List[Cookie]) -> str:
    pairs = [f"{c.name}={c.value}" for c in cookies]
    if existing:
        pairs.insert(0, existing)
    return "; ".join(pairs)


def basic_auth_value(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def assemble(request: 'Request') -> WireRequest:
    """
    Собирает WireRequest из дескриптора запроса и настроек клиента.

    Steps:
        1. URL: base_url + "/" + path без ведущего "/" + query string,
           пустой порт ("host:") убирается
        2. Тело: form параметры, иначе raw body; supplier, уже
           установленный на запросе, имеет приоритет
        3. Метод обязателен
        4. Контекст по умолчанию никогда не отменяется
        5. Заголовки клонируются; куки уходят в WireRequest.cookies и
           попадают в Cookie только если он задан явно (иначе jar
           транспорта был бы пропущен)
        6. Basic auth клиента имеет приоритет над токеном

    Raises:
        InvalidURLError: Битый base_url + path
        ConfigurationError: Не задан HTTP метод
    """
    client = request.client
    url = build_url(client.base_url, request.path, request.query_params)

    if request.get_body is not None:
        body = request.get_body()
        content_length = 0
    else:
        payload = _resolve_body(request)
        body = io.BytesIO(payload)
        content_length = len(payload)
        request.get_body = lambda: io.BytesIO(payload)

    if not request.method:
        raise ConfigurationError("HTTP method is not set")

    if request.context is None:
        request.context = BACKGROUND

    headers = CaseInsensitiveDict()
    for key, values in request.headers.items():
        headers[key] = ", ".join(values)

    if request.form_params and "Content-Type" not in headers:
        headers["Content-Type"] = CONTENT_TYPE_FORM

    if request.cookies and "Cookie" in headers:
        headers["Cookie"] = _cookie_header(headers["Cookie"], request.cookies)

    if client.user_info is not None:
        headers["Authorization"] = basic_auth_value(*client.user_info)
    elif not is_blank(client.auth_token):
        headers[client.authorization_header] = f"{client.auth_scheme} {client.auth_token}"

    return WireRequest(
        method=request.method.upper(),
        url=url,
        headers=headers,
        body=body,
        get_body=request.get_body,
        content_length=content_length,
        cookies=list(request.cookies),
        context=request.context,
        timeout=client.timeout.as_tuple(),
    )
