"""
Parameter store shared by Client (defaults) and Request (per call).

Holds method, headers, cookies, query/form parameters and body, and exposes
fluent setters that return ``self``. A store is not thread-safe: one
instance must only be mutated by one caller at a time.
"""

import copy
from http.cookiejar import Cookie
from typing import Any, Dict, Iterable, List, Mapping, Optional, TYPE_CHECKING

from requests.structures import CaseInsensitiveDict

from .config import CONTENT_TYPE_JSON, CONTENT_TYPE_XML
from .utils import looks_like_json, parse_cookies

if TYPE_CHECKING:
    from .http_client import Client


class ParameterStore:
    """
    Mixin with the accumulating request parameters.

    Attributes:
        method: HTTP method
        headers: Case-insensitive multimap ``name -> [values]``
        cookies: Cookies sent as the Cookie header
        query_params: Query parameters (last write wins)
        form_params: Form multimap ``name -> [values]``
        body: Raw body string
    """

    def _init_params(
        self,
        method: str = "",
        headers: Optional[Mapping[str, List[str]]] = None,
        cookies: Optional[Iterable[Cookie]] = None,
        query_params: Optional[Mapping[str, str]] = None,
        form_params: Optional[Mapping[str, List[str]]] = None,
        body: str = "",
    ) -> None:
        self.method = method
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        for key, values in (headers or {}).items():
            self.headers[key] = list(values)
        self.cookies: List[Cookie] = [copy.copy(c) for c in (cookies or [])]
        self.query_params: Dict[str, str] = dict(query_params or {})
        self.form_params: Dict[str, List[str]] = {
            key: list(values) for key, values in (form_params or {}).items()
        }
        self.body = body

    def _owner(self) -> 'Client':
        """Client that provides the logger and codec strategies."""
        raise NotImplementedError

    def copy_params(self) -> Dict[str, Any]:
        """Deep copy of the store, suitable for ``_init_params(**...)``."""
        return {
            "method": self.method,
            "headers": {key: list(values) for key, values in self.headers.items()},
            "cookies": [copy.copy(c) for c in self.cookies],
            "query_params": dict(self.query_params),
            "form_params": {key: list(values) for key, values in self.form_params.items()},
            "body": self.body,
        }

    # ==================== Метод ====================

    def set_method(self, method: str):
        """Устанавливает HTTP метод."""
        self.method = method
        return self

    # ==================== Заголовки ====================

    def set_header(self, key: str, value: str):
        """Заменяет все значения заголовка одним значением."""
        self.headers[key] = [str(value)]
        return self

    def set_headers(self, headers: Optional[Mapping[str, str]]):
        """Устанавливает несколько заголовков (set-семантика для каждого)."""
        for key, value in (headers or {}).items():
            self.set_header(key, value)
        return self

    def add_header(self, key: str, value: str):
        """Добавляет ещё одно значение заголовка."""
        self.headers.setdefault(key, []).append(str(value))
        return self

    def del_header(self, key: str):
        """Удаляет заголовок со всеми значениями."""
        self.headers.pop(key, None)
        return self

    def get_header(self, key: str) -> str:
        """Первое значение заголовка или пустая строка."""
        values = self.headers.get(key)
        return values[0] if values else ""

    def get_header_values(self, key: str) -> List[str]:
        """Все значения заголовка."""
        return list(self.headers.get(key, []))

    def set_user_agent(self, user_agent: str):
        return self.set_header("User-Agent", user_agent)

    # ==================== Куки ====================

    def set_cookie(self, cookies: str):
        """
        Парсит строку "k=v; k2=v2" и добавляет куки.

        Example:
            >>> store.set_cookie("session=abc; lang=en")
        """
        self.cookies.extend(parse_cookies(cookies))
        return self

    def set_cookie_raw(self, cookie: Cookie):
        """Добавляет готовый объект куки."""
        self.cookies.append(cookie)
        return self

    def set_cookies_raw(self, cookies: Iterable[Cookie]):
        """Добавляет несколько готовых объектов куки."""
        self.cookies.extend(cookies)
        return self

    def clear_cookies(self):
        self.cookies = []
        return self

    # ==================== Query параметры ====================

    def set_query_param(self, key: str, value: str):
        self.query_params[key] = str(value)
        return self

    def set_query_params(self, params: Optional[Mapping[str, str]]):
        for key, value in (params or {}).items():
            self.set_query_param(key, value)
        return self

    def del_query_param(self, key: str):
        self.query_params.pop(key, None)
        return self

    # ==================== Form параметры ====================

    def set_form_param(self, key: str, value: str):
        """Заменяет все значения form параметра."""
        self.form_params[key] = [str(value)]
        return self

    def set_form_params(self, params: Optional[Mapping[str, str]]):
        for key, value in (params or {}).items():
            self.set_form_param(key, value)
        return self

    def add_form_param(self, key: str, value: str):
        """Добавляет ещё одно значение form параметра."""
        self.form_params.setdefault(key, []).append(str(value))
        return self

    # ==================== Тело запроса ====================

    def set_body(self, body: str):
        self.body = body
        return self

    def set_body_bytes(self, body: bytes):
        """Тело из байтов; не-UTF-8 байты сохраняются через surrogateescape."""
        self.body = body.decode("utf-8", errors="surrogateescape")
        return self

    def set_body_json(self, data: Any):
        """
        Устанавливает JSON тело и заголовок Content-Type: application/json.

        Строка, похожая на JSON объект или массив, передаётся как есть.
        Любая другая строка отклоняется (ошибка уходит в лог, тело не
        меняется). Остальные значения сериализуются JSON маршалером клиента.

        Example:
            >>> request.set_body_json({"name": "alice"})
            >>> request.set_body_json('{"name": "alice"}')
        """
        client = self._owner()
        if isinstance(data, str):
            if looks_like_json(data):
                self.body = data
            else:
                client.logger().error("Invalid JSON string", body=data)
        else:
            try:
                self.body = client.json_marshal(data)
            except (TypeError, ValueError) as e:
                client.logger().error("Failed to marshal JSON", error=str(e))
        self.set_header("Content-Type", CONTENT_TYPE_JSON)
        return self

    def set_body_xml(self, data: Any):
        """Устанавливает XML тело и заголовок Content-Type: application/xml."""
        client = self._owner()
        if isinstance(data, str):
            self.body = data
        else:
            try:
                self.body = client.xml_marshal(data)
            except (TypeError, ValueError) as e:
                client.logger().error("Failed to marshal XML", error=str(e))
        self.set_header("Content-Type", CONTENT_TYPE_XML)
        return self
