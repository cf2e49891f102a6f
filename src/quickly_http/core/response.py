"""
Response envelope with a lazily materialized, thread-safe body cache.

The transport response body is read and closed at most once. Every derived
view (text, JSON, pretty print, buffer, file) works on the cached bytes.
"""

import io
import json
import logging
import os
import threading
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from http.cookiejar import Cookie
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union, TYPE_CHECKING

import requests
from requests.structures import CaseInsensitiveDict

from .exceptions import EncodingError, InvalidResponseError

if TYPE_CHECKING:
    from .request import Request

logger = logging.getLogger(__name__)

# Single legacy fallback for bodies that are not valid UTF-8
FALLBACK_ENCODING = "gbk"

SAVE_FILE_MODE = 0o644


class Response:
    """
    Обёртка над ответом транспорта.

    Features:
        - body() читает поток ответа ровно один раз (под lock)
        - Ошибка чтения сохраняется в ``error``, тело становится пустым
        - Производные представления: text, json, to_map, xml, pretty_print
        - detect_encoding(): GBK -> UTF-8 для тел, не являющихся UTF-8
        - Классификация статуса без исключений на 4xx/5xx

    Example:
        >>> response = client.r().execute("/users/1")
        >>> if response.is_success():
        ...     user = response.to_map()
    """

    def __init__(
        self,
        raw: requests.Response,
        request: Optional['Request'] = None,
        json_unmarshal: Callable[[bytes], Any] = json.loads,
        xml_unmarshal: Callable[[bytes], Any] = ET.fromstring,
    ):
        """
        Args:
            raw: Ответ транспорта
            request: Исходный Request (только для диагностики)
            json_unmarshal: Декодер JSON
            xml_unmarshal: Декодер XML
        """
        self.raw = raw
        self.request = request
        self.error: Optional[Exception] = None
        self.received_at = datetime.now(timezone.utc)
        self._json_unmarshal = json_unmarshal
        self._xml_unmarshal = xml_unmarshal
        self._body: Optional[bytes] = None
        self._body_lock = threading.Lock()

    # ==================== Тело ====================

    def _materialize(self) -> bytes:
        """Read and close the stream once. Caller must hold ``_body_lock``."""
        if self._body is None:
            try:
                self._body = self.raw.content or b""
            except (requests.exceptions.RequestException, OSError) as e:
                self.error = e
                self._body = b""
                logger.warning(f"Failed to read response body: {e}")
            finally:
                close = getattr(self.raw, "close", None)
                if close is not None:
                    close()
        return self._body

    def body(self) -> bytes:
        """
        Тело ответа в байтах.

        Первый вызов читает поток, все последующие (из любых потоков)
        возвращают те же закешированные байты. При ошибке чтения
        возвращается b"" и ошибка лежит в ``self.error``.
        """
        with self._body_lock:
            return self._materialize()

    def text(self) -> str:
        """Тело как строка UTF-8 (битые байты заменяются)."""
        return self.body().decode("utf-8", errors="replace")

    def __str__(self) -> str:
        return self.text()

    def json(self) -> Any:
        """
        Декодировать тело как JSON.

        Raises:
            InvalidResponseError: Тело не является JSON
        """
        try:
            return self._json_unmarshal(self.body())
        except ValueError as e:
            raise InvalidResponseError(f"Failed to decode JSON body: {e}") from e

    def to_map(self) -> Dict[str, Any]:
        """
        Декодировать тело как JSON объект.

        Raises:
            InvalidResponseError: Тело не JSON или не объект
        """
        result = self.json()
        if not isinstance(result, dict):
            raise InvalidResponseError(
                f"Expected JSON object, got {type(result).__name__}"
            )
        return result

    def get_json_path(self, path: str, default: Any = None) -> Any:
        """
        Достать значение из JSON тела по пути через точку.

        Индексы массивов пишутся числами. Если тело не JSON или путь не
        найден, возвращается default.

        Example:
            >>> response.get_json_path("data.items.0.name")
        """
        try:
            node = self.json()
        except InvalidResponseError:
            return default

        for part in path.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                return default
        return node

    def xml(self) -> Any:
        """
        Декодировать тело как XML.

        Raises:
            InvalidResponseError: Тело не является XML
        """
        try:
            return self._xml_unmarshal(self.body())
        except ET.ParseError as e:
            raise InvalidResponseError(f"Failed to decode XML body: {e}") from e

    def pretty_print(self) -> str:
        """JSON с отступом в 2 пробела; не-JSON тело возвращается как есть."""
        try:
            data = self._json_unmarshal(self.body())
        except ValueError:
            return self.text()
        return json.dumps(data, indent=2, ensure_ascii=False)

    def to_bytes_buffer(self) -> io.BytesIO:
        """Новый буфер поверх закешированного тела."""
        return io.BytesIO(self.body())

    def save_to_file(self, path: Union[str, Path]) -> None:
        """Записать байты тела в файл с правами 0644."""
        path = Path(path)
        path.write_bytes(self.body())
        os.chmod(path, SAVE_FILE_MODE)

    def detect_encoding(self) -> None:
        """
        Привести закешированное тело к UTF-8.

        Валидный UTF-8 не меняется. Иначе тело считается GBK и
        перекодируется в UTF-8, заменяя кеш.

        Raises:
            EncodingError: Тело не является ни UTF-8, ни GBK
        """
        with self._body_lock:
            body = self._materialize()
            try:
                body.decode("utf-8")
                return
            except UnicodeDecodeError:
                pass

            try:
                self._body = body.decode(FALLBACK_ENCODING).encode("utf-8")
            except UnicodeDecodeError as e:
                raise EncodingError(
                    f"Failed to convert body from {FALLBACK_ENCODING} to UTF-8: {e}"
                ) from e

    # ==================== Статус ====================

    @property
    def status_code(self) -> int:
        return getattr(self.raw, "status_code", 0) or 0

    @property
    def status(self) -> str:
        """Статус строкой, например "404 Not Found"."""
        reason = getattr(self.raw, "reason", "") or ""
        return f"{self.status_code} {reason}".strip()

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    # ==================== Заголовки и куки ====================

    @property
    def headers(self) -> CaseInsensitiveDict:
        headers = getattr(self.raw, "headers", None)
        return headers if headers is not None else CaseInsensitiveDict()

    @property
    def url(self) -> str:
        return getattr(self.raw, "url", "") or ""

    @property
    def cookies(self) -> List[Cookie]:
        jar = getattr(self.raw, "cookies", None)
        return list(jar) if jar is not None else []

    def get_header(self, key: str) -> str:
        return self.headers.get(key, "")

    def has_header(self, key: str) -> bool:
        return key in self.headers

    def get_header_values(self, key: str) -> List[str]:
        """
        Все значения заголовка.

        Берутся из urllib3 заголовков, если они есть; иначе единственное
        (склеенное) значение из headers.
        """
        raw_headers = getattr(getattr(self.raw, "raw", None), "headers", None)
        if raw_headers is not None and hasattr(raw_headers, "getlist"):
            return list(raw_headers.getlist(key))
        value = self.headers.get(key)
        return [value] if value is not None else []

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"
