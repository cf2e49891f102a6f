"""
Иерархия исключений quickly-http.

Классификация:
- TransportError (retryable=True) - ошибка одной попытки, executor делает следующую
- FatalError (fatal=True) - ошибки сборки запроса и декодирования, НЕ ретраятся

HTTP статусы 4xx/5xx исключениями не являются: это обычный Response.
"""

from typing import Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение quickly-http."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ТРАНСПОРТА (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(HTTPClientException):
    """
    Сетевая ошибка одной попытки.

    Примеры: connection refused, таймаут, DNS, отменённый контекст.
    """
    retryable = True

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = f"{message}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_type: Тип таймаута ('connect' или 'read')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_type: Optional[str] = None
    ):
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout)"

        super().__init__(msg, url)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Name resolution failure
    """
    pass

class ProxyError(TransportError):
    """Ошибка прокси."""
    pass

class RequestCancelledError(TransportError):
    """Контекст запроса отменён до отправки попытки."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(HTTPClientException):
    """Фатальная ошибка - НЕ ретраить."""
    fatal = True

class ConfigurationError(FatalError):
    """Запрос не может быть собран (например, не задан HTTP метод)."""
    pass

class InvalidURLError(ConfigurationError):
    """
    base_url + path не разбираются как абсолютный URL.

    Args:
        message: Сообщение
        url: Исходная строка URL
    """

    def __init__(self, message: str, url: str):
        self.url = url
        super().__init__(f"{message}: {url!r}")

class InvalidResponseError(FatalError):
    """
    Тело ответа не удалось декодировать.

    Примеры:
    - Битый JSON
    - Битый XML
    - JSON не того типа (ожидался объект)
    """
    pass

class EncodingError(InvalidResponseError):
    """Тело ответа не удалось перекодировать в UTF-8."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СПЕЦИАЛЬНЫЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TooManyRetriesError(HTTPClientException):
    """
    Исчерпаны все попытки.

    Args:
        attempts: Сколько попыток было сделано
        last_error: Ошибка последней попытки
        url: URL
    """

    def __init__(
        self,
        attempts: int,
        last_error: Optional[Exception] = None,
        url: Optional[str] = None
    ):
        self.attempts = attempts
        self.last_error = last_error
        self.url = url

        msg = f"Failed to execute request after {attempts} attempt(s)"
        if url:
            msg += f" for {url}"
        if last_error:
            msg += f". Last error: {str(last_error)}"

        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: str
) -> HTTPClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.retryable == True
    """

    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout_type="connect")

    elif isinstance(exc, requests.exceptions.ReadTimeout):
        return TimeoutError("Request timeout", url, timeout_type="read")

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError(f"Proxy error: {exc}", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
    )):
        # Повторять бессмысленно: без адаптера для схемы запрос не уйдёт
        return InvalidURLError(str(exc), url)

    else:
        return TransportError(f"Request failed: {exc}", url)
