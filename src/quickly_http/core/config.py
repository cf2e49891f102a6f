"""
Система конфигурации для quickly-http.

Все конфиги immutable (frozen dataclasses): из них Client при создании
заполняет свои изменяемые дефолты.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Union, Mapping, TYPE_CHECKING
from types import MappingProxyType

if TYPE_CHECKING:
    from .logging import LoggingConfig

# Значения по умолчанию
DEFAULT_METHOD = "GET"
DEFAULT_RETRY_MAX = 5
DEFAULT_AUTH_SCHEME = "Bearer"
DEFAULT_AUTHORIZATION_HEADER = "Authorization"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_STREAM = "application/octet-stream"
CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_HTML = "text/html"
CONTENT_TYPE_MULTIPART = "multipart/form-data"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
        >>> TimeoutConfig.from_value((3, 60))
    """
    connect: float = 5
    read: float = 30

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

    @classmethod
    def from_value(
        cls,
        value: Union[float, Tuple[float, float], 'TimeoutConfig']
    ) -> 'TimeoutConfig':
        """Число = read таймаут, кортеж = (connect, read)."""
        if isinstance(value, TimeoutConfig):
            return value
        if isinstance(value, tuple):
            return cls(connect=value[0], read=value[1])
        return cls(read=value)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryConfig:
    """
    Конфигурация retry стратегии.

    Ретраятся только ошибки транспорта; статус код ответа не проверяется.

    Args:
        max_attempts: Максимум попыток (включая первую), значения < 1 становятся 1
        backoff_base: Базовая задержка между попытками (сек), 0 = без задержки
        backoff_factor: Множитель для exponential backoff
        backoff_max: Максимальная задержка (сек)
        backoff_jitter: Добавлять случайность (против thundering herd)

    Examples:
        >>> RetryConfig(max_attempts=3)
        >>> RetryConfig(max_attempts=5, backoff_base=0.5, backoff_max=10)
    """
    max_attempts: int = DEFAULT_RETRY_MAX
    backoff_base: float = 0.0
    backoff_factor: float = 2.0
    backoff_max: float = 60.0
    backoff_jitter: bool = True

    def __post_init__(self):
        """Clamp max_attempts и валидация."""
        if self.max_attempts < 1:
            object.__setattr__(self, 'max_attempts', 1)
        if self.backoff_base < 0:
            raise ValueError("backoff_base must be non-negative")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")
        if self.backoff_max < 0:
            raise ValueError("backoff_max must be non-negative")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

@dataclass(frozen=True)
class ClientConfig:
    """
    Начальная конфигурация Client.

    Client копирует эти значения в свои изменяемые дефолты, поэтому один
    ClientConfig можно переиспользовать для нескольких клиентов.

    Args:
        base_url: Базовый URL (trailing slash убирается)
        method: HTTP метод по умолчанию
        headers: Дефолтные заголовки
        cookies: Дефолтные куки строкой "k=v; k2=v2"
        query_params: Дефолтные query параметры
        form_params: Дефолтные form параметры
        body: Дефолтное тело запроса
        proxy_url: URL прокси
        auth_token: Токен для заголовка авторизации
        auth_scheme: Схема токена ("Bearer")
        authorization_header: Имя заголовка авторизации
        basic_auth: (username, password), имеет приоритет над auth_token
        debug: Логировать каждый запрос и ответ целиком
        timeout: Конфигурация таймаутов
        retry: Конфигурация retry
        logging: Конфигурация логирования (None = stderr логгер по умолчанию)

    Examples:
        >>> config = ClientConfig(base_url="https://api.example.com")
        >>> config = ClientConfig.create(timeout=60, retry_max=3)
    """
    base_url: Optional[str] = None
    method: str = DEFAULT_METHOD
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    cookies: str = ""
    query_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    form_params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: str = ""
    proxy_url: Optional[str] = None

    auth_token: str = ""
    auth_scheme: str = DEFAULT_AUTH_SCHEME
    authorization_header: str = DEFAULT_AUTHORIZATION_HEADER
    basic_auth: Optional[Tuple[str, str]] = None

    debug: bool = False
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url and freeze mutable dicts."""
        for name in ('headers', 'query_params', 'form_params'):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _freeze_dict(value))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        retry_max: int = DEFAULT_RETRY_MAX,
        headers: Optional[Dict[str, str]] = None,
        user_agent: Optional[str] = None,
        debug: bool = False,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout: Таймаут (число = read, (connect, read) или TimeoutConfig)
            retry_max: Максимум попыток на один execute
            headers: Заголовки
            user_agent: Значение User-Agent (дописывается в headers)
            debug: Режим отладки
            logging: Конфигурация логирования

        Returns:
            ClientConfig instance

        Examples:
            >>> config = ClientConfig.create(timeout=60)
            >>> config = ClientConfig.create(timeout=(5, 60), retry_max=3)
        """
        merged_headers = dict(headers or {})
        if user_agent:
            merged_headers["User-Agent"] = user_agent

        return cls(
            base_url=base_url,
            headers=merged_headers,
            timeout=TimeoutConfig.from_value(timeout),
            retry=RetryConfig(max_attempts=retry_max),
            debug=debug,
            logging=logging,
            **kwargs
        )
