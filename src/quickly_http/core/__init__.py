"""Core модули quickly-http."""

from .config import (
    TimeoutConfig,
    RetryConfig,
    ClientConfig,
)
from .retry_engine import RetryEngine
from .exceptions import (
    HTTPClientException,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    RequestCancelledError,
    FatalError,
    ConfigurationError,
    InvalidURLError,
    InvalidResponseError,
    EncodingError,
    TooManyRetriesError,
    classify_requests_exception,
)
from .assembler import BACKGROUND, WireRequest, assemble, build_url
from .executor import Executor
from .http_client import Client, UserInfo
from .request import Request
from .response import Response
from .transport import RequestsTransport, Transport

__all__ = [
    # Config
    "TimeoutConfig",
    "RetryConfig",
    "ClientConfig",
    # Retry
    "RetryEngine",
    # Core
    "Client",
    "UserInfo",
    "Request",
    "Response",
    "Executor",
    "WireRequest",
    "BACKGROUND",
    "assemble",
    "build_url",
    "Transport",
    "RequestsTransport",
    # Exceptions
    "HTTPClientException",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "RequestCancelledError",
    "FatalError",
    "ConfigurationError",
    "InvalidURLError",
    "InvalidResponseError",
    "EncodingError",
    "TooManyRetriesError",
    "classify_requests_exception",
]
