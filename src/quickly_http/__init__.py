"""quickly-http: fluent HTTP client with bounded retries and a cached response body."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .api import get, head, post, post_form, post_json
from .core.http_client import Client, UserInfo
from .core.request import Request
from .core.response import Response
from .core.assembler import WireRequest
from .core.transport import RequestsTransport, Transport
from .core.config import (
    ClientConfig,
    TimeoutConfig,
    RetryConfig,
)
from .core.env_config import load_from_env, ConfigFileLoader
from .core.logging import LoggingConfig, HTTPClientLogger
from .core.exceptions import (
    HTTPClientException,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    RequestCancelledError,
    ConfigurationError,
    InvalidURLError,
    InvalidResponseError,
    EncodingError,
    TooManyRetriesError,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
logging.getLogger('quickly_http').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("quickly-http")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Shortcuts
    "get",
    "head",
    "post",
    "post_form",
    "post_json",

    # Core
    "Client",
    "UserInfo",
    "Request",
    "Response",
    "WireRequest",
    "Transport",
    "RequestsTransport",

    # Config
    "ClientConfig",
    "TimeoutConfig",
    "RetryConfig",
    "LoggingConfig",
    "HTTPClientLogger",
    "load_from_env",
    "ConfigFileLoader",

    # Exceptions
    "HTTPClientException",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "RequestCancelledError",
    "ConfigurationError",
    "InvalidURLError",
    "InvalidResponseError",
    "EncodingError",
    "TooManyRetriesError",

    # Version
    "__version__",
]
