"""
Loading ClientConfig from the environment and from config files.

Example:
    >>> from quickly_http.core.env_config import load_from_env, ConfigFileLoader
    >>>
    >>> config = load_from_env()                      # QUICKLY_HTTP_* + .env
    >>> config = load_from_env(base_url="https://custom.api.com")
    >>> config = ConfigFileLoader.from_file("quickly_http.yaml")
"""

from .file_loader import ConfigFileLoader, ConfigValidationError
from .loader import load_from_env, settings_to_config
from .settings import ClientSettings

__all__ = [
    "load_from_env",
    "settings_to_config",
    "ClientSettings",
    "ConfigFileLoader",
    "ConfigValidationError",
]
