"""
Configuration file loader for YAML and JSON files.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..config import ClientConfig, RetryConfig, TimeoutConfig
from ..exceptions import ConfigurationError
from ..logging import LoggingConfig

CONFIG_FILE_ENV = "QUICKLY_HTTP_CONFIG_FILE"
CONFIG_SECTION = "quickly_http"

_MAPPING_KEYS = ("headers", "query_params", "form_params")
_STRING_KEYS = ("base_url", "method", "cookies", "body", "proxy_url",
                "auth_token", "auth_scheme", "authorization_header")


class ConfigValidationError(ConfigurationError):
    """Конфигурационный файл или переменные окружения невалидны."""


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Конфиг может лежать в корне файла или в секции ``quickly_http``.

    Example config.yaml:
        quickly_http:
          base_url: https://api.example.com
          headers:
            Accept: application/json
          timeout:
            connect: 3
            read: 10
          retry:
            max_attempts: 3
          basic_auth:
            username: alice
            password: secret
          logging:
            level: INFO
            format: json

    Examples:
        >>> config = ConfigFileLoader.from_yaml("config.yaml")
        >>> config = ConfigFileLoader.from_file("config.json")  # Auto-detect
        >>> config = ConfigFileLoader.from_env_path()  # From QUICKLY_HTTP_CONFIG_FILE
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}") from e

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}") from e

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> ClientConfig:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            return ConfigFileLoader.from_yaml(path)
        if suffix == ".json":
            return ConfigFileLoader.from_json(path)
        raise ValueError(
            f"Unsupported config file format: {suffix}. "
            f"Supported formats: .yaml, .yml, .json"
        )

    @staticmethod
    def from_env_path() -> Optional[ClientConfig]:
        """
        Загрузить из пути в переменной QUICKLY_HTTP_CONFIG_FILE.

        Returns:
            ClientConfig или None, если переменная не задана
        """
        config_path = os.environ.get(CONFIG_FILE_ENV)
        if not config_path:
            return None
        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _section(config_data: Dict[str, Any], name: str, source: str) -> Dict[str, Any]:
        value = config_data.get(name, {})
        if not isinstance(value, dict):
            raise ConfigValidationError(f"{name} must be a dictionary in {source}")
        return value

    @staticmethod
    def _build_config(data: Any, source: str) -> ClientConfig:
        """
        Build ClientConfig from parsed data.

        Raises:
            ConfigValidationError: If config is invalid
        """
        if not data:
            raise ConfigValidationError(f"Empty config file: {source}")

        config_data = data.get(CONFIG_SECTION, data) if isinstance(data, dict) else data
        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        section = ConfigFileLoader._section
        try:
            kwargs: Dict[str, Any] = {
                key: str(config_data[key]) for key in _STRING_KEYS if key in config_data
            }
            for key in _MAPPING_KEYS:
                if key in config_data:
                    kwargs[key] = {
                        str(k): str(v) for k, v in section(config_data, key, source).items()
                    }

            if "debug" in config_data:
                kwargs["debug"] = bool(config_data["debug"])

            if "timeout" in config_data:
                timeout_data = config_data["timeout"]
                if isinstance(timeout_data, (int, float)):
                    kwargs["timeout"] = TimeoutConfig.from_value(timeout_data)
                else:
                    timeout_data = section(config_data, "timeout", source)
                    kwargs["timeout"] = TimeoutConfig(
                        connect=timeout_data.get("connect", 5),
                        read=timeout_data.get("read", 30),
                    )

            if "retry" in config_data:
                retry_data = section(config_data, "retry", source)
                allowed = {"max_attempts", "backoff_base", "backoff_factor",
                           "backoff_max", "backoff_jitter"}
                unknown = set(retry_data) - allowed
                if unknown:
                    raise ConfigValidationError(
                        f"Unknown retry options {sorted(unknown)} in {source}"
                    )
                kwargs["retry"] = RetryConfig(**retry_data)

            if "basic_auth" in config_data:
                auth_data = section(config_data, "basic_auth", source)
                if "username" not in auth_data:
                    raise ConfigValidationError(f"basic_auth.username is required in {source}")
                kwargs["basic_auth"] = (
                    str(auth_data["username"]), str(auth_data.get("password", ""))
                )

            if "logging" in config_data:
                logging_data = section(config_data, "logging", source)
                kwargs["logging"] = LoggingConfig.create(
                    level=logging_data.get("level", "DEBUG"),
                    format=logging_data.get("format", "text"),
                    enable_console=logging_data.get("enable_console", True),
                    enable_file=logging_data.get("enable_file", False),
                    file_path=logging_data.get("file_path"),
                    enable_correlation_id=logging_data.get("enable_correlation_id", True),
                    extra_fields=logging_data.get("extra_fields"),
                )

            return ClientConfig(**kwargs)

        except (ValueError, TypeError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e
