"""
Configuration loader from environment variables and .env files.
"""

from typing import Optional

from pydantic import ValidationError

from ..config import ClientConfig, RetryConfig, TimeoutConfig
from ..logging.config import LoggingConfig
from .file_loader import ConfigValidationError
from .settings import ClientSettings


def load_from_env(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit ClientSettings fields
    2. Environment variables (QUICKLY_HTTP_*)
    3. .env file (``env_file`` or ./.env)
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: ClientSettings field overrides (base_url, timeout_read, ...)

    Returns:
        ClientConfig instance

    Raises:
        ConfigValidationError: A value does not pass validation

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(env_file=".env.staging", retry_max_attempts=2)
        >>> client = Client(config=config)
    """
    try:
        settings = ClientSettings(_env_file=env_file or '.env', **overrides)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid environment configuration: {e}") from e

    return settings_to_config(settings)


def settings_to_config(settings: ClientSettings) -> ClientConfig:
    """Convert validated settings into a frozen ClientConfig."""
    headers = dict(settings.headers)
    if settings.user_agent:
        headers["User-Agent"] = settings.user_agent

    basic_auth = None
    if settings.basic_auth_username is not None:
        basic_auth = (settings.basic_auth_username, settings.basic_auth_password or "")

    logging_config = LoggingConfig.create(
        level=settings.log_level,
        format=settings.log_format,
        enable_console=settings.log_enable_console,
        enable_file=settings.log_enable_file,
        file_path=settings.log_file_path,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        enable_correlation_id=settings.log_enable_correlation_id,
    )

    return ClientConfig(
        base_url=settings.base_url or None,
        method=settings.method,
        headers=headers,
        cookies=settings.cookies,
        proxy_url=settings.proxy_url,
        auth_token=settings.auth_token,
        auth_scheme=settings.auth_scheme,
        authorization_header=settings.authorization_header,
        basic_auth=basic_auth,
        debug=settings.debug,
        timeout=TimeoutConfig(
            connect=settings.timeout_connect,
            read=settings.timeout_read,
        ),
        retry=RetryConfig(
            max_attempts=settings.retry_max_attempts,
            backoff_base=settings.retry_backoff_base,
            backoff_factor=settings.retry_backoff_factor,
            backoff_max=settings.retry_backoff_max,
            backoff_jitter=settings.retry_backoff_jitter,
        ),
        logging=logging_config,
    )
