"""
Pydantic settings for environment configuration.

Every ClientConfig option is a flat ``QUICKLY_HTTP_*`` variable.
"""

from typing import Dict, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Client configuration from environment variables.

    Reads from:
    1. Environment variables (QUICKLY_HTTP_*)
    2. .env file
    3. Defaults

    Example .env file:
        QUICKLY_HTTP_BASE_URL=https://api.example.com
        QUICKLY_HTTP_HEADERS={"Accept": "application/json"}
        QUICKLY_HTTP_TIMEOUT_READ=10
        QUICKLY_HTTP_RETRY_MAX_ATTEMPTS=3
        QUICKLY_HTTP_AUTH_TOKEN=secret-token
        QUICKLY_HTTP_LOG_LEVEL=WARNING

    Usage:
        >>> settings = ClientSettings()
        >>> settings.base_url
        'https://api.example.com'
    """

    model_config = SettingsConfigDict(
        env_prefix='QUICKLY_HTTP_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Request defaults
    base_url: str = Field(default="", description="Base URL for all requests")
    method: str = Field(default="GET")
    headers: Dict[str, str] = Field(default_factory=dict, description="JSON object")
    user_agent: Optional[str] = None
    cookies: str = Field(default="", description='Cookie string "k=v; k2=v2"')
    proxy_url: Optional[str] = None
    debug: bool = False

    # Auth
    auth_token: str = ""
    auth_scheme: str = "Bearer"
    authorization_header: str = "Authorization"
    basic_auth_username: Optional[str] = None
    basic_auth_password: Optional[str] = None

    # Timeouts
    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)

    # Retry (max_attempts < 1 is clamped to 1 by RetryConfig)
    retry_max_attempts: int = Field(default=5)
    retry_backoff_base: float = Field(default=0.0, ge=0)
    retry_backoff_factor: float = Field(default=2.0, ge=1.0)
    retry_backoff_max: float = Field(default=60.0, ge=0)
    retry_backoff_jitter: bool = True

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    log_format: Literal["json", "text", "colored"] = "text"
    log_enable_console: bool = True
    log_enable_file: bool = False
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = True

    @field_validator('method')
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.upper()

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator('basic_auth_password')
    @classmethod
    def validate_basic_auth(cls, v: Optional[str], info) -> Optional[str]:
        """Username and password are set together."""
        if v is not None and info.data.get('basic_auth_username') is None:
            raise ValueError("basic_auth_password requires basic_auth_username")
        return v

    @model_validator(mode='after')
    def validate_log_file_path(self) -> 'ClientSettings':
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self
