"""
Leveled logger used by Client.

Messages carry structured key/value fields; fields are masked before they
reach any handler.
"""

import itertools
import logging
from typing import Optional, Any, Dict
from urllib.parse import urlsplit

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter, RECORD_ATTRS
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class HTTPClientLogger:
    """
    Leveled logger with structured fields.

    Features:
    - Console (stderr) and rotating file handlers
    - JSON, text and colored formats
    - Correlation id of the current execute() call
    - Authorization, cookies and tokens masked in every field

    Example:
        >>> logger = HTTPClientLogger(LoggingConfig.create(level="INFO"))
        >>> logger.warning("Request failed", url="https://api.com", attempt=1)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "quickly_http"):
        """
        Args:
            config: Logging configuration (defaults if None)
            name: Name of the underlying ``logging.Logger``
        """
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self._get_level(self.config.level)
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Re-creating a logger with the same name replaces its handlers
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        filters = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(
                create_console_handler(level=level, formatter=formatter, filters=filters)
            )

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(
                create_file_handler(
                    file_path=self.config.file_path,
                    level=level,
                    formatter=formatter,
                    max_bytes=self.config.max_bytes,
                    backup_count=self.config.backup_count,
                    filters=filters
                )
            )

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    @staticmethod
    def _extra(fields: Dict[str, Any]) -> Dict[str, Any]:
        """Masked fields; names clashing with LogRecord attributes get a prefix."""
        masked = mask_sensitive_data(fields)
        return {
            (f"field_{key}" if key in RECORD_ATTRS else key): value
            for key, value in masked.items()
        }

    def is_enabled_for(self, level: LogLevel) -> bool:
        return self._logger.isEnabledFor(self._get_level(level))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=self._extra(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log info message.

        Example:
            >>> logger.info("Received response", status_code=200)
        """
        self._logger.info(message, extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=self._extra(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=self._extra(kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(message, extra=self._extra(kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log error with the traceback of the exception being handled."""
        self._logger.exception(message, extra=self._extra(kwargs))

    def close(self) -> None:
        """
        Flush and close handlers. Idempotent.

        Example:
            >>> with HTTPClientLogger(config) as logger:
            ...     logger.info("Processing...")
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.flush()
            handler.close()

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


_client_ids = itertools.count(1)


def create_client_logger(base_url: Optional[str], config: Optional[LoggingConfig] = None) -> HTTPClientLogger:
    """
    Logger for one client, named after the host of its base URL.

    Every call gets its own ``logging.Logger``, so two clients never share
    handlers or levels.

    Example:
        >>> create_client_logger("https://api.example.com/v1").name
        'quickly_http.api.example.com.1'
    """
    host = urlsplit(base_url).netloc if base_url else ""
    return HTTPClientLogger(
        config=config,
        name=f"quickly_http.{host or 'client'}.{next(_client_ids)}",
    )


def release_client_logger(logger: HTTPClientLogger) -> None:
    """
    Close a logger made by create_client_logger and drop it from the registry.

    The ``logging`` module keeps every named logger forever; client loggers
    have unique names, so without this each client would leave one behind.
    """
    logger.close()

    manager = logging.Logger.manager
    with logging._lock:
        record_logger = manager.loggerDict.pop(logger.name, None)
        if record_logger is None:
            return

        # Placeholders of parent names still reference the child logger
        name = logger.name
        while "." in name:
            name = name.rpartition(".")[0]
            holder = manager.loggerDict.get(name)
            if isinstance(holder, logging.PlaceHolder):
                holder.loggerMap.pop(record_logger, None)
                if not holder.loggerMap:
                    del manager.loggerDict[name]
