"""
Log filters: correlation id of the current execute() and static extra fields.
"""

import logging
import threading
from typing import Dict, Any, Optional


# Correlation id is per thread: each execute() runs on the caller's thread
_correlation_id_storage = threading.local()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set correlation id for the current thread.

    Example:
        >>> set_correlation_id("3f6c...")
        >>> logger.info("Request failed")  # correlation_id=3f6c...
    """
    _correlation_id_storage.value = correlation_id


def get_correlation_id() -> Optional[str]:
    return getattr(_correlation_id_storage, 'value', None)


def clear_correlation_id() -> None:
    if hasattr(_correlation_id_storage, 'value'):
        del _correlation_id_storage.value


class CorrelationIdFilter(logging.Filter):
    """
    Adds ``correlation_id`` to records logged during an execute() call.

    All attempts of one call share the id, so a retried request can be
    followed through the log.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment) to every record.

    Fields already present on the record are not overwritten.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "billing"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
