"""
Log handlers: stderr console and rotating file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, List, TextIO


def _configure(
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]],
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or []:
        handler.addFilter(f)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None,
    stream: Optional[TextIO] = None,
) -> logging.StreamHandler:
    """
    Create console handler.

    Writes to stderr unless another stream is given, so client logs never
    mix with a program's stdout output.

    Example:
        >>> handler = create_console_handler(logging.DEBUG, TextFormatter())
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _configure(handler, level, formatter, filters)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    filters: Optional[List[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Create rotating file handler.

    The parent directory is created when missing. The file is rotated at
    ``max_bytes`` and ``backup_count`` old files are kept
    (app.log, app.log.1, ... app.log.N).
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    _configure(handler, level, formatter, filters)
    return handler
