"""
Logging setup for mpctrack.

The package only installs a NullHandler on import. Hosts that want the
controller's output on stderr (or in a file) call setup_logging() once.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "MPCTRACK_LOG_LEVEL"
LOG_FORMAT_ENV = "MPCTRACK_LOG_FORMAT"
LOG_FILE_ENV = "MPCTRACK_LOG_FILE"

ROOT_LOGGER_NAME = "mpctrack"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'

_handlers: list = []

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_log_format() -> str:
    """Get log format from environment variable."""
    format_type = os.environ.get(LOG_FORMAT_ENV, "default").lower()
    if format_type == "json":
        return JSON_FORMAT
    return DEFAULT_FORMAT


def setup_logging(
    level: Optional[int] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the mpctrack logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Log level (default: from env or INFO).
        format_str: Log format string (default: from env or DEFAULT_FORMAT).
        log_file: Optional file to write logs to (default: from env).

    Returns:
        The configured mpctrack logger.
    """
    global _handlers

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers = []

    logger.setLevel(level or get_log_level())
    formatter = logging.Formatter(format_str or get_log_format())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    _handlers.append(console_handler)

    file_path = log_file or os.environ.get(LOG_FILE_ENV)
    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)

    for handler in _handlers:
        logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger inside the mpctrack namespace.

    Args:
        name: Logger name; module names already under mpctrack are kept as is,
              anything else is prefixed with 'mpctrack.'.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
