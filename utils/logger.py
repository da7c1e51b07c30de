"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.
Level, format and an optional log file come from `config` (LOG_* variables).
"""

import logging
import sys
from typing import Optional

import config

_handlers: list[logging.Handler] = []
_initialized = False


def configure_logging(
    level: str = config.LOG_LEVEL,
    fmt: str = config.LOG_FORMAT,
    datefmt: str = config.LOG_DATE_FORMAT,
    log_file: Optional[str] = config.LOG_FILE,
) -> None:
    """
    Install the stdout handler (and a file handler when `log_file` is set)
    on the root logger. Calling again replaces the handlers installed by the
    previous call.
    """
    global _initialized
    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    formatter = logging.Formatter(fmt, datefmt)
    _handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        _handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in _handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level.upper())
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A configured logging.Logger.
    """
    if not _initialized:
        configure_logging()
    return logging.getLogger(name)
