"""
Logging module for FastQuery.

The package logger (``fastquery``) is configured from application
settings by ``setup_logging``; engine modules log beneath it.

Limitations:
- Only console (stdout) logging is supported out of the box.
- JSON logs include timestamp, level, logger name and message by default.
"""

from fastquery.logging.formatters import JsonFormatter
from fastquery.logging.manager import (
    PACKAGE_LOGGER,
    Logger,
    ensure_logger,
    get_logger,
    setup_logger,
    setup_logging,
)

__all__ = [
    "Logger",
    "get_logger",
    "ensure_logger",
    "setup_logger",
    "setup_logging",
    "PACKAGE_LOGGER",
    "JsonFormatter",
]
