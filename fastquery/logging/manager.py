"""
Logging configuration for FastQuery.

The engine modules (parser, builder, store, repository) log through
``logging.getLogger(__name__)``, so everything they emit ends up under the
``fastquery`` package logger. ``setup_logging`` configures that logger once
from the application settings; ``get_logger`` and ``ensure_logger`` give
standalone loggers for code that wants its own handler.
"""

import logging
import sys
from typing import Optional

from fastquery.config.base import BaseAppSettings
from fastquery.logging.formatters import JsonFormatter

Logger = logging.Logger

PACKAGE_LOGGER = "fastquery"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level_name(settings: Optional[BaseAppSettings]) -> str:
    return str(getattr(settings, "LOG_LEVEL", None) or "INFO")


def setup_logger(
    name: str,
    level: str = "INFO",
    format: str = DEFAULT_FORMAT,
    debug: bool = False,
    json_format: bool = False,
) -> logging.Logger:
    """
    Create and configure a logger with a single stdout handler.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log message format (ignored if json_format=True)
        debug: If True, sets level to DEBUG regardless of level parameter
        json_format: If True, outputs logs in JSON format

    Returns:
        Configured logger instance
    """
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(format))
    logger.addHandler(handler)

    return logger


def setup_logging(settings: Optional[BaseAppSettings] = None) -> logging.Logger:
    """
    Configure the ``fastquery`` package logger from settings.

    DEBUG turns on the engine's DEBUG records (skipped filters, sorts and
    search fields, ignored cursors); otherwise LOG_LEVEL applies.

    Args:
        settings: Application settings; defaults apply when omitted

    Returns:
        The package logger
    """
    return setup_logger(
        PACKAGE_LOGGER,
        level=_level_name(settings),
        debug=bool(getattr(settings, "DEBUG", False)),
        json_format=bool(getattr(settings, "LOG_JSON", False)),
    )


def get_logger(
    name: str,
    settings: Optional[BaseAppSettings] = None,
    json_format: Optional[bool] = None,
) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (usually __name__)
        settings: Optional application settings (DEBUG, LOG_LEVEL, LOG_JSON)
        json_format: Overrides the LOG_JSON setting when given

    Returns:
        Configured logger instance
    """
    if json_format is None:
        json_format = bool(getattr(settings, "LOG_JSON", False))

    return setup_logger(
        name,
        level=_level_name(settings),
        debug=bool(getattr(settings, "DEBUG", False)),
        json_format=json_format,
    )


def ensure_logger(
    logger: Optional[logging.Logger] = None,
    name: Optional[str] = None,
    settings: Optional[BaseAppSettings] = None,
    json_format: Optional[bool] = None,
) -> logging.Logger:
    """
    Return ``logger`` if given, otherwise a new logger named ``name``.

    Raises:
        ValueError: If neither a logger nor a name is given
    """
    if logger:
        return logger

    if not name:
        raise ValueError("Module name must be provided when logger is not specified")

    return get_logger(name, settings, json_format)
