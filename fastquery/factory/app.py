"""
FastAPI application factory module.

This module provides a function to configure FastAPI applications
with standardized settings, error handling and database lifecycle.
"""

from typing import Optional

from fastapi import FastAPI

from fastquery.config import BaseAppSettings, get_settings
from fastquery.db import setup_db
from fastquery.errors import setup_errors
from fastquery.logging import setup_logging


def configure_app(app: FastAPI, settings: Optional[BaseAppSettings] = None) -> None:
    """
    Configure a FastAPI application with standard settings and error handling.

    The application instance should be created by the main application and passed
    to this function for configuration.

    Args:
        app: The FastAPI application to configure
        settings: Optional application settings, if not provided will be loaded
                 from environment
    """
    app_settings = settings or get_settings()

    # Engine modules log under the package logger configured here
    logger = setup_logging(app_settings)

    # Configure title and version if not already set
    if not app.title:
        app.title = app_settings.APP_NAME
    if not app.version:
        app.version = app_settings.VERSION

    app.debug = app_settings.DEBUG

    # Configure error handling (required)
    setup_errors(app, app_settings, logger)

    # Configure database (only when a URL is configured)
    if app_settings.DATABASE_URL:
        setup_db(app, app_settings, logger)
    else:
        logger.debug("DATABASE_URL not set, skipping database setup")
