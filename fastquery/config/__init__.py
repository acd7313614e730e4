"""
Configuration module for FastQuery.

This module provides:
- BaseAppSettings: The base class for application settings, supporting environment variable loading.
- Environment-specific settings (development, testing, production).
- get_settings: Factory for loading the correct settings class based on APP_ENV.

Example environment variables (to be placed in your consuming project's .env or environment):

# Application
APP_NAME="FastQuery"
APP_ENV="development"  # Options: development, testing, production
VERSION="0.1.0"
DEBUG=true
LOG_LEVEL=INFO
LOG_JSON=false

# Database configuration
DATABASE_URL="postgresql+asyncpg://<username>:<password>@<host>:<port>/<database_name>"
DB_ECHO=false
DB_POOL_SIZE=5

# Pagination configuration
PAGINATION_DEFAULT_PAGE_SIZE=20
PAGINATION_MAX_PAGE_SIZE=100
"""

from .base import BaseAppSettings
from .settings import get_settings

__all__ = [
    "BaseAppSettings",
    "get_settings",
]
