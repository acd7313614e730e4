"""
Error handling module for FastQuery.

This module provides standardized error handling including custom exceptions,
error responses, and exception handlers.

Limitations:
- Error response structure is fixed; customization requires code changes.
- Only HTTP-style errors are supported (exceptions must inherit from AppError or be handled by FastAPI).
"""

from fastquery.errors.exceptions import (
    AppError,
    BadRequestError,
    DBError,
    InvalidCursorError,
    NotFoundError,
    ValidationError,
)
from fastquery.errors.handlers import register_exception_handlers
from fastquery.errors.manager import setup_errors

__all__ = [
    # Main setup function
    "setup_errors",
    # Handler registration
    "register_exception_handlers",
    # Exception classes
    "AppError",
    "ValidationError",
    "NotFoundError",
    "BadRequestError",
    "DBError",
    "InvalidCursorError",
]
