"""
Response schemas for API endpoints.

This module exports all response schemas for easy access.
"""

from fastquery.schemas.response.base import BaseResponse
from fastquery.schemas.response.error import ErrorInfo, ErrorResponse
from fastquery.schemas.response.list import (
    CursorPagination,
    OffsetPagination,
    PaginationLinks,
    QueryResult,
)

__all__ = [
    "BaseResponse",
    "ErrorResponse",
    "ErrorInfo",
    "QueryResult",
    "OffsetPagination",
    "CursorPagination",
    "PaginationLinks",
]
