"""
Common schemas for FastQuery.

This module provides reusable Pydantic schemas for API responses and metadata.

Limitations:
- Envelope structure is fixed; customization requires subclassing or code changes
- Only basic metadata (timestamp, version) is included in error responses
"""

from fastquery.schemas.metadata import BaseMetadata, ResponseMetadata
from fastquery.schemas.response import (
    BaseResponse,
    CursorPagination,
    ErrorInfo,
    ErrorResponse,
    OffsetPagination,
    PaginationLinks,
    QueryResult,
)

__all__ = [
    # Metadata schemas
    "BaseMetadata",
    "ResponseMetadata",
    # Response schemas
    "BaseResponse",
    "ErrorResponse",
    "ErrorInfo",
    "QueryResult",
    "OffsetPagination",
    "CursorPagination",
    "PaginationLinks",
]
