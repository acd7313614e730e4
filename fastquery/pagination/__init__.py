"""
Pagination, filtering and sorting query engine.

Typical flow for a list endpoint:

1. ``parse_query_params`` turns the query string into a QueryRequest
2. ``QueryBuilder.build`` turns the request into count and data descriptors
3. the caller runs both descriptors against a store
4. ``build_response`` wraps the page into a QueryResult envelope

``fastquery.db.repository.PaginatedRepository`` runs steps 2 to 4 for
SQLAlchemy models.
"""

from fastquery.pagination.builder import (
    QueryBuilder,
    build_queries,
    filter_to_predicate,
    search_predicate,
)
from fastquery.pagination.config import QueryConfig
from fastquery.pagination.cursor import (
    create_cursor,
    decode_cursor,
    encode_cursor,
    extract_cursor_id,
    validate_cursor,
)
from fastquery.pagination.links import LinkBuilder, build_links
from fastquery.pagination.parser import (
    parse_filter_param,
    parse_filter_string,
    parse_query_params,
    parse_sort_string,
)
from fastquery.pagination.request import QueryRequest
from fastquery.pagination.response import ResponseBuilder, build_response
from fastquery.pagination.store import (
    AnyOf,
    Comparison,
    Limit,
    Membership,
    NullCheck,
    Offset,
    Order,
    Pattern,
    Predicate,
    QueryableStore,
    QueryDescriptor,
    Range,
    Where,
)
from fastquery.pagination.types import (
    CursorData,
    Filter,
    FilterOperator,
    PaginationMode,
    SortDirection,
    SortField,
)

__all__ = [
    # Types
    "PaginationMode",
    "SortDirection",
    "SortField",
    "FilterOperator",
    "Filter",
    "CursorData",
    "QueryRequest",
    "QueryConfig",
    # Parsing
    "parse_query_params",
    "parse_sort_string",
    "parse_filter_string",
    "parse_filter_param",
    # Cursors
    "encode_cursor",
    "decode_cursor",
    "create_cursor",
    "extract_cursor_id",
    "validate_cursor",
    # Query building
    "QueryBuilder",
    "build_queries",
    "filter_to_predicate",
    "search_predicate",
    "QueryableStore",
    "QueryDescriptor",
    "Predicate",
    "Comparison",
    "Pattern",
    "Membership",
    "NullCheck",
    "Range",
    "AnyOf",
    "Where",
    "Order",
    "Limit",
    "Offset",
    # Responses
    "ResponseBuilder",
    "build_response",
    "LinkBuilder",
    "build_links",
]
