"""
Response builder for paginated list endpoints.

Turns a page of results plus the facts the caller observed while running
the queries (total count, number of rows, first and last ids) into a
QueryResult envelope. Building is deterministic and never touches the store.
"""

import math
from typing import Any, Dict, Optional, Sequence

from fastquery.pagination.cursor import create_cursor
from fastquery.pagination.links import build_links
from fastquery.pagination.request import QueryRequest
from fastquery.schemas.response.list import (
    CursorPagination,
    OffsetPagination,
    QueryResult,
)


class ResponseBuilder:
    """
    Fluent builder for QueryResult envelopes.

    Example:
        ```python
        result = (
            ResponseBuilder()
            .with_data(items)
            .with_request(request)
            .with_total(total)
            .with_count(len(items))
            .with_cursor_ids(items[0].id, items[-1].id)
            .build()
        )
        ```
    """

    def __init__(self):
        self.data: Sequence[Any] = []
        self.request: Optional[QueryRequest] = None
        self.total = 0
        self.count = 0
        self.first_id = 0
        self.last_id = 0
        self.meta: Dict[str, Any] = {}

    def with_data(self, data: Sequence[Any]) -> "ResponseBuilder":
        self.data = data
        return self

    def with_request(self, request: QueryRequest) -> "ResponseBuilder":
        self.request = request
        return self

    def with_total(self, total: int) -> "ResponseBuilder":
        self.total = total
        return self

    def with_count(self, count: int) -> "ResponseBuilder":
        self.count = count
        return self

    def with_cursor_ids(self, first_id: int, last_id: int) -> "ResponseBuilder":
        self.first_id = first_id
        self.last_id = last_id
        return self

    def with_meta(self, key: str, value: Any) -> "ResponseBuilder":
        self.meta[key] = value
        return self

    def build(self) -> QueryResult:
        """
        Build the envelope.

        A builder without a request behaves as if it was given a default
        offset request (page 1, page size 20).
        """
        request = self.request or QueryRequest()

        if request.is_cursor_based:
            pagination = self._cursor_pagination(request)
        else:
            pagination = self._offset_pagination(request)

        return QueryResult(
            success=True,
            data=list(self.data),
            pagination=pagination,
            links=build_links(request, pagination),
            applied_filters=[f.to_dict() for f in request.filters],
            applied_sort=[s.to_dict() for s in request.sort],
            meta=dict(self.meta) if self.meta else None,
        )

    def _offset_pagination(self, request: QueryRequest) -> OffsetPagination:
        total_pages = 0
        if request.page_size > 0:
            total_pages = math.ceil(self.total / request.page_size)

        return OffsetPagination(
            page=request.page,
            page_size=request.page_size,
            total_items=self.total,
            total_pages=total_pages,
            has_next_page=request.page < total_pages,
            has_prev_page=request.page > 1,
        )

    def _cursor_pagination(self, request: QueryRequest) -> CursorPagination:
        # A full page is taken to mean more rows may follow; no lookahead
        # row is fetched, so an exact multiple of page_size over-reports.
        return CursorPagination(
            page_size=request.page_size,
            start_cursor=create_cursor(self.first_id) if self.first_id > 0 else None,
            end_cursor=create_cursor(self.last_id) if self.last_id > 0 else None,
            has_next_page=self.count >= request.page_size,
            has_prev_page=bool(request.cursor or request.after),
            count=self.count,
        )


def build_response(
    data: Sequence[Any],
    request: QueryRequest,
    total: int,
    result_count: int,
    first_id: int = 0,
    last_id: int = 0,
    meta: Optional[Dict[str, Any]] = None,
) -> QueryResult:
    """
    Build a QueryResult in one call.

    Args:
        data: Items of the current page
        request: Parsed request
        total: Number of items matching the filters (offset mode)
        result_count: Number of items in this page
        first_id: Id of the first returned item (cursor mode, 0 for none)
        last_id: Id of the last returned item (cursor mode, 0 for none)
        meta: Optional caller supplied metadata

    Returns:
        The response envelope
    """
    builder = (
        ResponseBuilder()
        .with_data(data)
        .with_request(request)
        .with_total(total)
        .with_count(result_count)
        .with_cursor_ids(first_id, last_id)
    )
    for key, value in (meta or {}).items():
        builder.with_meta(key, value)
    return builder.build()
