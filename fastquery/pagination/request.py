"""
Structured pagination request.

QueryRequest is the parsed form of a list endpoint's query string: the
pagination mode and position, requested sort and filters, search term and
the raw pieces needed to rebuild navigation links.
"""

from typing import List, Optional, Sequence, Tuple

from fastquery.pagination.config import QueryConfig
from fastquery.pagination.types import Filter, PaginationMode, SortField


class QueryRequest:
    """
    Pagination, filtering, sorting and search parameters of one request.

    Attributes:
        mode: Offset or cursor pagination
        page: Page number (1-indexed, offset mode)
        page_size: Number of items per page
        cursor: Opaque cursor to continue from (cursor mode)
        after: Opaque cursor, forward pagination alias
        before: Opaque cursor, backward pagination alias
        first: Requested page size for forward pagination
        last: Requested page size for backward pagination
        sort: Requested sort fields, in priority order
        sort_raw: Sort parameter exactly as received
        filters: Requested filters
        filter_raw: Filter parameter exactly as received
        filter_params: Bracket filter parameters exactly as received
        search: Search term
        search_fields: Columns to search, overriding the configured ones
        include_total: Whether the caller wants the total count
        base_url: Request path used to build navigation links

    Example:
        ```python
        request = QueryRequest(page=2, page_size=10)
        assert request.offset() == 10
        ```
    """

    def __init__(
        self,
        mode: PaginationMode = PaginationMode.OFFSET,
        page: int = 1,
        page_size: int = 20,
        cursor: str = "",
        after: str = "",
        before: str = "",
        first: int = 0,
        last: int = 0,
        sort: Optional[Sequence[SortField]] = None,
        sort_raw: str = "",
        filters: Optional[Sequence[Filter]] = None,
        filter_raw: str = "",
        filter_params: Optional[Sequence[Tuple[str, str]]] = None,
        search: str = "",
        search_fields: Optional[Sequence[str]] = None,
        include_total: bool = True,
        base_url: str = "",
    ):
        self.mode = PaginationMode(mode)
        self.page = page
        self.page_size = page_size
        self.cursor = cursor
        self.after = after
        self.before = before
        self.first = first
        self.last = last
        self.sort: List[SortField] = list(sort or [])
        self.sort_raw = sort_raw
        self.filters: List[Filter] = list(filters or [])
        self.filter_raw = filter_raw
        self.filter_params: List[Tuple[str, str]] = list(filter_params or [])
        self.search = search
        self.search_fields: List[str] = list(search_fields or [])
        self.include_total = include_total
        self.base_url = base_url

    def validate(self, config: Optional[QueryConfig] = None) -> "QueryRequest":
        """
        Bring page and page size into acceptable ranges in place.

        Args:
            config: Supplies the default and maximum page size

        Returns:
            The request itself, for chaining
        """
        if self.page <= 0:
            self.page = 1
        self.page_size = (config or QueryConfig()).clamp_page_size(self.page_size)
        return self

    def offset(self) -> int:
        """
        Calculate the number of items to skip.

        Returns:
            Number of items to skip for the current page
        """
        return (max(self.page, 1) - 1) * self.page_size

    @property
    def is_cursor_based(self) -> bool:
        return self.mode == PaginationMode.CURSOR

    @property
    def has_filters(self) -> bool:
        return len(self.filters) > 0

    @property
    def has_sort(self) -> bool:
        return len(self.sort) > 0

    @property
    def has_search(self) -> bool:
        return self.search != ""

    def __repr__(self) -> str:
        return (
            f"QueryRequest(mode={self.mode}, page={self.page}, "
            f"page_size={self.page_size}, cursor={self.cursor!r}, "
            f"sort={self.sort!r}, filters={self.filters!r}, search={self.search!r})"
        )
