"""
HATEOAS navigation links for paginated responses.

Links are built from the request path, re-attaching the sort, filter,
bracket filter and search parameters exactly as they were received so that
following a link keeps every applied criterion.
"""

from typing import List, Optional, Tuple, Union
from urllib.parse import urlencode

from starlette.datastructures import URL, QueryParams

from fastquery.pagination.request import QueryRequest
from fastquery.schemas.response.list import (
    CursorPagination,
    OffsetPagination,
    PaginationLinks,
)

Pagination = Union[OffsetPagination, CursorPagination]


class LinkBuilder:
    """
    Builds navigation URLs for one request.

    Query keys are emitted in sorted order; repeated keys (``status[in]``)
    keep their original value order.
    """

    def __init__(self, request: QueryRequest):
        self.request = request

    def build(self, pagination: Pagination) -> PaginationLinks:
        """
        Build the links matching the pagination metadata.

        Args:
            pagination: Metadata computed for the current page

        Returns:
            Links; empty when the request carries no base URL
        """
        if not self.request.base_url:
            return PaginationLinks()

        if isinstance(pagination, CursorPagination):
            return self.cursor_links(pagination)
        return self.offset_links(pagination)

    def offset_links(self, pagination: OffsetPagination) -> PaginationLinks:
        page = self.request.page
        links = PaginationLinks(
            self_link=self.build_url(page=page),
            first=self.build_url(page=1),
        )

        if pagination.total_pages > 0:
            links.last = self.build_url(page=pagination.total_pages)
        if pagination.has_next_page:
            links.next = self.build_url(page=page + 1)
        if pagination.has_prev_page:
            links.prev = self.build_url(page=page - 1)

        return links

    def cursor_links(self, pagination: CursorPagination) -> PaginationLinks:
        links = PaginationLinks(
            self_link=self.build_url(type="cursor", cursor=self.request.cursor)
        )

        if pagination.has_next_page and pagination.end_cursor:
            links.next = self.build_url(type="cursor", cursor=pagination.end_cursor)

        return links

    def build_url(self, **params: Optional[Union[str, int]]) -> str:
        """
        Build a URL from the base URL, the preserved criteria and ``params``.

        Empty parameter values are left out.
        """
        url = URL(self.request.base_url)
        replaced = set(params) | {"page_size"} | {key for key, _ in self._preserved()}

        items = [
            (key, value)
            for key, value in QueryParams(url.query).multi_items()
            if key not in replaced
        ]
        items.extend(self._preserved())
        items.append(("page_size", str(self.request.page_size)))
        items.extend(
            (key, str(value)) for key, value in params.items() if value not in (None, "")
        )

        items.sort(key=lambda item: item[0])
        return str(url.replace(query=urlencode(items)))

    def _preserved(self) -> List[Tuple[str, str]]:
        preserved = []
        if self.request.sort_raw:
            preserved.append(("sort", self.request.sort_raw))
        if self.request.filter_raw:
            preserved.append(("filter", self.request.filter_raw))
        if self.request.search:
            preserved.append(("search", self.request.search))
        preserved.extend(("search_fields", field) for field in self.request.search_fields)
        preserved.extend(self.request.filter_params)
        return preserved


def build_links(request: QueryRequest, pagination: Pagination) -> PaginationLinks:
    """Build navigation links for a request and its pagination metadata."""
    return LinkBuilder(request).build(pagination)
