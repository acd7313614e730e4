"""
Paginated list response schemas.

This module contains the envelope returned by paginated collection
endpoints: the data page, mode-specific pagination metadata, HATEOAS
navigation links and an echo of the requested filters and sort.

Limitations:
- Envelope structure is fixed; customization requires subclassing or code changes
- Data items must already be JSON-serializable (see PaginatedRepository serializer)
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class OffsetPagination(BaseModel):
    """
    Pagination metadata for page/offset based responses.

    Attributes:
        page: Current page number (1-based)
        page_size: Maximum items per page
        total_items: Number of items matching the filters
        total_pages: Number of pages at the current page size
        has_next_page: Whether a page follows this one
        has_prev_page: Whether a page precedes this one
    """

    page: int = Field(..., description="Current page number (1-based)")
    page_size: int = Field(..., description="Maximum items per page")
    total_items: int = Field(default=0, description="Items matching the filters")
    total_pages: int = Field(default=0, description="Number of pages")
    has_next_page: bool = Field(default=False, description="A page follows this one")
    has_prev_page: bool = Field(
        default=False, description="A page precedes this one"
    )


class CursorPagination(BaseModel):
    """
    Pagination metadata for cursor based responses.

    Attributes:
        page_size: Maximum items per page
        start_cursor: Cursor of the first returned item
        end_cursor: Cursor of the last returned item
        has_next_page: Whether more items may follow (full-page heuristic)
        has_prev_page: Whether the request continued from a cursor
        count: Number of items in this page
    """

    page_size: int = Field(..., description="Maximum items per page")
    start_cursor: Optional[str] = Field(
        default=None, description="Cursor of the first returned item"
    )
    end_cursor: Optional[str] = Field(
        default=None, description="Cursor of the last returned item"
    )
    has_next_page: bool = Field(default=False, description="More items may follow")
    has_prev_page: bool = Field(
        default=False, description="The request continued from a cursor"
    )
    count: int = Field(default=0, description="Number of items in this page")


class PaginationLinks(BaseModel):
    """
    HATEOAS navigation links.

    Absent links are dropped from the wire format.
    """

    model_config = ConfigDict(populate_by_name=True)

    self_link: Optional[str] = Field(
        default=None, alias="self", description="Link to the current page"
    )
    first: Optional[str] = Field(default=None, description="Link to the first page")
    last: Optional[str] = Field(default=None, description="Link to the last page")
    next: Optional[str] = Field(default=None, description="Link to the next page")
    prev: Optional[str] = Field(default=None, description="Link to the previous page")


class QueryResult(BaseModel):
    """
    Envelope for paginated, filtered and sorted collections.

    Attributes:
        success: Whether the request was successful
        data: Items of the current page
        pagination: Offset or cursor metadata, depending on the request mode
        links: Navigation links preserving the applied criteria
        applied_filters: Filters as requested (before whitelisting)
        applied_sort: Sort fields as requested (before whitelisting)
        meta: Optional caller supplied metadata
    """

    success: bool = Field(
        default=True, description="Indicates if the request was successful"
    )
    data: List[Any] = Field(default_factory=list, description="List of items")
    pagination: Union[OffsetPagination, CursorPagination]
    links: PaginationLinks = Field(default_factory=PaginationLinks)
    applied_filters: List[Dict[str, Any]] = Field(default_factory=list)
    applied_sort: List[Dict[str, str]] = Field(default_factory=list)
    meta: Optional[Dict[str, Any]] = Field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the envelope to its JSON wire format.

        Unset cursors and links are omitted; data items are passed through
        untouched.

        Returns:
            Dictionary ready for JSON encoding
        """
        payload: Dict[str, Any] = {
            "success": self.success,
            "data": list(self.data),
            "pagination": self.pagination.model_dump(exclude_none=True),
            "links": self.links.model_dump(by_alias=True, exclude_none=True),
            "applied_filters": list(self.applied_filters),
            "applied_sort": list(self.applied_sort),
        }
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload
