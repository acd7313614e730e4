"""
Query string parser for paginated list endpoints.

This module turns the raw query parameters of a request into a QueryRequest.
Parsing never fails: malformed values are dropped and defaults retained,
since pagination parameters are advisory.

Supported parameters:
    type            ``cursor`` switches to cursor pagination
    page, page_size offset pagination position and size
    cursor, after, before, first, last
                    cursor pagination position and size
    sort            ``-created_at,name:asc``
    filter          JSON list of filter objects or ``key:value,key2:value2``
    field[op]       one filter per key, e.g. ``price[gte]=100``
    search          search term
    search_fields   columns to search (repeatable)
    include_total   ``true``/``1`` to request a total count
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from fastquery.pagination.config import QueryConfig
from fastquery.pagination.request import QueryRequest
from fastquery.pagination.types import (
    Filter,
    FilterOperator,
    PaginationMode,
    Scalar,
    SortDirection,
    SortField,
)

logger = logging.getLogger(__name__)

MultiMap = Dict[str, List[str]]


class FilterPayload(BaseModel):
    """One entry of the JSON form of the ``filter`` parameter."""

    field: str = ""
    operator: str = ""
    value: Optional[Scalar] = None
    values: Optional[List[Scalar]] = None


_filter_list_adapter = TypeAdapter(List[FilterPayload])


def parse_query_params(
    params: Any,
    base_path: str = "",
    config: Optional[QueryConfig] = None,
) -> QueryRequest:
    """
    Parse raw query parameters into a QueryRequest.

    Args:
        params: Query parameters as a Starlette ``QueryParams``, a mapping of
            keys to lists of values, a mapping of keys to single values or an
            iterable of ``(key, value)`` pairs
        base_path: Request path, used for navigation links
        config: Supplies the default and maximum page size

    Returns:
        Parsed request; never raises for malformed input

    Example:
        ```python
        request = parse_query_params(
            {"sort": ["-created_at,name:asc"], "price[gte]": ["100"]},
            "/api/events",
        )
        ```
    """
    config = config or QueryConfig()
    query = _to_multimap(params)

    request = QueryRequest(page_size=config.default_page_size)

    _parse_pagination_type(query, request)
    _parse_offset_params(query, request, config)
    _parse_cursor_params(query, request)
    _parse_sorting(query, request)
    _parse_filtering(query, request)
    _parse_search(query, request)
    _parse_options(query, request)

    request.base_url = base_path
    return request


def _to_multimap(params: Any) -> MultiMap:
    """Normalise the supported parameter containers to key -> values."""
    result: MultiMap = {}
    if params is None:
        return result

    if hasattr(params, "multi_items"):
        items = params.multi_items()
    elif isinstance(params, Mapping):
        items = []
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, (str, bytes)):
                items.append((key, value))
            else:
                items.extend((key, item) for item in value)
    else:
        items = list(params)

    for key, value in items:
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        result.setdefault(str(key), []).append(str(value))
    return result


def _first(query: MultiMap, key: str) -> str:
    values = query.get(key)
    return values[0] if values else ""


def _parse_positive_int(raw: str) -> Optional[int]:
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.debug(f"Ignoring non-integer pagination value: {raw!r}")
        return None
    return value if value > 0 else None


def _parse_pagination_type(query: MultiMap, request: QueryRequest) -> None:
    if _first(query, "type") == PaginationMode.CURSOR.value:
        request.mode = PaginationMode.CURSOR


def _parse_offset_params(
    query: MultiMap, request: QueryRequest, config: QueryConfig
) -> None:
    page = _parse_positive_int(_first(query, "page"))
    if page is not None:
        request.page = page

    # Out-of-range sizes are rejected here; the builder clamps again
    page_size = _parse_positive_int(_first(query, "page_size"))
    if page_size is not None and page_size <= config.max_page_size:
        request.page_size = page_size


def _parse_cursor_params(query: MultiMap, request: QueryRequest) -> None:
    request.cursor = _first(query, "cursor")
    request.after = _first(query, "after")
    request.before = _first(query, "before")

    first = _parse_positive_int(_first(query, "first"))
    if first is not None:
        request.first = first
        request.page_size = first

    last = _parse_positive_int(_first(query, "last"))
    if last is not None:
        request.last = last
        request.page_size = last


def _parse_sorting(query: MultiMap, request: QueryRequest) -> None:
    sort_raw = _first(query, "sort")
    if sort_raw:
        request.sort_raw = sort_raw
        request.sort = parse_sort_string(sort_raw)


def _parse_filtering(query: MultiMap, request: QueryRequest) -> None:
    filter_raw = _first(query, "filter")
    if filter_raw:
        request.filter_raw = filter_raw
        request.filters = parse_filter_string(filter_raw)

    for key, values in query.items():
        if "[" in key and "]" in key:
            parsed = parse_filter_param(key, values)
            if parsed is not None:
                request.filters.append(parsed)
                request.filter_params.extend((key, value) for value in values)


def _parse_search(query: MultiMap, request: QueryRequest) -> None:
    request.search = _first(query, "search")
    request.search_fields = list(query.get("search_fields", []))


def _parse_options(query: MultiMap, request: QueryRequest) -> None:
    include_total = _first(query, "include_total")
    if include_total:
        request.include_total = include_total in ("true", "1")


def parse_sort_string(sort_string: str) -> List[SortField]:
    """
    Parse a sort string.

    Each comma separated part is either ``-field`` (descending),
    ``field:direction`` or a bare ``field`` (ascending).

    Args:
        sort_string: Raw sort parameter

    Returns:
        Sort fields in priority order

    Examples:
        >>> parse_sort_string("-created_at,name:asc")
        [SortField(field='created_at', direction=SortDirection.DESC), SortField(field='name', direction=SortDirection.ASC)]
    """
    sorts: List[SortField] = []

    for part in sort_string.split(","):
        part = part.strip()
        if not part:
            continue

        field, direction = _parse_sort_part(part)
        if field:
            sorts.append(SortField(field, direction))

    return sorts


def _parse_sort_part(part: str) -> Tuple[str, SortDirection]:
    if part.startswith("-"):
        return part[1:], SortDirection.DESC

    if ":" in part:
        field, direction = part.split(":", 1)
        if direction.strip().lower() == SortDirection.DESC.value:
            return field, SortDirection.DESC
        return field, SortDirection.ASC

    return part, SortDirection.ASC


def parse_filter_string(filter_string: str) -> List[Filter]:
    """
    Parse the ``filter`` parameter.

    The JSON form is tried first::

        [{"field": "name", "operator": "eq", "value": "test"}]

    and the simple form ``key:value,key2:value2`` (equality only) second.

    Args:
        filter_string: Raw filter parameter

    Returns:
        Parsed filters; entries without a field name are dropped
    """
    try:
        payloads = _filter_list_adapter.validate_json(filter_string)
    except PydanticValidationError:
        return _parse_simple_filter_string(filter_string)

    return [
        Filter(payload.field, payload.operator, payload.value, payload.values)
        for payload in payloads
        if payload.field
    ]


def _parse_simple_filter_string(filter_string: str) -> List[Filter]:
    filters: List[Filter] = []

    for part in filter_string.split(","):
        key, sep, value = part.partition(":")
        key = key.strip()
        if sep and key:
            filters.append(Filter(key, FilterOperator.EQ, value.strip()))

    return filters


def parse_filter_param(key: str, values: Sequence[str]) -> Optional[Filter]:
    """
    Parse a bracket filter parameter ``field[operator]=value``.

    ``in`` and ``nin`` take every value of a repeated parameter, ``between``
    takes the first two and every other operator takes the first one.

    Args:
        key: Query parameter name, e.g. ``price[gte]``
        values: All values given for the key

    Returns:
        The filter, or None if the key is not in bracket form

    Examples:
        >>> parse_filter_param("price[gte]", ["100"])
        Filter(field='price', operator='gte', value='100', values=[])
    """
    start = key.find("[")
    end = key.find("]")

    if start == -1 or end == -1 or start >= end:
        return None

    field = key[:start]
    operator = key[start + 1 : end]

    if not field or not values:
        return None

    if operator in (FilterOperator.IN.value, FilterOperator.NOT_IN.value):
        return Filter(field, operator, values=list(values))
    if operator == FilterOperator.BETWEEN.value:
        if len(values) >= 2:
            return Filter(field, operator, values=[values[0], values[1]])
        return Filter(field, operator)
    return Filter(field, operator, value=values[0])
