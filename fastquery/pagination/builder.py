"""
Query builder for paginated list endpoints.

The builder turns a QueryRequest into two query descriptors:

* a count descriptor: filters and search only, for the total count
* a data descriptor: filters, search, sort and pagination

Both are built from the same predicate list so the reported total always
matches the filtered result set. Fields outside the configured whitelists
never reach the store.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from fastquery.errors.exceptions import InvalidCursorError
from fastquery.logging import Logger
from fastquery.pagination.config import QueryConfig
from fastquery.pagination.cursor import decode_cursor
from fastquery.pagination.request import QueryRequest
from fastquery.pagination.store import (
    COMPARISON_OPERATORS,
    AnyOf,
    Comparison,
    Limit,
    Membership,
    NullCheck,
    Offset,
    Operation,
    Order,
    Pattern,
    Predicate,
    QueryDescriptor,
    Range,
    Where,
)
from fastquery.pagination.types import Filter, FilterOperator, SortDirection, SortField


def filter_to_predicate(item: Filter) -> Optional[Predicate]:
    """
    Translate a filter into a store predicate.

    Args:
        item: Filter to translate

    Returns:
        The predicate, or None when the filter cannot be applied (unknown
        operator, BETWEEN with fewer than two values)
    """
    operator = item.known_operator
    if operator is None:
        return None

    if operator in COMPARISON_OPERATORS:
        return Comparison(item.field, operator, item.value)
    if operator in (FilterOperator.LIKE, FilterOperator.ILIKE):
        term = "" if item.value is None else str(item.value)
        return Pattern(item.field, term, operator == FilterOperator.ILIKE)
    if operator in (FilterOperator.IN, FilterOperator.NOT_IN):
        values = item.values
        if not values and item.value is not None:
            values = [item.value]
        return Membership(
            item.field, tuple(values), operator == FilterOperator.NOT_IN
        )
    if operator == FilterOperator.IS_NULL:
        return NullCheck(item.field)
    if operator == FilterOperator.IS_NOT_NULL:
        return NullCheck(item.field, negated=True)
    if operator == FilterOperator.BETWEEN:
        if len(item.values) >= 2:
            return Range(item.field, item.values[0], item.values[1])
        return None

    return None


def search_predicate(term: str, columns: Sequence[str]) -> Optional[Predicate]:
    """
    Build a case-insensitive substring search across columns.

    Returns:
        An OR of one match per column, or None without term or columns
    """
    if not term or not columns:
        return None
    return AnyOf(tuple(Pattern(column, term, case_insensitive=True) for column in columns))


class QueryBuilder:
    """
    Builds count and data query descriptors from a QueryRequest.

    Attributes:
        config: Whitelists, search columns, default sort and page-size limits
        logger: Receives DEBUG records for everything that is skipped

    Example:
        ```python
        builder = QueryBuilder(
            QueryConfig(
                allowed_filter_fields={"status", "price"},
                allowed_sort_fields={"name", "created_at"},
                searchable_columns=("name", "description"),
            )
        )
        count_query, data_query = builder.build(request)
        ```
    """

    def __init__(
        self, config: Optional[QueryConfig] = None, logger: Optional[Logger] = None
    ) -> None:
        self.config = config or QueryConfig()
        self.logger = logger or logging.getLogger(__name__)

    def build(self, request: QueryRequest) -> Tuple[QueryDescriptor, QueryDescriptor]:
        """
        Build the count and data descriptors for a request.

        Args:
            request: Parsed request

        Returns:
            ``(count_descriptor, data_descriptor)``
        """
        predicates = self.filter_predicates(request) + self.search_predicates(request)
        where = tuple(Where(predicate) for predicate in predicates)

        count_query = QueryDescriptor(where, aggregate="count")
        data_query = QueryDescriptor(
            where + self.sort_operations(request) + self.pagination_operations(request)
        )
        return count_query, data_query

    def filter_predicates(self, request: QueryRequest) -> List[Predicate]:
        predicates = []
        for item in request.filters:
            if not self.config.is_filter_allowed(item.field):
                self.logger.debug(f"Skipping filter on non-whitelisted field: {item.field}")
                continue

            predicate = filter_to_predicate(item)
            if predicate is None:
                self.logger.debug(f"Skipping inapplicable filter: {item}")
                continue
            predicates.append(predicate)
        return predicates

    def search_predicates(self, request: QueryRequest) -> List[Predicate]:
        predicate = search_predicate(request.search, self.search_columns(request))
        return [predicate] if predicate is not None else []

    def search_columns(self, request: QueryRequest) -> List[str]:
        """
        Resolve the columns to search.

        Request-level search fields win over the configured searchable
        columns. They are limited to configured searchable columns and
        filterable fields.
        """
        if not request.search_fields:
            return list(self.config.searchable_columns)

        columns = []
        for field in request.search_fields:
            if field in self.config.searchable_columns or self.config.is_filter_allowed(field):
                columns.append(field)
            else:
                self.logger.debug(f"Skipping non-whitelisted search field: {field}")
        return columns

    def sort_operations(self, request: QueryRequest) -> Tuple[Operation, ...]:
        """
        Resolve the ordering for the data query.

        Cursor pages advance by ``id``, so a cursor request without an
        explicit sort is ordered by ``id`` ascending regardless of the
        configured default sort or the sort whitelist.
        """
        if not request.sort and request.is_cursor_based:
            return (Order("id", SortDirection.ASC),)

        sorts: Iterable[SortField] = request.sort or self.config.default_sort

        operations = []
        for sort in sorts:
            if not self.config.is_sort_allowed(sort.field):
                self.logger.debug(f"Skipping sort on non-whitelisted field: {sort.field}")
                continue
            operations.append(Order(sort.field, sort.direction))
        return tuple(operations)

    def pagination_operations(self, request: QueryRequest) -> Tuple[Operation, ...]:
        limit = self.config.clamp_page_size(request.page_size)

        if request.is_cursor_based:
            return self._cursor_operations(request, limit)

        page = request.page if request.page > 0 else 1
        return (Offset((page - 1) * limit), Limit(limit))

    def _cursor_operations(
        self, request: QueryRequest, limit: int
    ) -> Tuple[Operation, ...]:
        token = request.cursor or request.after
        if not token:
            return (Limit(limit),)

        try:
            cursor = decode_cursor(token)
        except InvalidCursorError:
            # Restart from the beginning of the result set
            self.logger.debug(f"Ignoring malformed cursor: {token!r}")
            return (Limit(limit),)

        return (Where(Comparison("id", FilterOperator.GT, cursor.id)), Limit(limit))


def build_queries(
    request: QueryRequest,
    allowed_filter_fields: Iterable[str] = (),
    allowed_sort_fields: Iterable[str] = (),
    searchable_columns: Sequence[str] = (),
    default_sort: Optional[Sequence[SortField]] = None,
    config: Optional[QueryConfig] = None,
) -> Tuple[QueryDescriptor, QueryDescriptor]:
    """
    Build count and data descriptors without creating a builder first.

    Args:
        request: Parsed request
        allowed_filter_fields: Filterable fields (empty allows all)
        allowed_sort_fields: Sortable fields (empty allows all)
        searchable_columns: Columns searched when the request names none
        default_sort: Sort applied when the request gives none
        config: Base configuration for page-size limits

    Returns:
        ``(count_descriptor, data_descriptor)``
    """
    overrides = {
        "allowed_filter_fields": frozenset(allowed_filter_fields),
        "allowed_sort_fields": frozenset(allowed_sort_fields),
        "searchable_columns": tuple(searchable_columns),
    }
    if default_sort is not None:
        overrides["default_sort"] = list(default_sort)

    base = config or QueryConfig()
    return QueryBuilder(base.with_overrides(**overrides)).build(request)
