"""
Reusable store scopes.

A scope is a callable taking a queryable store and returning the store with
one more clause applied. Scopes compose with ``apply_scopes``:

```python
store = apply_scopes(
    SQLAlchemyStore(Event),
    where_equal("status", "active"),
    search("rock", "name", "description"),
    order_by_created_at(SortDirection.DESC),
    paginate(2, 10),
)
```

Scopes do not consult any whitelist; only pass them trusted field names.
"""

from typing import Callable, Optional

from fastquery.pagination.builder import filter_to_predicate, search_predicate
from fastquery.pagination.config import QueryConfig
from fastquery.pagination.store import (
    Comparison,
    Membership,
    NullCheck,
    QueryableStore,
    Range,
)
from fastquery.pagination.types import Filter, FilterOperator, Scalar, SortDirection

Scope = Callable[[QueryableStore], QueryableStore]


def apply_scopes(store: QueryableStore, *scopes: Scope) -> QueryableStore:
    """Apply scopes to a store in order."""
    for scope in scopes:
        store = scope(store)
    return store


def paginate(page: int, page_size: int, config: Optional[QueryConfig] = None) -> Scope:
    """Offset pagination with the same defaults and clamp as the query builder."""
    limit = (config or QueryConfig()).clamp_page_size(page_size)
    page = page if page > 0 else 1

    def scope(store):
        return store.offset((page - 1) * limit).limit(limit)

    return scope


def search(term: str, *columns: str) -> Scope:
    """Case-insensitive substring search across columns; a no-op without either."""
    predicate = search_predicate(term, columns)

    def scope(store):
        if predicate is None:
            return store
        return store.where(predicate)

    return scope


def sort_by(field: str, direction: SortDirection = SortDirection.ASC) -> Scope:
    def scope(store):
        if not field:
            return store
        return store.order(field, SortDirection(direction))

    return scope


def filter_by(*filters: Filter) -> Scope:
    """Apply filters; filters that cannot be applied are skipped."""
    predicates = [p for p in map(filter_to_predicate, filters) if p is not None]

    def scope(store):
        for predicate in predicates:
            store = store.where(predicate)
        return store

    return scope


def where_equal(field: str, value: Scalar) -> Scope:
    return lambda store: store.where(Comparison(field, FilterOperator.EQ, value))


def where_in(field: str, values) -> Scope:
    values = tuple(values)
    return lambda store: store.where(Membership(field, values))


def where_between(field: str, low: Scalar, high: Scalar) -> Scope:
    return lambda store: store.where(Range(field, low, high))


def where_null(field: str) -> Scope:
    return lambda store: store.where(NullCheck(field))


def where_not_null(field: str) -> Scope:
    return lambda store: store.where(NullCheck(field, negated=True))


def order_by_created_at(direction: SortDirection = SortDirection.DESC) -> Scope:
    return sort_by("created_at", direction)


def order_by_updated_at(direction: SortDirection = SortDirection.DESC) -> Scope:
    return sort_by("updated_at", direction)


def limit(n: int, config: Optional[QueryConfig] = None) -> Scope:
    """Limit the number of rows, clamped like a page size."""
    n = (config or QueryConfig()).clamp_page_size(n)
    return lambda store: store.limit(n)
