"""
Store capability consumed by the query engine.

The engine never talks to a database. It describes queries as ordered
sequences of store operations (where / order / limit / offset) over a
closed set of predicates, and any object implementing ``QueryableStore``
can execute them. ``fastquery.db.store.SQLAlchemyStore`` is the SQLAlchemy
implementation.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence, Tuple, TypeVar, Union

from fastquery.pagination.types import FilterOperator, Scalar, SortDirection

# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Comparison:
    """``field <op> value`` for eq, neq, gt, gte, lt and lte."""

    field: str
    operator: FilterOperator
    value: Optional[Scalar]


@dataclass(frozen=True)
class Pattern:
    """Substring match of ``term`` against ``field``."""

    field: str
    term: str
    case_insensitive: bool = False


@dataclass(frozen=True)
class Membership:
    """``field IN values`` (or NOT IN when negated)."""

    field: str
    values: Tuple[Scalar, ...]
    negated: bool = False


@dataclass(frozen=True)
class NullCheck:
    """``field IS NULL`` (or IS NOT NULL when negated)."""

    field: str
    negated: bool = False


@dataclass(frozen=True)
class Range:
    """``field BETWEEN low AND high``."""

    field: str
    low: Scalar
    high: Scalar


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of predicates."""

    predicates: Tuple["Predicate", ...]


Predicate = Union[Comparison, Pattern, Membership, NullCheck, Range, AnyOf]

COMPARISON_OPERATORS = frozenset(
    {
        FilterOperator.EQ,
        FilterOperator.NE,
        FilterOperator.GT,
        FilterOperator.GTE,
        FilterOperator.LT,
        FilterOperator.LTE,
    }
)


def predicate_fields(predicate: Predicate) -> Iterator[str]:
    """Yield every field name a predicate refers to."""
    if isinstance(predicate, AnyOf):
        for inner in predicate.predicates:
            yield from predicate_fields(inner)
    else:
        yield predicate.field


# ---------------------------------------------------------------------------
# Store protocol
# ---------------------------------------------------------------------------

S = TypeVar("S", bound="QueryableStore")


class QueryableStore(Protocol):
    """
    Minimal query capability the engine relies on.

    Every method returns a store with the clause added; implementations may
    mutate and return themselves or return a new store. Terminal operations
    (count, find) are implementation specific.
    """

    def where(self: S, predicate: Predicate) -> S: ...

    def order(self: S, field: str, direction: SortDirection) -> S: ...

    def limit(self: S, n: int) -> S: ...

    def offset(self: S, n: int) -> S: ...


# ---------------------------------------------------------------------------
# Operations and descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Where:
    predicate: Predicate

    def apply(self, store: S) -> S:
        return store.where(self.predicate)


@dataclass(frozen=True)
class Order:
    field: str
    direction: SortDirection = SortDirection.ASC

    def apply(self, store: S) -> S:
        return store.order(self.field, self.direction)


@dataclass(frozen=True)
class Limit:
    count: int

    def apply(self, store: S) -> S:
        return store.limit(self.count)


@dataclass(frozen=True)
class Offset:
    count: int

    def apply(self, store: S) -> S:
        return store.offset(self.count)


Operation = Union[Where, Order, Limit, Offset]


@dataclass(frozen=True)
class QueryDescriptor:
    """
    An ordered, immutable sequence of store operations.

    Descriptors are callable: ``descriptor(store)`` applies every operation
    in order and returns the resulting store. ``aggregate`` tells the
    executor which terminal operation to run (``"count"`` for totals,
    None for fetching rows).

    Example:
        ```python
        count_query, data_query = builder.build(request)
        total = await count_query(SQLAlchemyStore(Event)).count(session)
        rows = await data_query(SQLAlchemyStore(Event)).find(session)
        ```
    """

    operations: Tuple[Operation, ...] = ()
    aggregate: Optional[str] = None

    def apply(self, store: S) -> S:
        for operation in self.operations:
            store = operation.apply(store)
        return store

    __call__ = apply

    def then(self, *operations: Operation) -> "QueryDescriptor":
        """Return a descriptor with more operations appended."""
        return QueryDescriptor(self.operations + tuple(operations), self.aggregate)

    @property
    def predicates(self) -> Tuple[Predicate, ...]:
        return tuple(op.predicate for op in self.operations if isinstance(op, Where))

    @property
    def orderings(self) -> Tuple[Order, ...]:
        return tuple(op for op in self.operations if isinstance(op, Order))

    @property
    def limit(self) -> Optional[int]:
        limits = [op.count for op in self.operations if isinstance(op, Limit)]
        return limits[-1] if limits else None

    @property
    def offset(self) -> Optional[int]:
        offsets = [op.count for op in self.operations if isinstance(op, Offset)]
        return offsets[-1] if offsets else None

    @property
    def fields(self) -> Sequence[str]:
        """Every field name that reaches the store through this descriptor."""
        names = []
        for operation in self.operations:
            if isinstance(operation, Where):
                names.extend(predicate_fields(operation.predicate))
            elif isinstance(operation, Order):
                names.append(operation.field)
        return names
