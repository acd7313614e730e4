"""
SQLAlchemy implementation of the queryable store.

SQLAlchemyStore wraps a ``select()`` over one mapped model. Field names are
resolved only against the model's mapped column attributes, so names that
are not columns (relationships, methods, private attributes, typos) are
skipped instead of reaching the SQL layer. String values coming from the
query string are coerced to the column's Python type before comparison.
"""

import logging
import operator
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Type

from sqlalchemy import Select, String, asc, cast, desc, func, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty
from sqlalchemy.sql.elements import ColumnElement

from fastquery.logging import Logger
from fastquery.pagination.store import (
    AnyOf,
    Comparison,
    Membership,
    NullCheck,
    Pattern,
    Predicate,
    Range,
)
from fastquery.pagination.types import FilterOperator, SortDirection

_COMPARATORS = {
    FilterOperator.EQ: operator.eq,
    FilterOperator.NE: operator.ne,
    FilterOperator.GT: operator.gt,
    FilterOperator.GTE: operator.ge,
    FilterOperator.LT: operator.lt,
    FilterOperator.LTE: operator.le,
}

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def coerce_value(python_type: Optional[type], value: Any) -> Any:
    """
    Coerce a filter value to a column's Python type.

    Only strings (and numbers compared against string columns) are
    converted. Values that cannot be converted are returned unchanged so
    the database decides how to compare them.

    Args:
        python_type: Python type of the column, None if unknown
        value: Filter value

    Returns:
        The coerced value, or the original value
    """
    if value is None or python_type is None:
        return value

    if python_type is str:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    if not isinstance(value, str):
        return value

    text = value.strip()
    try:
        if python_type is bool:
            if text.lower() in _TRUE_VALUES:
                return True
            if text.lower() in _FALSE_VALUES:
                return False
            return value
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        if python_type is Decimal:
            return Decimal(text)
        if python_type is datetime:
            if len(text) == 10:
                return datetime.combine(date.fromisoformat(text), datetime.min.time())
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        if python_type is date:
            if len(text) > 10:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
    except (ValueError, InvalidOperation):
        return value

    return value


class SQLAlchemyStore:
    """
    Immutable queryable store over a SQLAlchemy model.

    Every clause method returns a new store; the original is left untouched,
    which lets the count and data queries start from the same base.

    Attributes:
        model: Mapped model class
        statement: The ``select()`` built so far

    Example:
        ```python
        count_query, data_query = QueryBuilder(config).build(request)
        total = await count_query(SQLAlchemyStore(Event)).count(session)
        events = await data_query(SQLAlchemyStore(Event)).find(session)
        ```
    """

    def __init__(
        self,
        model: Type[Any],
        statement: Optional[Select] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.model = model
        self.statement = statement if statement is not None else select(model)
        self.logger = logger or logging.getLogger(__name__)

    def _derive(self, statement: Select) -> "SQLAlchemyStore":
        return type(self)(self.model, statement, self.logger)

    def _property(self, field: str) -> Optional[ColumnProperty]:
        return inspect(self.model).column_attrs.get(field)

    def _column(self, field: str) -> Optional[Any]:
        if self._property(field) is None:
            self.logger.debug(f"Skipping unknown column {self.model.__name__}.{field}")
            return None
        return getattr(self.model, field)

    def _python_type(self, field: str) -> Optional[type]:
        prop = self._property(field)
        if prop is None:
            return None
        try:
            return prop.columns[0].type.python_type
        except NotImplementedError:
            return None

    def condition(self, predicate: Predicate) -> Optional[ColumnElement]:
        """
        Translate a predicate into a SQL expression.

        Returns:
            The expression, or None when the predicate names no known column
        """
        if isinstance(predicate, AnyOf):
            conditions = [
                c for c in map(self.condition, predicate.predicates) if c is not None
            ]
            return or_(*conditions) if conditions else None

        column = self._column(predicate.field)
        if column is None:
            return None
        python_type = self._python_type(predicate.field)

        if isinstance(predicate, Comparison):
            compare = _COMPARATORS[FilterOperator(predicate.operator)]
            return compare(column, coerce_value(python_type, predicate.value))

        if isinstance(predicate, Pattern):
            if python_type is not str:
                column = cast(column, String)
            term = escape_like(predicate.term)
            if predicate.case_insensitive:
                return func.lower(column).like(f"%{term.lower()}%", escape="\\")
            return column.like(f"%{term}%", escape="\\")

        if isinstance(predicate, Membership):
            values = [coerce_value(python_type, v) for v in predicate.values]
            if predicate.negated:
                return column.not_in(values)
            return column.in_(values)

        if isinstance(predicate, NullCheck):
            return column.is_not(None) if predicate.negated else column.is_(None)

        if isinstance(predicate, Range):
            return column.between(
                coerce_value(python_type, predicate.low),
                coerce_value(python_type, predicate.high),
            )

        return None

    # QueryableStore

    def where(self, predicate: Predicate) -> "SQLAlchemyStore":
        condition = self.condition(predicate)
        if condition is None:
            return self
        return self._derive(self.statement.where(condition))

    def order(self, field: str, direction: SortDirection) -> "SQLAlchemyStore":
        column = self._column(field)
        if column is None:
            return self
        ordering = desc(column) if direction == SortDirection.DESC else asc(column)
        return self._derive(self.statement.order_by(ordering))

    def limit(self, n: int) -> "SQLAlchemyStore":
        return self._derive(self.statement.limit(n))

    def offset(self, n: int) -> "SQLAlchemyStore":
        return self._derive(self.statement.offset(n))

    # Execution

    def count_statement(self) -> Select:
        """``SELECT count(*)`` over the filtered statement, without order or paging."""
        filtered = self.statement.order_by(None).limit(None).offset(None)
        return select(func.count()).select_from(filtered.subquery())

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(self.count_statement())
        return result.scalar_one()

    async def find(self, session: AsyncSession) -> List[Any]:
        result = await session.execute(self.statement)
        return list(result.scalars().all())
