"""
Core pagination, filtering and sorting types.

This module defines the data model shared by the request parser, the query
builder and the response builder: pagination modes, sort fields, filter
operators, filters and cursor payloads.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field

# Filter values arrive as strings from the query string and as JSON scalars
# from the ``filter`` parameter. Typed coercion happens in the store adapter.
Scalar = Union[bool, int, float, str]


class PaginationMode(str, Enum):
    """
    Pagination strategy requested by the client.

    Attributes:
        OFFSET: Traditional page/offset based pagination
        CURSOR: Cursor based pagination (infinite scroll)
    """

    OFFSET = "offset"
    CURSOR = "cursor"


class SortDirection(str, Enum):
    """
    Sort direction enum.

    Attributes:
        ASC: Ascending order
        DESC: Descending order
    """

    ASC = "asc"
    DESC = "desc"


class FilterOperator(str, Enum):
    """
    Filter operators for field comparisons.

    Values are the tags used on the wire, e.g. ``price[gte]=100``.

    Attributes:
        EQ: Equal to
        NE: Not equal to
        GT: Greater than
        GTE: Greater than or equal to
        LT: Less than
        LTE: Less than or equal to
        LIKE: Substring match
        ILIKE: Case-insensitive substring match
        IN: In a list of values
        NOT_IN: Not in a list of values
        IS_NULL: Is NULL
        IS_NOT_NULL: Is not NULL
        BETWEEN: Between two values (inclusive)
    """

    EQ = "eq"
    NE = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    LIKE = "like"
    ILIKE = "ilike"
    IN = "in"
    NOT_IN = "nin"
    IS_NULL = "null"
    IS_NOT_NULL = "notnull"
    BETWEEN = "between"

    @classmethod
    def lookup(cls, tag: Any) -> Optional["FilterOperator"]:
        """
        Resolve a wire tag to an operator.

        Args:
            tag: Operator tag or FilterOperator member

        Returns:
            The matching operator, or None for unrecognised tags
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return None


class SortField:
    """
    Sort field definition.

    Attributes:
        field: Field name to sort by
        direction: Sort direction (asc or desc)
    """

    def __init__(self, field: str, direction: SortDirection = SortDirection.ASC):
        self.field = field
        self.direction = SortDirection(direction)

    def to_dict(self) -> Dict[str, str]:
        """
        Convert sort field to dictionary.

        Returns:
            Dictionary with field and direction
        """
        return {"field": self.field, "direction": self.direction.value}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortField):
            return NotImplemented
        return self.field == other.field and self.direction == other.direction

    def __hash__(self) -> int:
        return hash((self.field, self.direction))

    def __str__(self) -> str:
        return f"{self.field}:{self.direction.value}"

    def __repr__(self) -> str:
        return f"SortField(field='{self.field}', direction={self.direction})"


class Filter:
    """
    Filter condition for a field.

    The operator is kept as given by the client. Filters with an
    unrecognised operator are carried along (and echoed back) but never
    turned into a predicate.

    Attributes:
        field: Field name to filter on
        operator: Operator tag (see FilterOperator)
        value: Value for single-value operators
        values: Values for IN, NOT IN and BETWEEN
    """

    def __init__(
        self,
        field: str,
        operator: Union[FilterOperator, str],
        value: Optional[Scalar] = None,
        values: Optional[Sequence[Scalar]] = None,
    ):
        self.field = field
        self.operator = operator.value if isinstance(operator, FilterOperator) else operator
        self.value = value
        self.values: List[Scalar] = list(values) if values else []

    @property
    def known_operator(self) -> Optional[FilterOperator]:
        """The operator as a FilterOperator, or None if unrecognised."""
        return FilterOperator.lookup(self.operator)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert filter to dictionary.

        Returns:
            Dictionary with field, operator, value and (when present) values
        """
        result: Dict[str, Any] = {
            "field": self.field,
            "operator": self.operator,
            "value": self.value,
        }
        if self.values:
            result["values"] = list(self.values)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return (
            self.field == other.field
            and self.operator == other.operator
            and self.value == other.value
            and self.values == other.values
        )

    def __str__(self) -> str:
        if self.values:
            return f"{self.field}[{self.operator}]={','.join(map(str, self.values))}"
        if self.value is None:
            return f"{self.field}[{self.operator}]"
        return f"{self.field}[{self.operator}]={self.value}"

    def __repr__(self) -> str:
        return (
            f"Filter(field='{self.field}', operator='{self.operator}', "
            f"value={self.value!r}, values={self.values!r})"
        )


class CursorData(BaseModel):
    """Position of an item in a cursor paginated result set."""

    id: int = Field(description="Primary key of the item")
    created_at: Optional[datetime] = Field(
        default=None, description="Creation timestamp of the item"
    )
    sort_value: Optional[str] = Field(
        default=None, description="Value of the primary sort key"
    )
