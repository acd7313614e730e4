"""
Per-resource query engine configuration.

A QueryConfig is handed to the query builder (and optionally the parser)
by each call site. It carries the page-size limits together with the
filter/sort whitelists, searchable columns and default sort of one
resource, so nothing in the engine depends on module-level defaults.
"""

from typing import Any, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fastquery.config import BaseAppSettings, get_settings
from fastquery.pagination.types import SortDirection, SortField


def _default_sort() -> List[SortField]:
    return [SortField("created_at", SortDirection.DESC)]


class QueryConfig(BaseModel):
    """
    Configuration consumed by the request parser and the query builder.

    Attributes:
        default_page_size: Page size used when the request gives none
        max_page_size: Hard ceiling applied to every page size
        allowed_filter_fields: Filterable fields (empty allows all unless strict)
        allowed_sort_fields: Sortable fields (empty allows all unless strict)
        searchable_columns: Columns searched when the request names none
        default_sort: Sort applied when the request gives none
        strict: Treat empty whitelists as "allow nothing"

    Example:
        ```python
        events = QueryConfig(
            allowed_filter_fields={"status", "price"},
            allowed_sort_fields={"name", "created_at"},
            searchable_columns=("name", "description"),
        )
        ```
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    allowed_filter_fields: FrozenSet[str] = Field(default_factory=frozenset)
    allowed_sort_fields: FrozenSet[str] = Field(default_factory=frozenset)
    searchable_columns: Tuple[str, ...] = Field(default_factory=tuple)
    default_sort: List[SortField] = Field(default_factory=_default_sort)
    strict: bool = False

    @field_validator("default_sort", mode="before")
    def validate_default_sort(cls, value):
        """Accept None as "no default sort"."""
        if value is None:
            return []
        return list(value)

    @model_validator(mode="after")
    def validate_page_sizes(self):
        """The default page size may not exceed the ceiling."""
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) cannot exceed "
                f"max_page_size ({self.max_page_size})"
            )
        return self

    @classmethod
    def from_settings(
        cls, settings: Optional[BaseAppSettings] = None, **overrides: Any
    ) -> "QueryConfig":
        """
        Create a configuration seeded from application settings.

        Args:
            settings: Application settings; loaded from the environment if omitted
            **overrides: Any QueryConfig field

        Returns:
            QueryConfig instance
        """
        if settings is None:
            settings = get_settings()

        values = {
            "default_page_size": settings.PAGINATION_DEFAULT_PAGE_SIZE,
            "max_page_size": settings.PAGINATION_MAX_PAGE_SIZE,
        }
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "QueryConfig":
        """Return a validated copy with some fields replaced."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(overrides)
        return type(self)(**values)

    def clamp_page_size(self, page_size: Optional[int]) -> int:
        """
        Clamp a page size into [1, max_page_size].

        Non-positive or missing sizes fall back to the default page size.
        """
        if page_size is None or page_size <= 0:
            return self.default_page_size
        if page_size > self.max_page_size:
            return self.max_page_size
        return page_size

    def is_filter_allowed(self, field: str) -> bool:
        """Check a filter field against the whitelist."""
        if not self.allowed_filter_fields:
            return not self.strict
        return field in self.allowed_filter_fields

    def is_sort_allowed(self, field: str) -> bool:
        """Check a sort field against the whitelist."""
        if not self.allowed_sort_fields:
            return not self.strict
        return field in self.allowed_sort_fields
