"""
Tests for the query string parser.

Covers:
- Pagination mode, page and page size handling
- Cursor parameters and first/last overrides
- Sort string parsing
- JSON and simple filter strings
- Bracket filter parameters
- Search and include_total options
- Supported parameter containers (dict, pairs, Starlette QueryParams)
"""

import pytest
from starlette.datastructures import QueryParams

from fastquery.pagination.config import QueryConfig
from fastquery.pagination.parser import (
    parse_filter_param,
    parse_filter_string,
    parse_query_params,
    parse_sort_string,
)
from fastquery.pagination.types import (
    Filter,
    FilterOperator,
    PaginationMode,
    SortDirection,
    SortField,
)


class TestPaginationParams:
    """Tests for mode, page and page size parsing."""

    def test_defaults(self):
        request = parse_query_params({})
        assert request.mode == PaginationMode.OFFSET
        assert request.page == 1
        assert request.page_size == 20
        assert request.include_total is True
        assert request.filters == []
        assert request.sort == []

    def test_cursor_type(self):
        assert parse_query_params({"type": "cursor"}).mode == PaginationMode.CURSOR

    @pytest.mark.parametrize("value", ["offset", "CURSOR", "", "anything"])
    def test_other_types_are_offset(self, value):
        assert parse_query_params({"type": value}).mode == PaginationMode.OFFSET

    def test_page_and_page_size(self):
        request = parse_query_params({"page": "3", "page_size": "50"})
        assert request.page == 3
        assert request.page_size == 50

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", ""])
    def test_invalid_page_keeps_default(self, value):
        assert parse_query_params({"page": value}).page == 1

    @pytest.mark.parametrize("value", ["0", "-5", "ten", "101", "1000"])
    def test_invalid_page_size_keeps_default(self, value):
        assert parse_query_params({"page_size": value}).page_size == 20

    def test_max_page_size_is_accepted(self):
        assert parse_query_params({"page_size": "100"}).page_size == 100

    def test_config_limits(self):
        config = QueryConfig(default_page_size=10, max_page_size=30)
        assert parse_query_params({}, config=config).page_size == 10
        assert parse_query_params({"page_size": "30"}, config=config).page_size == 30
        assert parse_query_params({"page_size": "31"}, config=config).page_size == 10

    def test_base_url_comes_from_path(self):
        request = parse_query_params({"base_url": "/other"}, "/api/events")
        assert request.base_url == "/api/events"


class TestCursorParams:
    """Tests for cursor, after, before, first and last."""

    def test_cursor_values_copied_verbatim(self):
        request = parse_query_params(
            {"cursor": "abc==", "after": "def", "before": "ghi"}
        )
        assert request.cursor == "abc=="
        assert request.after == "def"
        assert request.before == "ghi"

    def test_first_overrides_page_size(self):
        request = parse_query_params({"page_size": "10", "first": "5"})
        assert request.first == 5
        assert request.page_size == 5

    def test_last_overrides_page_size(self):
        request = parse_query_params({"last": "7"})
        assert request.last == 7
        assert request.page_size == 7

    def test_invalid_first_is_ignored(self):
        request = parse_query_params({"page_size": "10", "first": "-3"})
        assert request.first == 0
        assert request.page_size == 10


class TestSortParsing:
    """Tests for the sort parameter."""

    def test_mixed_sort_string(self):
        assert parse_sort_string("-created_at,name:asc,price") == [
            SortField("created_at", SortDirection.DESC),
            SortField("name", SortDirection.ASC),
            SortField("price", SortDirection.ASC),
        ]

    def test_explicit_desc_is_case_insensitive(self):
        assert parse_sort_string("name:DESC") == [
            SortField("name", SortDirection.DESC)
        ]

    def test_unknown_direction_is_ascending(self):
        assert parse_sort_string("name:sideways") == [
            SortField("name", SortDirection.ASC)
        ]

    def test_empty_parts_are_skipped(self):
        assert parse_sort_string(" , ,name,,-") == [SortField("name")]

    def test_sort_raw_is_retained(self):
        request = parse_query_params({"sort": "-created_at,name:asc"})
        assert request.sort_raw == "-created_at,name:asc"
        assert len(request.sort) == 2
        assert request.has_sort


class TestFilterStringParsing:
    """Tests for the filter parameter."""

    def test_json_filters(self):
        filters = parse_filter_string(
            '[{"field": "name", "operator": "eq", "value": "test"},'
            ' {"field": "price", "operator": "between", "values": [10, 20]}]'
        )
        assert filters == [
            Filter("name", FilterOperator.EQ, "test"),
            Filter("price", FilterOperator.BETWEEN, values=[10, 20]),
        ]

    def test_json_entries_without_field_are_dropped(self):
        filters = parse_filter_string('[{"operator": "eq", "value": "x"}]')
        assert filters == []

    def test_simple_filters(self):
        filters = parse_filter_string("status:active, category : music")
        assert filters == [
            Filter("status", FilterOperator.EQ, "active"),
            Filter("category", FilterOperator.EQ, "music"),
        ]

    def test_simple_filter_value_keeps_colons(self):
        filters = parse_filter_string("starts_at:10:30")
        assert filters == [Filter("starts_at", FilterOperator.EQ, "10:30")]

    def test_malformed_parts_are_skipped(self):
        assert parse_filter_string("nocolon,:value") == []

    def test_filter_raw_is_retained(self):
        request = parse_query_params({"filter": "status:active"})
        assert request.filter_raw == "status:active"
        assert request.filters == [Filter("status", "eq", "active")]


class TestBracketFilterParsing:
    """Tests for field[operator]=value parameters."""

    def test_single_value_operator(self):
        assert parse_filter_param("price[gte]", ["100"]) == Filter(
            "price", FilterOperator.GTE, "100"
        )

    def test_single_value_operator_takes_first_value(self):
        assert parse_filter_param("status[eq]", ["a", "b"]).value == "a"

    def test_in_takes_all_values(self):
        parsed = parse_filter_param("status[in]", ["active", "pending"])
        assert parsed.operator == "in"
        assert parsed.values == ["active", "pending"]

    def test_nin_takes_all_values(self):
        parsed = parse_filter_param("status[nin]", ["a", "b", "c"])
        assert parsed.values == ["a", "b", "c"]

    def test_between_takes_first_two(self):
        parsed = parse_filter_param("price[between]", ["1", "5", "9"])
        assert parsed.values == ["1", "5"]

    def test_between_with_one_value_has_no_values(self):
        parsed = parse_filter_param("price[between]", ["1"])
        assert parsed.operator == "between"
        assert parsed.values == []

    def test_unknown_operator_is_kept(self):
        parsed = parse_filter_param("name[regex]", ["x"])
        assert parsed.operator == "regex"
        assert parsed.known_operator is None

    @pytest.mark.parametrize("key", ["[eq]", "price", "price]gte[", "price[gte"])
    def test_invalid_keys(self, key):
        assert parse_filter_param(key, ["1"]) is None

    def test_no_values(self):
        assert parse_filter_param("price[gte]", []) is None

    def test_bracket_params_in_request(self):
        request = parse_query_params(
            [
                ("price[gte]", "100"),
                ("status[in]", "active"),
                ("status[in]", "pending"),
                ("[eq]", "ignored"),
            ]
        )
        assert Filter("price", "gte", "100") in request.filters
        assert Filter("status", "in", values=["active", "pending"]) in request.filters
        assert len(request.filters) == 2
        assert request.filter_params == [
            ("price[gte]", "100"),
            ("status[in]", "active"),
            ("status[in]", "pending"),
        ]

    def test_bracket_filters_follow_filter_string(self):
        request = parse_query_params(
            {"filter": "status:active", "price[lt]": "50"}
        )
        assert request.filters == [
            Filter("status", "eq", "active"),
            Filter("price", "lt", "50"),
        ]


class TestSearchAndOptions:
    """Tests for search, search_fields and include_total."""

    def test_search(self):
        request = parse_query_params(
            {"search": "rock", "search_fields": ["name", "description"]}
        )
        assert request.search == "rock"
        assert request.search_fields == ["name", "description"]
        assert request.has_search

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("1", True), ("false", False), ("0", False), ("yes", False)],
    )
    def test_include_total(self, value, expected):
        assert parse_query_params({"include_total": value}).include_total is expected

    def test_include_total_absent_keeps_default(self):
        assert parse_query_params({"include_total": ""}).include_total is True


class TestParameterContainers:
    """Tests for the supported parameter containers."""

    def test_starlette_query_params(self):
        params = QueryParams("page=2&status[in]=a&status[in]=b&sort=-name")
        request = parse_query_params(params, "/api/events")
        assert request.page == 2
        assert request.sort == [SortField("name", SortDirection.DESC)]
        assert request.filters == [Filter("status", "in", values=["a", "b"])]

    def test_mapping_of_lists(self):
        request = parse_query_params({"page": ["4", "5"]})
        assert request.page == 4

    def test_none(self):
        assert parse_query_params(None).page == 1
