"""List query parsing tests."""

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import select

from workforce_api.exceptions import ValidationError
from workforce_api.models.orm import AttendanceRecordORM, EmployeeORM, WorksiteORM
from workforce_api.utils.query import (
    DEFAULT_LIMIT,
    apply_list_query,
    build_filter_conditions,
    parse_list_query,
)


class TestParseListQuery:
    """Reserved parameters and filters."""

    def test_defaults(self) -> None:
        query = parse_list_query({})
        assert query.page == 1
        assert query.limit == DEFAULT_LIMIT
        assert query.sort == "created_at"
        assert query.order == "desc"
        assert query.search is None
        assert query.filters == {}

    def test_reserved_and_filters_split(self) -> None:
        query = parse_list_query(
            {"page": "3", "limit": "50", "sort": "name", "order": "ASC", "search": " site ", "status": "ACTIVE"}
        )
        assert (query.page, query.limit, query.sort, query.order) == (3, 50, "name", "asc")
        assert query.search == "site"
        assert query.filters == {"status": "ACTIVE"}
        assert query.offset == 100

    @pytest.mark.parametrize("page", ["0", "-2", "abc", ""])
    def test_invalid_page_falls_back_to_first(self, page: str) -> None:
        assert parse_list_query({"page": page}).page == 1

    def test_empty_filter_values_ignored(self) -> None:
        assert parse_list_query({"status": ""}).filters == {}

    def test_pop_filter(self) -> None:
        query = parse_list_query({"date_from": "2025-01-01", "status": "ACTIVE"})
        assert query.pop_filter("date_from") == "2025-01-01"
        assert query.pop_filter("date_from") is None
        assert query.filters == {"status": "ACTIVE"}


class TestFilterConditions:
    """Filters become typed column comparisons."""

    def test_column_filters(self) -> None:
        conditions = build_filter_conditions(
            WorksiteORM, {"status": "ACTIVE", "is_active": "true", "id": str(uuid4())}
        )
        assert len(conditions) == 3

    def test_date_value_parsed(self) -> None:
        (condition,) = build_filter_conditions(AttendanceRecordORM, {"work_date": "2025-02-03"})
        assert condition.right.value == date(2025, 2, 3)

    def test_invalid_boolean_rejected(self) -> None:
        with pytest.raises(ValidationError):
            build_filter_conditions(WorksiteORM, {"is_active": "maybe"})

    def test_unknown_filter_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_filter_conditions(WorksiteORM, {"nope": "1"})
        assert "nope" in exc_info.value.message

    def test_relation_filter_requires_whitelist(self) -> None:
        with pytest.raises(ValidationError):
            build_filter_conditions(EmployeeORM, {"employment.worksite_id": str(uuid4())})
        conditions = build_filter_conditions(
            EmployeeORM, {"employment.worksite_id": str(uuid4())}, relations=("employment",)
        )
        assert len(conditions) == 1

    def test_search_escapes_wildcards(self) -> None:
        query = parse_list_query({"search": "50%"})
        stmt = apply_list_query(select(WorksiteORM), WorksiteORM, query, search_columns=(WorksiteORM.name,))
        assert "%50\\%%" in stmt.compile().params.values()
