"""SQL injection prevention tests.

SQLAlchemy parameterizes every query, which is the primary protection.
These tests cover the second layer: search sanitization, whitelisted sort
columns and filters restricted to real model columns.
"""

from uuid import UUID, uuid4

import pytest

from workforce_api.exceptions import ValidationError
from workforce_api.models.orm import EmployeeORM
from workforce_api.utils.query import build_filter_conditions, parse_list_query
from workforce_api.utils.validation import (
    escape_like_wildcards,
    normalize_code,
    sanitize_search,
    validate_sort_by,
)

SQL_INJECTION_PAYLOADS = [
    "'; DROP TABLE users; --",
    "1' OR '1'='1",
    "1; DELETE FROM employees WHERE '1'='1",
    "' UNION SELECT * FROM users --",
    "1' AND (SELECT COUNT(*) FROM users) > 0 --",
    "1'; SELECT pg_sleep(5) --",
    "' UNION ALL SELECT email, password_hash FROM users --",
    "1'; UPDATE users SET status = 'ACTIVE'; --",
    "%27%20OR%201%3D1%20--",
    "ʼ; DROP TABLE users; --",
    "1'/**/OR/**/1=1--",
    "$$; DROP TABLE payroll_runs; $$",
    "1'\x00 OR 1=1 --",
]


class TestSQLInjectionPrevention:
    """Injection payloads across the list query inputs."""

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_search_parameter_sanitized(self, payload: str) -> None:
        result = sanitize_search(payload)
        if result is not None:
            assert ";" not in result
            assert "--" not in result
            assert "\x00" not in result
            assert len(result) <= 200

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_sort_column_whitelist_rejects_injection(self, payload: str) -> None:
        allowed_columns = {"employee_no", "created_at", "last_name"}
        assert validate_sort_by(payload, allowed_columns, "created_at") == "created_at"

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_filter_key_must_be_a_column(self, payload: str) -> None:
        with pytest.raises(ValidationError):
            build_filter_conditions(EmployeeORM, {payload: "x"})

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_uuid_filter_value_rejected(self, payload: str) -> None:
        with pytest.raises(ValidationError):
            build_filter_conditions(EmployeeORM, {"nationality_id": payload})

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_codes_reject_injection(self, payload: str) -> None:
        with pytest.raises(ValueError):
            normalize_code(payload)

    def test_like_wildcard_escaping(self) -> None:
        assert escape_like_wildcards("test%value") == r"test\%value"
        assert escape_like_wildcards("test_value") == r"test\_value"
        assert escape_like_wildcards("test\\value") == r"test\\value"

        escaped = escape_like_wildcards("test%'; DROP TABLE users; --")
        assert "%" not in escaped.replace(r"\%", "")

    def test_uuid_parameter_validation(self) -> None:
        valid_uuid = uuid4()
        assert UUID(str(valid_uuid)) == valid_uuid
        for invalid in ["'; DROP TABLE users; --", "1 OR 1=1", "not-a-uuid", ""]:
            with pytest.raises(ValueError):
                UUID(invalid)


class TestListQueryLimits:
    """Paging limits guard against oversized result sets."""

    def test_limit_clamped(self) -> None:
        assert parse_list_query({"limit": "100000"}).limit == 100
        assert parse_list_query({"limit": "-5"}).limit == 1

    def test_filter_values_truncated(self) -> None:
        query = parse_list_query({"status": "A" * 1000})
        assert len(query.filters["status"]) == 100
