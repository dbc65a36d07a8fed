"""List query parsing and translation into SQLAlchemy statements.

List endpoints accept ``page``, ``limit``, ``sort``, ``order`` and ``search``.
Every other query parameter is an exact-match filter on a column of the
listed model, or on a column of one of its relationships when written as
``relation.column`` (one level deep).
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Mapping, Sequence
from uuid import UUID

from sqlalchemy import Select, inspect, or_
from sqlalchemy.orm import InstrumentedAttribute

from workforce_api.exceptions import ValidationError
from workforce_api.utils.validation import (
    MAX_FILTER_VALUE_LENGTH,
    escape_like_wildcards,
    sanitize_search,
    validate_sort_by,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
DEFAULT_SORT = "created_at"

RESERVED_PARAMS = frozenset({"page", "limit", "sort", "order", "search"})


@dataclass
class ListQuery:
    """Parsed list parameters."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: str = DEFAULT_SORT
    order: Literal["asc", "desc"] = "desc"
    search: str | None = None
    filters: dict[str, str] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def pop_filter(self, key: str) -> str | None:
        """Remove and return a filter handled by the caller itself."""
        return self.filters.pop(key, None)


def _to_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_list_query(params: Mapping[str, str], default_sort: str = DEFAULT_SORT) -> ListQuery:
    """Parse raw query parameters.

    Args:
        params: Query parameters (e.g. ``request.query_params``)
        default_sort: Sort column when none is given

    Returns:
        ListQuery with page >= 1 and limit clamped to 1..100
    """
    page = max(DEFAULT_PAGE, _to_int(params.get("page"), DEFAULT_PAGE))
    limit = min(MAX_LIMIT, max(1, _to_int(params.get("limit"), DEFAULT_LIMIT)))
    order_param = (params.get("order") or "").lower()
    order: Literal["asc", "desc"] = "asc" if order_param == "asc" else "desc"
    sort = params.get("sort") or default_sort

    filters = {
        key: value[:MAX_FILTER_VALUE_LENGTH]
        for key, value in params.items()
        if key not in RESERVED_PARAMS and value
    }

    return ListQuery(
        page=page,
        limit=limit,
        sort=sort,
        order=order,
        search=sanitize_search(params.get("search")),
        filters=filters,
    )


def _coerce(attribute: InstrumentedAttribute, raw: str) -> Any:
    """Convert a raw filter string to the Python type of a column."""
    try:
        python_type = attribute.type.python_type
    except NotImplementedError:
        return raw

    try:
        if python_type is bool:
            lowered = raw.lower()
            if lowered in ("true", "1", "yes"):
                return True
            if lowered in ("false", "0", "no"):
                return False
            raise ValueError(raw)
        if python_type is UUID:
            return UUID(raw)
        if python_type is int:
            return int(raw)
        if python_type is Decimal:
            return Decimal(raw)
        if python_type is datetime:
            return datetime.fromisoformat(raw)
        if python_type is date:
            return date.fromisoformat(raw)
    except (ValueError, InvalidOperation) as e:
        raise ValidationError(f"Invalid value for filter '{attribute.key}'") from e
    return raw


def _column_attribute(model: type, name: str) -> InstrumentedAttribute | None:
    if name not in inspect(model).columns:
        return None
    return getattr(model, name)


def build_filter_conditions(
    model: type,
    filters: Mapping[str, str],
    relations: Sequence[str] = (),
) -> list[Any]:
    """Translate exact-match filters into SQL conditions.

    Args:
        model: ORM class being listed
        filters: Filter key/value pairs
        relations: Relationship names allowed in ``relation.column`` keys

    Raises:
        ValidationError: For unknown keys or unparsable values
    """
    conditions = []
    for key, raw in filters.items():
        parts = key.split(".")
        if len(parts) == 1:
            attribute = _column_attribute(model, key)
            if attribute is None:
                raise ValidationError(f"Unknown filter '{key}'")
            conditions.append(attribute == _coerce(attribute, raw))
            continue

        if len(parts) != 2 or parts[0] not in relations:
            raise ValidationError(f"Unknown filter '{key}'")

        relation_name, column_name = parts
        relationship_attr = getattr(model, relation_name)
        related = relationship_attr.property.mapper.class_
        attribute = _column_attribute(related, column_name)
        if attribute is None:
            raise ValidationError(f"Unknown filter '{key}'")
        condition = attribute == _coerce(attribute, raw)
        if relationship_attr.property.uselist:
            conditions.append(relationship_attr.any(condition))
        else:
            conditions.append(relationship_attr.has(condition))
    return conditions


def apply_list_query(
    stmt: Select,
    model: type,
    query: ListQuery,
    search_columns: Sequence[InstrumentedAttribute] = (),
    relations: Sequence[str] = (),
) -> Select:
    """Apply search and filters to a select (no paging, no ordering)."""
    if query.search and search_columns:
        pattern = f"%{escape_like_wildcards(query.search)}%"
        stmt = stmt.where(or_(*(column.ilike(pattern, escape="\\") for column in search_columns)))

    for condition in build_filter_conditions(model, query.filters, relations):
        stmt = stmt.where(condition)
    return stmt


def apply_ordering(stmt: Select, model: type, query: ListQuery, default: str = DEFAULT_SORT) -> Select:
    """Order by a whitelisted column of the model, then page."""
    columns = set(inspect(model).columns.keys())
    sort = validate_sort_by(query.sort, columns, default)
    if sort != query.sort:
        logger.debug(f"Ignoring unknown sort column for {model.__name__}")
    column = getattr(model, sort)
    ordered = column.asc() if query.order == "asc" else column.desc()
    return stmt.order_by(ordered).offset(query.offset).limit(query.limit)
