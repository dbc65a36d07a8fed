"""Input validation utilities to prevent injection attacks."""

import re

# Maximum lengths for common fields
MAX_SEARCH_LENGTH = 200
MAX_FILTER_VALUE_LENGTH = 100

PERIOD_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
CODE_PATTERN = re.compile(r"^[A-Z0-9_\-]{1,50}$")


def sanitize_search(search: str | None, max_length: int = MAX_SEARCH_LENGTH) -> str | None:
    """Sanitize search input.

    Args:
        search: Raw search string
        max_length: Maximum allowed length

    Returns:
        Sanitized search string or None
    """
    if search is None:
        return None

    search = search[:max_length]

    # SQLAlchemy parameterizes queries anyway; strip statement separators
    # and comment markers as a second layer
    search = search.replace(";", "").replace("--", "").replace("\x00", "")

    return search.strip() or None


def escape_like_wildcards(value: str) -> str:
    """Escape SQL LIKE wildcards so user input matches literally.

    Args:
        value: Raw value

    Returns:
        Value with %, _ and the escape character escaped by backslash
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def validate_sort_by(sort_by: str | None, allowed_columns: set[str], default: str) -> str:
    """Validate sort column against whitelist.

    Args:
        sort_by: Raw sort column name
        allowed_columns: Set of allowed column names
        default: Default column if invalid

    Returns:
        Validated sort column name
    """
    if sort_by and sort_by in allowed_columns:
        return sort_by
    return default


def is_valid_period(period: str) -> bool:
    """Check a ``YYYY-MM`` period string."""
    return bool(PERIOD_PATTERN.match(period))


def normalize_code(code: str) -> str:
    """Upper-case a business code and validate its characters.

    Raises:
        ValueError: If the code contains characters outside A-Z, 0-9, _ and -
    """
    normalized = code.strip().upper()
    if not CODE_PATTERN.match(normalized):
        raise ValueError("Code must contain only letters, digits, '_' or '-'")
    return normalized
