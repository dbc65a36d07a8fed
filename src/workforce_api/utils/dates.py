"""Calendar helpers for monthly periods."""

import calendar
from datetime import date

from workforce_api.exceptions import ValidationError
from workforce_api.utils.validation import is_valid_period


def period_of(day: date) -> str:
    """``YYYY-MM`` period containing a date."""
    return f"{day.year:04d}-{day.month:02d}"


def month_bounds(period: str) -> tuple[date, date]:
    """First and last calendar day of a ``YYYY-MM`` period.

    Raises:
        ValidationError: If the period is malformed
    """
    if not is_valid_period(period):
        raise ValidationError("Period must be in YYYY-MM format")
    year, month = (int(part) for part in period.split("-"))
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days from start to end, both included."""
    return (end - start).days + 1
