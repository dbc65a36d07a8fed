"""Document expiry classification and alert threshold rules."""

from datetime import date
from enum import StrEnum


class DocumentStatus(StrEnum):
    """Computed status of an employee document."""

    VALID = "VALID"
    EXPIRING_SOON = "EXPIRING_SOON"
    EXPIRED = "EXPIRED"
    UPLOADED = "UPLOADED"
    VERIFIED = "VERIFIED"


class AlertSeverity(StrEnum):
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class AlertEntity(StrEnum):
    """Which part of the employee aggregate an alert rule watches."""

    WORK_STATUS = "work_status"
    IDENTITY = "identity"
    EMPLOYMENT = "employment"
    DOCUMENT = "document"


# Tracked date fields per entity; alert rules must name one of these
TRACKED_DATE_FIELDS: dict[AlertEntity, frozenset[str]] = {
    AlertEntity.WORK_STATUS: frozenset(
        {
            "visa_end",
            "patent_end",
            "registration_end",
            "migration_card_end",
            "work_permit_end",
            "residence_permit_end",
        }
    ),
    AlertEntity.IDENTITY: frozenset({"passport_expiry_date"}),
    AlertEntity.EMPLOYMENT: frozenset({"contract_end", "probation_end"}),
    AlertEntity.DOCUMENT: frozenset({"expiry_date"}),
}


def days_until(expiry: date, today: date | None = None) -> int:
    """Whole days from today until an expiry date.

    Equals ``ceil((expiry - now) / 1 day)`` for any time of day after
    midnight, since the expiry date is taken as its midnight.
    """
    today = today or date.today()
    return (expiry - today).days


def classify_document(
    expiry_date: date | None,
    default_alert_days: int,
    is_verified: bool,
    today: date | None = None,
) -> DocumentStatus:
    """Classify a document by its expiry date.

    Args:
        expiry_date: Document expiry date, None for non-expiring documents
        default_alert_days: Lead time of the document type
        is_verified: Verification flag of the document
        today: Reference date (defaults to today)

    Returns:
        EXPIRED, EXPIRING_SOON or VALID for dated documents; VERIFIED or
        UPLOADED for undated ones
    """
    if expiry_date is None:
        return DocumentStatus.VERIFIED if is_verified else DocumentStatus.UPLOADED

    days_left = days_until(expiry_date, today)
    if days_left < 0:
        return DocumentStatus.EXPIRED
    if days_left <= default_alert_days:
        return DocumentStatus.EXPIRING_SOON
    return DocumentStatus.VALID


def evaluate_severity(days_left: int, warning_days: int, critical_days: int) -> AlertSeverity | None:
    """Severity for a tracked date, or None when no threshold is crossed."""
    if days_left <= critical_days:
        return AlertSeverity.CRITICAL
    if days_left <= warning_days:
        return AlertSeverity.WARNING
    return None


def alert_message(label: str, expiry: date, days_left: int) -> str:
    """Human readable alert text."""
    if days_left < 0:
        return f"{label} expired on {expiry.isoformat()}"
    if days_left == 0:
        return f"{label} expires today"
    return f"{label} expires in {days_left} days"
