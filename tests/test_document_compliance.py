"""Document classification and alert threshold tests."""

from datetime import date, timedelta

import pytest

from workforce_api.models.domain.compliance import (
    AlertSeverity,
    DocumentStatus,
    alert_message,
    classify_document,
    days_until,
    evaluate_severity,
)

TODAY = date(2025, 3, 15)


class TestClassifyDocument:
    """Expiry classification."""

    @pytest.mark.parametrize(
        "offset,expected",
        [
            (-1, DocumentStatus.EXPIRED),
            (0, DocumentStatus.EXPIRING_SOON),
            (30, DocumentStatus.EXPIRING_SOON),
            (31, DocumentStatus.VALID),
        ],
    )
    def test_dated_documents(self, offset: int, expected: DocumentStatus) -> None:
        expiry = TODAY + timedelta(days=offset)
        assert classify_document(expiry, 30, False, TODAY) == expected

    def test_undated_unverified_is_uploaded(self) -> None:
        assert classify_document(None, 30, False, TODAY) == DocumentStatus.UPLOADED

    def test_undated_verified(self) -> None:
        assert classify_document(None, 30, True, TODAY) == DocumentStatus.VERIFIED

    def test_verification_does_not_hide_expiry(self) -> None:
        assert classify_document(TODAY - timedelta(days=5), 30, True, TODAY) == DocumentStatus.EXPIRED


class TestSeverity:
    """Alert threshold evaluation."""

    @pytest.mark.parametrize(
        "days_left,expected",
        [
            (-3, AlertSeverity.CRITICAL),
            (0, AlertSeverity.CRITICAL),
            (7, AlertSeverity.CRITICAL),
            (8, AlertSeverity.WARNING),
            (30, AlertSeverity.WARNING),
            (31, None),
        ],
    )
    def test_thresholds(self, days_left: int, expected: AlertSeverity | None) -> None:
        assert evaluate_severity(days_left, warning_days=30, critical_days=7) == expected


class TestAlertMessage:
    """Alert text."""

    def test_expired(self) -> None:
        expiry = date(2025, 3, 10)
        assert alert_message("Visa ends", expiry, days_until(expiry, TODAY)) == "Visa ends expired on 2025-03-10"

    def test_expires_in_days(self) -> None:
        expiry = date(2025, 3, 25)
        assert alert_message("Patent ends", expiry, days_until(expiry, TODAY)) == "Patent ends expires in 10 days"

    def test_expires_today(self) -> None:
        assert alert_message("Passport", TODAY, 0) == "Passport expires today"
