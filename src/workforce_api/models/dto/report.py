"""Report export DTOs."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ReportType(StrEnum):
    """Closed set of exportable reports."""

    EMPLOYEE_LIST = "EMPLOYEE_LIST"
    ATTENDANCE_SUMMARY = "ATTENDANCE_SUMMARY"
    PAYROLL_SUMMARY = "PAYROLL_SUMMARY"
    EXPIRING_DOCUMENTS = "EXPIRING_DOCUMENTS"
    ASSET_SUMMARY = "ASSET_SUMMARY"
    TRANSFER_HISTORY = "TRANSFER_HISTORY"


class ReportLocale(StrEnum):
    TR = "tr"
    RU = "ru"
    EN = "en"


class ExportRequest(BaseModel):
    """Export request.

    ``filters`` accepts worksite_id, period (YYYY-MM), payroll_run_id and
    days_ahead depending on the report.
    """

    report_type: ReportType
    filters: dict[str, Any] = Field(default_factory=dict)
    locale: ReportLocale = ReportLocale.TR
