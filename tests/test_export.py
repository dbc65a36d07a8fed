"""Spreadsheet export tests."""

import io
from datetime import date
from decimal import Decimal

from openpyxl import load_workbook

from workforce_api.models.dto.report import ReportLocale
from workforce_api.services.export_service import (
    XLSX_CONTENT_TYPE,
    build_workbook,
    expiry_severity,
    header_label,
)


class TestBuildWorkbook:
    def test_header_row_is_bold_and_localized(self):
        content = build_workbook(
            "Employees",
            ["employee_no", "full_name"],
            [{"employee_no": "EMP-000001", "full_name": "Ivan Petrov"}],
            ReportLocale.RU,
        )

        sheet = load_workbook(io.BytesIO(content)).active
        assert sheet.title == "Employees"
        assert sheet["A1"].value == "Табельный номер"
        assert sheet["A1"].font.bold is True
        assert sheet["B2"].value == "Ivan Petrov"
        assert sheet.freeze_panes == "A2"

    def test_values_are_converted(self):
        content = build_workbook(
            "Payroll",
            ["net_amount", "hire_date"],
            [{"net_amount": Decimal("4872.00"), "hire_date": date(2025, 1, 10)}],
            ReportLocale.EN,
        )

        sheet = load_workbook(io.BytesIO(content)).active
        assert sheet["A2"].value == 4872.0
        assert sheet["B2"].value.date() == date(2025, 1, 10)

    def test_header_labels(self):
        assert header_label("net_amount", ReportLocale.TR) == "Net"
        assert header_label("full_name", ReportLocale.EN) == "Full Name"

    def test_expiry_severity(self):
        assert expiry_severity(-3) == "EXPIRED"
        assert expiry_severity(0) == "EXPIRED"
        assert expiry_severity(7) == "CRITICAL"
        assert expiry_severity(8) == "WARNING"


class TestExportEndpoint:
    async def test_employee_list_export(self, client, admin_headers):
        await client.post(
            "/api/v1/employees", json={"first_name": "Ivan", "last_name": "Petrov"}, headers=admin_headers
        )

        response = await client.post(
            "/api/v1/reports/export",
            json={"report_type": "EMPLOYEE_LIST", "locale": "en"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_CONTENT_TYPE
        assert response.headers["content-disposition"].startswith('attachment; filename="employee_list_')
        sheet = load_workbook(io.BytesIO(response.content)).active
        assert sheet["A1"].value == "Employee No"
        assert sheet["A2"].value == "EMP-000001"

    async def test_attendance_summary_requires_period(self, client, admin_headers):
        response = await client.post(
            "/api/v1/reports/export",
            json={"report_type": "ATTENDANCE_SUMMARY"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "period" in response.json()["error"]

    async def test_unknown_report_type(self, client, admin_headers):
        response = await client.post(
            "/api/v1/reports/export", json={"report_type": "EVERYTHING"}, headers=admin_headers
        )
        assert response.status_code == 400
