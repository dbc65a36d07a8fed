"""Export service for spreadsheet reports."""

import io
import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

from fastapi import Request
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import NotFoundError, ValidationError
from workforce_api.models.domain.compliance import days_until
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.report import ExportRequest, ReportLocale, ReportType
from workforce_api.repositories.asset_repository import AssetRepository
from workforce_api.repositories.attendance_repository import AttendanceRecordRepository
from workforce_api.repositories.document_repository import EmployeeDocumentRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.payroll_repository import PayrollRunRepository
from workforce_api.repositories.transfer_repository import TransferRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType
from workforce_api.services.payroll_calculator import AttendanceTotals
from workforce_api.utils.dates import month_bounds

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DEFAULT_DAYS_AHEAD = 30
CRITICAL_DAYS = 7
MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 60

# Header labels per column key: (tr, ru, en)
HEADERS: dict[str, tuple[str, str, str]] = {
    "employee_no": ("Sicil No", "Табельный номер", "Employee No"),
    "full_name": ("Ad Soyad", "ФИО", "Full Name"),
    "nationality": ("Uyruk", "Гражданство", "Nationality"),
    "profession": ("Meslek", "Профессия", "Profession"),
    "department": ("Departman", "Отдел", "Department"),
    "worksite": ("Şantiye", "Объект", "Worksite"),
    "status": ("Durum", "Статус", "Status"),
    "hire_date": ("İşe Giriş", "Дата приёма", "Hire Date"),
    "phone": ("Telefon", "Телефон", "Phone"),
    "worked_days": ("Çalışılan Gün", "Отработано дней", "Worked Days"),
    "worked_hours": ("Çalışılan Saat", "Отработано часов", "Worked Hours"),
    "overtime_hours": ("Fazla Mesai Saati", "Сверхурочные часы", "Overtime Hours"),
    "night_hours": ("Gece Saati", "Ночные часы", "Night Hours"),
    "holiday_hours": ("Tatil Saati", "Праздничные часы", "Holiday Hours"),
    "payment_type": ("Ödeme Tipi", "Тип оплаты", "Payment Type"),
    "base_amount": ("Temel Ücret", "Оклад", "Base Pay"),
    "overtime_amount": ("Fazla Mesai", "Сверхурочные", "Overtime Pay"),
    "night_amount": ("Gece Primi", "Ночные", "Night Pay"),
    "holiday_amount": ("Tatil Primi", "Праздничные", "Holiday Pay"),
    "earnings_amount": ("Ek Kazanç", "Доплаты", "Earnings"),
    "gross_amount": ("Brüt", "Начислено", "Gross"),
    "tax_rate": ("Vergi Oranı", "Ставка НДФЛ", "Tax Rate"),
    "tax_amount": ("Vergi", "НДФЛ", "Tax"),
    "deductions_amount": ("Kesintiler", "Удержания", "Deductions"),
    "manual_adjustment": ("Düzeltme", "Корректировка", "Adjustment"),
    "net_amount": ("Net", "К выплате", "Net"),
    "document_type": ("Belge Türü", "Тип документа", "Document Type"),
    "document_no": ("Belge No", "Номер документа", "Document No"),
    "expiry_date": ("Bitiş Tarihi", "Дата окончания", "Expiry Date"),
    "days_left": ("Kalan Gün", "Осталось дней", "Days Left"),
    "asset_no": ("Demirbaş No", "Инв. номер", "Asset No"),
    "name": ("Ad", "Наименование", "Name"),
    "category": ("Kategori", "Категория", "Category"),
    "serial_no": ("Seri No", "Серийный номер", "Serial No"),
    "holder": ("Zimmetli", "Выдано", "Holder"),
    "purchase_date": ("Alım Tarihi", "Дата покупки", "Purchase Date"),
    "purchase_cost": ("Alım Bedeli", "Стоимость", "Purchase Cost"),
    "from_worksite": ("Çıkış Şantiyesi", "Откуда", "From Worksite"),
    "to_worksite": ("Varış Şantiyesi", "Куда", "To Worksite"),
    "transfer_date": ("Transfer Tarihi", "Дата перевода", "Transfer Date"),
    "reason": ("Sebep", "Причина", "Reason"),
}

_LOCALE_INDEX = {ReportLocale.TR: 0, ReportLocale.RU: 1, ReportLocale.EN: 2}

SHEET_TITLES = {
    ReportType.EMPLOYEE_LIST: "Employees",
    ReportType.ATTENDANCE_SUMMARY: "Attendance",
    ReportType.PAYROLL_SUMMARY: "Payroll",
    ReportType.EXPIRING_DOCUMENTS: "Expiring Documents",
    ReportType.ASSET_SUMMARY: "Assets",
    ReportType.TRANSFER_HISTORY: "Transfers",
}

PAYROLL_ITEM_FIELDS = (
    "worked_days",
    "worked_hours",
    "base_amount",
    "overtime_amount",
    "night_amount",
    "holiday_amount",
    "earnings_amount",
    "gross_amount",
    "tax_rate",
    "tax_amount",
    "deductions_amount",
    "manual_adjustment",
    "net_amount",
)

Row = dict[str, Any]


def header_label(key: str, locale: ReportLocale) -> str:
    return HEADERS[key][_LOCALE_INDEX[locale]]


def localized_name(entry: Any, locale: ReportLocale) -> str | None:
    """Name of a reference entry in the report locale, falling back to Turkish."""
    if entry is None:
        return None
    return getattr(entry, f"name_{locale.value}", None) or entry.name_tr


def expiry_severity(days_left: int) -> str:
    """Severity of a document in the expiring-documents report."""
    if days_left <= 0:
        return "EXPIRED"
    if days_left <= CRITICAL_DAYS:
        return "CRITICAL"
    return "WARNING"


def _cell_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    return value


def _worksite_name(employee: Any) -> str | None:
    employment = employee.employment if employee is not None else None
    if employment is None or employment.worksite is None:
        return None
    return employment.worksite.name


def build_workbook(title: str, columns: list[str], rows: list[Row], locale: ReportLocale) -> bytes:
    """Render rows into a single-sheet workbook.

    Args:
        title: Sheet title
        columns: Column keys in output order
        rows: Row dicts keyed by column key
        locale: Header language

    Returns:
        Excel file bytes
    """
    wb = Workbook()
    ws = wb.active
    ws.title = title

    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")

    widths = []
    for col, key in enumerate(columns, 1):
        label = header_label(key, locale)
        cell = ws.cell(row=1, column=col, value=label)
        cell.font = header_font
        cell.fill = header_fill
        widths.append(len(label))

    for row_idx, row in enumerate(rows, 2):
        for col, key in enumerate(columns, 1):
            value = _cell_value(row.get(key))
            cell = ws.cell(row=row_idx, column=col, value=value)
            if isinstance(value, date):
                cell.number_format = "yyyy-mm-dd"
                length = 10
            else:
                length = len(str(value)) if value is not None else 0
            widths[col - 1] = max(widths[col - 1], length)

    for col, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = min(
            MAX_COLUMN_WIDTH, max(MIN_COLUMN_WIDTH, width + 2)
        )
    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


class ExportService:
    """Service for exporting reports to Excel."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.record_repo = AttendanceRecordRepository(session)
        self.payroll_repo = PayrollRunRepository(session)
        self.document_repo = EmployeeDocumentRepository(session)
        self.asset_repo = AssetRepository(session)
        self.transfer_repo = TransferRepository(session)
        self.audit_service = AuditService(session)
        self._builders: dict[ReportType, tuple[list[str], Callable]] = {
            ReportType.EMPLOYEE_LIST: (
                ["employee_no", "full_name", "nationality", "profession", "department",
                 "worksite", "status", "hire_date", "phone"],
                self._employee_rows,
            ),
            ReportType.ATTENDANCE_SUMMARY: (
                ["employee_no", "full_name", "worksite", "worked_days", "worked_hours",
                 "overtime_hours", "night_hours", "holiday_hours"],
                self._attendance_rows,
            ),
            ReportType.PAYROLL_SUMMARY: (
                ["employee_no", "full_name", "payment_type", "worked_days", "worked_hours",
                 "base_amount", "overtime_amount", "night_amount", "holiday_amount",
                 "earnings_amount", "gross_amount", "tax_rate", "tax_amount",
                 "deductions_amount", "manual_adjustment", "net_amount"],
                self._payroll_rows,
            ),
            ReportType.EXPIRING_DOCUMENTS: (
                ["employee_no", "full_name", "document_type", "document_no", "expiry_date",
                 "days_left", "status"],
                self._expiring_document_rows,
            ),
            ReportType.ASSET_SUMMARY: (
                ["asset_no", "name", "category", "worksite", "serial_no", "status", "holder",
                 "purchase_date", "purchase_cost"],
                self._asset_rows,
            ),
            ReportType.TRANSFER_HISTORY: (
                ["employee_no", "full_name", "from_worksite", "to_worksite", "transfer_date",
                 "status", "reason"],
                self._transfer_rows,
            ),
        }

    # =========================================================================
    # Filters
    # =========================================================================

    @staticmethod
    def _uuid_filter(filters: dict[str, Any], key: str) -> UUID | None:
        raw = filters.get(key)
        if raw in (None, ""):
            return None
        try:
            return UUID(str(raw))
        except ValueError as e:
            raise ValidationError(f"Invalid value for filter '{key}'") from e

    @staticmethod
    def _required(filters: dict[str, Any], key: str, report_type: ReportType) -> Any:
        value = filters.get(key)
        if value in (None, ""):
            raise ValidationError(f"Filter '{key}' is required for {report_type.value}")
        return value

    # =========================================================================
    # Row builders
    # =========================================================================

    async def _employee_rows(self, filters: dict[str, Any], locale: ReportLocale) -> list[Row]:
        employees = await self.employee_repo.get_for_export(self._uuid_filter(filters, "worksite_id"))
        return [
            {
                "employee_no": e.employee_no,
                "full_name": e.full_name,
                "nationality": localized_name(e.nationality, locale),
                "profession": localized_name(e.profession, locale),
                "department": localized_name(e.department, locale),
                "worksite": _worksite_name(e),
                "status": e.status,
                "hire_date": e.employment.hire_date if e.employment else None,
                "phone": e.phone,
            }
            for e in employees
        ]

    async def _attendance_rows(self, filters: dict[str, Any], locale: ReportLocale) -> list[Row]:
        start, end = month_bounds(str(self._required(filters, "period", ReportType.ATTENDANCE_SUMMARY)))
        worksite_id = self._uuid_filter(filters, "worksite_id")

        by_employee = defaultdict(list)
        for record in await self.record_repo.get_in_range(start, end, worksite_id):
            by_employee[record.employee_id].append(record)

        rows = []
        for employee in await self.employee_repo.get_for_export():
            records = by_employee.get(employee.id)
            if not records:
                continue
            totals = AttendanceTotals.from_records(records)
            rows.append(
                {
                    "employee_no": employee.employee_no,
                    "full_name": employee.full_name,
                    "worksite": _worksite_name(employee),
                    "worked_days": totals.worked_days,
                    "worked_hours": totals.worked_hours,
                    "overtime_hours": totals.overtime_hours,
                    "night_hours": totals.night_hours,
                    "holiday_hours": totals.holiday_hours,
                }
            )
        return rows

    async def _payroll_rows(self, filters: dict[str, Any], locale: ReportLocale) -> list[Row]:
        self._required(filters, "payroll_run_id", ReportType.PAYROLL_SUMMARY)
        run_id = self._uuid_filter(filters, "payroll_run_id")
        run = await self.payroll_repo.get_with_items(run_id)
        if run is None:
            raise NotFoundError("Payroll run", run_id)

        rows = []
        for item in sorted(run.items, key=lambda i: i.employee.employee_no):
            row = {field: getattr(item, field) for field in PAYROLL_ITEM_FIELDS}
            row.update(
                employee_no=item.employee.employee_no,
                full_name=item.employee.full_name,
                payment_type=item.payment_type,
            )
            rows.append(row)
        return rows

    async def _expiring_document_rows(self, filters: dict[str, Any], locale: ReportLocale) -> list[Row]:
        try:
            days_ahead = int(filters.get("days_ahead") or DEFAULT_DAYS_AHEAD)
        except (TypeError, ValueError) as e:
            raise ValidationError("Invalid value for filter 'days_ahead'") from e
        if days_ahead < 0:
            raise ValidationError("days_ahead must not be negative")

        today = date.today()
        documents = await self.document_repo.get_expiring(
            today + timedelta(days=days_ahead),
            self._uuid_filter(filters, "worksite_id"),
        )
        rows = []
        for doc in documents:
            days_left = days_until(doc.expiry_date, today)
            rows.append(
                {
                    "employee_no": doc.employee.employee_no,
                    "full_name": doc.employee.full_name,
                    "document_type": localized_name(doc.document_type, locale),
                    "document_no": doc.document_no,
                    "expiry_date": doc.expiry_date,
                    "days_left": days_left,
                    "status": expiry_severity(days_left),
                }
            )
        return rows

    async def _asset_rows(self, filters: dict[str, Any], locale: ReportLocale) -> list[Row]:
        assets = await self.asset_repo.get_for_export(self._uuid_filter(filters, "worksite_id"))
        rows = []
        for asset in assets:
            holder = next((a.employee for a in asset.assignments if a.returned_on is None), None)
            rows.append(
                {
                    "asset_no": asset.asset_no,
                    "name": asset.name,
                    "category": localized_name(asset.category, locale),
                    "worksite": asset.worksite.name if asset.worksite else None,
                    "serial_no": asset.serial_no,
                    "status": asset.status,
                    "holder": holder.full_name if holder else None,
                    "purchase_date": asset.purchase_date,
                    "purchase_cost": asset.purchase_cost,
                }
            )
        return rows

    async def _transfer_rows(self, filters: dict[str, Any], locale: ReportLocale) -> list[Row]:
        transfers = await self.transfer_repo.get_history(self._uuid_filter(filters, "worksite_id"))
        return [
            {
                "employee_no": t.employee.employee_no,
                "full_name": t.employee.full_name,
                "from_worksite": t.from_worksite.name if t.from_worksite else None,
                "to_worksite": t.to_worksite.name if t.to_worksite else None,
                "transfer_date": t.transfer_date,
                "status": t.status,
                "reason": t.reason,
            }
            for t in transfers
        ]

    # =========================================================================
    # Export
    # =========================================================================

    async def export(
        self,
        request: ExportRequest,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> tuple[str, bytes]:
        """Build a report workbook.

        Args:
            request: Report type, filters and locale
            current_user: Exporting user
            http_request: Request for audit metadata

        Returns:
            Tuple of (file name, xlsx bytes)

        Raises:
            ValidationError: Missing or malformed filters
            NotFoundError: Unknown payroll run
        """
        columns, build_rows = self._builders[request.report_type]
        rows = await build_rows(request.filters, request.locale)
        content = build_workbook(SHEET_TITLES[request.report_type], columns, rows, request.locale)

        await self.audit_service.log(
            action=AuditAction.EXPORT,
            entity=EntityType.REPORT,
            entity_id=request.report_type.value,
            actor_id=current_user.id,
            new_values={
                "report_type": request.report_type.value,
                "filters": {k: str(v) for k, v in request.filters.items()},
                "locale": request.locale.value,
                "rows": len(rows),
            },
            request=http_request,
        )
        await self.session.commit()

        filename = f"{request.report_type.value.lower()}_{date.today().isoformat()}.xlsx"
        logger.info(f"Exported {request.report_type.value} with {len(rows)} rows")
        return filename, content
