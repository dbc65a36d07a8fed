"""Payroll DTOs."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from workforce_api.models.domain.employee import PaymentType, TaxStatus
from workforce_api.models.domain.workflow import PayrollRunStatus
from workforce_api.models.dto.worksite import WorksiteSummary


class EntryKind(StrEnum):
    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"


class PayrollRunCreate(BaseModel):
    """Create a run for one worksite, or every worksite when omitted."""

    worksite_id: UUID | None = None
    period: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    notes: str | None = Field(default=None, max_length=2000)


class PayrollRunResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    worksite_id: UUID | None = None
    worksite: WorksiteSummary | None = None
    period: str
    status: PayrollRunStatus
    employee_count: int
    total_gross: Decimal
    total_tax: Decimal
    total_deductions: Decimal
    total_net: Decimal
    notes: str | None = None
    calculated_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by: UUID | None = None
    paid_at: datetime | None = None
    locked_at: datetime | None = None
    created_at: datetime


class EmployeeBrief(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    employee_no: str
    first_name: str
    last_name: str


class PayrollItemResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    employee_id: UUID
    employee: EmployeeBrief | None = None
    payment_type: PaymentType
    tax_status: TaxStatus
    worked_days: int
    worked_hours: Decimal
    overtime_hours: Decimal
    night_hours: Decimal
    holiday_hours: Decimal
    base_amount: Decimal
    overtime_amount: Decimal
    night_amount: Decimal
    holiday_amount: Decimal
    earnings_amount: Decimal
    gross_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    deductions_amount: Decimal
    manual_adjustment: Decimal
    adjustment_note: str | None = None
    net_amount: Decimal


class PayrollRunDetailResponse(PayrollRunResponse):
    items: list[PayrollItemResponse] = []


class PayrollEntryCreate(BaseModel):
    """One-off earning or deduction."""

    employee_id: UUID
    kind: EntryKind
    category_code: str = Field(min_length=1, max_length=50)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    description: str | None = Field(default=None, max_length=1000)
    is_approved: bool = False


class PayrollEntryResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    payroll_run_id: UUID
    employee_id: UUID
    kind: EntryKind
    category_code: str
    amount: Decimal
    description: str | None = None
    is_approved: bool
    created_at: datetime


class ManualAdjustmentRequest(BaseModel):
    """Signed amount added to the net pay of one item."""

    amount: Decimal = Field(max_digits=12, decimal_places=2)
    note: str | None = Field(default=None, max_length=1000)


class PayrollRunUpdate(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)
