"""Progress payment (hakkediş) DTOs."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from workforce_api.models.domain.workflow import ProgressPaymentStatus
from workforce_api.models.dto.payroll import EmployeeBrief
from workforce_api.models.dto.worksite import WorksiteSummary

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class ProgressPaymentCreate(BaseModel):
    worksite_id: UUID
    period: str | None = Field(default=None, pattern=PERIOD_PATTERN)
    notes: str | None = Field(default=None, max_length=5000)


class ProgressPaymentUpdate(BaseModel):
    """Partial update; a status change must follow the progress payment workflow."""

    period: str | None = Field(default=None, pattern=PERIOD_PATTERN)
    status: ProgressPaymentStatus | None = None
    notes: str | None = Field(default=None, max_length=5000)


class ProgressPaymentItemCreate(BaseModel):
    employee_id: UUID | None = None
    work_item: str = Field(min_length=1, max_length=255)
    unit: str = Field(min_length=1, max_length=20)
    quantity: Decimal = Field(gt=0, max_digits=12, decimal_places=3)
    unit_price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    team_name: str | None = Field(default=None, max_length=100)
    distribution_percent: Decimal | None = Field(default=None, ge=0, le=100)
    distribution_amount: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    work_date: date
    notes: str | None = Field(default=None, max_length=2000)


class ProgressPaymentItemResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    progress_payment_id: UUID
    employee_id: UUID | None = None
    employee: EmployeeBrief | None = None
    work_item: str
    unit: str
    quantity: Decimal
    unit_price: Decimal
    total_amount: Decimal
    team_name: str | None = None
    distribution_percent: Decimal | None = None
    distribution_amount: Decimal | None = None
    work_date: date
    notes: str | None = None


class ProgressPaymentResponse(BaseModel):
    """Progress payment header as listed."""

    model_config = {"from_attributes": True}

    id: UUID
    worksite_id: UUID
    worksite: WorksiteSummary | None = None
    period: str | None = None
    status: ProgressPaymentStatus
    total_amount: Decimal
    notes: str | None = None
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class ProgressPaymentDetailResponse(ProgressPaymentResponse):
    items: list[ProgressPaymentItemResponse] = []
