"""Leave, site transfer and asset DTOs."""

from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from workforce_api.models.domain.workflow import LeaveStatus, TransferStatus
from workforce_api.models.dto.payroll import EmployeeBrief
from workforce_api.models.dto.worksite import WorksiteSummary


class LeaveRequestCreate(BaseModel):
    employee_id: UUID
    leave_type_id: UUID
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _check_range(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class LeaveDecision(BaseModel):
    status: LeaveStatus
    rejection_reason: str | None = Field(default=None, max_length=2000)


class LeaveRequestResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    employee_id: UUID
    employee: EmployeeBrief | None = None
    leave_type_id: UUID
    start_date: date
    end_date: date
    days: int
    reason: str | None = None
    status: LeaveStatus
    decided_by: UUID | None = None
    decided_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime


class TransferCreate(BaseModel):
    employee_id: UUID
    to_worksite_id: UUID
    transfer_date: date
    reason: str | None = Field(default=None, max_length=2000)


class TransferDecision(BaseModel):
    """Status change; ``auto_complete`` completes an approval immediately."""

    status: TransferStatus
    auto_complete: bool = False


class TransferResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    employee_id: UUID
    employee: EmployeeBrief | None = None
    from_worksite_id: UUID | None = None
    from_worksite: WorksiteSummary | None = None
    to_worksite_id: UUID
    to_worksite: WorksiteSummary | None = None
    transfer_date: date
    reason: str | None = None
    status: TransferStatus
    requested_by: UUID | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime


class AssetStatus(StrEnum):
    AVAILABLE = "AVAILABLE"
    ASSIGNED = "ASSIGNED"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"


class AssetCreate(BaseModel):
    asset_no: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    category_id: UUID | None = None
    worksite_id: UUID | None = None
    serial_no: str | None = Field(default=None, max_length=100)
    purchase_date: date | None = None
    purchase_cost: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    notes: str | None = Field(default=None, max_length=2000)


class AssetUpdate(BaseModel):
    """Partial asset update; ASSIGNED is only reached through an assignment."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    category_id: UUID | None = None
    worksite_id: UUID | None = None
    serial_no: str | None = Field(default=None, max_length=100)
    status: AssetStatus | None = None
    purchase_date: date | None = None
    purchase_cost: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    notes: str | None = Field(default=None, max_length=2000)


class AssetAssignmentResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    asset_id: UUID
    employee_id: UUID
    assigned_on: date
    returned_on: date | None = None
    condition_notes: str | None = None


class AssetResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    asset_no: str
    name: str
    category_id: UUID | None = None
    worksite_id: UUID | None = None
    worksite: WorksiteSummary | None = None
    serial_no: str | None = None
    status: AssetStatus
    purchase_date: date | None = None
    purchase_cost: Decimal | None = None
    notes: str | None = None
    assignments: list[AssetAssignmentResponse] = []
    created_at: datetime


class AssetAssignRequest(BaseModel):
    employee_id: UUID
    assigned_on: date | None = None
    condition_notes: str | None = Field(default=None, max_length=1000)


class AssetReturnRequest(BaseModel):
    returned_on: date | None = None
    condition_notes: str | None = Field(default=None, max_length=1000)
