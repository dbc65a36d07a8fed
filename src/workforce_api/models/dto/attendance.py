"""Attendance DTOs."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from workforce_api.models.domain.workflow import AttendanceType, PeriodStatus
from workforce_api.models.dto.worksite import WorksiteSummary

Hours = Decimal


class AttendanceRecordInput(BaseModel):
    """One employee on one date; writing the same pair again updates it."""

    employee_id: UUID
    worksite_id: UUID
    work_date: date
    attendance_type: AttendanceType = AttendanceType.NORMAL
    total_hours: Hours = Field(default=Decimal("0"), ge=0, le=24, decimal_places=2)
    overtime_hours: Hours = Field(default=Decimal("0"), ge=0, le=24, decimal_places=2)
    night_hours: Hours = Field(default=Decimal("0"), ge=0, le=24, decimal_places=2)
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _check_hours(self) -> "AttendanceRecordInput":
        if self.night_hours > self.total_hours:
            raise ValueError("night_hours cannot exceed total_hours")
        return self


class BulkAttendanceRequest(BaseModel):
    records: list[AttendanceRecordInput] = Field(min_length=1, max_length=1000)


class AttendanceRecordResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    employee_id: UUID
    worksite_id: UUID
    period_id: UUID
    work_date: date
    attendance_type: AttendanceType
    total_hours: Hours
    overtime_hours: Hours
    night_hours: Hours
    notes: str | None = None
    updated_at: datetime


class BulkAttendanceResult(BaseModel):
    created: int
    updated: int
    records: list[AttendanceRecordResponse]


class PeriodRequest(BaseModel):
    worksite_id: UUID
    period: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")


class AttendancePeriodResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    worksite_id: UUID
    worksite: WorksiteSummary | None = None
    period: str
    status: PeriodStatus
    submitted_at: datetime | None = None
    submitted_by: UUID | None = None
    approved_at: datetime | None = None
    approved_by: UUID | None = None
    locked_at: datetime | None = None
    locked_by: UUID | None = None
    created_at: datetime
