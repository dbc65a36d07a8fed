"""Reference data DTOs.

Every lookup shares the code / localized name / active / sort-order block;
kinds add their own fields on top.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from workforce_api.models.domain.compliance import AlertEntity, TRACKED_DATE_FIELDS
from workforce_api.models.domain.employee import WorkStatusType
from workforce_api.utils.validation import normalize_code


class LookupCreate(BaseModel):
    """Fields shared by every reference-data entry."""

    code: str = Field(min_length=1, max_length=50)
    name_tr: str = Field(min_length=1, max_length=255)
    name_ru: str | None = Field(default=None, max_length=255)
    name_en: str | None = Field(default=None, max_length=255)
    is_active: bool = True
    sort_order: int = Field(default=0, ge=0)

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        return normalize_code(value)


class LookupUpdate(BaseModel):
    """Partial update of a reference-data entry; the code is immutable."""

    name_tr: str | None = Field(default=None, min_length=1, max_length=255)
    name_ru: str | None = Field(default=None, max_length=255)
    name_en: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None
    sort_order: int | None = Field(default=None, ge=0)


class LookupResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    code: str
    name_tr: str
    name_ru: str | None = None
    name_en: str | None = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


# Nationality


class NationalityCreate(LookupCreate):
    requires_work_permit: bool = True


class NationalityUpdate(LookupUpdate):
    requires_work_permit: bool | None = None


class NationalityResponse(LookupResponse):
    requires_work_permit: bool


# Shift

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ShiftCreate(LookupCreate):
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    is_night: bool = False


class ShiftUpdate(LookupUpdate):
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    is_night: bool | None = None


class ShiftResponse(LookupResponse):
    start_time: str | None = None
    end_time: str | None = None
    is_night: bool


# Document type


class DocumentTypeCreate(LookupCreate):
    category: str = Field(default="OTHER", max_length=50)
    has_expiry: bool = False
    default_alert_days: int = Field(default=30, ge=0, le=3650)


class DocumentTypeUpdate(LookupUpdate):
    category: str | None = Field(default=None, max_length=50)
    has_expiry: bool | None = None
    default_alert_days: int | None = Field(default=None, ge=0, le=3650)


class DocumentTypeResponse(LookupResponse):
    category: str
    has_expiry: bool
    default_alert_days: int


# Leave type


class LeaveTypeCreate(LookupCreate):
    is_paid: bool = True
    default_days: int = Field(default=0, ge=0, le=366)


class LeaveTypeUpdate(LookupUpdate):
    is_paid: bool | None = None
    default_days: int | None = Field(default=None, ge=0, le=366)


class LeaveTypeResponse(LookupResponse):
    is_paid: bool
    default_days: int


# Earning category


class EarningCategoryCreate(LookupCreate):
    is_taxable: bool = True


class EarningCategoryUpdate(LookupUpdate):
    is_taxable: bool | None = None


class EarningCategoryResponse(LookupResponse):
    is_taxable: bool


# Alert rule


class AlertRuleCreate(LookupCreate):
    entity: AlertEntity
    date_field: str = Field(min_length=1, max_length=100)
    warning_days: int = Field(default=30, ge=0, le=3650)
    critical_days: int = Field(default=7, ge=0, le=3650)
    document_type_code: str | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def _check_rule(self) -> "AlertRuleCreate":
        if self.date_field not in TRACKED_DATE_FIELDS[self.entity]:
            raise ValueError(f"'{self.date_field}' is not a tracked date field of {self.entity}")
        if self.critical_days > self.warning_days:
            raise ValueError("critical_days must not exceed warning_days")
        return self


class AlertRuleUpdate(LookupUpdate):
    warning_days: int | None = Field(default=None, ge=0, le=3650)
    critical_days: int | None = Field(default=None, ge=0, le=3650)
    document_type_code: str | None = Field(default=None, max_length=50)


class AlertRuleResponse(LookupResponse):
    entity: str
    date_field: str
    warning_days: int
    critical_days: int
    document_type_code: str | None = None


# Payroll rule


class PayrollRuleVersionInput(BaseModel):
    rate: Decimal = Field(ge=0, max_digits=8, decimal_places=4)
    is_percentage: bool = True
    effective_from: date
    effective_to: date | None = None

    @model_validator(mode="after")
    def _check_window(self) -> "PayrollRuleVersionInput":
        if self.effective_to is not None and self.effective_to < self.effective_from:
            raise ValueError("effective_to must not precede effective_from")
        return self


class PayrollRuleVersionResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    rate: Decimal
    is_percentage: bool
    effective_from: date
    effective_to: date | None = None


class PayrollRuleCreate(LookupCreate):
    category: str = Field(default="TAX", max_length=50)
    description: str | None = Field(default=None, max_length=2000)
    versions: list[PayrollRuleVersionInput] = Field(default=[], max_length=50)


class PayrollRuleUpdate(LookupUpdate):
    category: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=2000)


class PayrollRuleResponse(LookupResponse):
    category: str
    description: str | None = None
    versions: list[PayrollRuleVersionResponse] = []


# Document requirements


class DocumentRequirementsUpdate(BaseModel):
    """Complete set of document types required for one work-status type."""

    document_type_ids: list[UUID] = Field(default=[], max_length=100)


class DocumentRequirementResponse(BaseModel):
    work_status_type: WorkStatusType
    document_type_id: UUID
    document_type_code: str
    is_mandatory: bool
