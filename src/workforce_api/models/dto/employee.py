"""Employee DTOs."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from workforce_api.models.domain.employee import (
    ContactType,
    EmployeeStatus,
    Gender,
    PaymentType,
    TaxStatus,
    WorkStatusType,
)
from workforce_api.models.dto.worksite import WorksiteSummary

Money = Decimal


class LookupRef(BaseModel):
    """Code and names of a referenced lookup entry."""

    model_config = {"from_attributes": True}

    id: UUID
    code: str
    name_tr: str
    name_ru: str | None = None
    name_en: str | None = None


class IdentityInput(BaseModel):
    passport_no: str | None = Field(default=None, max_length=50)
    passport_issue_date: date | None = None
    passport_expiry_date: date | None = None
    passport_issued_by: str | None = Field(default=None, max_length=255)
    inn: str | None = Field(default=None, max_length=20)
    snils: str | None = Field(default=None, max_length=20)


class IdentityResponse(IdentityInput):
    model_config = {"from_attributes": True}


class WorkStatusInput(BaseModel):
    work_status_type: WorkStatusType = WorkStatusType.LOCAL
    patent_no: str | None = Field(default=None, max_length=50)
    patent_start: date | None = None
    patent_end: date | None = None
    visa_no: str | None = Field(default=None, max_length=50)
    visa_start: date | None = None
    visa_end: date | None = None
    work_permit_no: str | None = Field(default=None, max_length=50)
    work_permit_end: date | None = None
    residence_permit_no: str | None = Field(default=None, max_length=50)
    residence_permit_end: date | None = None
    registration_address: str | None = Field(default=None, max_length=2000)
    registration_end: date | None = None
    migration_card_no: str | None = Field(default=None, max_length=50)
    migration_card_end: date | None = None


class WorkStatusResponse(WorkStatusInput):
    model_config = {"from_attributes": True}


class EmploymentInput(BaseModel):
    worksite_id: UUID | None = None
    shift_id: UUID | None = None
    hire_date: date | None = None
    termination_date: date | None = None
    contract_type: str | None = Field(default=None, max_length=30)
    contract_end: date | None = None
    probation_end: date | None = None
    team_name: str | None = Field(default=None, max_length=100)


class EmploymentResponse(EmploymentInput):
    model_config = {"from_attributes": True}

    worksite: WorksiteSummary | None = None


class SalaryProfileInput(BaseModel):
    """Pay terms of an employee."""

    payment_type: PaymentType = PaymentType.MONTHLY
    gross_salary: Money | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    net_salary: Money | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    daily_rate: Money | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    hourly_rate: Money | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    overtime_multiplier: Decimal = Field(default=Decimal("1.5"), ge=1, le=10)
    night_multiplier: Decimal = Field(default=Decimal("1.2"), ge=1, le=10)
    holiday_multiplier: Decimal = Field(default=Decimal("2.0"), ge=1, le=10)
    tax_status: TaxStatus = TaxStatus.RESIDENT
    custom_ndfl_rate: Decimal | None = Field(default=None, ge=0, lt=100)
    currency: str = Field(default="RUB", min_length=3, max_length=3)

    @model_validator(mode="after")
    def _check_rate_for_payment_type(self) -> "SalaryProfileInput":
        if self.payment_type == PaymentType.DAILY and self.daily_rate is None:
            raise ValueError("daily_rate is required for DAILY payment type")
        if self.payment_type == PaymentType.HOURLY and self.hourly_rate is None:
            raise ValueError("hourly_rate is required for HOURLY payment type")
        return self


class SalaryProfileUpdate(SalaryProfileInput):
    """Salary terms plus metadata for the revision history of changed fields."""

    effective_from: date | None = None
    revision_reason: str | None = Field(default=None, max_length=2000)


# Request fields that describe a salary change rather than the profile itself
REVISION_META_FIELDS = frozenset({"effective_from", "revision_reason"})


class SalaryProfileResponse(BaseModel):
    model_config = {"from_attributes": True}

    payment_type: PaymentType
    gross_salary: Money | None = None
    net_salary: Money | None = None
    daily_rate: Money | None = None
    hourly_rate: Money | None = None
    overtime_multiplier: Decimal
    night_multiplier: Decimal
    holiday_multiplier: Decimal
    tax_status: TaxStatus
    custom_ndfl_rate: Decimal | None = None
    currency: str


class EmployeeCreate(BaseModel):
    """Employee creation request; every section is optional."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    patronymic: str | None = Field(default=None, max_length=100)
    birth_date: date | None = None
    gender: Gender | None = None
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    nationality_id: UUID | None = None
    profession_id: UUID | None = None
    department_id: UUID | None = None
    notes: str | None = Field(default=None, max_length=5000)

    identity: IdentityInput | None = None
    work_status: WorkStatusInput | None = None
    employment: EmploymentInput | None = None
    salary_profile: SalaryProfileInput | None = None


class EmployeeUpdate(BaseModel):
    """Partial employee update; the employee number is immutable."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    patronymic: str | None = Field(default=None, max_length=100)
    birth_date: date | None = None
    gender: Gender | None = None
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    status: EmployeeStatus | None = None
    nationality_id: UUID | None = None
    profession_id: UUID | None = None
    department_id: UUID | None = None
    notes: str | None = Field(default=None, max_length=5000)


class EmployeeResponse(BaseModel):
    """Employee list row."""

    model_config = {"from_attributes": True}

    id: UUID
    employee_no: str
    first_name: str
    last_name: str
    patronymic: str | None = None
    full_name: str
    birth_date: date | None = None
    gender: Gender | None = None
    phone: str | None = None
    email: str | None = None
    status: EmployeeStatus
    nationality: LookupRef | None = None
    profession: LookupRef | None = None
    department: LookupRef | None = None
    created_at: datetime
    updated_at: datetime


class EmployeeDetailResponse(EmployeeResponse):
    """Employee with every 1:1 section.

    ``salary_profile`` is only filled for callers holding ``salary.view``.
    """

    notes: str | None = None
    identity: IdentityResponse | None = None
    work_status: WorkStatusResponse | None = None
    employment: EmploymentResponse | None = None
    salary_profile: SalaryProfileResponse | None = None


class MissingDocumentResponse(BaseModel):
    document_type_id: UUID
    code: str
    name_tr: str
    name_ru: str | None = None
    name_en: str | None = None


class SalaryRevisionResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    field: str
    old_value: str | None = None
    new_value: str | None = None
    effective_from: date
    reason: str | None = None
    changed_by: UUID | None = None
    created_at: datetime


class PatentPaymentInput(BaseModel):
    """Patent payment for one month; an existing month is overwritten."""

    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)
    amount: Money = Field(ge=0, max_digits=12, decimal_places=2)
    paid_date: date | None = None
    receipt_url: str | None = Field(default=None, max_length=500)
    notes: str | None = Field(default=None, max_length=2000)


class PatentPaymentResponse(PatentPaymentInput):
    model_config = {"from_attributes": True}

    id: UUID
    employee_id: UUID
    created_at: datetime
    updated_at: datetime


class ContactCreate(BaseModel):
    contact_type: ContactType
    full_name: str = Field(min_length=1, max_length=255)
    relation: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    address: str | None = Field(default=None, max_length=2000)
    notes: str | None = Field(default=None, max_length=2000)


class ContactResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    employee_id: UUID
    contact_type: ContactType
    full_name: str
    relation: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: datetime


class FinancialMonth(BaseModel):
    """Earnings and payments of one period; ``cumulative`` carries the running balance."""

    period: str
    payroll: Money
    progress_payments: Money
    total_income: Money
    paid: Money
    balance: Money
    cumulative: Money


class FinancialSummary(BaseModel):
    employee_id: UUID
    total_payroll: Money
    total_progress_payments: Money
    total_paid: Money
    current_balance: Money
    months: list[FinancialMonth]
