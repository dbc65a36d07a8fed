"""Employee aggregate ORM models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeORM(Base, UUIDMixin, TimestampMixin):
    """Employee database model."""

    __tablename__ = "employees"

    employee_no: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    patronymic: Mapped[str | None] = mapped_column(String(100), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)
    nationality_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("nationalities.id"), nullable=True
    )
    profession_id: Mapped[UUID | None] = mapped_column(ForeignKey("professions.id"), nullable=True)
    department_id: Mapped[UUID | None] = mapped_column(ForeignKey("departments.id"), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    nationality: Mapped["NationalityORM | None"] = relationship("NationalityORM")
    profession: Mapped["ProfessionORM | None"] = relationship("ProfessionORM")
    department: Mapped["DepartmentORM | None"] = relationship("DepartmentORM")

    # One-to-one sections; load with selectinload() when needed
    identity: Mapped["EmployeeIdentityORM | None"] = relationship(
        "EmployeeIdentityORM", back_populates="employee", uselist=False, cascade="all, delete-orphan"
    )
    work_status: Mapped["EmployeeWorkStatusORM | None"] = relationship(
        "EmployeeWorkStatusORM", back_populates="employee", uselist=False, cascade="all, delete-orphan"
    )
    employment: Mapped["EmployeeEmploymentORM | None"] = relationship(
        "EmployeeEmploymentORM", back_populates="employee", uselist=False, cascade="all, delete-orphan"
    )
    salary_profile: Mapped["EmployeeSalaryProfileORM | None"] = relationship(
        "EmployeeSalaryProfileORM",
        back_populates="employee",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_employees_status", "status"),
        Index("idx_employees_last_name", "last_name"),
    )

    @property
    def full_name(self) -> str:
        parts = [self.last_name, self.first_name, self.patronymic]
        return " ".join(part for part in parts if part)


class EmployeeIdentityORM(Base, UUIDMixin, TimestampMixin):
    """Passport and tax identifiers."""

    __tablename__ = "employee_identities"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    passport_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    passport_issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    passport_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    passport_issued_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    inn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    snils: Mapped[str | None] = mapped_column(String(20), nullable=True)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM", back_populates="identity")


class EmployeeWorkStatusORM(Base, UUIDMixin, TimestampMixin):
    """Work authorization category and instrument validity windows."""

    __tablename__ = "employee_work_statuses"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    work_status_type: Mapped[str] = mapped_column(String(30), default="LOCAL", nullable=False)
    patent_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    patent_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    patent_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    visa_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    visa_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    visa_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    work_permit_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    work_permit_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    residence_permit_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    residence_permit_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    registration_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    migration_card_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    migration_card_end: Mapped[date | None] = mapped_column(Date, nullable=True)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM", back_populates="work_status")


class EmployeeEmploymentORM(Base, UUIDMixin, TimestampMixin):
    """Current assignment of an employee to a worksite."""

    __tablename__ = "employee_employments"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    worksite_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("worksites.id"), nullable=True, index=True
    )
    shift_id: Mapped[UUID | None] = mapped_column(ForeignKey("shifts.id"), nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    termination_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    contract_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    probation_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    team_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM", back_populates="employment")
    worksite: Mapped["WorksiteORM | None"] = relationship("WorksiteORM")


class EmployeeSalaryProfileORM(Base, UUIDMixin, TimestampMixin):
    """Pay terms and tax classification; the single source of truth for payroll."""

    __tablename__ = "employee_salary_profiles"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    payment_type: Mapped[str] = mapped_column(String(20), default="MONTHLY", nullable=False)
    gross_salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    net_salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    daily_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    overtime_multiplier: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), default=Decimal("1.5"), nullable=False
    )
    night_multiplier: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), default=Decimal("1.2"), nullable=False
    )
    holiday_multiplier: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), default=Decimal("2.0"), nullable=False
    )
    tax_status: Mapped[str] = mapped_column(String(20), default="RESIDENT", nullable=False)
    custom_ndfl_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default="RUB", nullable=False)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM", back_populates="salary_profile")


class SalaryRevisionORM(Base, UUIDMixin, TimestampMixin):
    """One changed salary profile field, kept as history."""

    __tablename__ = "salary_revisions"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    field: Mapped[str] = mapped_column(String(50), nullable=False)
    old_value: Mapped[str | None] = mapped_column(String(100), nullable=True)
    new_value: Mapped[str | None] = mapped_column(String(100), nullable=True)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)


class PatentPaymentORM(Base, UUIDMixin, TimestampMixin):
    """Monthly advance payment for a work patent."""

    __tablename__ = "patent_payments"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    receipt_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "year", "month", name="uq_patent_payment_month"),
    )


class EmployeeContactORM(Base, UUIDMixin, TimestampMixin):
    """Emergency or family contact of an employee."""

    __tablename__ = "employee_contacts"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    contact_type: Mapped[str] = mapped_column(String(30), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    relation: Mapped[str | None] = mapped_column("relationship", String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
