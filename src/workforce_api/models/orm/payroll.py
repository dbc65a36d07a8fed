"""Payroll ORM models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin

ZERO = Decimal("0")


class PayrollRunORM(Base, UUIDMixin, TimestampMixin):
    """Payroll for one worksite (or every worksite) and one month."""

    __tablename__ = "payroll_runs"

    worksite_id: Mapped[UUID | None] = mapped_column(ForeignKey("worksites.id"), nullable=True)
    period: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    status: Mapped[str] = mapped_column(String(20), default="DRAFT", nullable=False)
    employee_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_gross: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=ZERO, nullable=False)
    total_tax: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=ZERO, nullable=False)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=ZERO, nullable=False)
    total_net: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=ZERO, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    calculated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    worksite: Mapped["WorksiteORM | None"] = relationship("WorksiteORM")
    items: Mapped[list["PayrollItemORM"]] = relationship(
        "PayrollItemORM",
        back_populates="run",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_payroll_runs_period", "period", "worksite_id"),)


class PayrollItemORM(Base, UUIDMixin, TimestampMixin):
    """Computed pay of one employee within a run."""

    __tablename__ = "payroll_items"

    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_runs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    employee_id: Mapped[UUID] = mapped_column(ForeignKey("employees.id"), nullable=False)
    payment_type: Mapped[str] = mapped_column(String(20), nullable=False)
    tax_status: Mapped[str] = mapped_column(String(20), nullable=False)
    worked_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    worked_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=ZERO, nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=ZERO, nullable=False)
    night_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=ZERO, nullable=False)
    holiday_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), default=ZERO, nullable=False)
    base_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    overtime_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    night_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    holiday_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    earnings_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=ZERO, nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    deductions_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    manual_adjustment: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    adjustment_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    net_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)

    run: Mapped["PayrollRunORM"] = relationship("PayrollRunORM", back_populates="items")
    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM")

    __table_args__ = (
        UniqueConstraint("payroll_run_id", "employee_id", name="uq_payroll_item_employee"),
    )


class PayrollEntryORM(Base, UUIDMixin, TimestampMixin):
    """One-off earning or deduction for an employee within a run."""

    __tablename__ = "payroll_entries"

    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_runs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    employee_id: Mapped[UUID] = mapped_column(ForeignKey("employees.id"), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)  # EARNING / DEDUCTION
    category_code: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
