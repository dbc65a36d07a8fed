"""Attendance ORM models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class AttendancePeriodORM(Base, UUIDMixin, TimestampMixin):
    """Monthly approval container for one worksite's attendance."""

    __tablename__ = "attendance_periods"

    worksite_id: Mapped[UUID] = mapped_column(ForeignKey("worksites.id"), nullable=False)
    period: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    status: Mapped[str] = mapped_column(String(20), default="OPEN", nullable=False)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submitted_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    locked_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    worksite: Mapped["WorksiteORM"] = relationship("WorksiteORM")

    __table_args__ = (UniqueConstraint("worksite_id", "period", name="uq_attendance_period"),)


class AttendanceRecordORM(Base, UUIDMixin, TimestampMixin):
    """One employee on one calendar date."""

    __tablename__ = "attendance_records"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    worksite_id: Mapped[UUID] = mapped_column(ForeignKey("worksites.id"), nullable=False)
    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("attendance_periods.id"), nullable=False, index=True
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    attendance_type: Mapped[str] = mapped_column(String(20), default="NORMAL", nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    night_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM")

    __table_args__ = (UniqueConstraint("employee_id", "work_date", name="uq_attendance_employee_date"),)
