"""Progress payment (hakkediş) ORM models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class ProgressPaymentORM(Base, UUIDMixin, TimestampMixin):
    """Measured work of a worksite for one period, paid by quantity."""

    __tablename__ = "progress_payments"

    worksite_id: Mapped[UUID] = mapped_column(ForeignKey("worksites.id"), nullable=False)
    period: Mapped[str | None] = mapped_column(String(7), nullable=True)  # YYYY-MM
    status: Mapped[str] = mapped_column(String(20), default="DRAFT", nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    worksite: Mapped["WorksiteORM"] = relationship("WorksiteORM")
    items: Mapped[list["ProgressPaymentItemORM"]] = relationship(
        "ProgressPaymentItemORM",
        back_populates="progress_payment",
        cascade="all, delete-orphan",
        order_by="ProgressPaymentItemORM.work_date",
    )

    __table_args__ = (Index("idx_progress_payments_period", "period", "worksite_id"),)


class ProgressPaymentItemORM(Base, UUIDMixin, TimestampMixin):
    """A measured work item, optionally credited to one employee or team."""

    __tablename__ = "progress_payment_items"

    progress_payment_id: Mapped[UUID] = mapped_column(
        ForeignKey("progress_payments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    employee_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("employees.id"), nullable=True, index=True
    )
    work_item: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    team_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    distribution_percent: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    distribution_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    progress_payment: Mapped["ProgressPaymentORM"] = relationship(
        "ProgressPaymentORM", back_populates="items"
    )
    employee: Mapped["EmployeeORM | None"] = relationship("EmployeeORM")
