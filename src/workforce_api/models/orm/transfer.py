"""Employee site transfer ORM model."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeSiteTransferORM(Base, UUIDMixin, TimestampMixin):
    """Move of an employee from one worksite to another."""

    __tablename__ = "employee_site_transfers"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_worksite_id: Mapped[UUID | None] = mapped_column(ForeignKey("worksites.id"), nullable=True)
    to_worksite_id: Mapped[UUID] = mapped_column(ForeignKey("worksites.id"), nullable=False)
    transfer_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    requested_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    approved_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM")
    from_worksite: Mapped["WorksiteORM | None"] = relationship(
        "WorksiteORM", foreign_keys=[from_worksite_id]
    )
    to_worksite: Mapped["WorksiteORM"] = relationship("WorksiteORM", foreign_keys=[to_worksite_id])
