"""Alert ORM model."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class AlertORM(Base, UUIDMixin, TimestampMixin):
    """Materialized alert for one rule and one tracked date instance."""

    __tablename__ = "alerts"

    rule_id: Mapped[UUID] = mapped_column(
        ForeignKey("alert_rules.id", ondelete="CASCADE"), nullable=False
    )
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("employee_documents.id", ondelete="CASCADE"), nullable=True
    )
    entity: Mapped[str] = mapped_column(String(50), nullable=False)
    date_field: Mapped[str] = mapped_column(String(100), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_left: Mapped[int] = mapped_column(Integer, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_dismissed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dismissed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    rule: Mapped["AlertRuleORM"] = relationship("AlertRuleORM")
    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM")

    __table_args__ = (
        Index("idx_alerts_instance", "rule_id", "employee_id", "document_id"),
        Index("idx_alerts_open", "is_dismissed", "resolved_at"),
    )
