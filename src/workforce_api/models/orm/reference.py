"""Reference data (lookup table) ORM models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, LookupMixin, TimestampMixin, UUIDMixin


class NationalityORM(Base, LookupMixin):
    """Nationality lookup."""

    __tablename__ = "nationalities"

    # Citizens need a work authorization other than LOCAL
    requires_work_permit: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class ProfessionORM(Base, LookupMixin):
    """Profession lookup."""

    __tablename__ = "professions"


class DepartmentORM(Base, LookupMixin):
    """Department lookup."""

    __tablename__ = "departments"


class ShiftORM(Base, LookupMixin):
    """Work shift lookup."""

    __tablename__ = "shifts"

    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    is_night: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class DocumentTypeORM(Base, LookupMixin):
    """Document type catalog entry."""

    __tablename__ = "document_types"

    category: Mapped[str] = mapped_column(String(50), default="OTHER", nullable=False)
    has_expiry: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    default_alert_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)


class LeaveTypeORM(Base, LookupMixin):
    """Leave type lookup."""

    __tablename__ = "leave_types"

    is_paid: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    default_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class AssetCategoryORM(Base, LookupMixin):
    """Asset category lookup."""

    __tablename__ = "asset_categories"


class EarningCategoryORM(Base, LookupMixin):
    """One-off earning category (bonus, allowance...)."""

    __tablename__ = "earning_categories"

    is_taxable: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class DeductionCategoryORM(Base, LookupMixin):
    """Deduction category (advance, fine, ...)."""

    __tablename__ = "deduction_categories"


class AlertRuleORM(Base, LookupMixin):
    """Threshold rule for a tracked date field."""

    __tablename__ = "alert_rules"

    entity: Mapped[str] = mapped_column(String(50), nullable=False)
    date_field: Mapped[str] = mapped_column(String(100), nullable=False)
    warning_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    critical_days: Mapped[int] = mapped_column(Integer, default=7, nullable=False)
    # Only used when entity is "document"
    document_type_code: Mapped[str | None] = mapped_column(String(50), nullable=True)


class PayrollRuleORM(Base, LookupMixin):
    """Named payroll rule (tax rate, contribution...) with dated versions."""

    __tablename__ = "payroll_rules"

    category: Mapped[str] = mapped_column(String(50), default="TAX", nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    versions: Mapped[list["PayrollRuleVersionORM"]] = relationship(
        "PayrollRuleVersionORM",
        back_populates="rule",
        cascade="all, delete-orphan",
        order_by="PayrollRuleVersionORM.effective_from",
    )


class PayrollRuleVersionORM(Base, UUIDMixin, TimestampMixin):
    """Effective-dated value of a payroll rule."""

    __tablename__ = "payroll_rule_versions"

    rule_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_rules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rate: Mapped[Decimal] = mapped_column(Numeric(8, 4), nullable=False)
    is_percentage: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)

    rule: Mapped["PayrollRuleORM"] = relationship("PayrollRuleORM", back_populates="versions")


class DocumentRequirementORM(Base, UUIDMixin, TimestampMixin):
    """Document type required for a work-authorization category."""

    __tablename__ = "document_requirements"

    work_status_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    document_type_id: Mapped[UUID] = mapped_column(
        ForeignKey("document_types.id", ondelete="CASCADE"), nullable=False
    )
    is_mandatory: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    document_type: Mapped["DocumentTypeORM"] = relationship("DocumentTypeORM")

    __table_args__ = (
        UniqueConstraint("work_status_type", "document_type_id", name="uq_document_requirement"),
    )
