"""Asset ORM models."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class AssetORM(Base, UUIDMixin, TimestampMixin):
    """Tool, vehicle or equipment item."""

    __tablename__ = "assets"

    asset_no: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[UUID | None] = mapped_column(ForeignKey("asset_categories.id"), nullable=True)
    worksite_id: Mapped[UUID | None] = mapped_column(ForeignKey("worksites.id"), nullable=True)
    serial_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="AVAILABLE", nullable=False)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    category: Mapped["AssetCategoryORM | None"] = relationship("AssetCategoryORM")
    worksite: Mapped["WorksiteORM | None"] = relationship("WorksiteORM")
    assignments: Mapped[list["AssetAssignmentORM"]] = relationship(
        "AssetAssignmentORM", back_populates="asset", order_by="AssetAssignmentORM.assigned_on"
    )


class AssetAssignmentORM(Base, UUIDMixin, TimestampMixin):
    """Period during which an employee holds an asset."""

    __tablename__ = "asset_assignments"

    asset_id: Mapped[UUID] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_on: Mapped[date] = mapped_column(Date, nullable=False)
    returned_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    condition_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    asset: Mapped["AssetORM"] = relationship("AssetORM", back_populates="assignments")
    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM")
