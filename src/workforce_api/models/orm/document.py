"""Employee document ORM models."""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeDocumentORM(Base, UUIDMixin, TimestampMixin):
    """One document of a given type held by an employee."""

    __tablename__ = "employee_documents"

    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_type_id: Mapped[UUID] = mapped_column(ForeignKey("document_types.id"), nullable=False)
    document_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    issued_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    verified_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM")
    document_type: Mapped["DocumentTypeORM"] = relationship("DocumentTypeORM")
    files: Mapped[list["DocumentFileORM"]] = relationship(
        "DocumentFileORM",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentFileORM.version_no",
    )


class DocumentFileORM(Base, UUIDMixin, TimestampMixin):
    """A stored file version of a document."""

    __tablename__ = "document_files"

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee_documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_no: Mapped[int] = mapped_column(Integer, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    uploaded_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    document: Mapped["EmployeeDocumentORM"] = relationship(
        "EmployeeDocumentORM", back_populates="files"
    )

    __table_args__ = (UniqueConstraint("document_id", "version_no", name="uq_document_file_version"),)
