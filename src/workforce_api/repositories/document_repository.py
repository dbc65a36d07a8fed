"""Employee document repositories."""

from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.document import DocumentFileORM, EmployeeDocumentORM
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.repositories.base import BaseRepository


class EmployeeDocumentRepository(BaseRepository[EmployeeDocumentORM]):
    """Repository for employee documents."""

    model = EmployeeDocumentORM
    search_columns = ("document_no", "issued_by")
    filter_relations = ("document_type", "employee")

    def base_query(self) -> Select:
        return select(EmployeeDocumentORM).options(
            selectinload(EmployeeDocumentORM.document_type),
            selectinload(EmployeeDocumentORM.employee),
            selectinload(EmployeeDocumentORM.files),
        )

    async def get_full(self, document_id: UUID) -> EmployeeDocumentORM | None:
        """Get a document with type, employee and file versions loaded."""
        result = await self.session.execute(
            self.base_query()
            .where(EmployeeDocumentORM.id == document_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_for_employee(self, employee_id: UUID) -> list[EmployeeDocumentORM]:
        result = await self.session.execute(
            self.base_query()
            .where(EmployeeDocumentORM.employee_id == employee_id)
            .order_by(EmployeeDocumentORM.created_at)
        )
        return list(result.scalars().all())

    async def get_document_type_ids(self, employee_id: UUID) -> set[UUID]:
        """Document types an employee has on file."""
        result = await self.session.execute(
            select(EmployeeDocumentORM.document_type_id)
            .where(EmployeeDocumentORM.employee_id == employee_id)
            .distinct()
        )
        return set(result.scalars().all())

    async def get_dated(self) -> list[EmployeeDocumentORM]:
        """Documents of non-deleted employees that carry an expiry date."""
        result = await self.session.execute(
            select(EmployeeDocumentORM)
            .join(EmployeeORM, EmployeeORM.id == EmployeeDocumentORM.employee_id)
            .options(selectinload(EmployeeDocumentORM.document_type))
            .where(
                EmployeeDocumentORM.expiry_date.is_not(None),
                EmployeeORM.deleted_at.is_(None),
            )
        )
        return list(result.scalars().all())

    async def get_expiring(self, until: date, worksite_id: UUID | None = None) -> list[EmployeeDocumentORM]:
        """Documents expiring on or before a date (already expired included)."""
        stmt = (
            select(EmployeeDocumentORM)
            .join(EmployeeORM, EmployeeORM.id == EmployeeDocumentORM.employee_id)
            .options(
                selectinload(EmployeeDocumentORM.document_type),
                selectinload(EmployeeDocumentORM.employee).selectinload(EmployeeORM.employment),
            )
            .where(
                EmployeeDocumentORM.expiry_date.is_not(None),
                EmployeeDocumentORM.expiry_date <= until,
                EmployeeORM.deleted_at.is_(None),
            )
            .order_by(EmployeeDocumentORM.expiry_date)
        )
        if worksite_id is not None:
            stmt = stmt.where(EmployeeORM.employment.has(worksite_id=worksite_id))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class DocumentFileRepository(BaseRepository[DocumentFileORM]):
    """Repository for stored document file versions."""

    model = DocumentFileORM

    async def latest_version_no(self, document_id: UUID) -> int:
        """Highest version number of a document, 0 when it has no files."""
        result = await self.session.execute(
            select(func.max(DocumentFileORM.version_no)).where(
                DocumentFileORM.document_id == document_id
            )
        )
        return result.scalar_one() or 0

    async def get_version(self, document_id: UUID, version_no: int | None = None) -> DocumentFileORM | None:
        """Get a given version, or the latest when version_no is None."""
        stmt = select(DocumentFileORM).where(DocumentFileORM.document_id == document_id)
        if version_no is None:
            stmt = stmt.order_by(DocumentFileORM.version_no.desc()).limit(1)
        else:
            stmt = stmt.where(DocumentFileORM.version_no == version_no)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
