"""Document service for employee documents and their file versions."""

import logging
from datetime import date
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.config import get_settings
from workforce_api.exceptions import NotFoundError, ValidationError
from workforce_api.models.domain.compliance import classify_document, days_until
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.dto.document import (
    DocumentCreate,
    DocumentFileResponse,
    DocumentResponse,
    DocumentUpdate,
)
from workforce_api.models.orm.base import utcnow
from workforce_api.models.orm.document import DocumentFileORM, EmployeeDocumentORM
from workforce_api.repositories.document_repository import (
    DocumentFileRepository,
    EmployeeDocumentRepository,
)
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.reference_repository import DocumentTypeRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.services.storage import FileStorage, content_hash, document_path, get_storage
from workforce_api.utils.file_validation import (
    extension_for,
    is_allowed_content_type,
    safe_filename,
    validate_file_signature,
)
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

DOCUMENT_FIELDS = ("document_no", "issue_date", "expiry_date", "issued_by", "notes", "is_verified")


def document_response(document: EmployeeDocumentORM, today: date | None = None) -> DocumentResponse:
    """Build a document response with its status computed for today."""
    status = classify_document(
        document.expiry_date,
        document.document_type.default_alert_days,
        document.is_verified,
        today,
    )
    employee = document.employee
    return DocumentResponse(
        id=document.id,
        employee_id=document.employee_id,
        employee_no=employee.employee_no if employee else None,
        employee_name=employee.full_name if employee else None,
        document_type_id=document.document_type_id,
        document_type_code=document.document_type.code,
        document_no=document.document_no,
        issue_date=document.issue_date,
        expiry_date=document.expiry_date,
        issued_by=document.issued_by,
        notes=document.notes,
        is_verified=document.is_verified,
        verified_at=document.verified_at,
        status=status,
        days_left=days_until(document.expiry_date, today) if document.expiry_date else None,
        files=[DocumentFileResponse.model_validate(f) for f in document.files],
        created_at=document.created_at,
        updated_at=document.updated_at,
    )


class DocumentService:
    """Service for employee documents."""

    def __init__(self, session: AsyncSession, storage: FileStorage | None = None) -> None:
        """Initialize service with database session and storage backend."""
        self.session = session
        self.storage = storage or get_storage()
        self.repo = EmployeeDocumentRepository(session)
        self.file_repo = DocumentFileRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.document_type_repo = DocumentTypeRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, document_id: UUID) -> EmployeeDocumentORM:
        document = await self.repo.get_full(document_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    async def list_documents(self, query: ListQuery) -> PaginatedResponse[DocumentResponse]:
        documents, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[document_response(d) for d in documents],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def list_for_employee(self, employee_id: UUID) -> list[DocumentResponse]:
        if await self.employee_repo.get(employee_id) is None:
            raise NotFoundError("Employee", employee_id)
        return [document_response(d) for d in await self.repo.get_for_employee(employee_id)]

    async def get_document(self, document_id: UUID) -> DocumentResponse:
        return document_response(await self._get(document_id))

    async def create_document(
        self,
        data: DocumentCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DocumentResponse:
        """Register a document of an employee.

        Raises:
            NotFoundError: Unknown employee or document type
            ValidationError: Inactive document type
        """
        employee = await self.employee_repo.get(data.employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", data.employee_id)
        document_type = await self.document_type_repo.get(data.document_type_id)
        if document_type is None:
            raise NotFoundError("Document type", data.document_type_id)
        if not document_type.is_active:
            raise ValidationError(f"Document type {document_type.code} is inactive")

        values = data.model_dump()
        if data.is_verified:
            values["verified_at"] = utcnow()
            values["verified_by"] = current_user.id
        document = await self.repo.create(**values)

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.DOCUMENT,
            entity_id=document.id,
            actor_id=current_user.id,
            new_values=snapshot(document),
            request=http_request,
        )
        await self.session.commit()
        return document_response(await self._get(document.id))

    async def update_document(
        self,
        document_id: UUID,
        data: DocumentUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DocumentResponse:
        """Apply a partial update; verification stamps the actor and time."""
        document = await self._get(document_id)
        before = snapshot(document, DOCUMENT_FIELDS)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("is_verified") is None:
            changes.pop("is_verified", None)
        for field, value in changes.items():
            setattr(document, field, value)

        if document.issue_date and document.expiry_date and document.expiry_date < document.issue_date:
            raise ValidationError("expiry_date must not precede issue_date")
        if "is_verified" in changes:
            document.verified_at = utcnow() if document.is_verified else None
            document.verified_by = current_user.id if document.is_verified else None

        await self.session.flush()
        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.DOCUMENT,
            entity_id=document_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(document, DOCUMENT_FIELDS),
        )
        await self.session.commit()
        return document_response(await self._get(document_id))

    async def delete_document(
        self,
        document_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> None:
        """Delete a document with its file versions and alerts.

        Stored blobs are content-addressed and may be shared, so they stay
        on the storage backend.
        """
        document = await self._get(document_id)
        before = snapshot(document)
        await self.session.delete(document)
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.DOCUMENT,
            entity_id=document_id,
            actor_id=current_user.id,
            old_values=before,
            request=http_request,
        )
        await self.session.commit()

    async def upload_file(
        self,
        document_id: UUID,
        filename: str | None,
        content_type: str | None,
        content: bytes,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DocumentFileResponse:
        """Store a new file version of a document.

        Args:
            document_id: Document UUID
            filename: Name of the uploaded file
            content_type: Declared MIME type
            content: File bytes
            current_user: Uploading user
            http_request: Request for audit metadata

        Returns:
            The stored version, numbered one above the latest

        Raises:
            ValidationError: Disallowed type, empty or oversized file, or
                content not matching the declared type
            StorageError: The backend failed to store the file
        """
        document = await self._get(document_id)

        name = safe_filename(filename)
        if name is None:
            raise ValidationError("Invalid filename")
        if not is_allowed_content_type(content_type):
            raise ValidationError(f"File type not allowed: {content_type}")
        content_type = content_type.lower()
        if not content:
            raise ValidationError("File is empty")
        max_size = get_settings().max_upload_size_bytes
        if len(content) > max_size:
            raise ValidationError(f"File too large. Maximum size: {max_size // 1024 // 1024}MB")
        if not validate_file_signature(content, content_type):
            raise ValidationError("File content does not match declared file type")

        digest = content_hash(content)
        key = document_path(
            document.employee.employee_no,
            document.document_type.code,
            digest,
            extension_for(content_type, name),
        )
        await self.storage.save(key, content)

        version_no = await self.file_repo.latest_version_no(document_id) + 1
        stored = await self.file_repo.create(
            document_id=document_id,
            version_no=version_no,
            file_name=name,
            storage_path=key,
            content_type=content_type,
            size_bytes=len(content),
            content_hash=digest,
            uploaded_by=current_user.id,
        )

        await self.audit_service.log(
            action=AuditAction.UPLOAD,
            entity=EntityType.DOCUMENT_FILE,
            entity_id=stored.id,
            actor_id=current_user.id,
            new_values={
                "document_id": document_id,
                "version_no": version_no,
                "file_name": name,
                "size_bytes": len(content),
                "content_hash": digest,
            },
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Stored version {version_no} of document {document_id}")
        return DocumentFileResponse.model_validate(stored)

    async def download_file(
        self,
        document_id: UUID,
        version_no: int | None = None,
    ) -> tuple[DocumentFileORM, bytes]:
        """Latest (or a given) file version of a document with its bytes."""
        await self._get(document_id)
        stored = await self.file_repo.get_version(document_id, version_no)
        if stored is None:
            raise NotFoundError("Document file", version_no)
        return stored, await self.storage.read(stored.storage_path)
