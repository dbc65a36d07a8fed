"""Reference data service for lookup tables.

All kinds share one set of operations; the registry maps a kind name to
its repository and DTOs.
"""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

import pydantic
from fastapi import Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import ConflictError, NotFoundError, ValidationError
from workforce_api.models.domain.employee import WorkStatusType
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import DeletionResult, PaginatedResponse, PaginationMeta
from workforce_api.models.dto.reference import (
    AlertRuleCreate,
    AlertRuleResponse,
    AlertRuleUpdate,
    DocumentRequirementResponse,
    DocumentTypeCreate,
    DocumentTypeResponse,
    DocumentTypeUpdate,
    EarningCategoryCreate,
    EarningCategoryResponse,
    EarningCategoryUpdate,
    LeaveTypeCreate,
    LeaveTypeResponse,
    LeaveTypeUpdate,
    LookupCreate,
    LookupResponse,
    LookupUpdate,
    NationalityCreate,
    NationalityResponse,
    NationalityUpdate,
    PayrollRuleCreate,
    PayrollRuleResponse,
    PayrollRuleUpdate,
    PayrollRuleVersionInput,
    ShiftCreate,
    ShiftResponse,
    ShiftUpdate,
)
from workforce_api.repositories.base import BaseRepository, RetireOutcome
from workforce_api.repositories.reference_repository import (
    AlertRuleRepository,
    AssetCategoryRepository,
    DeductionCategoryRepository,
    DepartmentRepository,
    DocumentRequirementRepository,
    DocumentTypeRepository,
    EarningCategoryRepository,
    LeaveTypeRepository,
    NationalityRepository,
    PayrollRuleRepository,
    ProfessionRepository,
    ShiftRepository,
)
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceKind:
    """Repository and DTOs of one lookup table."""

    repository: type[BaseRepository]
    create_model: type[LookupCreate]
    update_model: type[LookupUpdate]
    response_model: type[LookupResponse]


REFERENCE_KINDS: dict[str, ReferenceKind] = {
    "nationality": ReferenceKind(NationalityRepository, NationalityCreate, NationalityUpdate, NationalityResponse),
    "profession": ReferenceKind(ProfessionRepository, LookupCreate, LookupUpdate, LookupResponse),
    "department": ReferenceKind(DepartmentRepository, LookupCreate, LookupUpdate, LookupResponse),
    "shift": ReferenceKind(ShiftRepository, ShiftCreate, ShiftUpdate, ShiftResponse),
    "document_type": ReferenceKind(
        DocumentTypeRepository, DocumentTypeCreate, DocumentTypeUpdate, DocumentTypeResponse
    ),
    "leave_type": ReferenceKind(LeaveTypeRepository, LeaveTypeCreate, LeaveTypeUpdate, LeaveTypeResponse),
    "asset_category": ReferenceKind(AssetCategoryRepository, LookupCreate, LookupUpdate, LookupResponse),
    "earning_category": ReferenceKind(
        EarningCategoryRepository, EarningCategoryCreate, EarningCategoryUpdate, EarningCategoryResponse
    ),
    "deduction_category": ReferenceKind(
        DeductionCategoryRepository, LookupCreate, LookupUpdate, LookupResponse
    ),
    "alert_rule": ReferenceKind(AlertRuleRepository, AlertRuleCreate, AlertRuleUpdate, AlertRuleResponse),
    "payroll_rule": ReferenceKind(
        PayrollRuleRepository, PayrollRuleCreate, PayrollRuleUpdate, PayrollRuleResponse
    ),
}


def _validate(model: type[BaseModel], payload: dict[str, Any]) -> BaseModel:
    """Validate a raw payload against a DTO, as a domain ValidationError."""
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = first["loc"][-1] if first.get("loc") else "body"
        raise ValidationError(f"{field}: {first['msg']}") from e


class ReferenceDataService:
    """Service for reference data (lookup tables)."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.audit_service = AuditService(session)
        self.rule_repo = PayrollRuleRepository(session)
        self.document_type_repo = DocumentTypeRepository(session)
        self.requirement_repo = DocumentRequirementRepository(session)

    @staticmethod
    def get_kind(kind: str) -> ReferenceKind:
        """Look up a registered kind.

        Raises:
            NotFoundError: If the kind is not registered
        """
        try:
            return REFERENCE_KINDS[kind]
        except KeyError:
            raise NotFoundError("Reference data kind", kind) from None

    def _repo(self, kind: str) -> BaseRepository:
        return self.get_kind(kind).repository(self.session)

    async def _get_entry(self, kind: str, entry_id: UUID):
        repo = self._repo(kind)
        if kind == "payroll_rule":
            entry = await repo.get_with_versions(entry_id)
        else:
            entry = await repo.get(entry_id)
        if entry is None:
            raise NotFoundError(kind.replace("_", " ").capitalize(), entry_id)
        return entry

    def _respond(self, kind: str, entry) -> LookupResponse:
        return self.get_kind(kind).response_model.model_validate(entry)

    async def list_entries(self, kind: str, query: ListQuery) -> PaginatedResponse[LookupResponse]:
        """List entries of a kind with paging, search and filters."""
        repo = self._repo(kind)
        entries, total = await repo.list(query)
        return PaginatedResponse(
            data=[self._respond(kind, entry) for entry in entries],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def list_active(self, kind: str) -> list[LookupResponse]:
        """Active entries of a kind in display order (for dropdowns)."""
        entries = await self._repo(kind).get_active()
        return [self._respond(kind, entry) for entry in entries]

    async def get_entry(self, kind: str, entry_id: UUID) -> LookupResponse:
        return self._respond(kind, await self._get_entry(kind, entry_id))

    async def create_entry(
        self,
        kind: str,
        payload: dict[str, Any],
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> LookupResponse:
        """Create an entry.

        Args:
            kind: Registered kind name
            payload: Raw request body, validated against the kind's create DTO
            current_user: User performing the action
            http_request: HTTP request for audit logging

        Raises:
            NotFoundError: Unknown kind
            ValidationError: Invalid payload
            ConflictError: Code already in use
        """
        reference_kind = self.get_kind(kind)
        data = _validate(reference_kind.create_model, payload)
        repo = reference_kind.repository(self.session)

        if await repo.get_by_code(data.code) is not None:
            raise ConflictError(f"Code {data.code} already exists")

        values = data.model_dump(exclude={"versions"})
        if isinstance(data, AlertRuleCreate):
            values["entity"] = data.entity.value
        entry = await repo.create(**values)

        if isinstance(data, PayrollRuleCreate):
            for version in data.versions:
                await self.rule_repo.add_version(entry, **version.model_dump())

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.REFERENCE,
            entity_id=entry.id,
            actor_id=current_user.id,
            new_values={"kind": kind, **snapshot(entry)},
            request=http_request,
        )
        await self.session.commit()

        return self._respond(kind, await self._get_entry(kind, entry.id))

    async def update_entry(
        self,
        kind: str,
        entry_id: UUID,
        payload: dict[str, Any],
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> LookupResponse:
        """Apply a partial update to an entry; omitted fields are left unchanged."""
        reference_kind = self.get_kind(kind)
        data = _validate(reference_kind.update_model, payload)
        entry = await self._get_entry(kind, entry_id)
        before = snapshot(entry)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(entry, field, value)

        if kind == "alert_rule" and entry.critical_days > entry.warning_days:
            raise ValidationError("critical_days must not exceed warning_days")

        await self.session.flush()
        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.REFERENCE,
            entity_id=entry_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(entry),
        )
        await self.session.commit()

        return self._respond(kind, await self._get_entry(kind, entry_id))

    async def retire_or_delete(
        self,
        kind: str,
        entry_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DeletionResult:
        """Hard-delete an unreferenced entry, otherwise deactivate it.

        Returns:
            Which branch was taken
        """
        entry = await self._get_entry(kind, entry_id)
        before = {"kind": kind, **snapshot(entry)}

        outcome = await self._repo(kind).retire_or_delete(entry)
        deleted = outcome == RetireOutcome.DELETED

        await self.audit_service.log(
            action=AuditAction.DELETE if deleted else AuditAction.DEACTIVATE,
            entity=EntityType.REFERENCE,
            entity_id=entry_id,
            actor_id=current_user.id,
            old_values=before,
            new_values=None if deleted else {"is_active": False},
            request=http_request,
        )
        await self.session.commit()

        logger.info(f"{kind} {entry_id} {outcome.value.lower()}")
        return DeletionResult(id=str(entry_id), deleted=deleted, deactivated=not deleted)

    # =========================================================================
    # Payroll Rule Versions
    # =========================================================================

    async def add_rule_version(
        self,
        rule_id: UUID,
        data: PayrollRuleVersionInput,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> PayrollRuleResponse:
        """Add an effective-dated version to a payroll rule."""
        rule = await self._get_entry("payroll_rule", rule_id)
        for existing in rule.versions:
            if existing.effective_from == data.effective_from:
                raise ConflictError(
                    f"Rule {rule.code} already has a version effective from {data.effective_from}"
                )

        version = await self.rule_repo.add_version(rule, **data.model_dump())
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.REFERENCE,
            entity_id=rule_id,
            actor_id=current_user.id,
            new_values={"kind": "payroll_rule_version", **snapshot(version)},
            request=http_request,
        )
        await self.session.commit()
        return self._respond("payroll_rule", await self._get_entry("payroll_rule", rule_id))

    # =========================================================================
    # Document Requirements
    # =========================================================================

    async def list_requirements(
        self, work_status_type: WorkStatusType | None = None
    ) -> list[DocumentRequirementResponse]:
        """Document types required per work-status type."""
        if work_status_type is None:
            rows = await self.requirement_repo.get_all()
        else:
            rows = await self.requirement_repo.get_for_status(work_status_type.value)
        return [
            DocumentRequirementResponse(
                work_status_type=WorkStatusType(row.work_status_type),
                document_type_id=row.document_type_id,
                document_type_code=row.document_type.code,
                is_mandatory=row.is_mandatory,
            )
            for row in rows
        ]

    async def replace_requirements(
        self,
        work_status_type: WorkStatusType,
        document_type_ids: list[UUID],
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> list[DocumentRequirementResponse]:
        """Replace the set of document types required for one work-status type.

        Raises:
            NotFoundError: If a document type does not exist
        """
        for document_type_id in document_type_ids:
            if await self.document_type_repo.get(document_type_id) is None:
                raise NotFoundError("Document type", document_type_id)

        before = [r.document_type_id for r in await self.requirement_repo.get_for_status(work_status_type.value)]
        await self.requirement_repo.replace_for_status(work_status_type.value, document_type_ids)

        await self.audit_service.log(
            action=AuditAction.UPDATE,
            entity=EntityType.REFERENCE,
            entity_id=work_status_type.value,
            actor_id=current_user.id,
            old_values={"kind": "document_requirement", "document_type_ids": before},
            new_values={"kind": "document_requirement", "document_type_ids": document_type_ids},
            request=http_request,
        )
        await self.session.commit()
        return await self.list_requirements(work_status_type)
