"""Employee service for the employee aggregate."""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.constants.permissions import Permissions
from workforce_api.exceptions import NotFoundError, PermissionDeniedError
from workforce_api.models.domain.employee import EmployeeStatus, WorkStatusType
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import DeletionResult, PaginatedResponse, PaginationMeta
from workforce_api.models.dto.employee import (
    REVISION_META_FIELDS,
    EmployeeCreate,
    EmployeeDetailResponse,
    EmployeeResponse,
    EmployeeUpdate,
    EmploymentInput,
    IdentityInput,
    MissingDocumentResponse,
    SalaryProfileInput,
    SalaryRevisionResponse,
    WorkStatusInput,
)
from workforce_api.models.orm.base import utcnow
from workforce_api.models.orm.employee import EmployeeORM
from workforce_api.repositories.document_repository import EmployeeDocumentRepository
from workforce_api.repositories.employee_record_repository import SalaryRevisionRepository
from workforce_api.repositories.employee_repository import SECTION_MODELS, EmployeeRepository
from workforce_api.repositories.reference_repository import (
    DepartmentRepository,
    DocumentRequirementRepository,
    NationalityRepository,
    ProfessionRepository,
    ShiftRepository,
)
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.services.audit_service import (
    AuditAction,
    AuditService,
    EntityType,
    snapshot,
    to_json_value,
)
from workforce_api.services.numbering_service import NumberingService
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

SectionInput = IdentityInput | WorkStatusInput | EmploymentInput | SalaryProfileInput

# Salary profile fields whose changes are kept as revisions
TRACKED_SALARY_FIELDS = (
    "payment_type",
    "net_salary",
    "gross_salary",
    "hourly_rate",
    "daily_rate",
    "overtime_multiplier",
    "night_multiplier",
    "holiday_multiplier",
    "tax_status",
    "custom_ndfl_rate",
)


def _revision_value(value: Any) -> str | None:
    return None if value is None else str(to_json_value(value))


class EmployeeService:
    """Service for employees and their 1:1 sections."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = EmployeeRepository(session)
        self.revision_repo = SalaryRevisionRepository(session)
        self.document_repo = EmployeeDocumentRepository(session)
        self.requirement_repo = DocumentRequirementRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.numbering = NumberingService(session)
        self.audit_service = AuditService(session)
        self._lookups = {
            "nationality_id": ("Nationality", NationalityRepository(session)),
            "profession_id": ("Profession", ProfessionRepository(session)),
            "department_id": ("Department", DepartmentRepository(session)),
        }
        self.shift_repo = ShiftRepository(session)

    async def _get(self, employee_id: UUID) -> EmployeeORM:
        employee = await self.repo.get_aggregate(employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def _check_references(self, values: dict) -> None:
        """Raise NotFoundError for lookup ids that do not exist."""
        for field, (label, repo) in self._lookups.items():
            ref_id = values.get(field)
            if ref_id is not None and await repo.get(ref_id) is None:
                raise NotFoundError(label, ref_id)

    async def _check_employment(self, data: EmploymentInput) -> None:
        if data.worksite_id is not None and await self.worksite_repo.get(data.worksite_id) is None:
            raise NotFoundError("Worksite", data.worksite_id)
        if data.shift_id is not None and await self.shift_repo.get(data.shift_id) is None:
            raise NotFoundError("Shift", data.shift_id)

    @staticmethod
    def _ensure_salary_edit(current_user: CurrentUser) -> None:
        if not current_user.has_permission(Permissions.SALARY_EDIT):
            raise PermissionDeniedError(permission=Permissions.SALARY_EDIT)

    @staticmethod
    def _detail(employee: EmployeeORM, current_user: CurrentUser) -> EmployeeDetailResponse:
        """Build the detail view; salary terms only for ``salary.view`` holders."""
        detail = EmployeeDetailResponse.model_validate(employee)
        if not current_user.has_permission(Permissions.SALARY_VIEW):
            detail.salary_profile = None
        return detail

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_employees(self, query: ListQuery) -> PaginatedResponse[EmployeeResponse]:
        """List non-deleted employees.

        Filters use column names of the employee or dot-notation into a
        section, e.g. ``employment.worksite_id``.
        """
        employees, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[EmployeeResponse.model_validate(e) for e in employees],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_employee(self, employee_id: UUID, current_user: CurrentUser) -> EmployeeDetailResponse:
        return self._detail(await self._get(employee_id), current_user)

    async def get_missing_documents(self, employee_id: UUID) -> list[MissingDocumentResponse]:
        """Mandatory document types for the employee's work status not yet on file."""
        employee = await self._get(employee_id)
        status_type = (
            employee.work_status.work_status_type if employee.work_status else WorkStatusType.LOCAL.value
        )
        requirements = await self.requirement_repo.get_for_status(status_type)
        on_file = await self.document_repo.get_document_type_ids(employee_id)

        return [
            MissingDocumentResponse(
                document_type_id=req.document_type_id,
                code=req.document_type.code,
                name_tr=req.document_type.name_tr,
                name_ru=req.document_type.name_ru,
                name_en=req.document_type.name_en,
            )
            for req in requirements
            if req.is_mandatory and req.document_type_id not in on_file
        ]

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_employee(
        self,
        data: EmployeeCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> EmployeeDetailResponse:
        """Create an employee with any supplied sections in one transaction.

        The employee number comes from the ``employee`` numbering rule.

        Raises:
            NotFoundError: A referenced lookup, worksite or shift does not exist
            PermissionDeniedError: A salary profile is supplied without ``salary.edit``
        """
        sections = {name: getattr(data, name) for name in SECTION_MODELS if getattr(data, name) is not None}
        if "salary_profile" in sections:
            self._ensure_salary_edit(current_user)

        values = data.model_dump(exclude=set(SECTION_MODELS))
        await self._check_references(values)
        if "employment" in sections:
            await self._check_employment(sections["employment"])

        employee_no = await self.numbering.next_number()
        employee = await self.repo.create(employee_no=employee_no, **values)
        for name, section in sections.items():
            await self.repo.upsert_section(employee.id, name, section.model_dump())

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.EMPLOYEE,
            entity_id=employee.id,
            actor_id=current_user.id,
            new_values={**snapshot(employee), "sections": sorted(sections)},
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"Created employee {employee_no}")

        return self._detail(await self._get(employee.id), current_user)

    async def update_employee(
        self,
        employee_id: UUID,
        data: EmployeeUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> EmployeeDetailResponse:
        """Apply a partial update to the employee's own fields."""
        employee = await self._get(employee_id)
        before = snapshot(employee)

        changes = data.model_dump(exclude_unset=True)
        await self._check_references(changes)
        for field, value in changes.items():
            setattr(employee, field, value)

        await self.session.flush()
        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.EMPLOYEE,
            entity_id=employee_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(employee),
        )
        await self.session.commit()
        return self._detail(await self._get(employee_id), current_user)

    async def upsert_section(
        self,
        employee_id: UUID,
        section: str,
        data: SectionInput,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> EmployeeDetailResponse:
        """Replace one 1:1 section of an employee (PUT semantics).

        Args:
            employee_id: Employee UUID
            section: identity, work_status, employment or salary_profile
            data: Complete section content
            current_user: Acting user
            http_request: Request for audit metadata

        Returns:
            Updated employee detail
        """
        if section == "salary_profile":
            self._ensure_salary_edit(current_user)
        if isinstance(data, EmploymentInput):
            await self._check_employment(data)

        await self._get(employee_id)
        existing = await self.repo.get_section(employee_id, section)
        values = data.model_dump(exclude=REVISION_META_FIELDS)
        before = snapshot(existing, fields=list(values)) if existing is not None else {}
        tracked = (
            {name: getattr(existing, name) for name in TRACKED_SALARY_FIELDS}
            if section == "salary_profile" and existing is not None
            else None
        )

        row = await self.repo.upsert_section(employee_id, section, values)
        if tracked is not None:
            await self._record_salary_revisions(employee_id, tracked, row, data, current_user)

        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE if existing is not None else AuditAction.CREATE,
            entity=EntityType.EMPLOYEE,
            entity_id=employee_id,
            actor_id=current_user.id,
            request=http_request,
            old_values={section: before},
            new_values={section: snapshot(row, fields=list(values))},
        )
        await self.session.commit()
        return self._detail(await self._get(employee_id), current_user)

    async def _record_salary_revisions(
        self,
        employee_id: UUID,
        before: dict[str, Any],
        row,
        data: SectionInput,
        current_user: CurrentUser,
    ) -> int:
        """Write one revision per tracked salary field whose value changed.

        Values are compared as numbers and enum values, so 85000 and 85000.00
        are the same salary.
        """
        effective_from = getattr(data, "effective_from", None) or date.today()
        reason = getattr(data, "revision_reason", None)
        written = 0
        for field in TRACKED_SALARY_FIELDS:
            old, new = before[field], getattr(row, field)
            if old == new:
                continue
            await self.revision_repo.create(
                employee_id=employee_id,
                field=field,
                old_value=_revision_value(old),
                new_value=_revision_value(new),
                effective_from=effective_from,
                reason=reason,
                changed_by=current_user.id,
            )
            written += 1
        if written:
            logger.info(f"Recorded {written} salary revision(s) for employee {employee_id}")
        return written

    async def list_salary_revisions(self, employee_id: UUID) -> list[SalaryRevisionResponse]:
        """Salary change history of an employee, newest first."""
        await self._get(employee_id)
        revisions = await self.revision_repo.get_for_employee(employee_id)
        return [SalaryRevisionResponse.model_validate(r) for r in revisions]

    async def delete_employee(
        self,
        employee_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DeletionResult:
        """Soft-delete an employee.

        Employees are never hard-deleted; attendance and payroll history keep
        pointing at the row.
        """
        employee = await self._get(employee_id)
        employee.deleted_at = utcnow()
        employee.status = EmployeeStatus.TERMINATED.value
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.EMPLOYEE,
            entity_id=employee_id,
            actor_id=current_user.id,
            old_values={"employee_no": employee.employee_no},
            new_values={"status": employee.status, "deleted_at": employee.deleted_at},
            request=http_request,
        )
        await self.session.commit()
        return DeletionResult(id=str(employee_id), deleted=False, deactivated=True)
