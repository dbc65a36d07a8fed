"""Asset service for equipment and its hand-outs."""

from datetime import date
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import ConflictError, NotFoundError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import DeletionResult, PaginatedResponse, PaginationMeta
from workforce_api.models.dto.operations import (
    AssetAssignRequest,
    AssetCreate,
    AssetResponse,
    AssetReturnRequest,
    AssetStatus,
    AssetUpdate,
)
from workforce_api.models.orm.asset import AssetORM
from workforce_api.repositories.asset_repository import AssetAssignmentRepository, AssetRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType, snapshot
from workforce_api.utils.query import ListQuery

ASSET_FIELDS = (
    "name",
    "category_id",
    "worksite_id",
    "serial_no",
    "status",
    "purchase_date",
    "purchase_cost",
    "notes",
)


class AssetService:
    """Service for assets."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = AssetRepository(session)
        self.assignment_repo = AssetAssignmentRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, asset_id: UUID) -> AssetORM:
        asset = await self.repo.get_full(asset_id)
        if asset is None:
            raise NotFoundError("Asset", asset_id)
        return asset

    async def list_assets(self, query: ListQuery) -> PaginatedResponse[AssetResponse]:
        assets, total = await self.repo.list(query)
        return PaginatedResponse(
            data=[AssetResponse.model_validate(a) for a in assets],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_asset(self, asset_id: UUID) -> AssetResponse:
        return AssetResponse.model_validate(await self._get(asset_id))

    async def create_asset(
        self,
        data: AssetCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> AssetResponse:
        """Register an AVAILABLE asset.

        Raises:
            ConflictError: Asset number already in use
        """
        if await self.repo.get_by_asset_no(data.asset_no):
            raise ConflictError(f"Asset number {data.asset_no} already exists")

        asset = await self.repo.create(**data.model_dump(), status=AssetStatus.AVAILABLE.value)
        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.ASSET,
            entity_id=asset.id,
            actor_id=current_user.id,
            new_values=snapshot(asset),
            request=http_request,
        )
        await self.session.commit()
        return AssetResponse.model_validate(await self._get(asset.id))

    async def update_asset(
        self,
        asset_id: UUID,
        data: AssetUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> AssetResponse:
        """Apply a partial update.

        Raises:
            ValidationError: Status set to or away from ASSIGNED directly
        """
        asset = await self._get(asset_id)
        before = snapshot(asset, ASSET_FIELDS)

        changes = data.model_dump(exclude_unset=True)
        status = changes.get("status")
        if status is not None and status != asset.status:
            if AssetStatus.ASSIGNED in (status, asset.status):
                raise ValidationError("Use assign and return to change an assignment")
            changes["status"] = AssetStatus(status).value
        for field, value in changes.items():
            setattr(asset, field, value)
        await self.session.flush()

        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.ASSET,
            entity_id=asset_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=snapshot(asset, ASSET_FIELDS),
        )
        await self.session.commit()
        return AssetResponse.model_validate(await self._get(asset_id))

    async def assign(
        self,
        asset_id: UUID,
        data: AssetAssignRequest,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> AssetResponse:
        """Hand an AVAILABLE asset to an employee.

        Raises:
            NotFoundError: Unknown asset or employee
            ValidationError: Asset is not AVAILABLE
        """
        asset = await self._get(asset_id)
        if asset.status != AssetStatus.AVAILABLE:
            raise ValidationError(
                f"Asset {asset.asset_no} is {asset.status}",
                details={"status": asset.status},
            )
        employee = await self.employee_repo.get(data.employee_id)
        if employee is None or employee.deleted_at is not None:
            raise NotFoundError("Employee", data.employee_id)

        assigned_on = data.assigned_on or date.today()
        await self.assignment_repo.create(
            asset_id=asset_id,
            employee_id=data.employee_id,
            assigned_on=assigned_on,
            condition_notes=data.condition_notes,
        )
        asset.status = AssetStatus.ASSIGNED.value
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.ASSIGN,
            entity=EntityType.ASSET,
            entity_id=asset_id,
            actor_id=current_user.id,
            new_values={"employee_id": str(data.employee_id), "assigned_on": assigned_on.isoformat()},
            request=http_request,
        )
        await self.session.commit()
        return AssetResponse.model_validate(await self._get(asset_id))

    async def return_asset(
        self,
        asset_id: UUID,
        data: AssetReturnRequest,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> AssetResponse:
        """Close the open assignment and make the asset AVAILABLE again.

        Raises:
            ValidationError: The asset is not assigned, or the return date
                precedes the hand-out
        """
        asset = await self._get(asset_id)
        assignment = await self.assignment_repo.get_open(asset_id)
        if assignment is None:
            raise ValidationError(f"Asset {asset.asset_no} is not assigned")

        returned_on = data.returned_on or date.today()
        if returned_on < assignment.assigned_on:
            raise ValidationError("returned_on must not precede assigned_on")
        assignment.returned_on = returned_on
        if data.condition_notes:
            assignment.condition_notes = data.condition_notes
        asset.status = AssetStatus.AVAILABLE.value
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.RETURN,
            entity=EntityType.ASSET,
            entity_id=asset_id,
            actor_id=current_user.id,
            new_values={"employee_id": str(assignment.employee_id), "returned_on": returned_on.isoformat()},
            request=http_request,
        )
        await self.session.commit()
        return AssetResponse.model_validate(await self._get(asset_id))

    async def delete_asset(
        self,
        asset_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> DeletionResult:
        """Delete an asset that was never handed out, otherwise retire it.

        Raises:
            ValidationError: The asset is currently assigned
        """
        asset = await self._get(asset_id)
        if asset.status == AssetStatus.ASSIGNED:
            raise ValidationError(f"Asset {asset.asset_no} must be returned first")
        before = snapshot(asset)

        deleted = await self.repo.count_references(asset_id) == 0
        if deleted:
            await self.session.delete(asset)
        else:
            asset.status = AssetStatus.RETIRED.value
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.DELETE if deleted else AuditAction.DEACTIVATE,
            entity=EntityType.ASSET,
            entity_id=asset_id,
            actor_id=current_user.id,
            old_values=before,
            new_values=None if deleted else {"status": AssetStatus.RETIRED.value},
            request=http_request,
        )
        await self.session.commit()
        return DeletionResult(id=str(asset_id), deleted=deleted, deactivated=not deleted)
