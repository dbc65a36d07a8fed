"""RBAC service for user, role, and permission management."""

import logging
from datetime import datetime, timezone
from itertools import groupby
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import (
    CannotModifySystemRoleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from workforce_api.models.domain.permissions import SUPER_ADMIN_ROLE
from workforce_api.models.domain.user import CurrentUser, RoleDescriptor, UserStatus
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.dto.rbac import (
    PermissionGroup,
    PermissionResponse,
    RoleAssignmentInput,
    RoleCreate,
    RoleResponse,
    RoleUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.user import UserORM
from workforce_api.repositories.permission_repository import PermissionRepository
from workforce_api.repositories.role_repository import RoleRepository
from workforce_api.repositories.user_repository import UserRepository
from workforce_api.repositories.worksite_repository import WorksiteRepository
from workforce_api.security.password import get_password_service
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType
from workforce_api.utils.query import ListQuery
from workforce_api.utils.validation import normalize_code

logger = logging.getLogger(__name__)


def _user_response(user: UserORM) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        status=UserStatus(user.status),
        locale=user.locale,
        theme=user.theme,
        roles=[
            RoleDescriptor(
                id=assignment.role.id,
                code=assignment.role.code,
                name=assignment.role.name,
                site_scoped=assignment.role.site_scoped,
                worksite_id=assignment.worksite_id,
            )
            for assignment in user.role_assignments
        ],
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


def _role_response(role: RoleORM, user_count: int = 0) -> RoleResponse:
    return RoleResponse(
        id=role.id,
        code=role.code,
        name=role.name,
        description=role.description,
        is_system=role.is_system,
        site_scoped=role.site_scoped,
        permissions=sorted(p.code for p in role.permissions),
        user_count=user_count,
    )


class RbacService:
    """Service for RBAC operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.role_repo = RoleRepository(session)
        self.permission_repo = PermissionRepository(session)
        self.worksite_repo = WorksiteRepository(session)
        self.audit_service = AuditService(session)
        self.password_service = get_password_service()

    async def _resolve_assignments(self, roles: list[RoleAssignmentInput]) -> list[tuple[UUID, UUID | None]]:
        """Validate role assignments and drop worksite ids on unscoped roles.

        Raises:
            NotFoundError: Unknown role or worksite
            ValidationError: Site-scoped role without a worksite
        """
        if not roles:
            return []
        found = {role.id: role for role in await self.role_repo.get_by_ids([r.role_id for r in roles])}
        pairs = []
        for assignment in roles:
            role = found.get(assignment.role_id)
            if role is None:
                raise NotFoundError("Role", assignment.role_id)
            worksite_id = assignment.worksite_id
            if role.site_scoped:
                if worksite_id is None:
                    raise ValidationError(f"Role {role.code} requires a worksite")
                if await self.worksite_repo.get(worksite_id) is None:
                    raise NotFoundError("Worksite", worksite_id)
            else:
                worksite_id = None
            pairs.append((role.id, worksite_id))
        return pairs

    # =========================================================================
    # User Management
    # =========================================================================

    async def list_users(self, query: ListQuery) -> PaginatedResponse[UserResponse]:
        """List users (soft-deleted users excluded)."""
        users, total = await self.user_repo.list(query)
        return PaginatedResponse(
            data=[_user_response(user) for user in users],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def get_user(self, user_id: UUID) -> UserResponse:
        user = await self.user_repo.get_with_roles(user_id)
        if user is None or user.deleted_at is not None:
            raise NotFoundError("User", user_id)
        return _user_response(user)

    async def create_user(
        self,
        request: UserCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> UserResponse:
        """Create a user together with its role assignments.

        Args:
            request: User creation request
            current_user: Administrator creating the user
            http_request: HTTP request for audit logging

        Returns:
            Created user

        Raises:
            ConflictError: If the email is taken
            ValidationError: If the password violates the policy
        """
        email = request.email.strip().lower()
        if await self.user_repo.email_exists(email):
            raise ConflictError(f"User with email {email} already exists")

        errors = self.password_service.validate_password_strength(request.password)
        if errors:
            raise ValidationError(errors[0])

        assignments = await self._resolve_assignments(request.roles)

        user = await self.user_repo.create(
            email=email,
            name=request.name,
            password_hash=self.password_service.hash_password(request.password),
            status=request.status.value,
            locale=request.locale,
            theme=request.theme,
        )
        user = await self.user_repo.get_with_roles(user.id)
        await self.user_repo.replace_roles(user, assignments)

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.USER,
            entity_id=user.id,
            actor_id=current_user.id,
            new_values={
                "email": email,
                "name": request.name,
                "status": request.status.value,
                "roles": [{"role_id": r, "worksite_id": w} for r, w in assignments],
            },
            request=http_request,
        )
        await self.session.commit()

        user = await self.user_repo.get_with_roles(user.id)
        return _user_response(user)

    async def update_user(
        self,
        user_id: UUID,
        request: UserUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> UserResponse:
        """Update user details and optionally replace the role assignments.

        Raises:
            NotFoundError: If user not found
            ValidationError: If the caller would lock themselves out
        """
        user = await self.user_repo.get_with_roles(user_id)
        if user is None or user.deleted_at is not None:
            raise NotFoundError("User", user_id)

        if user_id == current_user.id and request.status not in (None, UserStatus.ACTIVE):
            raise ValidationError("Cannot deactivate your own account")

        before = _user_response(user).model_dump(mode="json", exclude={"created_at", "last_login_at"})

        for field in ("name", "locale", "theme"):
            value = getattr(request, field)
            if value is not None:
                setattr(user, field, value)
        if request.status is not None:
            user.status = request.status.value

        if request.roles is not None:
            assignments = await self._resolve_assignments(request.roles)
            if user_id == current_user.id and current_user.is_super_admin:
                super_admin = await self.role_repo.get_by_code(SUPER_ADMIN_ROLE)
                if super_admin is not None and super_admin.id not in {r for r, _ in assignments}:
                    raise ValidationError("Cannot remove the super administrator role from yourself")
            await self.user_repo.replace_roles(user, assignments)

        await self.session.flush()
        user = await self.user_repo.get_with_roles(user_id)
        after = _user_response(user).model_dump(mode="json", exclude={"created_at", "last_login_at"})

        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.USER,
            entity_id=user_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=after,
        )
        await self.session.commit()
        return _user_response(user)

    async def delete_user(
        self,
        user_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> None:
        """Soft-delete a user.

        Raises:
            ValidationError: If trying to delete self
            NotFoundError: If user not found
        """
        if user_id == current_user.id:
            raise ValidationError("Cannot delete your own account")

        user = await self.user_repo.get_by_id(user_id)
        if user is None or user.deleted_at is not None:
            raise NotFoundError("User", user_id)

        user.deleted_at = datetime.now(timezone.utc)
        user.status = UserStatus.INACTIVE.value

        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.USER,
            entity_id=user_id,
            actor_id=current_user.id,
            old_values={"email": user.email},
            request=http_request,
        )
        await self.session.commit()
        logger.info(f"User {user_id} deleted by {current_user.id}")

    # =========================================================================
    # Role Management
    # =========================================================================

    async def list_roles(self) -> list[RoleResponse]:
        """List all roles with their permissions and holder counts."""
        roles = await self.role_repo.get_all_with_permissions()
        return [_role_response(role, await self.role_repo.count_assignments(role.id)) for role in roles]

    async def get_role(self, role_id: UUID) -> RoleResponse:
        role = await self.role_repo.get_with_permissions(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return _role_response(role, await self.role_repo.count_assignments(role_id))

    async def _permissions_for(self, codes: list[str]) -> list:
        permissions = await self.permission_repo.get_by_codes(codes)
        unknown = set(codes) - {p.code for p in permissions}
        if unknown:
            raise ValidationError(f"Unknown permission codes: {', '.join(sorted(unknown))}")
        return permissions

    async def create_role(
        self,
        request: RoleCreate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> RoleResponse:
        """Create a custom role.

        Raises:
            ConflictError: If role code already exists
            ValidationError: If a permission code is unknown
        """
        try:
            code = normalize_code(request.code)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if await self.role_repo.get_by_code(code) is not None:
            raise ConflictError(f"Role {code} already exists")

        permissions = await self._permissions_for(request.permission_codes)
        role = await self.role_repo.create(
            code=code,
            name=request.name,
            description=request.description,
            site_scoped=request.site_scoped,
            is_system=False,
        )
        role = await self.role_repo.get_with_permissions(role.id)
        await self.role_repo.set_permissions(role, permissions)

        await self.audit_service.log(
            action=AuditAction.CREATE,
            entity=EntityType.ROLE,
            entity_id=role.id,
            actor_id=current_user.id,
            new_values={"code": code, "name": request.name, "permissions": sorted(request.permission_codes)},
            request=http_request,
        )
        await self.session.commit()

        role = await self.role_repo.get_with_permissions(role.id)
        return _role_response(role)

    async def update_role(
        self,
        role_id: UUID,
        request: RoleUpdate,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> RoleResponse:
        """Update a role.

        System roles keep their permission set unless the caller is a super
        administrator.

        Raises:
            NotFoundError: If role not found
            CannotModifySystemRoleError: If a non super admin edits a system role
        """
        role = await self.role_repo.get_with_permissions(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)

        if role.is_system and not current_user.is_super_admin:
            raise CannotModifySystemRoleError(role.code)

        before = _role_response(role).model_dump(mode="json", exclude={"user_count"})

        if request.name is not None:
            role.name = request.name
        if request.description is not None:
            role.description = request.description
        if request.site_scoped is not None:
            role.site_scoped = request.site_scoped
        if request.permission_codes is not None:
            await self.role_repo.set_permissions(role, await self._permissions_for(request.permission_codes))

        await self.session.flush()
        role = await self.role_repo.get_with_permissions(role_id)
        await self.audit_service.log_entity_change(
            action=AuditAction.UPDATE,
            entity=EntityType.ROLE,
            entity_id=role_id,
            actor_id=current_user.id,
            request=http_request,
            old_values=before,
            new_values=_role_response(role).model_dump(mode="json", exclude={"user_count"}),
        )
        await self.session.commit()
        return _role_response(role, await self.role_repo.count_assignments(role_id))

    async def delete_role(
        self,
        role_id: UUID,
        current_user: CurrentUser,
        http_request: Request | None = None,
    ) -> None:
        """Delete a custom role.

        Raises:
            NotFoundError: If role not found
            CannotModifySystemRoleError: If role is a system role
            ConflictError: If role has users assigned
        """
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)

        if role.is_system:
            raise CannotModifySystemRoleError(role.code)

        user_count = await self.role_repo.count_assignments(role_id)
        if user_count > 0:
            raise ConflictError(f"Role {role.code} is assigned to {user_count} user(s)")

        await self.audit_service.log(
            action=AuditAction.DELETE,
            entity=EntityType.ROLE,
            entity_id=role_id,
            actor_id=current_user.id,
            old_values={"code": role.code, "name": role.name},
            request=http_request,
        )
        await self.role_repo.delete(role_id)
        await self.session.commit()

    # =========================================================================
    # Permission Catalog
    # =========================================================================

    async def list_permissions(self) -> list[PermissionGroup]:
        """Permission catalog grouped by module."""
        permissions = await self.permission_repo.get_all()
        return [
            PermissionGroup(
                module=module,
                permissions=[PermissionResponse.model_validate(p) for p in group],
            )
            for module, group in groupby(permissions, key=lambda p: p.module)
        ]
