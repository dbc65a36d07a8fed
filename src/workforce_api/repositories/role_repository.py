"""Role repository."""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.permission import PermissionORM
from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.user_role import UserRoleORM
from workforce_api.repositories.base import BaseRepository


class RoleRepository(BaseRepository[RoleORM]):
    """Repository for role operations."""

    model = RoleORM

    def base_query(self) -> Select:
        return select(RoleORM).options(selectinload(RoleORM.permissions))

    async def get_by_code(self, code: str) -> RoleORM | None:
        """Get role by code.

        Args:
            code: Role code

        Returns:
            RoleORM or None if not found
        """
        result = await self.session.execute(self.base_query().where(RoleORM.code == code))
        return result.scalar_one_or_none()

    async def get_with_permissions(self, role_id: UUID) -> RoleORM | None:
        """Get role with permissions loaded.

        Args:
            role_id: Role UUID

        Returns:
            RoleORM with permissions or None
        """
        result = await self.session.execute(
            self.base_query()
            .where(RoleORM.id == role_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all_with_permissions(self) -> list[RoleORM]:
        """Get all roles with permissions, system roles first."""
        result = await self.session.execute(
            self.base_query().order_by(RoleORM.is_system.desc(), RoleORM.code)
        )
        return list(result.scalars().all())

    async def get_by_ids(self, role_ids: list[UUID]) -> list[RoleORM]:
        result = await self.session.execute(self.base_query().where(RoleORM.id.in_(role_ids)))
        return list(result.scalars().all())

    async def set_permissions(self, role: RoleORM, permissions: list[PermissionORM]) -> None:
        """Set permissions for a role (replaces existing).

        Args:
            role: Role loaded with its permissions
            permissions: Complete new permission list
        """
        role.permissions = list(permissions)
        await self.session.flush()

    async def count_assignments(self, role_id: UUID) -> int:
        """Number of users holding a role."""
        result = await self.session.execute(
            select(func.count()).select_from(UserRoleORM).where(UserRoleORM.role_id == role_id)
        )
        return result.scalar_one()
