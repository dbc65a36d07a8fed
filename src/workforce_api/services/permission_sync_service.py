"""Permission sync service for the permission catalog and system roles.

On startup the catalog is brought in line with ``PERMISSION_CATALOG`` and
every system role is created if missing and granted the permissions it is
defined with. Syncing only ever adds; permissions removed from a system role
by an administrator are put back, custom roles are never touched.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.constants.permissions import PERMISSION_CATALOG, SYSTEM_ROLES
from workforce_api.models.orm.permission import PermissionORM
from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.role_permission import RolePermissionORM

logger = logging.getLogger(__name__)


class PermissionSyncService:
    """Synchronizes the permission catalog and system roles."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service.

        Args:
            session: Database session
        """
        self.session = session

    async def sync_permissions(self) -> dict[str, PermissionORM]:
        """Insert catalog permissions that do not exist yet.

        Returns:
            Dict of permission code to permission
        """
        result = await self.session.execute(select(PermissionORM))
        existing = {p.code: p for p in result.scalars().all()}

        for code in PERMISSION_CATALOG:
            if code in existing:
                continue
            module, action = code.split(".", 1)
            permission = PermissionORM(code=code, module=module, action=action)
            self.session.add(permission)
            existing[code] = permission

        await self.session.flush()
        return existing

    async def sync_system_roles(self) -> dict[str, int]:
        """Create missing system roles and grant their missing permissions.

        Returns:
            Dict of role code to number of permissions added
        """
        permissions = await self.sync_permissions()

        result = await self.session.execute(select(RoleORM).where(RoleORM.is_system.is_(True)))
        roles = {role.code: role for role in result.scalars().all()}

        added: dict[str, int] = {}
        for code, (name, site_scoped, permission_codes) in SYSTEM_ROLES.items():
            role = roles.get(code)
            if role is None:
                role = RoleORM(code=code, name=name, site_scoped=site_scoped, is_system=True)
                self.session.add(role)
                await self.session.flush()
                logger.info(f"Created system role {code}")
            added[code] = await self._sync_role_permissions(
                role, [permissions[p] for p in permission_codes]
            )

        await self.session.commit()

        total = sum(added.values())
        if total:
            logger.info(f"Permission sync completed: {total} grants added")
        else:
            logger.debug("Permission sync: no changes needed")
        return added

    async def _sync_role_permissions(self, role: RoleORM, permissions: list[PermissionORM]) -> int:
        """Add the permissions a role is missing.

        Returns:
            Number of permissions added
        """
        existing_result = await self.session.execute(
            select(RolePermissionORM.permission_id).where(RolePermissionORM.role_id == role.id)
        )
        existing_ids = set(existing_result.scalars().all())

        added = 0
        for permission in permissions:
            if permission.id not in existing_ids:
                self.session.add(RolePermissionORM(role_id=role.id, permission_id=permission.id))
                added += 1

        if added > 0:
            await self.session.flush()
        return added


async def sync_system_role_permissions() -> dict[str, int]:
    """Convenience function to sync system roles.

    Called from application startup.
    """
    from workforce_api.database import async_session_maker

    async with async_session_maker() as session:
        service = PermissionSyncService(session)
        return await service.sync_system_roles()
