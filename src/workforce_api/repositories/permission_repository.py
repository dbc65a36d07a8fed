"""Permission repository."""

from sqlalchemy import select

from workforce_api.models.orm.permission import PermissionORM
from workforce_api.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[PermissionORM]):
    """Repository for the permission catalog."""

    model = PermissionORM

    async def get_all(self) -> list[PermissionORM]:
        """Get all permissions ordered by module and code."""
        result = await self.session.execute(
            select(PermissionORM).order_by(PermissionORM.module, PermissionORM.code)
        )
        return list(result.scalars().all())

    async def get_by_codes(self, codes: list[str] | tuple[str, ...]) -> list[PermissionORM]:
        """Get permissions by codes.

        Args:
            codes: Permission codes

        Returns:
            Permissions found; unknown codes are skipped
        """
        if not codes:
            return []
        result = await self.session.execute(
            select(PermissionORM).where(PermissionORM.code.in_(codes))
        )
        return list(result.scalars().all())
