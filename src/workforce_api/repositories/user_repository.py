"""User repository."""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.user import UserORM
from workforce_api.models.orm.user_role import UserRoleORM
from workforce_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserORM]):
    """Repository for user operations."""

    model = UserORM
    search_columns = ("email", "name")

    def _with_roles(self) -> Select:
        return select(UserORM).options(
            selectinload(UserORM.role_assignments)
            .selectinload(UserRoleORM.role)
            .selectinload(RoleORM.permissions)
        )

    def base_query(self) -> Select:
        """Soft-deleted users are never listed."""
        return self._with_roles().where(UserORM.deleted_at.is_(None))

    async def get_by_email(self, email: str) -> UserORM | None:
        """Get user by email (case-insensitive) with roles loaded.

        Args:
            email: User email address

        Returns:
            UserORM or None if not found
        """
        result = await self.session.execute(
            self._with_roles().where(func.lower(UserORM.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_with_roles(self, user_id: UUID) -> UserORM | None:
        """Get user with role assignments and permissions loaded."""
        result = await self.session.execute(
            self._with_roles()
            .where(UserORM.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(
            select(func.count())
            .select_from(UserORM)
            .where(func.lower(UserORM.email) == email.strip().lower())
        )
        return result.scalar_one() > 0

    async def get_emails_by_ids(self, user_ids: set[UUID]) -> dict[UUID, str]:
        """Map user IDs to emails.

        Args:
            user_ids: IDs to look up

        Returns:
            Dict of user ID to email for the IDs that exist
        """
        if not user_ids:
            return {}
        result = await self.session.execute(
            select(UserORM.id, UserORM.email).where(UserORM.id.in_(user_ids))
        )
        return {row.id: row.email for row in result}

    async def replace_roles(
        self,
        user: UserORM,
        assignments: list[tuple[UUID, UUID | None]],
    ) -> None:
        """Replace every role assignment of a user.

        Args:
            user: User loaded with role assignments
            assignments: (role_id, worksite_id) pairs
        """
        user.role_assignments.clear()
        await self.session.flush()
        for role_id, worksite_id in dict.fromkeys(assignments):
            user.role_assignments.append(UserRoleORM(role_id=role_id, worksite_id=worksite_id))
        await self.session.flush()
