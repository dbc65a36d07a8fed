"""Authenticated user domain model."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workforce_api.models.domain.permissions import AllPermissions, GrantedPermissions, PermissionSet


class UserStatus(StrEnum):
    """User account status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class RoleDescriptor(BaseModel):
    """A role held by a user, with its optional worksite scope."""

    id: UUID
    code: str
    name: str
    site_scoped: bool = False
    worksite_id: UUID | None = None


class CurrentUser(BaseModel):
    """The user on whose behalf a request runs."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: UUID
    email: str
    name: str
    status: UserStatus = UserStatus.ACTIVE
    locale: str = "tr"
    theme: str = "light"
    last_login_at: datetime | None = None
    roles: list[RoleDescriptor] = []
    permission_set: PermissionSet = Field(default_factory=GrantedPermissions, exclude=True)

    @property
    def is_super_admin(self) -> bool:
        return isinstance(self.permission_set, AllPermissions)

    @property
    def permissions(self) -> list[str]:
        """Sorted permission codes, for display."""
        if self.is_super_admin:
            return ["*"]
        return sorted(self.permission_set.codes)

    def has_permission(self, permission_code: str, worksite_id: UUID | None = None) -> bool:
        """Check if user has a specific permission.

        When ``worksite_id`` is given, site-scoped grants only count on that
        worksite.
        """
        if worksite_id is None:
            return self.permission_set.allows(permission_code)
        return self.permission_set.allows_at(permission_code, worksite_id)

    def has_any_permission(self, *permission_codes: str) -> bool:
        """Check if user has any of the specified permissions."""
        return any(self.permission_set.allows(code) for code in permission_codes)

    def has_all_permissions(self, *permission_codes: str) -> bool:
        """Check if user has all specified permissions."""
        return all(self.permission_set.allows(code) for code in permission_codes)
