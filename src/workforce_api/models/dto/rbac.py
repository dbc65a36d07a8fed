"""User, role and permission administration DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from workforce_api.models.domain.user import RoleDescriptor, UserStatus


class RoleAssignmentInput(BaseModel):
    """Role to grant, optionally bound to one worksite."""

    role_id: UUID
    worksite_id: UUID | None = None


class UserCreate(BaseModel):
    """User creation request."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    locale: str = Field(default="tr", pattern=r"^(tr|ru|en)$")
    theme: str = Field(default="light", pattern=r"^(light|dark|system)$")
    status: UserStatus = UserStatus.ACTIVE
    roles: list[RoleAssignmentInput] = Field(default=[], max_length=50)


class UserUpdate(BaseModel):
    """Partial user update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    locale: str | None = Field(default=None, pattern=r"^(tr|ru|en)$")
    theme: str | None = Field(default=None, pattern=r"^(light|dark|system)$")
    status: UserStatus | None = None
    roles: list[RoleAssignmentInput] | None = Field(default=None, max_length=50)


class UserResponse(BaseModel):
    """User as shown in administration screens."""

    id: UUID
    email: str
    name: str
    status: UserStatus
    locale: str
    theme: str
    roles: list[RoleDescriptor]
    last_login_at: datetime | None = None
    created_at: datetime


class RoleCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    site_scoped: bool = False
    permission_codes: list[str] = Field(default=[], max_length=200)


class RoleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    site_scoped: bool | None = None
    permission_codes: list[str] | None = Field(default=None, max_length=200)


class RoleResponse(BaseModel):
    """Role with its permission codes."""

    id: UUID
    code: str
    name: str
    description: str | None = None
    is_system: bool
    site_scoped: bool
    permissions: list[str]
    user_count: int = 0


class PermissionResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    code: str
    module: str
    action: str
    description: str | None = None


class PermissionGroup(BaseModel):
    """Permissions of one module."""

    module: str
    permissions: list[PermissionResponse]
