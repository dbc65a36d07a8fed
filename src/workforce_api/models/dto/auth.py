"""Authentication DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from workforce_api.models.domain.user import RoleDescriptor, UserStatus


class LoginRequest(BaseModel):
    """Local login request."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class RefreshTokenRequest(BaseModel):
    """Refresh token request; the cookie is used when the body omits it."""

    refresh_token: str | None = Field(default=None, max_length=2000)


class UserInfo(BaseModel):
    """User info DTO."""

    id: UUID
    email: str
    name: str
    status: UserStatus
    locale: str
    theme: str
    roles: list[RoleDescriptor]
    permissions: list[str]
    is_super_admin: bool = False
    last_login_at: datetime | None = None


class TokenResponse(BaseModel):
    """Token response DTO."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserInfo


class PasswordChangeRequest(BaseModel):
    """Password change request."""

    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


class PreferencesUpdate(BaseModel):
    locale: str | None = Field(default=None, pattern=r"^(tr|ru|en)$")
    theme: str | None = Field(default=None, pattern=r"^(light|dark|system)$")
