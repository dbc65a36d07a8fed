"""Authentication and authorization utilities."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Callable
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workforce_api.config import get_settings
from workforce_api.constants.permissions import Permissions
from workforce_api.database import get_db
from workforce_api.exceptions import AccountStatusError, AuthenticationError, PermissionDeniedError
from workforce_api.models.domain.permissions import RoleAssignment, resolve_permissions
from workforce_api.models.domain.user import CurrentUser, RoleDescriptor, UserStatus
from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.user import UserORM
from workforce_api.models.orm.user_role import UserRoleORM

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

bearer_scheme = HTTPBearer(auto_error=False)

__all__ = [
    "Permissions",
    "build_current_user",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "ensure_account_usable",
    "ensure_worksite_access",
    "get_current_user",
    "load_user_with_roles",
    "require_any_permission",
    "require_permission",
]


def _encode(payload: dict[str, Any], expires_in: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        **payload,
        "iss": settings.jwt_issuer,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: UUID, email: str) -> str:
    """Create a short-lived JWT access token.

    Args:
        user_id: User UUID
        email: User email

    Returns:
        JWT token string
    """
    settings = get_settings()
    return _encode(
        {"sub": str(user_id), "email": email, "type": ACCESS_TOKEN_TYPE},
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: UUID) -> str:
    """Create a refresh token, valid for ``refresh_token_days``."""
    settings = get_settings()
    return _encode(
        {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE},
        timedelta(days=settings.refresh_token_days),
    )


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict:
    """Decode and verify a JWT token.

    Args:
        token: JWT token string
        expected_type: Required value of the ``type`` claim

    Returns:
        Token payload

    Raises:
        AuthenticationError: If token is invalid, expired or of the wrong type
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e

    if payload.get("type") != expected_type or "sub" not in payload:
        raise AuthenticationError("Invalid or expired token")
    return payload


async def load_user_with_roles(session: AsyncSession, user_id: UUID) -> UserORM | None:
    """Load a user together with role assignments and role permissions."""
    result = await session.execute(
        select(UserORM)
        .where(UserORM.id == user_id)
        .options(
            selectinload(UserORM.role_assignments)
            .selectinload(UserRoleORM.role)
            .selectinload(RoleORM.permissions)
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def ensure_account_usable(user: UserORM) -> None:
    """Reject deleted, inactive and suspended accounts.

    Raises:
        AuthenticationError: Account was deleted
        AccountStatusError: Account exists but is not active
    """
    if user.deleted_at is not None:
        raise AuthenticationError("Account has been deleted")
    if user.status == UserStatus.INACTIVE:
        raise AccountStatusError("Account is inactive")
    if user.status == UserStatus.SUSPENDED:
        raise AccountStatusError("Account is suspended")


def build_current_user(user: UserORM) -> CurrentUser:
    """Build the request principal from a user loaded with its roles."""
    assignments = []
    descriptors = []
    for assignment in user.role_assignments:
        role = assignment.role
        assignments.append(
            RoleAssignment(
                role_code=role.code,
                permission_codes=tuple(p.code for p in role.permissions),
                site_scoped=role.site_scoped,
                worksite_id=assignment.worksite_id,
            )
        )
        descriptors.append(
            RoleDescriptor(
                id=role.id,
                code=role.code,
                name=role.name,
                site_scoped=role.site_scoped,
                worksite_id=assignment.worksite_id,
            )
        )

    return CurrentUser(
        id=user.id,
        email=user.email,
        name=user.name,
        status=UserStatus(user.status),
        locale=user.locale,
        theme=user.theme,
        last_login_at=user.last_login_at,
        roles=descriptors,
        permission_set=resolve_permissions(assignments),
    )


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> CurrentUser:
    """Get the current authenticated user from the bearer token.

    Raises:
        AuthenticationError: Missing, invalid or expired token, unknown user
        AccountStatusError: Account is not active
    """
    if credentials is None:
        raise AuthenticationError()

    payload = decode_token(credentials.credentials)
    try:
        user_id = UUID(payload["sub"])
    except ValueError as e:
        raise AuthenticationError("Invalid or expired token") from e

    user = await load_user_with_roles(db, user_id)
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    ensure_account_usable(user)

    return build_current_user(user)


def require_permission(permission_code: str) -> Callable:
    """Dependency factory enforcing one permission.

    Args:
        permission_code: Permission code such as ``payroll.approve``

    Returns:
        Dependency returning the current user when the check passes
    """

    async def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_permission(permission_code):
            logger.info(f"Permission denied: user={current_user.id} permission={permission_code}")
            raise PermissionDeniedError(permission=permission_code)
        return current_user

    return dependency


def require_any_permission(*permission_codes: str) -> Callable:
    """Dependency factory passing when the user holds any of the given codes."""

    async def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_any_permission(*permission_codes):
            raise PermissionDeniedError()
        return current_user

    return dependency


def ensure_worksite_access(current_user: CurrentUser, permission_code: str, worksite_id: UUID | None) -> None:
    """Apply site-scoped grants to a resource on a given worksite.

    Raises:
        PermissionDeniedError: The user's grant does not cover the worksite
    """
    if not current_user.has_permission(permission_code, worksite_id):
        raise PermissionDeniedError(permission=permission_code)
