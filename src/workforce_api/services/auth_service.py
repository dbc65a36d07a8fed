"""Authentication service."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.config import get_settings
from workforce_api.exceptions import AuthenticationError, ValidationError
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.auth import PasswordChangeRequest, PreferencesUpdate, TokenResponse, UserInfo
from workforce_api.repositories.user_repository import UserRepository
from workforce_api.security.auth import (
    REFRESH_TOKEN_TYPE,
    build_current_user,
    create_access_token,
    create_refresh_token,
    decode_token,
    ensure_account_usable,
    load_user_with_roles,
)
from workforce_api.security.password import get_password_service
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def user_info(current_user: CurrentUser) -> UserInfo:
    """Build the user block returned by login, refresh and /me."""
    return UserInfo(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        status=current_user.status,
        locale=current_user.locale,
        theme=current_user.theme,
        roles=current_user.roles,
        permissions=current_user.permissions,
        is_super_admin=current_user.is_super_admin,
        last_login_at=current_user.last_login_at,
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize auth service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.audit_service = AuditService(session)
        self.password_service = get_password_service()

    def _issue_tokens(self, current_user: CurrentUser) -> TokenResponse:
        settings = get_settings()
        return TokenResponse(
            access_token=create_access_token(current_user.id, current_user.email),
            refresh_token=create_refresh_token(current_user.id),
            expires_in=settings.access_token_expire_minutes * 60,
            user=user_info(current_user),
        )

    async def login(
        self,
        email: str,
        password: str,
        http_request: Request | None = None,
    ) -> TokenResponse:
        """Authenticate with email and password.

        Unknown emails and wrong passwords fail with the same message so
        callers cannot tell which accounts exist.

        Args:
            email: User email
            password: Plain text password
            http_request: HTTP request for audit logging

        Returns:
            Access token, refresh token and user info

        Raises:
            AuthenticationError: Invalid credentials or deleted account
            AccountStatusError: Inactive or suspended account
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not self.password_service.verify_password(password, user.password_hash):
            await self.audit_service.log_login(
                user_id=None,
                success=False,
                request=http_request,
                email=email,
                failure_reason="invalid_credentials",
            )
            await self.session.commit()
            raise AuthenticationError(INVALID_CREDENTIALS)

        ensure_account_usable(user)

        user.last_login_at = datetime.now(timezone.utc)
        await self.session.flush()

        await self.audit_service.log_login(
            user_id=user.id,
            success=True,
            request=http_request,
            email=user.email,
        )
        await self.session.commit()

        logger.info(f"User {user.id} logged in")
        return self._issue_tokens(build_current_user(user))

    async def refresh(self, refresh_token: str | None) -> TokenResponse:
        """Exchange a refresh token for a new token pair.

        Raises:
            AuthenticationError: Missing, invalid or expired token, unknown user
            AccountStatusError: Account no longer active
        """
        if not refresh_token:
            raise AuthenticationError("Refresh token required")

        payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        try:
            user_id = UUID(payload["sub"])
        except ValueError as e:
            raise AuthenticationError("Invalid or expired token") from e

        user = await load_user_with_roles(self.session, user_id)
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        ensure_account_usable(user)
        return self._issue_tokens(build_current_user(user))

    async def me(self, current_user: CurrentUser) -> UserInfo:
        """Current user with roles and permissions."""
        return user_info(current_user)

    async def change_password(
        self,
        current_user: CurrentUser,
        request: PasswordChangeRequest,
        http_request: Request | None = None,
    ) -> None:
        """Change the password of the signed-in user.

        Raises:
            AuthenticationError: Current password is wrong
            ValidationError: New password violates the policy
        """
        user = await self.user_repo.get_by_id(current_user.id)
        if user is None:
            raise AuthenticationError()

        if not self.password_service.verify_password(request.current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        errors = self.password_service.validate_password_strength(request.new_password)
        if errors:
            raise ValidationError(errors[0])
        if request.current_password == request.new_password:
            raise ValidationError("New password must differ from the current password")

        user.password_hash = self.password_service.hash_password(request.new_password)
        user.password_changed_at = datetime.now(timezone.utc)

        await self.audit_service.log(
            action=AuditAction.UPDATE,
            entity=EntityType.USER,
            entity_id=user.id,
            actor_id=current_user.id,
            new_values={"password": request.new_password},
            request=http_request,
        )
        await self.session.commit()

    async def update_preferences(self, current_user: CurrentUser, request: PreferencesUpdate) -> UserInfo:
        """Update locale and theme of the signed-in user."""
        user = await load_user_with_roles(self.session, current_user.id)
        if user is None:
            raise AuthenticationError()

        for field, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, field, value)
        await self.session.commit()

        user = await load_user_with_roles(self.session, current_user.id)
        return user_info(build_current_user(user))
