"""Authentication router - local email/password login."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from workforce_api.config import get_settings
from workforce_api.dependencies import get_auth_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.auth import (
    LoginRequest,
    PasswordChangeRequest,
    PreferencesUpdate,
    RefreshTokenRequest,
    TokenResponse,
    UserInfo,
)
from workforce_api.models.dto.common import ApiResponse, MessageResponse
from workforce_api.security.auth import get_current_user
from workforce_api.security.rate_limit import (
    AUTH_LOGIN_LIMIT,
    AUTH_REFRESH_LIMIT,
    SENSITIVE_OPERATION_LIMIT,
    limiter,
)
from workforce_api.services.auth_service import AuthService

router = APIRouter()


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Set the httpOnly refresh token cookie."""
    settings = get_settings()

    is_secure = settings.refresh_cookie_secure
    if settings.environment == "development":
        is_secure = False

    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        httponly=True,
        secure=is_secure,
        samesite=settings.refresh_cookie_samesite,
        max_age=settings.refresh_token_days * 24 * 3600,
        path="/",
    )


def _clear_refresh_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path="/",
        secure=settings.refresh_cookie_secure and settings.environment != "development",
        samesite=settings.refresh_cookie_samesite,
        httponly=True,
    )


@router.post("/login", response_model=ApiResponse[TokenResponse])
@limiter.limit(AUTH_LOGIN_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse[TokenResponse]:
    """Authenticate with email and password."""
    tokens = await auth_service.login(body.email, body.password, http_request=request)
    _set_refresh_cookie(response, tokens.refresh_token)
    return ApiResponse(data=tokens)


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
@limiter.limit(AUTH_REFRESH_LIMIT)
async def refresh_token(
    request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    body: RefreshTokenRequest | None = None,
) -> ApiResponse[TokenResponse]:
    """Refresh the token pair using the refresh cookie (or body token)."""
    token = request.cookies.get(get_settings().refresh_cookie_name)
    if not token and body:
        token = body.refresh_token

    tokens = await auth_service.refresh(token)
    _set_refresh_cookie(response, tokens.refresh_token)
    return ApiResponse(data=tokens)


@router.post("/logout", response_model=ApiResponse[MessageResponse])
async def logout(response: Response) -> ApiResponse[MessageResponse]:
    """Clear the refresh cookie."""
    _clear_refresh_cookie(response)
    return ApiResponse(data=MessageResponse(message="Logout successful"))


@router.get("/me", response_model=ApiResponse[UserInfo])
async def get_current_user_info(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse[UserInfo]:
    """Get current user information including roles and permissions."""
    return ApiResponse(data=await auth_service.me(current_user))


@router.post("/password", response_model=ApiResponse[MessageResponse])
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def change_password(
    request: Request,
    body: PasswordChangeRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse[MessageResponse]:
    """Change the password of the signed-in user."""
    await auth_service.change_password(current_user, body, http_request=request)
    return ApiResponse(data=MessageResponse(message="Password changed"))


@router.patch("/preferences", response_model=ApiResponse[UserInfo])
async def update_preferences(
    body: PreferencesUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiResponse[UserInfo]:
    """Update locale and theme of the signed-in user."""
    return ApiResponse(data=await auth_service.update_preferences(current_user, body))
