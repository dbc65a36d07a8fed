"""Security package."""

from workforce_api.security.auth import (
    create_access_token,
    create_refresh_token,
    get_current_user,
    require_any_permission,
    require_permission,
)
from workforce_api.security.password import PasswordService, get_password_service

__all__ = [
    "PasswordService",
    "create_access_token",
    "create_refresh_token",
    "get_current_user",
    "get_password_service",
    "require_any_permission",
    "require_permission",
]
