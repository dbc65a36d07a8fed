"""Domain-specific exceptions for the workforce API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses, avoiding string matching in routers. Each family maps to
one entry of the error taxonomy in ``middleware.error_handler``.
"""

from typing import Any


class WorkforceAPIError(Exception):
    """Base exception for all workforce API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(WorkforceAPIError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any | None = None) -> None:
        details = {"id": str(entity_id)} if entity_id is not None else {}
        super().__init__(f"{entity} not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(WorkforceAPIError):
    """Raised on unique-key collisions and similar conflicts."""

    pass


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(WorkforceAPIError):
    """Raised when input is missing or malformed."""

    pass


class InvalidStateTransitionError(ValidationError):
    """Raised when a workflow entity is moved to a state it cannot reach."""

    def __init__(self, entity: str, current: str, target: str) -> None:
        super().__init__(
            f"Invalid {entity} status transition from {current} to {target}",
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target


# =============================================================================
# Authentication Errors (401) and Permission Errors (403)
# =============================================================================


class AuthenticationError(WorkforceAPIError):
    """Raised when a credential is missing or invalid."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class AccountStatusError(WorkforceAPIError):
    """Raised when a valid account is not allowed to sign in."""

    pass


class PermissionDeniedError(WorkforceAPIError):
    """Raised when an authenticated user lacks a permission."""

    def __init__(self, message: str = "Insufficient permissions", permission: str | None = None) -> None:
        super().__init__(message, {"permission": permission} if permission else {})


class CannotModifySystemRoleError(PermissionDeniedError):
    """Raised when trying to delete or rename a system role."""

    def __init__(self, role_code: str | None = None) -> None:
        super().__init__("Cannot modify system role")
        if role_code:
            self.details["role_code"] = role_code


# =============================================================================
# Upstream Errors (500)
# =============================================================================


class StorageError(WorkforceAPIError):
    """Raised when the document storage backend fails."""

    pass
