"""Exception handlers translating errors into the response envelope.

Every failure leaves the API as ``{"success": false, "error": <message>}``.
Domain errors carry messages written for callers; anything else is logged
server side and answered with a generic message.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from workforce_api.config import get_settings
from workforce_api.exceptions import (
    AccountStatusError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
    WorkforceAPIError,
)
from workforce_api.utils.request_id import get_request_id
from workforce_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)

# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    422: "Invalid input data",
    429: "Too many requests",
    500: "Internal server error",
}

# Domain error family -> HTTP status. Order matters: first match wins.
DOMAIN_ERROR_STATUS: tuple[tuple[type[WorkforceAPIError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AccountStatusError, status.HTTP_403_FORBIDDEN),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _get_cors_headers(request: Request) -> dict[str, str]:
    """CORS headers for error responses.

    Exception handlers run outside the CORS middleware, so allowed origins
    are echoed here.
    """
    origin = request.headers.get("origin")
    if not origin:
        return {}
    if origin in get_settings().cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return {}


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build the failure envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=_get_cors_headers(request),
    )


def status_for(exc: WorkforceAPIError) -> int:
    """HTTP status for a domain error."""
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Summarize pydantic errors as ``field: message`` pairs.

    Only field names are exposed, not input values or type internals.
    """
    safe_errors = []
    for error in errors:
        loc = error.get("loc", [])
        msg = error.get("msg", "Invalid value")
        field = loc[-1] if loc else "field"
        if isinstance(field, str) and not field.startswith("_"):
            safe_errors.append(f"{field}: {msg}")
    if safe_errors:
        return "; ".join(safe_errors[:3])
    return SAFE_ERROR_MESSAGES[400]


async def domain_exception_handler(request: Request, exc: WorkforceAPIError) -> JSONResponse:
    """Handle service-layer errors."""
    status_code = status_for(exc)
    if status_code >= 500:
        log_error(logger, f"Upstream failure for {request.url.path} [{get_request_id()}]", exc)
        return error_response(request, status_code, SAFE_ERROR_MESSAGES[500])
    logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return error_response(request, status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by the framework."""
    detail = exc.detail if isinstance(exc.detail, str) else None
    message = detail or SAFE_ERROR_MESSAGES.get(exc.status_code, "Request failed")
    return error_response(request, exc.status_code, message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as VALIDATION (400)."""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return error_response(
        request, status.HTTP_400_BAD_REQUEST, sanitize_validation_errors(list(exc.errors()))
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database errors without leaking database details."""
    if isinstance(exc, IntegrityError):
        text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
        if "unique" in text or "duplicate" in text:
            logger.info(f"Unique constraint violation on {request.url.path}")
            return error_response(request, status.HTTP_409_CONFLICT, "Resource already exists")
        if "foreign key" in text:
            return error_response(
                request, status.HTTP_400_BAD_REQUEST, "Referenced resource not found"
            )

    log_error(logger, f"Database error for {request.url.path} [{get_request_id()}]", exc)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred")


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information."""
    log_error(logger, f"Unhandled exception for {request.url.path} [{get_request_id()}]", exc)
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, SAFE_ERROR_MESSAGES[500]
    )
