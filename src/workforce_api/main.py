"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from workforce_api.config import get_settings
from workforce_api.exceptions import WorkforceAPIError
from workforce_api.middleware import RequestIdMiddleware, SecurityHeadersMiddleware
from workforce_api.middleware.error_handler import (
    domain_exception_handler,
    error_response,
    generic_exception_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from workforce_api.routers import (
    alerts,
    assets,
    attendance,
    audit,
    auth,
    dashboard,
    documents,
    employees,
    leaves,
    payroll,
    progress_payments,
    reference,
    reports,
    transfers,
    users,
    worksites,
)
from workforce_api.security.rate_limit import limiter
from workforce_api.services.permission_sync_service import sync_system_role_permissions
from workforce_api.tasks.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(debug: bool) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)
    # SQL statements may contain personal data
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()

    # Startup
    if settings.auto_create_tables:
        from workforce_api.database import create_tables

        await create_tables()

    # Sync permission catalog and system role grants
    await sync_system_role_permissions()

    if settings.enable_scheduler:
        await start_scheduler()
    yield
    # Shutdown
    await stop_scheduler()


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Rate limit handler using the failure envelope.

    Includes Retry-After header per RFC 6585 Section 4.
    """
    response = error_response(request, 429, "Too many requests")
    response.headers["Retry-After"] = "60"
    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()
    configure_logging(config.debug)

    app = FastAPI(
        title=config.app_name,
        version="0.1.0",
        description="Workforce, Attendance and Payroll Management API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Every failure leaves as {"success": false, "error": ...}
    app.add_exception_handler(WorkforceAPIError, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    allowed_origins = config.cors_origins_list
    if "*" in allowed_origins:
        raise ValueError(
            "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
            "Specify explicit origins."
        )
    if config.environment == "production" and not allowed_origins:
        raise ValueError("CORS_ORIGINS must be set in production")

    # Middleware runs in reverse order of addition: CORS first on requests
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Requested-With", "X-Request-ID"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/v1", tags=["Users & Roles"])
    app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    app.include_router(reference.router, prefix="/api/v1/reference", tags=["Reference Data"])
    app.include_router(worksites.router, prefix="/api/v1/worksites", tags=["Worksites"])
    app.include_router(employees.router, prefix="/api/v1/employees", tags=["Employees"])
    app.include_router(attendance.router, prefix="/api/v1/attendance", tags=["Attendance"])
    app.include_router(payroll.router, prefix="/api/v1/payroll", tags=["Payroll"])
    app.include_router(
        progress_payments.router, prefix="/api/v1/progress-payments", tags=["Progress Payments"]
    )
    app.include_router(documents.router, prefix="/api/v1/documents", tags=["Documents"])
    app.include_router(alerts.router, prefix="/api/v1/alerts", tags=["Alerts"])
    app.include_router(leaves.router, prefix="/api/v1/leaves", tags=["Leaves"])
    app.include_router(transfers.router, prefix="/api/v1/transfers", tags=["Transfers"])
    app.include_router(assets.router, prefix="/api/v1/assets", tags=["Assets"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
    app.include_router(audit.router, prefix="/api/v1/audit", tags=["Audit"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
