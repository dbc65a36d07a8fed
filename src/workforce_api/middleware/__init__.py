"""Middleware package."""

from workforce_api.middleware.request_context import RequestIdMiddleware, SecurityHeadersMiddleware

__all__ = ["RequestIdMiddleware", "SecurityHeadersMiddleware"]
