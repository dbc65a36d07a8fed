"""Audit service for centralized audit logging."""

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable
from uuid import UUID

from fastapi import Request
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.repositories.audit_repository import AuditRepository
from workforce_api.security.rate_limit import client_key

logger = logging.getLogger(__name__)


class AuditAction:
    """Standard audit action verbs."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    DEACTIVATE = "DEACTIVATE"
    LOGIN = "LOGIN"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    UPLOAD = "UPLOAD"
    EXPORT = "EXPORT"
    CALCULATE = "CALCULATE"
    APPROVE = "APPROVE"
    SUBMIT = "SUBMIT"
    LOCK = "LOCK"
    PAY = "PAY"
    CANCEL = "CANCEL"
    REOPEN = "REOPEN"
    REJECT = "REJECT"
    COMPLETE = "COMPLETE"
    ASSIGN = "ASSIGN"
    RETURN = "RETURN"
    ADD_ITEM = "ADD_ITEM"


class EntityType:
    """Entity names written to audit entries."""

    USER = "User"
    ROLE = "Role"
    SESSION = "Session"
    REFERENCE = "Reference"
    WORKSITE = "Worksite"
    EMPLOYEE = "Employee"
    ATTENDANCE_RECORD = "AttendanceRecord"
    ATTENDANCE_PERIOD = "AttendancePeriod"
    PAYROLL_RUN = "PayrollRun"
    PAYROLL_ITEM = "PayrollItem"
    PAYROLL_ENTRY = "PayrollEntry"
    DOCUMENT = "EmployeeDocument"
    DOCUMENT_FILE = "DocumentFile"
    ALERT = "Alert"
    LEAVE_REQUEST = "LeaveRequest"
    TRANSFER = "EmployeeSiteTransfer"
    ASSET = "Asset"
    PATENT_PAYMENT = "PatentPayment"
    EMPLOYEE_CONTACT = "EmployeeContact"
    PROGRESS_PAYMENT = "ProgressPayment"
    REPORT = "Report"


def to_json_value(value: Any) -> Any:
    """Convert a column value to something JSON can store."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def snapshot(instance: Any, fields: Iterable[str] | None = None) -> dict[str, Any]:
    """Column values of an ORM instance as a JSON-safe dict.

    Args:
        instance: ORM instance
        fields: Columns to include (defaults to every mapped column)
    """
    if fields is None:
        fields = [attr.key for attr in inspect(instance).mapper.column_attrs]
    return {name: to_json_value(getattr(instance, name)) for name in fields}


def changed_values(before: dict[str, Any], after: dict[str, Any]) -> tuple[dict, dict]:
    """Reduce two snapshots to the keys whose values differ."""
    keys = [key for key in after if before.get(key) != after.get(key)]
    return {key: before.get(key) for key in keys}, {key: after[key] for key in keys}


class AuditService:
    """Service for audit logging operations.

    Every mutation is logged through this service, inside the request's
    transaction.
    """

    # Keys whose values are masked in stored snapshots
    SENSITIVE_FIELDS = frozenset({
        "password",
        "password_hash",
        "new_password",
        "current_password",
        "access_token",
        "refresh_token",
        "token",
        "secret",
        "jwt_secret",
    })

    def __init__(self, session: AsyncSession) -> None:
        """Initialize audit service.

        Args:
            session: Database session
        """
        self.session = session
        self.audit_repo = AuditRepository(session)

    @classmethod
    def _mask_sensitive_data(cls, data: dict[str, Any] | None) -> dict[str, Any] | None:
        """Mask sensitive fields in audit data to prevent credential leakage.

        Args:
            data: Dictionary that may contain sensitive fields

        Returns:
            Dictionary with sensitive values replaced by "[REDACTED]"
        """
        if data is None:
            return None

        masked = {}
        for key, value in data.items():
            if key.lower() in cls.SENSITIVE_FIELDS:
                masked[key] = "[REDACTED]"
            elif isinstance(value, dict):
                masked[key] = cls._mask_sensitive_data(value)
            elif isinstance(value, list):
                masked[key] = [
                    cls._mask_sensitive_data(item) if isinstance(item, dict) else to_json_value(item)
                    for item in value
                ]
            else:
                masked[key] = to_json_value(value)
        return masked

    async def log(
        self,
        action: str,
        entity: str,
        entity_id: UUID | str | None = None,
        actor_id: UUID | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        request: Request | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Log an audit event.

        Args:
            action: Action performed (use AuditAction constants)
            entity: Entity type (use EntityType constants)
            entity_id: ID of the affected entity
            actor_id: User performing the action
            old_values: Snapshot before the change
            new_values: Snapshot after the change
            request: FastAPI request object (for extracting IP/user agent)
            ip_address: Client IP (overrides request extraction)
            user_agent: Client user agent (overrides request extraction)
        """
        if request is not None:
            if not ip_address:
                ip_address = client_key(request)
            if not user_agent:
                user_agent = request.headers.get("user-agent", "")

        try:
            await self.audit_repo.log(
                action=action,
                entity=entity,
                entity_id=str(entity_id) if entity_id is not None else None,
                actor_id=actor_id,
                old_values=self._mask_sensitive_data(old_values),
                new_values=self._mask_sensitive_data(new_values),
                ip_address=ip_address,
                user_agent=user_agent[:500] if user_agent else None,
            )
            logger.debug(f"Audit logged: action={action} entity={entity}/{entity_id} actor={actor_id}")
        except SQLAlchemyError as e:
            # Never fail the main operation due to audit logging
            logger.error(f"Failed to write audit log: {e}")

    async def log_login(
        self,
        user_id: UUID | None,
        success: bool,
        request: Request | None,
        email: str | None = None,
        failure_reason: str | None = None,
    ) -> None:
        """Log a login attempt.

        Args:
            user_id: User attempting to login (None for unknown emails)
            success: Whether login was successful
            request: FastAPI request object
            email: Email used for login attempt
            failure_reason: Reason for failure if not successful
        """
        details: dict[str, Any] = {"email": email} if email else {}
        if failure_reason:
            details["reason"] = failure_reason

        await self.log(
            action=AuditAction.LOGIN if success else AuditAction.LOGIN_FAILED,
            entity=EntityType.SESSION,
            entity_id=user_id if success else None,
            actor_id=user_id if success else None,
            new_values=details or None,
            request=request,
        )

    async def log_entity_change(
        self,
        action: str,
        entity: str,
        entity_id: UUID | str,
        actor_id: UUID | None,
        request: Request | None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> None:
        """Log an UPDATE with only the fields that actually changed."""
        if old_values is not None and new_values is not None:
            old_values, new_values = changed_values(old_values, new_values)
            if not new_values:
                return
        await self.log(
            action=action,
            entity=entity,
            entity_id=entity_id,
            actor_id=actor_id,
            old_values=old_values,
            new_values=new_values,
            request=request,
        )
