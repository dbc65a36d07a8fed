"""Alert service for compliance alerts and their generation."""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import NotFoundError
from workforce_api.models.domain.compliance import (
    TRACKED_DATE_FIELDS,
    AlertEntity,
    alert_message,
    days_until,
    evaluate_severity,
)
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import PaginatedResponse, PaginationMeta
from workforce_api.models.dto.document import AlertGenerationResult, AlertResponse
from workforce_api.models.orm.alert import AlertORM
from workforce_api.models.orm.base import utcnow
from workforce_api.models.orm.reference import AlertRuleORM
from workforce_api.repositories.alert_repository import AlertRepository
from workforce_api.repositories.document_repository import EmployeeDocumentRepository
from workforce_api.repositories.employee_repository import EmployeeRepository
from workforce_api.repositories.reference_repository import AlertRuleRepository
from workforce_api.services.audit_service import AuditAction, AuditService, EntityType
from workforce_api.utils.query import ListQuery

logger = logging.getLogger(__name__)

InstanceKey = tuple[UUID, UUID, UUID | None]


@dataclass(frozen=True)
class TrackedDate:
    """One dated field of one employee (or one of their documents)."""

    employee_id: UUID
    document_id: UUID | None
    due_date: date
    label: str


def _rule_label(rule: AlertRuleORM) -> str:
    return rule.name_en or rule.name_tr


class AlertService:
    """Service for compliance alerts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = AlertRepository(session)
        self.rule_repo = AlertRuleRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.document_repo = EmployeeDocumentRepository(session)
        self.audit_service = AuditService(session)

    async def _get(self, alert_id: UUID) -> AlertORM:
        alert = await self.repo.get(alert_id)
        if alert is None:
            raise NotFoundError("Alert", alert_id)
        return alert

    async def list_alerts(self, query: ListQuery) -> PaginatedResponse[AlertResponse]:
        """List alerts; resolved ones only with ``include_resolved=true``."""
        stmt = self.repo.base_query()
        include_resolved = (query.pop_filter("include_resolved") or "").lower() in ("true", "1", "yes")
        if not include_resolved:
            stmt = stmt.where(AlertORM.resolved_at.is_(None))
        alerts, total = await self.repo.list(query, stmt)
        return PaginatedResponse(
            data=[AlertResponse.model_validate(a) for a in alerts],
            pagination=PaginationMeta.build(total, query.page, query.limit),
        )

    async def _set_flag(
        self,
        alert_id: UUID,
        flag: str,
        current_user: CurrentUser,
        http_request: Request | None,
    ) -> AlertResponse:
        alert = await self._get(alert_id)
        if flag == "read":
            alert.is_read = True
            alert.read_at = alert.read_at or utcnow()
        elif flag == "dismissed":
            alert.is_dismissed = True
            alert.dismissed_at = alert.dismissed_at or utcnow()
        else:
            alert.resolved_at = alert.resolved_at or utcnow()
        await self.session.flush()

        await self.audit_service.log(
            action=AuditAction.UPDATE,
            entity=EntityType.ALERT,
            entity_id=alert_id,
            actor_id=current_user.id,
            new_values={flag: True},
            request=http_request,
        )
        await self.session.commit()
        return AlertResponse.model_validate(alert)

    async def mark_read(self, alert_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self._set_flag(alert_id, "read", current_user, http_request)

    async def dismiss(self, alert_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self._set_flag(alert_id, "dismissed", current_user, http_request)

    async def resolve(self, alert_id: UUID, current_user: CurrentUser, http_request: Request | None = None):
        return await self._set_flag(alert_id, "resolved", current_user, http_request)

    # =========================================================================
    # Generation
    # =========================================================================

    @staticmethod
    def _tracked_dates(rule: AlertRuleORM, employees: list, documents: list) -> list[TrackedDate]:
        """Every instance of the date field a rule watches."""
        entity = AlertEntity(rule.entity)
        if entity == AlertEntity.DOCUMENT:
            return [
                TrackedDate(
                    doc.employee_id,
                    doc.id,
                    doc.expiry_date,
                    doc.document_type.name_en or doc.document_type.name_tr,
                )
                for doc in documents
                if rule.document_type_code is None or doc.document_type.code == rule.document_type_code
            ]

        tracked = []
        for employee in employees:
            section = getattr(employee, entity.value)
            due = getattr(section, rule.date_field, None) if section is not None else None
            if due is not None:
                tracked.append(TrackedDate(employee.id, None, due, _rule_label(rule)))
        return tracked

    async def generate(self, today: date | None = None) -> AlertGenerationResult:
        """Evaluate every active rule against every tracked date.

        A crossed threshold creates an alert, or updates the instance's open
        alert in place (its read and dismissed flags are kept). Open alerts
        whose instance no longer crosses a threshold, or whose rule or
        instance is gone, are resolved.

        Args:
            today: Reference date (defaults to today)

        Returns:
            Counts of created, updated and resolved alerts
        """
        today = today or date.today()
        result = AlertGenerationResult()

        rules = await self.rule_repo.get_active()
        employees = await self.employee_repo.get_for_alerts()
        documents = await self.document_repo.get_dated()
        open_alerts: dict[InstanceKey, AlertORM] = {
            (a.rule_id, a.employee_id, a.document_id): a for a in await self.repo.get_unresolved()
        }
        seen: set[InstanceKey] = set()

        for rule in rules:
            try:
                entity = AlertEntity(rule.entity)
            except ValueError:
                logger.warning(f"Skipping alert rule {rule.code}: unknown entity {rule.entity}")
                continue
            if rule.date_field not in TRACKED_DATE_FIELDS[entity]:
                logger.warning(f"Skipping alert rule {rule.code}: untracked field {rule.date_field}")
                continue

            for instance in self._tracked_dates(rule, employees, documents):
                days_left = days_until(instance.due_date, today)
                severity = evaluate_severity(days_left, rule.warning_days, rule.critical_days)
                if severity is None:
                    continue

                key = (rule.id, instance.employee_id, instance.document_id)
                seen.add(key)
                message = alert_message(instance.label, instance.due_date, days_left)
                existing = open_alerts.get(key)
                if existing is None:
                    self.session.add(
                        AlertORM(
                            rule_id=rule.id,
                            employee_id=instance.employee_id,
                            document_id=instance.document_id,
                            entity=entity.value,
                            date_field=rule.date_field,
                            due_date=instance.due_date,
                            days_left=days_left,
                            severity=severity.value,
                            message=message,
                        )
                    )
                    result.created += 1
                elif (
                    existing.severity != severity
                    or existing.days_left != days_left
                    or existing.due_date != instance.due_date
                ):
                    existing.severity = severity.value
                    existing.days_left = days_left
                    existing.due_date = instance.due_date
                    existing.message = message
                    result.updated += 1

        resolved_at = utcnow()
        for key, alert in open_alerts.items():
            if key not in seen:
                alert.resolved_at = resolved_at
                result.resolved += 1

        await self.session.flush()
        if result.created or result.updated or result.resolved:
            await self.audit_service.log(
                action=AuditAction.CREATE,
                entity=EntityType.ALERT,
                new_values=result.model_dump(),
            )
        await self.session.commit()
        logger.info(
            f"Alert generation: {result.created} created, {result.updated} updated, {result.resolved} resolved"
        )
        return result
