"""Audit log router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_audit_log_service, get_list_query
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.audit import AuditLogResponse
from workforce_api.models.dto.common import PaginatedResponse
from workforce_api.security.auth import require_permission
from workforce_api.services.audit_log_service import AuditLogService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[AuditLogResponse])
async def list_audit_logs(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.AUDIT_VIEW))],
    service: Annotated[AuditLogService, Depends(get_audit_log_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[AuditLogResponse]:
    """List audit log entries, newest first.

    Filters: entity, entity_id, action, actor_id, date_from, date_to.
    Requires audit.view permission.
    """
    return await service.list_entries(query)
