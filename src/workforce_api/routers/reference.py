"""Reference data router.

One set of endpoints serves every lookup kind (nationality, profession,
shift, document_type, payroll_rule, ...). Request bodies are validated
against the kind's own DTO by the service. Responses carry the kind-specific
fields, so their envelopes are typed loosely.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_list_query, get_reference_data_service
from workforce_api.models.domain.employee import WorkStatusType
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, DeletionResult, PaginatedResponse
from workforce_api.models.dto.reference import (
    DocumentRequirementResponse,
    DocumentRequirementsUpdate,
    LookupResponse,
    PayrollRuleResponse,
    PayrollRuleVersionInput,
)
from workforce_api.security.auth import get_current_user, require_permission
from workforce_api.services.reference_data_service import ReferenceDataService
from workforce_api.utils.query import ListQuery

router = APIRouter()


# =============================================================================
# Document Requirements
# =============================================================================


@router.get("/document-requirements", response_model=ApiResponse[list[DocumentRequirementResponse]])
async def list_document_requirements(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    work_status_type: WorkStatusType | None = Query(default=None),
) -> ApiResponse[list[DocumentRequirementResponse]]:
    """Document types required per work-status type."""
    return ApiResponse(data=await service.list_requirements(work_status_type))


@router.put(
    "/document-requirements/{work_status_type}",
    response_model=ApiResponse[list[DocumentRequirementResponse]],
)
async def replace_document_requirements(
    request: Request,
    work_status_type: WorkStatusType,
    body: DocumentRequirementsUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SETTINGS_EDIT))],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[list[DocumentRequirementResponse]]:
    """Replace the required document types of one work-status type."""
    result = await service.replace_requirements(
        work_status_type, body.document_type_ids, current_user, http_request=request
    )
    return ApiResponse(data=result)


# =============================================================================
# Payroll Rule Versions
# =============================================================================


@router.post("/payroll_rule/{rule_id}/versions", response_model=ApiResponse[Any])
async def add_payroll_rule_version(
    request: Request,
    rule_id: UUID,
    body: PayrollRuleVersionInput,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SETTINGS_EDIT))],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[PayrollRuleResponse]:
    """Add an effective-dated version to a payroll rule."""
    return ApiResponse(data=await service.add_rule_version(rule_id, body, current_user, http_request=request))


# =============================================================================
# Generic Kinds
# =============================================================================


@router.get("/{kind}", response_model=PaginatedResponse[Any])
async def list_entries(
    kind: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[LookupResponse]:
    """List entries of a kind with paging, search and filters."""
    return await service.list_entries(kind, query)


@router.get("/{kind}/active", response_model=ApiResponse[list[Any]])
async def list_active_entries(
    kind: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[list[LookupResponse]]:
    """Active entries of a kind in display order."""
    return ApiResponse(data=await service.list_active(kind))


@router.get("/{kind}/{entry_id}", response_model=ApiResponse[Any])
async def get_entry(
    kind: str,
    entry_id: UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[LookupResponse]:
    return ApiResponse(data=await service.get_entry(kind, entry_id))


@router.post("/{kind}", response_model=ApiResponse[Any], status_code=201)
async def create_entry(
    request: Request,
    kind: str,
    body: Annotated[dict[str, Any], Body()],
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SETTINGS_CREATE))],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[LookupResponse]:
    """Create an entry. Requires settings.create permission."""
    return ApiResponse(data=await service.create_entry(kind, body, current_user, http_request=request))


@router.patch("/{kind}/{entry_id}", response_model=ApiResponse[Any])
async def update_entry(
    request: Request,
    kind: str,
    entry_id: UUID,
    body: Annotated[dict[str, Any], Body()],
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SETTINGS_EDIT))],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[LookupResponse]:
    """Partially update an entry. Requires settings.edit permission."""
    result = await service.update_entry(kind, entry_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.delete("/{kind}/{entry_id}", response_model=ApiResponse[DeletionResult])
async def delete_entry(
    request: Request,
    kind: str,
    entry_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SETTINGS_DELETE))],
    service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
) -> ApiResponse[DeletionResult]:
    """Delete an unreferenced entry, otherwise deactivate it."""
    return ApiResponse(data=await service.retire_or_delete(kind, entry_id, current_user, http_request=request))
