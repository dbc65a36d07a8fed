"""Worksites router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_list_query, get_worksite_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, DeletionResult, PaginatedResponse
from workforce_api.models.dto.worksite import WorksiteCreate, WorksiteResponse, WorksiteUpdate
from workforce_api.security.auth import require_permission
from workforce_api.services.worksite_service import WorksiteService
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[WorksiteResponse])
async def list_worksites(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.WORKSITES_VIEW))],
    service: Annotated[WorksiteService, Depends(get_worksite_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[WorksiteResponse]:
    """List worksites. Requires worksites.view permission."""
    return await service.list_worksites(query)


@router.get("/{worksite_id}", response_model=ApiResponse[WorksiteResponse])
async def get_worksite(
    worksite_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.WORKSITES_VIEW))],
    service: Annotated[WorksiteService, Depends(get_worksite_service)],
) -> ApiResponse[WorksiteResponse]:
    return ApiResponse(data=await service.get_worksite(worksite_id))


@router.post("", response_model=ApiResponse[WorksiteResponse], status_code=201)
async def create_worksite(
    request: Request,
    body: WorksiteCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.WORKSITES_CREATE))],
    service: Annotated[WorksiteService, Depends(get_worksite_service)],
) -> ApiResponse[WorksiteResponse]:
    """Create a worksite. Requires worksites.create permission."""
    return ApiResponse(data=await service.create_worksite(body, current_user, http_request=request))


@router.patch("/{worksite_id}", response_model=ApiResponse[WorksiteResponse])
async def update_worksite(
    request: Request,
    worksite_id: UUID,
    body: WorksiteUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.WORKSITES_EDIT))],
    service: Annotated[WorksiteService, Depends(get_worksite_service)],
) -> ApiResponse[WorksiteResponse]:
    result = await service.update_worksite(worksite_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.delete("/{worksite_id}", response_model=ApiResponse[DeletionResult])
async def delete_worksite(
    request: Request,
    worksite_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.WORKSITES_DELETE))],
    service: Annotated[WorksiteService, Depends(get_worksite_service)],
) -> ApiResponse[DeletionResult]:
    """Delete an unused worksite, otherwise deactivate it."""
    return ApiResponse(data=await service.delete_worksite(worksite_id, current_user, http_request=request))
