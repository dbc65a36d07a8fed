"""Employee documents router with versioned file storage."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import Response

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_document_service, get_list_query
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, MessageResponse, PaginatedResponse
from workforce_api.models.dto.document import (
    DocumentCreate,
    DocumentFileResponse,
    DocumentResponse,
    DocumentUpdate,
)
from workforce_api.security.auth import require_permission
from workforce_api.services.document_service import DocumentService
from workforce_api.utils.file_validation import sanitize_filename_part
from workforce_api.utils.query import ListQuery

router = APIRouter()


@router.get("", response_model=PaginatedResponse[DocumentResponse])
async def list_documents(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_VIEW))],
    service: Annotated[DocumentService, Depends(get_document_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[DocumentResponse]:
    """List documents. Filters: employee_id, document_type_id."""
    return await service.list_documents(query)


@router.get("/{document_id}", response_model=ApiResponse[DocumentResponse])
async def get_document(
    document_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_VIEW))],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> ApiResponse[DocumentResponse]:
    return ApiResponse(data=await service.get_document(document_id))


@router.post("", response_model=ApiResponse[DocumentResponse], status_code=201)
async def create_document(
    request: Request,
    body: DocumentCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_CREATE))],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> ApiResponse[DocumentResponse]:
    return ApiResponse(data=await service.create_document(body, current_user, http_request=request))


@router.patch("/{document_id}", response_model=ApiResponse[DocumentResponse])
async def update_document(
    request: Request,
    document_id: UUID,
    body: DocumentUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_EDIT))],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> ApiResponse[DocumentResponse]:
    result = await service.update_document(document_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.delete("/{document_id}", response_model=ApiResponse[MessageResponse])
async def delete_document(
    request: Request,
    document_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_DELETE))],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> ApiResponse[MessageResponse]:
    await service.delete_document(document_id, current_user, http_request=request)
    return ApiResponse(data=MessageResponse(message="Document deleted"))


@router.post("/{document_id}/files", response_model=ApiResponse[DocumentFileResponse], status_code=201)
async def upload_document_file(
    request: Request,
    document_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_CREATE))],
    service: Annotated[DocumentService, Depends(get_document_service)],
    file: UploadFile = File(...),
) -> ApiResponse[DocumentFileResponse]:
    """Upload a new file version. Type, size and content are validated."""
    content = await file.read()
    result = await service.upload_file(
        document_id,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
        current_user=current_user,
        http_request=request,
    )
    return ApiResponse(data=result)


@router.get("/{document_id}/files/download")
async def download_document_file(
    document_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_DOWNLOAD))],
    service: Annotated[DocumentService, Depends(get_document_service)],
    version: int | None = Query(default=None, ge=1, description="Version number, latest if omitted"),
) -> Response:
    """Download the latest or a given file version."""
    stored, content = await service.download_file(document_id, version)
    filename = sanitize_filename_part(stored.file_name) or "document"
    return Response(
        content=content,
        media_type=stored.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache",
        },
    )
