"""Reports router - spreadsheet exports."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import get_export_service
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.report import ExportRequest
from workforce_api.security.auth import require_permission
from workforce_api.services.export_service import XLSX_CONTENT_TYPE, ExportService

router = APIRouter()


@router.post("/export")
async def export_report(
    request: Request,
    body: ExportRequest,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.REPORTS_EXPORT))],
    export_service: Annotated[ExportService, Depends(get_export_service)],
) -> Response:
    """Export a report as an Excel workbook.

    Returns a downloadable .xlsx file with one sheet, a bold header row in
    the requested locale and auto-sized columns.
    """
    filename, content = await export_service.export(body, current_user, http_request=request)
    return Response(
        content=content,
        media_type=XLSX_CONTENT_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache",
        },
    )
