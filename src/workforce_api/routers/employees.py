"""Employees router.

The employee aggregate is edited in two ways: PATCH for the employee's own
fields and PUT per 1:1 section (identity, work status, employment, salary
profile). Salary revisions, patent payments and contacts are kept as lists
beside the sections.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response

from workforce_api.constants.permissions import Permissions
from workforce_api.dependencies import (
    get_document_service,
    get_employee_record_service,
    get_employee_service,
    get_list_query,
)
from workforce_api.models.domain.user import CurrentUser
from workforce_api.models.dto.common import ApiResponse, DeletionResult, PaginatedResponse
from workforce_api.models.dto.document import DocumentResponse
from workforce_api.models.dto.employee import (
    ContactCreate,
    ContactResponse,
    EmployeeCreate,
    EmployeeDetailResponse,
    EmployeeResponse,
    EmployeeUpdate,
    EmploymentInput,
    FinancialSummary,
    IdentityInput,
    MissingDocumentResponse,
    PatentPaymentInput,
    PatentPaymentResponse,
    SalaryProfileUpdate,
    SalaryRevisionResponse,
    WorkStatusInput,
)
from workforce_api.security.auth import require_permission
from workforce_api.services.document_service import DocumentService
from workforce_api.services.employee_record_service import EmployeeRecordService
from workforce_api.services.employee_service import EmployeeService
from workforce_api.utils.query import ListQuery

router = APIRouter()


# =============================================================================
# Employees
# =============================================================================


@router.get("", response_model=PaginatedResponse[EmployeeResponse])
async def list_employees(
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_VIEW))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PaginatedResponse[EmployeeResponse]:
    """List employees with paging, search and filters.

    Filters: status, worksite_id, department_id, nationality_id.
    """
    return await service.list_employees(query)


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeDetailResponse])
async def get_employee(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_VIEW))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    """Employee with all sections. Salary terms need salary.view."""
    return ApiResponse(data=await service.get_employee(employee_id, current_user))


@router.post("", response_model=ApiResponse[EmployeeDetailResponse], status_code=201)
async def create_employee(
    request: Request,
    body: EmployeeCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_CREATE))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    """Create an employee; the employee number is assigned automatically."""
    return ApiResponse(data=await service.create_employee(body, current_user, http_request=request))


@router.patch("/{employee_id}", response_model=ApiResponse[EmployeeDetailResponse])
async def update_employee(
    request: Request,
    employee_id: UUID,
    body: EmployeeUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    result = await service.update_employee(employee_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.delete("/{employee_id}", response_model=ApiResponse[DeletionResult])
async def delete_employee(
    request: Request,
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_DELETE))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[DeletionResult]:
    """Soft-delete an employee."""
    return ApiResponse(data=await service.delete_employee(employee_id, current_user, http_request=request))


# =============================================================================
# Sections
# =============================================================================


@router.put("/{employee_id}/identity", response_model=ApiResponse[EmployeeDetailResponse])
async def put_identity(
    request: Request,
    employee_id: UUID,
    body: IdentityInput,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    result = await service.upsert_section(employee_id, "identity", body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.put("/{employee_id}/work-status", response_model=ApiResponse[EmployeeDetailResponse])
async def put_work_status(
    request: Request,
    employee_id: UUID,
    body: WorkStatusInput,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    result = await service.upsert_section(employee_id, "work_status", body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.put("/{employee_id}/employment", response_model=ApiResponse[EmployeeDetailResponse])
async def put_employment(
    request: Request,
    employee_id: UUID,
    body: EmploymentInput,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    result = await service.upsert_section(employee_id, "employment", body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.put("/{employee_id}/salary-profile", response_model=ApiResponse[EmployeeDetailResponse])
async def put_salary_profile(
    request: Request,
    employee_id: UUID,
    body: SalaryProfileUpdate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[EmployeeDetailResponse]:
    """Replace salary terms. Additionally requires salary.edit.

    Every changed pay field is recorded as a salary revision, effective from
    ``effective_from`` (default today) with the optional ``revision_reason``.
    """
    result = await service.upsert_section(
        employee_id, "salary_profile", body, current_user, http_request=request
    )
    return ApiResponse(data=result)


@router.get(
    "/{employee_id}/salary-revisions",
    response_model=ApiResponse[list[SalaryRevisionResponse]],
)
async def list_salary_revisions(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SALARY_VIEW))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[list[SalaryRevisionResponse]]:
    """Salary change history, newest first."""
    return ApiResponse(data=await service.list_salary_revisions(employee_id))


# =============================================================================
# Documents
# =============================================================================


@router.get("/{employee_id}/documents", response_model=ApiResponse[list[DocumentResponse]])
async def list_employee_documents(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_VIEW))],
    service: Annotated[DocumentService, Depends(get_document_service)],
) -> ApiResponse[list[DocumentResponse]]:
    return ApiResponse(data=await service.list_for_employee(employee_id))


@router.get(
    "/{employee_id}/missing-documents",
    response_model=ApiResponse[list[MissingDocumentResponse]],
)
async def list_missing_documents(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.DOCUMENTS_VIEW))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> ApiResponse[list[MissingDocumentResponse]]:
    """Required document types the employee has no valid document for."""
    return ApiResponse(data=await service.get_missing_documents(employee_id))


# =============================================================================
# Patent payments, contacts and finances
# =============================================================================


@router.get("/{employee_id}/patent-payments", response_model=ApiResponse[list[PatentPaymentResponse]])
async def list_patent_payments(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_VIEW))],
    service: Annotated[EmployeeRecordService, Depends(get_employee_record_service)],
    year: Annotated[int | None, Query(ge=2000, le=2100)] = None,
) -> ApiResponse[list[PatentPaymentResponse]]:
    """Monthly patent payments, newest month first."""
    return ApiResponse(data=await service.list_patent_payments(employee_id, year))


@router.post("/{employee_id}/patent-payments", response_model=ApiResponse[PatentPaymentResponse])
async def upsert_patent_payment(
    request: Request,
    response: Response,
    employee_id: UUID,
    body: PatentPaymentInput,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeRecordService, Depends(get_employee_record_service)],
) -> ApiResponse[PatentPaymentResponse]:
    """Record the payment of one month.

    Returns 201 for a new month and 200 when an existing month is replaced.
    """
    payment, created = await service.upsert_patent_payment(
        employee_id, body, current_user, http_request=request
    )
    response.status_code = 201 if created else 200
    return ApiResponse(data=payment)


@router.get("/{employee_id}/contacts", response_model=ApiResponse[list[ContactResponse]])
async def list_contacts(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_VIEW))],
    service: Annotated[EmployeeRecordService, Depends(get_employee_record_service)],
) -> ApiResponse[list[ContactResponse]]:
    return ApiResponse(data=await service.list_contacts(employee_id))


@router.post("/{employee_id}/contacts", response_model=ApiResponse[ContactResponse], status_code=201)
async def create_contact(
    request: Request,
    employee_id: UUID,
    body: ContactCreate,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.EMPLOYEES_EDIT))],
    service: Annotated[EmployeeRecordService, Depends(get_employee_record_service)],
) -> ApiResponse[ContactResponse]:
    result = await service.create_contact(employee_id, body, current_user, http_request=request)
    return ApiResponse(data=result)


@router.get("/{employee_id}/financial", response_model=ApiResponse[FinancialSummary])
async def get_financial_summary(
    employee_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_permission(Permissions.SALARY_VIEW))],
    service: Annotated[EmployeeRecordService, Depends(get_employee_record_service)],
) -> ApiResponse[FinancialSummary]:
    """Per-period payroll and progress payment income, payments and running balance."""
    return ApiResponse(data=await service.get_financial_summary(employee_id))
