"""Employee document and alert DTOs."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from workforce_api.models.domain.compliance import AlertSeverity, DocumentStatus


class DocumentCreate(BaseModel):
    employee_id: UUID
    document_type_id: UUID
    document_no: str | None = Field(default=None, max_length=100)
    issue_date: date | None = None
    expiry_date: date | None = None
    issued_by: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=2000)
    is_verified: bool = False

    @model_validator(mode="after")
    def _check_dates(self) -> "DocumentCreate":
        if self.issue_date and self.expiry_date and self.expiry_date < self.issue_date:
            raise ValueError("expiry_date must not precede issue_date")
        return self


class DocumentUpdate(BaseModel):
    """Partial document update."""

    document_no: str | None = Field(default=None, max_length=100)
    issue_date: date | None = None
    expiry_date: date | None = None
    issued_by: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=2000)
    is_verified: bool | None = None


class DocumentFileResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    version_no: int
    file_name: str
    content_type: str
    size_bytes: int
    content_hash: str
    uploaded_by: UUID | None = None
    created_at: datetime


class DocumentResponse(BaseModel):
    """Document with its computed status."""

    id: UUID
    employee_id: UUID
    employee_no: str | None = None
    employee_name: str | None = None
    document_type_id: UUID
    document_type_code: str
    document_no: str | None = None
    issue_date: date | None = None
    expiry_date: date | None = None
    issued_by: str | None = None
    notes: str | None = None
    is_verified: bool
    verified_at: datetime | None = None
    status: DocumentStatus
    days_left: int | None = None
    files: list[DocumentFileResponse] = []
    created_at: datetime
    updated_at: datetime


class AlertResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    rule_id: UUID
    employee_id: UUID
    document_id: UUID | None = None
    entity: str
    date_field: str
    due_date: date
    days_left: int
    severity: AlertSeverity
    message: str
    is_read: bool
    is_dismissed: bool
    read_at: datetime | None = None
    dismissed_at: datetime | None = None
    resolved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class AlertGenerationResult(BaseModel):
    """Counts produced by one alert generation pass."""

    created: int = 0
    updated: int = 0
    resolved: int = 0
