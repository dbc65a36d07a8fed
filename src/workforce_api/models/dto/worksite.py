"""Worksite DTOs."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from workforce_api.models.domain.employee import WorksiteStatus
from workforce_api.utils.validation import normalize_code


class WorksiteCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=2000)
    status: WorksiteStatus = WorksiteStatus.ACTIVE
    manager_name: str | None = Field(default=None, max_length=255)
    manager_phone: str | None = Field(default=None, max_length=50)
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        return normalize_code(value)


class WorksiteUpdate(BaseModel):
    """Partial worksite update."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=2000)
    status: WorksiteStatus | None = None
    manager_name: str | None = Field(default=None, max_length=255)
    manager_phone: str | None = Field(default=None, max_length=50)
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class WorksiteSummary(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    code: str
    name: str


class WorksiteResponse(WorksiteSummary):
    city: str | None = None
    address: str | None = None
    status: WorksiteStatus
    manager_name: str | None = None
    manager_phone: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
