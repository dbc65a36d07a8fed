"""Response envelopes shared by every endpoint."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, SerializeAsAny

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{success, data}``."""

    success: bool = True
    data: SerializeAsAny[T]


class ErrorResponse(BaseModel):
    """Failure envelope: ``{success: false, error}``."""

    success: bool = False
    error: str


class PaginationMeta(BaseModel):
    """Pagination block of list responses."""

    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """List envelope: ``{success, data, pagination}``."""

    success: bool = True
    data: list[SerializeAsAny[T]]
    pagination: PaginationMeta


class DeletionResult(BaseModel):
    """Outcome of a retire-or-delete operation."""

    id: str
    deleted: bool
    deactivated: bool


class MessageResponse(BaseModel):
    message: str
