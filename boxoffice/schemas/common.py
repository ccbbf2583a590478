"""Common schema utilities."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class ErrorResponse(BaseModel):
    """Body of every error response; ``error`` is the stable error code."""

    error: str
    detail: str | None = None
    field_errors: dict[str, str] | None = None


class HealthResponse(BaseModel):
    """Service health."""

    status: str
    version: str
    redis: bool
