"""Common Pydantic schemas shared across the API."""

from math import ceil
from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationParams(BaseModel):
    """Pagination query parameters."""

    page: int = Field(default=DEFAULT_PAGE, ge=1, description="Page number (1-indexed)")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Items per page")

    @property
    def offset(self) -> int:
        """Calculate offset from page and limit."""
        return (self.page - 1) * self.limit


class PaginatedResponse(CamelModel, Generic[T]):
    """Paginated response envelope."""

    data: list[T] = Field(description="Items for this page")
    total: int = Field(ge=0, description="Total number of items across all pages")
    page: int = Field(ge=1, description="Current page number")
    limit: int = Field(ge=1, description="Items per page")
    total_pages: int = Field(ge=0, description="Total number of pages")

    @classmethod
    def create(
        cls,
        data: list,
        total: int,
        pagination: PaginationParams,
    ) -> "PaginatedResponse[T]":
        """Create a paginated response."""
        return cls(
            data=data,
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            total_pages=ceil(total / pagination.limit),
        )
