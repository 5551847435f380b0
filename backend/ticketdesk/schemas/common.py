"""
Shared response envelope for paginated endpoints.

Every paginated list responds with:
    {"data": [...], "pagination": {page, page_size, total_count,
     total_pages, has_next_page, has_previous_page}}
"""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

from ticketdesk.services.pagination import PageMeta

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata."""

    page: int = Field(..., description="1-based page number")
    page_size: int = Field(..., description="Items per page")
    total_count: int = Field(..., description="Items across all pages")
    total_pages: int = Field(..., description="Number of pages (0 when empty)")
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def from_meta(cls, meta: PageMeta) -> "PaginationMeta":
        return cls(
            page=meta.page,
            page_size=meta.page_size,
            total_count=meta.total_count,
            total_pages=meta.total_pages,
            has_next_page=meta.has_next_page,
            has_previous_page=meta.has_previous_page,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of items plus metadata."""

    data: List[T]
    pagination: PaginationMeta
