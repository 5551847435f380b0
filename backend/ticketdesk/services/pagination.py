"""
Pagination contract shared by every paginated list endpoint.

WHAT: Bounds checking, slice arithmetic and page metadata for list
operations (users, comments).

WHY: Every list endpoint must agree on what page 0, page_size 101 or a page
past the end mean. Keeping the arithmetic here, free of I/O, makes those
edge cases uniform and directly testable.

HOW:
- PageRequest validates page >= 1 and 1 <= page_size <= 100 on
  construction, raising InvalidPaginationError before any query runs.
- DAOs apply PageRequest.offset / PageRequest.limit to an ordered query and
  return (items, total_count).
- PageMeta.build() derives total_pages and the next/previous flags.
"""

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

from ticketdesk.core.exceptions import InvalidPaginationError


MIN_PAGE = 1
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """
    Validated page coordinates.

    Attributes:
        page: 1-based page number
        page_size: Items per page, 1..100

    Raises:
        InvalidPaginationError: If either value is out of range
    """

    page: int
    page_size: int

    def __post_init__(self) -> None:
        if isinstance(self.page, bool) or not isinstance(self.page, int):
            raise InvalidPaginationError(message="Page must be an integer.", page=self.page)
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int):
            raise InvalidPaginationError(
                message="Page size must be an integer.", page_size=self.page_size
            )
        if self.page < MIN_PAGE:
            raise InvalidPaginationError(message="Page must be at least 1.", page=self.page)
        if not MIN_PAGE_SIZE <= self.page_size <= MAX_PAGE_SIZE:
            raise InvalidPaginationError(
                message=f"Page size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}.",
                page_size=self.page_size,
            )

    @property
    def offset(self) -> int:
        """Number of items to skip."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Maximum number of items to take."""
        return self.page_size


@dataclass(frozen=True)
class PageMeta:
    """Metadata returned alongside a page slice."""

    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, request: PageRequest, total_count: int) -> "PageMeta":
        """
        Compute metadata for a page.

        Args:
            request: Validated page coordinates
            total_count: Number of items before slicing

        Returns:
            PageMeta; total_pages is 0 when total_count is 0
        """
        if total_count < 0:
            raise ValueError("total_count cannot be negative")

        total_pages = math.ceil(total_count / request.page_size) if total_count else 0
        return cls(
            page=request.page,
            page_size=request.page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_next_page=request.page < total_pages,
            has_previous_page=request.page > 1,
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """A slice of an ordered collection plus its metadata."""

    items: List[T]
    meta: PageMeta


def paginate_items(items: Sequence[T], request: PageRequest) -> Page[T]:
    """
    Slice an already ordered in-memory sequence.

    Args:
        items: Full ordered collection
        request: Validated page coordinates

    Returns:
        Page with at most page_size items; empty past the last page
    """
    window = list(items[request.offset : request.offset + request.limit])
    return Page(items=window, meta=PageMeta.build(request, len(items)))
