"""Pagination primitives shared by paginated listings.

Pages are 1-indexed at the service boundary; the store works with
zero-based row offsets.
"""

from attrs import define, field

from bookforge.domain.entities.library import Book

PAGE_SIZE = 100


def normalize_page(page: int) -> int:
    """Clamp a requested page number to the first page."""
    return page if page >= 1 else 1


def page_offset(page: int, page_size: int = PAGE_SIZE) -> int:
    """Zero-based row offset of a 1-indexed page."""
    return (normalize_page(page) - 1) * page_size


def count_pages(total: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed to show ``total`` rows (ceiling division)."""
    if total <= 0:
        return 0
    return -(-total // page_size)


@define(frozen=True, slots=True)
class PaginatedBooks:
    """One page of a filtered book listing."""

    books: list[Book] = field(factory=list)
    current_page: int = 1
    total_pages: int = 0

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1
