"""Core domain entities representing the lending library."""

from .forms import BookFilter, BookForm, UserFilter, UserForm
from .library import MAX_ROW_ID, Book, User
from .pagination import (
    PAGE_SIZE,
    PaginatedBooks,
    count_pages,
    normalize_page,
    page_offset,
)

__all__ = [
    # Records
    "Book",
    "User",
    "MAX_ROW_ID",
    # Forms and filters
    "BookFilter",
    "BookForm",
    "UserFilter",
    "UserForm",
    # Pagination
    "PAGE_SIZE",
    "PaginatedBooks",
    "count_pages",
    "normalize_page",
    "page_offset",
]
