"""Application services - use cases over the book and user store."""

from .book_service import BookService
from .export_service import ExportService
from .user_service import UserService

__all__ = [
    "BookService",
    "ExportService",
    "UserService",
]
