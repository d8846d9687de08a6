"""Book use cases: CRUD, filtered and paginated listings.

Each public method runs in its own unit of work unless the service was bound
to a caller's unit of work with ``within``; that is how ``UserService``
folds book changes into its cascading delete.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Self

from bookforge.config import get_logger
from bookforge.domain.entities import (
    PAGE_SIZE,
    Book,
    BookFilter,
    BookForm,
    PaginatedBooks,
    count_pages,
    normalize_page,
    page_offset,
)
from bookforge.domain.repositories import UnitOfWorkFactory, UnitOfWorkProtocol

logger = get_logger(__name__)


class BookService:
    """Application service for books."""

    def __init__(
        self,
        database: UnitOfWorkFactory,
        uow: UnitOfWorkProtocol | None = None,
    ) -> None:
        """Initialize with the store handle.

        Args:
            database: Opens a fresh unit of work per call
            uow: Existing unit of work to run every call in instead
        """
        self._database = database
        self._uow = uow

    def within(self, uow: UnitOfWorkProtocol) -> Self:
        """Copy of this service whose calls join ``uow``'s transaction."""
        return type(self)(self._database, uow)

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[UnitOfWorkProtocol]:
        if self._uow is not None:
            yield self._uow
            return
        async with self._database.unit_of_work() as uow:
            yield uow

    # -------------------------------------------------------------------------
    # QUERIES
    # -------------------------------------------------------------------------

    async def list(self, book_filter: BookFilter | None = None) -> list[Book]:
        """All books matching the filter, newest first."""
        async with self._transaction() as uow:
            books = await uow.get_book_repository().list_books(book_filter)
        logger.debug(f"Listed {len(books)} books")
        return books

    async def list_all(self) -> list[Book]:
        return await self.list()

    async def list_paginated(
        self, page: int, book_filter: BookFilter | None = None
    ) -> PaginatedBooks:
        """One page of the filtered listing.

        Pages start at 1 and anything lower is treated as 1. ``total_pages``
        is computed from the filtered count, so a page past the end comes back
        empty with the real page count.
        """
        current_page = normalize_page(page)

        async with self._transaction() as uow:
            repo = uow.get_book_repository()
            total = await repo.count_books(book_filter)
            books = await repo.list_books(
                book_filter,
                limit=PAGE_SIZE,
                offset=page_offset(current_page, PAGE_SIZE),
            )

        return PaginatedBooks(
            books=books,
            current_page=current_page,
            total_pages=count_pages(total, PAGE_SIZE),
        )

    async def find_by_id(self, book_id: int) -> Book:
        """Raises ``NotFound`` when the book does not exist."""
        async with self._transaction() as uow:
            return await uow.get_book_repository().get_book(book_id)

    async def find_all_by_owner(self, owner_id: int) -> list[Book]:
        async with self._transaction() as uow:
            return await uow.get_book_repository().find_books_by_owner(owner_id)

    async def find_all_by_holder(self, holder_id: int) -> list[Book]:
        async with self._transaction() as uow:
            return await uow.get_book_repository().find_books_by_holder(holder_id)

    # -------------------------------------------------------------------------
    # MUTATIONS
    # -------------------------------------------------------------------------

    async def create(self, form: BookForm) -> Book:
        async with self._transaction() as uow:
            book = await uow.get_book_repository().create_book(form)
        logger.info(f"Created book {book.id}", owner_id=book.owner_id)
        return book

    async def update(self, book_id: int, form: BookForm) -> Book:
        """Replace every writable field of the book with the form's values.

        An omitted ``current_holder_id`` puts the book back on the shelf.
        """
        async with self._transaction() as uow:
            book = await uow.get_book_repository().update_book(book_id, form)
        logger.info(
            f"Updated book {book.id}",
            owner_id=book.owner_id,
            current_holder_id=book.current_holder_id,
        )
        return book

    async def delete(self, book_id: int) -> None:
        async with self._transaction() as uow:
            await uow.get_book_repository().delete_book(book_id)
        logger.info(f"Deleted book {book_id}")
