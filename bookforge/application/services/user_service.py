"""User use cases, including the cascading delete."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Self

from bookforge.application.services.book_service import BookService
from bookforge.config import get_logger
from bookforge.domain.entities import BookForm, User, UserFilter, UserForm
from bookforge.domain.repositories import UnitOfWorkFactory, UnitOfWorkProtocol

logger = get_logger(__name__)


class UserService:
    """Application service for users.

    Deleting a user also deletes the books they own and returns the books
    they hold to their owners' shelves; the whole cascade is one transaction.
    """

    def __init__(
        self,
        database: UnitOfWorkFactory,
        book_service: BookService | None = None,
        uow: UnitOfWorkProtocol | None = None,
    ) -> None:
        self._database = database
        self._books = book_service or BookService(database)
        self._uow = uow

    def within(self, uow: UnitOfWorkProtocol) -> Self:
        """Copy of this service whose calls join ``uow``'s transaction."""
        return type(self)(self._database, self._books, uow)

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[UnitOfWorkProtocol]:
        if self._uow is not None:
            yield self._uow
            return
        async with self._database.unit_of_work() as uow:
            yield uow

    async def list(self, user_filter: UserFilter | None = None) -> list[User]:
        """Users whose name contains ``user_filter.name``, in id order."""
        async with self._transaction() as uow:
            return await uow.get_user_repository().list_users(user_filter)

    async def list_all(self) -> list[User]:
        return await self.list()

    async def find_by_id(self, user_id: int) -> User:
        """Raises ``NotFound`` when the user does not exist."""
        async with self._transaction() as uow:
            return await uow.get_user_repository().get_user(user_id)

    async def find_by_ids(self, user_ids: list[int]) -> dict[int, User]:
        """Batch lookup keyed by id; unknown ids are simply missing."""
        async with self._transaction() as uow:
            return await uow.get_user_repository().find_users_by_ids(user_ids)

    async def create(self, form: UserForm) -> User:
        async with self._transaction() as uow:
            user = await uow.get_user_repository().create_user(form)
        logger.info(f"Created user {user.id}")
        return user

    async def update(self, user_id: int, form: UserForm) -> User:
        async with self._transaction() as uow:
            user = await uow.get_user_repository().update_user(user_id, form)
        logger.info(f"Renamed user {user.id}")
        return user

    async def delete(self, user_id: int) -> None:
        """Delete a user and cascade to their books.

        Owned books are deleted first, then held books are returned to the
        shelf, then the user row goes. Any failure (a missing user included)
        rolls the whole cascade back.
        """
        async with self._transaction() as uow:
            books = self._books.within(uow)

            owned = await books.find_all_by_owner(user_id)
            for book in owned:
                await books.delete(book.id)

            held = await books.find_all_by_holder(user_id)
            for book in held:
                await books.update(book.id, BookForm.from_book(book).returned_to_shelf())

            await uow.get_user_repository().delete_user(user_id)

        logger.info(
            f"Deleted user {user_id}",
            books_deleted=len(owned),
            books_returned=len(held),
        )
