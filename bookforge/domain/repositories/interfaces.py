"""Domain repository interfaces.

These protocols define the data-access contracts the services depend on,
keeping SQLAlchemy details in the infrastructure layer.
"""

from collections.abc import Awaitable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from bookforge.domain.entities import (
        Book,
        BookFilter,
        BookForm,
        User,
        UserFilter,
        UserForm,
    )


class BookRepositoryProtocol(Protocol):
    """Repository interface for book persistence operations."""

    def list_books(
        self,
        book_filter: "BookFilter | None" = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Awaitable[list["Book"]]:
        """List books matching the filter, newest (highest id) first."""
        ...

    def count_books(self, book_filter: "BookFilter | None" = None) -> Awaitable[int]:
        """Count books matching the filter."""
        ...

    def get_book(self, book_id: int) -> Awaitable["Book"]:
        """Get a book by id.

        Raises:
            NotFound: if no book has this id
        """
        ...

    def find_books_by_owner(self, owner_id: int) -> Awaitable[list["Book"]]:
        """All books owned by the user."""
        ...

    def find_books_by_holder(self, holder_id: int) -> Awaitable[list["Book"]]:
        """All books currently held by the user."""
        ...

    def create_book(self, form: "BookForm") -> Awaitable["Book"]:
        """Insert a new book and return it with its generated id."""
        ...

    def update_book(self, book_id: int, form: "BookForm") -> Awaitable["Book"]:
        """Replace every writable field of an existing book."""
        ...

    def delete_book(self, book_id: int) -> Awaitable[None]:
        """Delete a book by id."""
        ...


class UserRepositoryProtocol(Protocol):
    """Repository interface for user persistence operations."""

    def list_users(self, user_filter: "UserFilter | None" = None) -> Awaitable[list["User"]]:
        """List users matching the filter in id order."""
        ...

    def get_user(self, user_id: int) -> Awaitable["User"]:
        """Get a user by id.

        Raises:
            NotFound: if no user has this id
        """
        ...

    def find_users_by_ids(self, user_ids: list[int]) -> Awaitable[dict[int, "User"]]:
        """Batch lookup; ids without a row are simply absent from the result."""
        ...

    def create_user(self, form: "UserForm") -> Awaitable["User"]:
        """Insert a new user."""
        ...

    def update_user(self, user_id: int, form: "UserForm") -> Awaitable["User"]:
        """Replace the user's name."""
        ...

    def delete_user(self, user_id: int) -> Awaitable[None]:
        """Delete the user row only; books are not touched."""
        ...


class UnitOfWorkProtocol(Protocol):
    """Unit of Work interface for transaction boundary management.

    Each instance wraps a single store transaction and hands out repositories
    that share it. Exiting the context commits on success and rolls back on
    any exception, including cancellation.
    """

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager with automatic commit/rollback."""
        ...

    async def commit(self) -> None:
        """Explicitly commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Explicitly rollback the current transaction."""
        ...

    def get_book_repository(self) -> BookRepositoryProtocol:
        """Get book repository using this unit of work's transaction."""
        ...

    def get_user_repository(self) -> UserRepositoryProtocol:
        """Get user repository using this unit of work's transaction."""
        ...


class UnitOfWorkFactory(Protocol):
    """Anything that can open a fresh unit of work (the database handle)."""

    def unit_of_work(self) -> AbstractAsyncContextManager[UnitOfWorkProtocol]:
        """Open a new unit of work on a fresh session."""
        ...
