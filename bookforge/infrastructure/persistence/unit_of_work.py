"""Database Unit of Work implementation for transaction boundary management.

Provides the concrete UnitOfWork handling commit/rollback and repository
creation on a shared database session.
"""

from typing import Self

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookforge.config import get_logger
from bookforge.domain.exceptions import StoreFailure
from bookforge.domain.repositories.interfaces import (
    BookRepositoryProtocol,
    UserRepositoryProtocol,
)
from bookforge.infrastructure.persistence.repositories.book import BookRepository
from bookforge.infrastructure.persistence.repositories.user import UserRepository

logger = get_logger(__name__)


class DatabaseUnitOfWork:
    """Database implementation of the Unit of Work pattern.

    Manages one database transaction and provides access to all repositories
    sharing it. Commits automatically on successful exit and rolls back when
    the block raises (``BaseException`` included, so a cancelled task never
    leaves a half-applied change behind). Explicit ``commit``/``rollback`` are
    available for finer control.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._committed = False

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager with automatic commit/rollback."""
        if exc_type is not None:
            logger.debug(f"Rolling back unit of work after {exc_type.__name__}")
            await self.rollback()
        elif not self._committed:
            await self.commit()

    async def commit(self) -> None:
        """Explicitly commit the current transaction."""
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Commit failed: {e}")
            raise StoreFailure("commit") from e
        self._committed = True

    async def rollback(self) -> None:
        """Explicitly rollback the current transaction."""
        await self._session.rollback()

    def get_book_repository(self) -> BookRepositoryProtocol:
        """Get book repository using this unit of work's transaction."""
        return BookRepository(self._session)

    def get_user_repository(self) -> UserRepositoryProtocol:
        """Get user repository using this unit of work's transaction."""
        return UserRepository(self._session)
