"""Book repository and mapper."""

from typing import Any, ClassVar, override

from attrs import define
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from bookforge.config import get_logger
from bookforge.domain.entities import Book, BookFilter, BookForm
from bookforge.domain.exceptions import EntityName
from bookforge.infrastructure.persistence.database.db_models import DBBook
from bookforge.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    contains,
)
from bookforge.infrastructure.persistence.repositories.repo_decorator import (
    db_operation,
)

logger = get_logger(__name__)

# Newest books first
_NEWEST_FIRST = ("id", False)


@define(frozen=True, slots=True)
class BookMapper(BaseModelMapper[DBBook, Book]):
    """Bidirectional mapper between DB and domain models."""

    @staticmethod
    @override
    def to_domain(db_model: DBBook) -> Book:
        return Book(
            id=db_model.id,
            title=db_model.title,
            authors=db_model.authors,
            owner_id=db_model.owner_id,
            description=db_model.description,
            comment=db_model.comment,
            current_holder_id=db_model.current_holder_id,
        )

    @staticmethod
    def to_values(form: BookForm) -> dict[str, Any]:
        """Column values for an insert or full-replace update."""
        return {
            "title": form.title,
            "authors": form.authors,
            "description": form.description,
            "comment": form.comment,
            "owner_id": form.owner_id,
            "current_holder_id": form.current_holder_id,
        }


def filter_conditions(book_filter: BookFilter | None) -> list[ColumnElement[bool]]:
    """Translate a filter into AND-ed column predicates."""
    if book_filter is None or book_filter.is_empty:
        return []

    conditions: list[ColumnElement[bool]] = []
    if book_filter.title is not None:
        conditions.append(contains(DBBook.title, book_filter.title))
    if book_filter.authors is not None:
        conditions.append(contains(DBBook.authors, book_filter.authors))
    if book_filter.owner_id is not None:
        conditions.append(DBBook.owner_id == book_filter.owner_id)
    if book_filter.current_holder_id is not None:
        conditions.append(DBBook.current_holder_id == book_filter.current_holder_id)
    return conditions


class BookRepository(BaseRepository[DBBook, Book]):
    """Repository for book operations."""

    entity_name: ClassVar[EntityName] = "book"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session and mapper."""
        super().__init__(session=session, model_class=DBBook, mapper=BookMapper())

    @db_operation("list_books")
    async def list_books(
        self,
        book_filter: BookFilter | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Book]:
        """List books matching the filter, highest id first."""
        return await self.find_by(
            conditions=filter_conditions(book_filter),
            limit=limit,
            offset=offset,
            order_by=_NEWEST_FIRST,
        )

    @db_operation("count_books")
    async def count_books(self, book_filter: BookFilter | None = None) -> int:
        return await self.count_entities(filter_conditions(book_filter))

    async def get_book(self, book_id: int) -> Book:
        return await self.get_by_id(book_id)

    @db_operation("find_books_by_owner")
    async def find_books_by_owner(self, owner_id: int) -> list[Book]:
        return await self.find_by(
            conditions={"owner_id": owner_id}, order_by=_NEWEST_FIRST
        )

    @db_operation("find_books_by_holder")
    async def find_books_by_holder(self, holder_id: int) -> list[Book]:
        return await self.find_by(
            conditions={"current_holder_id": holder_id}, order_by=_NEWEST_FIRST
        )

    @db_operation("create_book")
    async def create_book(self, form: BookForm) -> Book:
        """Insert a book; a dangling owner or holder id fails the FK check."""
        book = await self.insert_values(BookMapper.to_values(form))
        logger.debug(f"Inserted book {book.id}", title=book.title)
        return book

    @db_operation("update_book")
    async def update_book(self, book_id: int, form: BookForm) -> Book:
        """Full replace: every writable column is overwritten from the form."""
        return await self.replace_values(book_id, BookMapper.to_values(form))

    @db_operation("delete_book")
    async def delete_book(self, book_id: int) -> None:
        await self.hard_delete(book_id)
