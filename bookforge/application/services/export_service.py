"""CSV export of the filtered book listing."""

from pathlib import Path

import pandas as pd

from bookforge.application.services.book_service import BookService
from bookforge.application.services.user_service import UserService
from bookforge.config import get_logger
from bookforge.domain.entities import Book, BookFilter, User
from bookforge.domain.exceptions import ExportFailure
from bookforge.domain.repositories import UnitOfWorkFactory

logger = get_logger(__name__)

# Column order of the exported file
CSV_COLUMNS = [
    "ID",
    "Title",
    "Author(s)",
    "Description",
    "Owner",
    "Current Holder",
    "Comment",
]

# Rendered for an absent or unresolvable user reference
MISSING_USER = "-"


def user_cell(user_id: int | None, users: dict[int, User]) -> str:
    """Label of the referenced user, or ``-`` when there is none."""
    if user_id is None:
        return MISSING_USER
    user = users.get(user_id)
    return user.label if user is not None else MISSING_USER


def books_frame(books: list[Book], users: dict[int, User]) -> pd.DataFrame:
    """One row per book, user references resolved to labels."""
    rows = [
        {
            "ID": book.id,
            "Title": book.title,
            "Author(s)": book.authors,
            "Description": book.description,
            "Owner": user_cell(book.owner_id, users),
            "Current Holder": user_cell(book.current_holder_id, users),
            "Comment": book.comment,
        }
        for book in books
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


class ExportService:
    """Renders books as CSV.

    Books and their owners/holders are read in a single unit of work so the
    export is a consistent snapshot.
    """

    def __init__(
        self,
        database: UnitOfWorkFactory,
        book_service: BookService | None = None,
        user_service: UserService | None = None,
    ) -> None:
        self._database = database
        self._books = book_service or BookService(database)
        self._users = user_service or UserService(database, self._books)

    async def _load(
        self, book_filter: BookFilter | None
    ) -> tuple[list[Book], dict[int, User]]:
        async with self._database.unit_of_work() as uow:
            books = await self._books.within(uow).list(book_filter)
            user_ids = {book.owner_id for book in books} | {
                book.current_holder_id
                for book in books
                if book.current_holder_id is not None
            }
            users = await self._users.within(uow).find_by_ids(sorted(user_ids))
        return books, users

    async def _render(self, book_filter: BookFilter | None) -> tuple[bytes, int]:
        books, users = await self._load(book_filter)
        try:
            csv_text = books_frame(books, users).to_csv(index=False, lineterminator="\n")
            payload = csv_text.encode("utf-8")
        except (ValueError, UnicodeError) as e:
            logger.error(f"CSV rendering failed: {e}")
            raise ExportFailure("Could not produce the CSV export") from e
        return payload, len(books)

    async def export_books(self, book_filter: BookFilter | None = None) -> bytes:
        """UTF-8 CSV of every book matching the filter, newest first."""
        payload, row_count = await self._render(book_filter)
        logger.info(f"Exported {row_count} books as CSV", size_bytes=len(payload))
        return payload

    async def write_books(
        self, path: Path | str, book_filter: BookFilter | None = None
    ) -> int:
        """Write the export to ``path`` and return the number of rows written."""
        payload, row_count = await self._render(book_filter)
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as e:
            logger.error(f"Writing CSV export failed: {e}")
            raise ExportFailure(f"Could not write export to {target}") from e
        logger.info(f"Wrote {row_count} books to {target}")
        return row_count
