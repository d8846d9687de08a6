"""Book management commands."""

from pathlib import Path
from typing import Annotated

import typer

from bookforge.application.services import BookService, ExportService, UserService
from bookforge.domain.entities import Book, BookFilter, BookForm, PaginatedBooks, User
from bookforge.infrastructure.cli.async_helpers import run_with_database
from bookforge.infrastructure.cli.ui import (
    book_details,
    book_user_ids,
    command_error_handler,
    console,
    display_book_page,
)
from bookforge.infrastructure.persistence.database.db_connection import Database

app = typer.Typer(help="Manage books", no_args_is_help=True)

# Shared option declarations
TitleFilter = Annotated[
    str | None, typer.Option("--title", help="Title contains this text (case-sensitive)")
]
AuthorsFilter = Annotated[
    str | None,
    typer.Option("--authors", help="Author(s) contain this text (case-sensitive)"),
]
OwnerFilter = Annotated[int | None, typer.Option("--owner", help="Owner user id")]
HolderFilter = Annotated[int | None, typer.Option("--holder", help="Holder user id")]

Title = Annotated[str, typer.Option("--title", help="Book title")]
Authors = Annotated[str, typer.Option("--authors", help="Author(s), free text")]
Owner = Annotated[int, typer.Option("--owner", help="Owner user id")]
Description = Annotated[str | None, typer.Option("--description", help="Description")]
Comment = Annotated[str | None, typer.Option("--comment", help="Comment")]
Holder = Annotated[
    int | None,
    typer.Option("--holder", help="User currently holding the book; omit for the shelf"),
]


def _book_filter(
    title: str | None, authors: str | None, owner: int | None, holder: int | None
) -> BookFilter:
    return BookFilter(
        title=title, authors=authors, owner_id=owner, current_holder_id=holder
    )


@app.command("list")
@command_error_handler
def list_books(
    page: Annotated[int, typer.Option("--page", "-p", help="Page number")] = 1,
    title: TitleFilter = None,
    authors: AuthorsFilter = None,
    owner: OwnerFilter = None,
    holder: HolderFilter = None,
) -> None:
    """List books, newest first, 100 per page."""
    book_filter = _book_filter(title, authors, owner, holder)

    async def operation(database: Database) -> tuple[PaginatedBooks, dict[int, User]]:
        books = BookService(database)
        result = await books.list_paginated(page, book_filter)
        users = await UserService(database, books).find_by_ids(
            book_user_ids(result.books)
        )
        return result, users

    result, users = run_with_database(operation)
    display_book_page(result, users)


@app.command("show")
@command_error_handler
def show_book(
    book_id: Annotated[int, typer.Argument(help="Book id")],
) -> None:
    """Show every field of a book."""

    async def operation(database: Database) -> tuple[Book, dict[int, User]]:
        books = BookService(database)
        book = await books.find_by_id(book_id)
        users = await UserService(database, books).find_by_ids(book_user_ids([book]))
        return book, users

    book, users = run_with_database(operation)
    console.print(book_details(book, users))


@app.command("add")
@command_error_handler
def add_book(
    title: Title,
    authors: Authors,
    owner: Owner,
    description: Description = None,
    comment: Comment = None,
    holder: Holder = None,
) -> None:
    """Create a book."""
    form = BookForm(
        title=title,
        authors=authors,
        owner_id=owner,
        description=description,
        comment=comment,
        current_holder_id=holder,
    )

    async def operation(database: Database) -> Book:
        return await BookService(database).create(form)

    book = run_with_database(operation)
    console.print(f"[green]✓ Created book {book.id}: {book.title}[/green]")


@app.command("edit")
@command_error_handler
def edit_book(
    book_id: Annotated[int, typer.Argument(help="Book id")],
    title: Title,
    authors: Authors,
    owner: Owner,
    description: Description = None,
    comment: Comment = None,
    holder: Holder = None,
) -> None:
    """Replace every field of a book.

    Options left out are cleared; leaving out --holder returns the book to
    its owner's shelf.
    """
    form = BookForm(
        title=title,
        authors=authors,
        owner_id=owner,
        description=description,
        comment=comment,
        current_holder_id=holder,
    )

    async def operation(database: Database) -> Book:
        return await BookService(database).update(book_id, form)

    book = run_with_database(operation)
    console.print(f"[green]✓ Updated book {book.id}: {book.title}[/green]")


@app.command("delete")
@command_error_handler
def delete_book(
    book_id: Annotated[int, typer.Argument(help="Book id")],
) -> None:
    """Delete a book."""

    async def operation(database: Database) -> None:
        await BookService(database).delete(book_id)

    run_with_database(operation)
    console.print(f"[green]✓ Deleted book {book_id}[/green]")


@app.command("export")
@command_error_handler
def export_books(
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the CSV here instead of stdout"),
    ] = None,
    title: TitleFilter = None,
    authors: AuthorsFilter = None,
    owner: OwnerFilter = None,
    holder: HolderFilter = None,
) -> None:
    """Export books matching the filters as CSV."""
    book_filter = _book_filter(title, authors, owner, holder)

    if output is None:

        async def render(database: Database) -> bytes:
            return await ExportService(database).export_books(book_filter)

        payload = run_with_database(render)
        typer.echo(payload.decode("utf-8"), nl=False)
        return

    async def write(database: Database) -> int:
        return await ExportService(database).write_books(output, book_filter)

    row_count = run_with_database(write)
    console.print(f"[green]✓ Exported {row_count} book(s) to {output}[/green]")
