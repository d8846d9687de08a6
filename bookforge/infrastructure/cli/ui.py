"""UI helpers for CLI interaction.

This module provides reusable UI components and helpers for the CLI,
keeping the presentation logic separate from business logic.
"""

from collections.abc import Callable
import functools
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.table import Table
import typer

from bookforge.application.services.export_service import user_cell
from bookforge.config import get_logger
from bookforge.domain.entities import Book, PaginatedBooks, User
from bookforge.domain.exceptions import NotFound

# Initialize console and logger
console = Console()
logger = get_logger(__name__)

# Type variables for command handler decorator
P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    This decorator wraps a command function to:
    - report a missing book or user as a red "not found" line
    - log any other error with its traceback and show a short message
    - exit with code 1 on every failure

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with integrated error handling
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        # Get operation name from function name for logging context
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                # Let typer.Exit propagate to Typer - it's already being handled
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except NotFound as e:
                logger.info(f"{operation}: {e}")
                console.print(f"[bold red]✗ Not found:[/bold red] {e}")
                raise typer.Exit(code=1) from e

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def users_table(users: list[User], title: str = "Users") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")

    for user in users:
        table.add_row(str(user.id), user.name)
    return table


def books_table(books: list[Book], users: dict[int, User], title: str = "Books") -> Table:
    """Book listing with owner and holder resolved to user labels."""
    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Title", style="green")
    table.add_column("Author(s)", style="cyan")
    table.add_column("Owner")
    table.add_column("Holder", style="yellow")

    for book in books:
        table.add_row(
            str(book.id),
            book.title,
            book.authors,
            user_cell(book.owner_id, users),
            user_cell(book.current_holder_id, users),
        )
    return table


def book_details(book: Book, users: dict[int, User]) -> Table:
    table = Table(title=f"Book {book.id}", show_header=False)
    table.add_column(style="cyan")
    table.add_column()

    table.add_row("Title", book.title)
    table.add_row("Author(s)", book.authors)
    table.add_row("Description", book.description or "")
    table.add_row("Owner", user_cell(book.owner_id, users))
    table.add_row("Current Holder", user_cell(book.current_holder_id, users))
    table.add_row("Comment", book.comment or "")
    return table


def display_book_page(page: PaginatedBooks, users: dict[int, User]) -> None:
    """Print one page of books followed by the page position."""
    if not page.books:
        console.print("[yellow]No books found[/yellow]")
    else:
        console.print(books_table(page.books, users))
    position = f"Page {page.current_page} of {page.total_pages}"
    if page.has_previous:
        position += f" | previous: --page {page.current_page - 1}"
    if page.has_next:
        position += f" | next: --page {page.current_page + 1}"
    console.print(f"[dim]{position}[/dim]")


def book_user_ids(books: list[Book]) -> list[int]:
    """Every owner and holder id referenced by ``books``."""
    ids = {book.owner_id for book in books}
    ids.update(book.current_holder_id for book in books if book.is_checked_out)
    return sorted(ids)
