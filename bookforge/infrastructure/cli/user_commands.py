"""User management commands."""

from typing import Annotated

import typer

from bookforge.application.services import BookService, UserService
from bookforge.domain.entities import User, UserFilter, UserForm
from bookforge.infrastructure.cli.async_helpers import run_with_database
from bookforge.infrastructure.cli.ui import command_error_handler, console, users_table
from bookforge.infrastructure.persistence.database.db_connection import Database

app = typer.Typer(help="Manage library members", no_args_is_help=True)


@app.command("list")
@command_error_handler
def list_users(
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Only users whose name contains this text"),
    ] = None,
) -> None:
    """List users in id order."""
    user_filter = UserFilter(name=name)

    async def operation(database: Database) -> list[User]:
        return await UserService(database).list(user_filter)

    users = run_with_database(operation)
    if not users:
        console.print("[yellow]No users found[/yellow]")
        return
    console.print(users_table(users))


@app.command("show")
@command_error_handler
def show_user(
    user_id: Annotated[int, typer.Argument(help="User id")],
) -> None:
    """Show a user with the number of books they own and hold."""

    async def operation(database: Database) -> tuple[User, int, int]:
        books = BookService(database)
        user = await UserService(database, books).find_by_id(user_id)
        owned = await books.find_all_by_owner(user_id)
        held = await books.find_all_by_holder(user_id)
        return user, len(owned), len(held)

    user, owned_count, held_count = run_with_database(operation)
    console.print(f"[bold cyan]{user.label}[/bold cyan]")
    console.print(f"Owns {owned_count} book(s), holds {held_count} book(s)")


@app.command("add")
@command_error_handler
def add_user(
    name: Annotated[str, typer.Argument(help="Display name")],
) -> None:
    """Create a user."""
    form = UserForm(name=name)

    async def operation(database: Database) -> User:
        return await UserService(database).create(form)

    user = run_with_database(operation)
    console.print(f"[green]✓ Created user {user.label}[/green]")


@app.command("rename")
@command_error_handler
def rename_user(
    user_id: Annotated[int, typer.Argument(help="User id")],
    name: Annotated[str, typer.Argument(help="New display name")],
) -> None:
    """Replace a user's name."""
    form = UserForm(name=name)

    async def operation(database: Database) -> User:
        return await UserService(database).update(user_id, form)

    user = run_with_database(operation)
    console.print(f"[green]✓ Renamed user {user.label}[/green]")


@app.command("delete")
@command_error_handler
def delete_user(
    user_id: Annotated[int, typer.Argument(help="User id")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")
    ] = False,
) -> None:
    """Delete a user, their books, and return the books they hold."""
    if not yes:
        typer.confirm(
            f"Delete user {user_id}, every book they own, and return the books "
            "they hold to their owners?",
            abort=True,
        )

    async def operation(database: Database) -> None:
        await UserService(database).delete(user_id)

    run_with_database(operation)
    console.print(f"[green]✓ Deleted user {user_id}[/green]")
