"""BookForge CLI - Main application entry point and app structure."""

from typing import Annotated

from rich.console import Console
import typer

from bookforge import __version__
from bookforge.config import get_logger, log_startup_info, setup_loguru_logger
from bookforge.infrastructure.cli import book_commands, user_commands
from bookforge.infrastructure.cli.async_helpers import run_with_database
from bookforge.infrastructure.cli.ui import command_error_handler
from bookforge.infrastructure.persistence.database.db_connection import Database

console = Console(width=80)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"📚 BookForge v{__version__} - Lending library for friends",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)

app.add_typer(
    user_commands.app,
    name="users",
    help="Manage library members",
    rich_help_panel="📖 Library",
)
app.add_typer(
    book_commands.app,
    name="books",
    help="Manage books",
    rich_help_panel="📖 Library",
)


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(
        f"[bold bright_blue]📚 BookForge[/bold bright_blue] [dim]v{__version__}[/dim]"
    )


@app.command(name="init-db", rich_help_panel="⚙️ System")
@command_error_handler
def init_db_command() -> None:
    """Create the book and user tables if they do not exist."""

    async def operation(database: Database) -> str:
        await database.create_schema()
        return database.engine.url.render_as_string(hide_password=True)

    url = run_with_database(operation)
    console.print(f"[green]✓ Database ready:[/green] {url}")


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize BookForge CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)
    if verbose:
        log_startup_info()


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
