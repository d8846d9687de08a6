"""Async helpers for CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable

from bookforge.config import Settings, get_logger
from bookforge.infrastructure.persistence.database.db_connection import Database

logger = get_logger(__name__)


def run_with_database[R](operation: Callable[[Database], Awaitable[R]]) -> R:
    """Run ``operation`` against a database built for this invocation.

    Settings are re-read from the environment so ``DATABASE_URL`` can be
    changed between runs. The schema is created if missing and the engine is
    disposed afterwards.
    """

    async def _run() -> R:
        app_settings = Settings()
        logger.debug("Opening database for CLI command", url=app_settings.database.url)
        database = Database.from_settings(app_settings)
        try:
            await database.create_schema()
            return await operation(database)
        finally:
            await database.dispose()

    return asyncio.run(_run())
