"""SQLAlchemy engine, session and unit-of-work handle.

This module is responsible for:
- Engine creation and SQLite connection configuration
- Session factory management
- Opening units of work for the service layer

A single ``Database`` is built at startup and passed to every service; there
is no module-level engine.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from bookforge.config import Settings, get_logger
from bookforge.infrastructure.persistence.database.db_models import init_db
from bookforge.infrastructure.persistence.unit_of_work import DatabaseUnitOfWork

logger = get_logger(__name__)


def _is_memory_url(db_url: str) -> bool:
    database = make_url(db_url).database
    return not database or database == ":memory:"


def create_db_engine(
    db_url: str,
    echo: bool = False,
    pool_timeout: int = 30,
    busy_timeout_ms: int = 30000,
) -> AsyncEngine:
    """Create async SQLAlchemy engine configured for SQLite.

    In-memory databases share one connection through ``StaticPool`` so every
    session sees the same data.
    """
    engine_kwargs: dict[str, Any] = {"echo": echo}

    is_sqlite = db_url.startswith("sqlite")
    in_memory = is_sqlite and _is_memory_url(db_url)

    if is_sqlite:
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": busy_timeout_ms / 1000,
        }
        if in_memory:
            engine_kwargs["poolclass"] = StaticPool
        else:
            database = make_url(db_url).database
            if database:
                Path(database).parent.mkdir(parents=True, exist_ok=True)
            engine_kwargs["pool_timeout"] = pool_timeout
            engine_kwargs["pool_pre_ping"] = True
    else:
        engine_kwargs["pool_timeout"] = pool_timeout
        engine_kwargs["pool_pre_ping"] = True

    engine = create_async_engine(db_url, **engine_kwargs)

    if is_sqlite:

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _):  # type: ignore # pragma: no cover
            """Set SQLite PRAGMAs on connection creation."""
            cursor = dbapi_connection.cursor()
            cursor.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)}")
            cursor.execute("PRAGMA foreign_keys = ON")  # Enforce book -> user references
            if not in_memory:
                cursor.execute("PRAGMA journal_mode = WAL")
                cursor.execute("PRAGMA synchronous = NORMAL")
            cursor.close()

    logger.debug("Created database engine", url=db_url, in_memory=in_memory)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory for the given engine."""
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Domain objects are mapped before commit anyway
        autoflush=True,
        autocommit=False,
    )


class Database:
    """Store handle: one engine plus its session factory.

    Construct once and inject into services.

    Example:
        ```python
        database = Database.from_settings(settings)
        await database.create_schema()
        books = BookService(database)
        ```
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = create_session_factory(engine)

    @classmethod
    def from_url(cls, db_url: str, **engine_options: Any) -> "Database":
        return cls(create_db_engine(db_url, **engine_options))

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "Database":
        db_config = app_settings.database
        return cls.from_url(
            db_config.url,
            echo=db_config.echo,
            pool_timeout=db_config.pool_timeout,
            busy_timeout_ms=db_config.busy_timeout_ms,
        )

    async def create_schema(self) -> None:
        """Create the ``user`` and ``book`` tables if missing."""
        await init_db(self.engine)

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncGenerator[DatabaseUnitOfWork]:
        """Open a unit of work on a fresh session.

        The session is closed when the block exits; the unit of work commits
        or rolls back before that.
        """
        session = self.session_factory()
        try:
            async with DatabaseUnitOfWork(session) as uow:
                yield uow
        finally:
            await session.close()

    async def dispose(self) -> None:
        """Release all pooled connections."""
        await self.engine.dispose()
