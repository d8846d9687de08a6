"""SQLAlchemy database models for the BookForge lending library.

Two tables: ``user`` and ``book``. ``book.owner_id`` and
``book.current_holder_id`` reference ``user.id``; no ON DELETE action is
declared, cascading on user removal is handled by the user service.
"""

from sqlalchemy import ForeignKey, MetaData, String, Text
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from bookforge.config import get_logger

logger = get_logger(__name__)

# Define naming convention for constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


class BookForgeDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for all database models."""

    metadata = metadata

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


class DBUser(BookForgeDBBase):
    """Library member."""

    __tablename__ = "user"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class DBBook(BookForgeDBBase):
    """Book owned by a user and optionally held by another."""

    __tablename__ = "book"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    authors: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    comment: Mapped[str | None] = mapped_column(Text)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("user.id"), nullable=False, index=True
    )
    current_holder_id: Mapped[int | None] = mapped_column(
        ForeignKey("user.id"), nullable=True, index=True
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet.

    Safe to run repeatedly; existing tables and data are left untouched.
    """
    from sqlalchemy import inspect

    try:
        async with engine.connect() as conn:
            existing_tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
            if existing_tables:
                logger.debug(f"Found existing tables: {existing_tables}")

        async with engine.begin() as conn:
            await conn.run_sync(BookForgeDBBase.metadata.create_all)

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
    else:
        logger.debug("Database schema initialization complete")
