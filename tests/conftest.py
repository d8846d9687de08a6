"""Shared fixtures: a fresh in-memory database per test and the services on it."""

import pytest

from bookforge.application.services import BookService, ExportService, UserService
from bookforge.domain.entities import BookForm, UserForm
from bookforge.infrastructure.persistence.database.db_connection import Database

MEMORY_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def database():
    """In-memory database with the schema created; disposed after the test."""
    db = Database.from_url(MEMORY_URL)
    try:
        await db.create_schema()
    except Exception as e:
        pytest.fail(f"Database initialization failed: {e}")
    yield db
    await db.dispose()


@pytest.fixture
def book_service(database):
    return BookService(database)


@pytest.fixture
def user_service(database, book_service):
    return UserService(database, book_service)


@pytest.fixture
def export_service(database, book_service, user_service):
    return ExportService(database, book_service, user_service)


@pytest.fixture
def make_user(user_service):
    """Factory creating a user by name."""

    async def _make_user(name: str):
        return await user_service.create(UserForm(name=name))

    return _make_user


@pytest.fixture
def make_book(book_service):
    """Factory creating a book; only owner is required."""

    async def _make_book(
        owner_id: int,
        title: str = "Untitled",
        authors: str = "Anonymous",
        **optional,
    ):
        form = BookForm(title=title, authors=authors, owner_id=owner_id, **optional)
        return await book_service.create(form)

    return _make_book
