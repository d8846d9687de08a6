"""Commit/rollback behaviour of DatabaseUnitOfWork against a mocked session."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from bookforge.domain.exceptions import StoreFailure
from bookforge.infrastructure.persistence.repositories.book import BookRepository
from bookforge.infrastructure.persistence.repositories.user import UserRepository
from bookforge.infrastructure.persistence.unit_of_work import DatabaseUnitOfWork


@pytest.fixture
def session():
    return AsyncMock()


class TestDatabaseUnitOfWork:
    async def test_commits_on_success(self, session):
        async with DatabaseUnitOfWork(session):
            pass

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    async def test_rolls_back_on_error(self, session):
        with pytest.raises(ValueError):
            async with DatabaseUnitOfWork(session):
                raise ValueError("fail mid-transaction")

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    async def test_rolls_back_on_cancellation(self, session):
        with pytest.raises(asyncio.CancelledError):
            async with DatabaseUnitOfWork(session):
                raise asyncio.CancelledError

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    async def test_explicit_commit_is_not_repeated(self, session):
        async with DatabaseUnitOfWork(session) as uow:
            await uow.commit()

        session.commit.assert_awaited_once()

    async def test_commit_failure_raises_store_failure(self, session):
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with pytest.raises(StoreFailure) as exc_info:
            async with DatabaseUnitOfWork(session):
                pass

        assert exc_info.value.operation == "commit"

    def test_repositories_share_the_session(self, session):
        uow = DatabaseUnitOfWork(session)

        books = uow.get_book_repository()
        users = uow.get_user_repository()

        assert isinstance(books, BookRepository)
        assert isinstance(users, UserRepository)
        assert books.session is session
        assert users.session is session
