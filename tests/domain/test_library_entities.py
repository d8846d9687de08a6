"""Book and User records and the error types raised around them."""

import attrs
import pytest

from bookforge.domain.entities import Book, User
from bookforge.domain.exceptions import (
    BookForgeError,
    ExportFailure,
    NotFound,
    StoreFailure,
)


def test_user_label():
    assert User(id=3, name="Alice").label == "Alice (id: 3)"


def test_records_are_immutable():
    user = User(id=1, name="Alice")
    with pytest.raises(attrs.exceptions.FrozenInstanceError):
        user.name = "Bob"  # type: ignore[misc]


def test_book_checkout_state():
    shelved = Book(id=1, title="Emma", authors="Jane Austen", owner_id=1)
    lent = attrs.evolve(shelved, current_holder_id=2)

    assert not shelved.is_checked_out
    assert lent.is_checked_out


class TestExceptions:
    def test_not_found_message_and_fields(self):
        error = NotFound("book", 12)

        assert str(error) == "Book with id 12 not found"
        assert error.entity == "book"
        assert error.id == 12

    def test_user_not_found_message(self):
        assert str(NotFound("user", 4)) == "User with id 4 not found"

    def test_store_failure_default_message(self):
        error = StoreFailure("create_book")
        assert error.operation == "create_book"
        assert "create_book" in str(error)

    @pytest.mark.parametrize(
        "error", [NotFound("user", 1), StoreFailure("x"), ExportFailure("boom")]
    )
    def test_all_errors_share_a_base(self, error):
        assert isinstance(error, BookForgeError)
