"""Row rendering for the CSV export."""

from bookforge.application.services.export_service import (
    CSV_COLUMNS,
    MISSING_USER,
    books_frame,
    user_cell,
)
from bookforge.domain.entities import Book, User

ALICE = User(id=1, name="Alice")


def test_user_cell_resolves_label():
    assert user_cell(1, {1: ALICE}) == "Alice (id: 1)"


def test_user_cell_without_reference():
    assert user_cell(None, {1: ALICE}) == MISSING_USER == "-"


def test_user_cell_with_unknown_user():
    assert user_cell(99, {1: ALICE}) == "-"


def test_books_frame_columns_and_cells():
    books = [
        Book(
            id=2,
            title="Into the Woods",
            authors="Ann Example",
            owner_id=1,
            current_holder_id=99,
        ),
        Book(
            id=1,
            title="Emma",
            authors="Jane Austen",
            owner_id=1,
            description="Classic",
            comment="Signed",
        ),
    ]

    frame = books_frame(books, {1: ALICE})

    assert list(frame.columns) == CSV_COLUMNS
    assert list(frame["ID"]) == [2, 1]
    assert list(frame["Owner"]) == ["Alice (id: 1)", "Alice (id: 1)"]
    # Holder 99 does not exist, book 1 has no holder
    assert list(frame["Current Holder"]) == ["-", "-"]
    assert frame.loc[1, "Description"] == "Classic"


def test_books_frame_empty_keeps_header():
    frame = books_frame([], {})

    assert frame.empty
    assert list(frame.columns) == CSV_COLUMNS
