"""Lending library domain entities.

Pure representations of books and users with zero infrastructure dependencies.
"""

from attrs import define, field, validators

# Ids are stored in signed 64-bit INTEGER columns
MAX_ROW_ID = 2**63 - 1


@define(frozen=True, slots=True)
class User:
    """A library member who can own and hold books."""

    id: int = field(validator=validators.instance_of(int))
    name: str = field(validator=validators.instance_of(str))

    @property
    def label(self) -> str:
        """Display label used in listings and exports."""
        return f"{self.name} (id: {self.id})"


@define(frozen=True, slots=True)
class Book:
    """Immutable book record.

    A book always has exactly one owner. ``current_holder_id`` is None while
    the book sits on its owner's shelf and set to the borrowing user's id
    while it is checked out (the holder may be the owner).
    """

    id: int = field(validator=validators.instance_of(int))
    title: str = field(validator=validators.instance_of(str))
    authors: str = field(validator=validators.instance_of(str))
    owner_id: int = field(validator=validators.instance_of(int))
    description: str | None = field(default=None)
    comment: str | None = field(default=None)
    current_holder_id: int | None = field(default=None)

    @property
    def is_checked_out(self) -> bool:
        return self.current_holder_id is not None
