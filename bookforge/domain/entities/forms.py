"""Input forms and filters accepted by the service layer.

Every form validates itself on construction, so an invalid form never
reaches the store.
"""

from typing import TYPE_CHECKING, Any

from attrs import define, evolve, field

from bookforge.domain.entities.library import MAX_ROW_ID
from bookforge.domain.exceptions import InvalidForm

if TYPE_CHECKING:
    from bookforge.domain.entities.library import Book


def _required_text(instance: Any, attribute: Any, value: Any) -> None:
    if not isinstance(value, str):
        raise InvalidForm(f"{attribute.name} must be a string")
    if not value.strip():
        raise InvalidForm(f"{attribute.name} must not be empty")


def _optional_text(instance: Any, attribute: Any, value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise InvalidForm(f"{attribute.name} must be a string")


def _user_id(instance: Any, attribute: Any, value: Any) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidForm(f"{attribute.name} must be a positive integer, got {value!r}")
    if value > MAX_ROW_ID:
        raise InvalidForm(f"{attribute.name} is out of range, got {value!r}")


def _optional_user_id(instance: Any, attribute: Any, value: Any) -> None:
    if value is not None:
        _user_id(instance, attribute, value)


@define(frozen=True, slots=True)
class BookForm:
    """Full set of writable book fields.

    Used for both create and update; an update replaces every field, so an
    omitted optional field clears the stored value.
    """

    title: str = field(validator=_required_text)
    authors: str = field(validator=_required_text)
    owner_id: int = field(validator=_user_id)
    description: str | None = field(default=None, validator=_optional_text)
    comment: str | None = field(default=None, validator=_optional_text)
    current_holder_id: int | None = field(default=None, validator=_optional_user_id)

    @classmethod
    def from_book(cls, book: "Book") -> "BookForm":
        """Build a form carrying every current value of ``book``."""
        return cls(
            title=book.title,
            authors=book.authors,
            owner_id=book.owner_id,
            description=book.description,
            comment=book.comment,
            current_holder_id=book.current_holder_id,
        )

    def returned_to_shelf(self) -> "BookForm":
        """Copy of this form with the checkout cleared."""
        return evolve(self, current_holder_id=None)


@define(frozen=True, slots=True)
class UserForm:
    """Writable user fields."""

    name: str = field(validator=_required_text)


@define(frozen=True, slots=True)
class BookFilter:
    """Optional predicates for book listings, combined with logical AND.

    ``title`` and ``authors`` are case-sensitive substring matches;
    ``owner_id`` and ``current_holder_id`` are exact matches.
    """

    title: str | None = field(default=None, validator=_optional_text)
    authors: str | None = field(default=None, validator=_optional_text)
    owner_id: int | None = field(default=None, validator=_optional_user_id)
    current_holder_id: int | None = field(default=None, validator=_optional_user_id)

    @property
    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.authors is None
            and self.owner_id is None
            and self.current_holder_id is None
        )


@define(frozen=True, slots=True)
class UserFilter:
    """Optional case-sensitive substring match on the user's name."""

    name: str | None = field(default=None, validator=_optional_text)
