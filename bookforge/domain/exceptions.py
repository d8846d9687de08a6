"""Domain error kinds surfaced by the service layer.

Callers are expected to handle ``NotFound`` (e.g. render a 404) and treat
``StoreFailure`` and ``ExportFailure`` as operational errors.
"""

from typing import Literal

EntityName = Literal["book", "user"]


class BookForgeError(Exception):
    """Base class for all BookForge errors."""


class StoreFailure(BookForgeError):
    """Any persistence error: connectivity, constraint violation, serialization."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Database error during {operation}")


class NotFound(BookForgeError):
    """Lookup, update or delete targeted a row that does not exist."""

    def __init__(self, entity: EntityName, id: int) -> None:  # noqa: A002
        self.entity = entity
        self.id = id
        super().__init__(f"{entity.capitalize()} with id {id} not found")


class ExportFailure(BookForgeError):
    """Producing the CSV byte stream failed."""


class InvalidForm(BookForgeError, ValueError):
    """Input form rejected at the service boundary."""
