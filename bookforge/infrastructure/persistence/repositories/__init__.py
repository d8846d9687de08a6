"""Repository layer for database operations with SQLAlchemy 2.0."""

# Re-export core components
from bookforge.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    ModelMapper,
    contains,
)
from bookforge.infrastructure.persistence.repositories.book import (
    BookMapper,
    BookRepository,
)
from bookforge.infrastructure.persistence.repositories.repo_decorator import db_operation
from bookforge.infrastructure.persistence.repositories.user import (
    UserMapper,
    UserRepository,
)

# Define public API
__all__ = [
    "BaseModelMapper",
    "BaseRepository",
    "BookMapper",
    "BookRepository",
    "ModelMapper",
    "UserMapper",
    "UserRepository",
    "contains",
    "db_operation",
]
