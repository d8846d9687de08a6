"""Domain repository interfaces.

These interfaces define the contracts for data access without depending on
infrastructure implementations.
"""

from .interfaces import (
    BookRepositoryProtocol,
    UnitOfWorkFactory,
    UnitOfWorkProtocol,
    UserRepositoryProtocol,
)

__all__ = [
    "BookRepositoryProtocol",
    "UnitOfWorkFactory",
    "UnitOfWorkProtocol",
    "UserRepositoryProtocol",
]
