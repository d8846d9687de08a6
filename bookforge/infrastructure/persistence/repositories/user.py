"""User repository and mapper."""

from typing import ClassVar, override

from attrs import define
from sqlalchemy.ext.asyncio import AsyncSession

from bookforge.domain.entities import User, UserFilter, UserForm
from bookforge.domain.exceptions import EntityName
from bookforge.infrastructure.persistence.database.db_models import DBUser
from bookforge.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
    contains,
)
from bookforge.infrastructure.persistence.repositories.repo_decorator import (
    db_operation,
)


@define(frozen=True, slots=True)
class UserMapper(BaseModelMapper[DBUser, User]):
    """Bidirectional mapper between DB and domain models."""

    @staticmethod
    @override
    def to_domain(db_model: DBUser) -> User:
        return User(id=db_model.id, name=db_model.name)


class UserRepository(BaseRepository[DBUser, User]):
    """Repository for user operations."""

    entity_name: ClassVar[EntityName] = "user"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session and mapper."""
        super().__init__(session=session, model_class=DBUser, mapper=UserMapper())

    @db_operation("list_users")
    async def list_users(self, user_filter: UserFilter | None = None) -> list[User]:
        conditions = []
        if user_filter is not None and user_filter.name is not None:
            conditions.append(contains(DBUser.name, user_filter.name))
        return await self.find_by(conditions=conditions, order_by=("id", True))

    async def get_user(self, user_id: int) -> User:
        return await self.get_by_id(user_id)

    @db_operation("find_users_by_ids")
    async def find_users_by_ids(self, user_ids: list[int]) -> dict[int, User]:
        """Batch lookup keyed by id; unknown ids are left out."""
        users = await self.get_by_ids(sorted(set(user_ids)))
        return {user.id: user for user in users}

    @db_operation("create_user")
    async def create_user(self, form: UserForm) -> User:
        return await self.insert_values({"name": form.name})

    @db_operation("update_user")
    async def update_user(self, user_id: int, form: UserForm) -> User:
        return await self.replace_values(user_id, {"name": form.name})

    @db_operation("delete_user")
    async def delete_user(self, user_id: int) -> None:
        """Delete the user row; fails with StoreFailure while books still reference it."""
        await self.hard_delete(user_id)
