"""Repository layer for database operations with SQLAlchemy 2.0."""

from typing import Any, ClassVar, Protocol, TypeVar

from attrs import define
from sqlalchemy import Select, delete, false, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from bookforge.config import get_logger
from bookforge.domain.entities import MAX_ROW_ID
from bookforge.domain.exceptions import EntityName, NotFound
from bookforge.infrastructure.persistence.database.db_models import BookForgeDBBase
from bookforge.infrastructure.persistence.repositories.repo_decorator import (
    db_operation,
)

TDBModel = TypeVar("TDBModel", bound=BookForgeDBBase)
TDomainModel = TypeVar("TDomainModel")

logger = get_logger(__name__)

Conditions = dict[str, Any] | list[ColumnElement]

# -------------------------------------------------------------------------
# COMMON UTILITIES
# -------------------------------------------------------------------------


def contains(column: Any, needle: str) -> ColumnElement[bool]:
    """Case-sensitive substring predicate.

    SQLite's ``LIKE`` ignores ASCII case, ``instr`` compares bytes and treats
    ``%``/``_`` literally.
    """
    return func.instr(column, needle) > 0


def fits_integer_column(value: int) -> bool:
    """Whether ``value`` can be bound to a 64-bit INTEGER parameter."""
    return -MAX_ROW_ID - 1 <= value <= MAX_ROW_ID


def equals(column: Any, value: Any) -> ColumnElement[bool]:
    """Equality predicate that matches nothing for unstorable integers.

    sqlite3 refuses to bind an int outside the INTEGER range, and no stored
    row can hold one.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if not fits_integer_column(value):
            return false()
    return column == value


class ModelMapper[TDBModel: BookForgeDBBase, TDomainModel](Protocol):
    """Protocol for mapping database rows to domain models."""

    @staticmethod
    def to_domain(db_model: TDBModel) -> TDomainModel:
        """Convert database model to domain model."""
        ...

    @classmethod
    def map_collection(cls, db_models: list[TDBModel]) -> list[TDomainModel]:
        """Map a collection of DB models to domain models."""
        ...


@define(frozen=True, slots=True)
class BaseModelMapper[TDBModel: BookForgeDBBase, TDomainModel]:
    """Base implementation of ModelMapper.

    Usage:
        @define(frozen=True, slots=True)
        class UserMapper(BaseModelMapper[DBUser, User]):
            @staticmethod
            def to_domain(db_model: DBUser) -> User:
                return User(id=db_model.id, name=db_model.name)
    """

    @staticmethod
    def to_domain(db_model: TDBModel) -> TDomainModel:
        raise NotImplementedError("Subclasses must implement to_domain")

    @classmethod
    def map_collection(cls, db_models: list[TDBModel]) -> list[TDomainModel]:
        """Map a collection of DB models to domain models.

        Uses cls.to_domain so the subclass implementation is called.
        """
        return [cls.to_domain(db_model) for db_model in db_models]


class BaseRepository[TDBModel: BookForgeDBBase, TDomainModel]:
    """Base repository for database operations.

    Subclasses set ``entity_name`` so missing rows are reported as
    ``NotFound(entity_name, id)``.
    """

    entity_name: ClassVar[EntityName]

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[TDBModel],
        mapper: ModelMapper[TDBModel, TDomainModel],
    ) -> None:
        """Initialize repository with session and model mappings."""
        self.session = session
        self.model_class = model_class
        self.mapper = mapper
        logger.trace(
            f"Initialized {self.__class__.__name__} for {model_class.__name__}",
        )

    # -------------------------------------------------------------------------
    # SELECT STATEMENT BUILDERS
    # -------------------------------------------------------------------------

    def select(self, *columns: Any) -> Select[tuple[Any, ...]]:
        """Create select statement for the model (or the given columns)."""
        return select(*columns) if columns else select(self.model_class)

    def select_by_id(self, id_: int) -> Select[tuple[TDBModel]]:
        """Create select statement for a record by ID."""
        return select(self.model_class).where(equals(self.model_class.id, id_))

    def select_by_ids(self, ids: list[int]) -> Select[tuple[TDBModel]]:
        """Create select statement for multiple records by ID."""
        ids = [id_ for id_ in ids if fits_integer_column(id_)]
        if not ids:
            return select(self.model_class).where(false())
        return select(self.model_class).where(self.model_class.id.in_(ids))

    def where(
        self, stmt: Select[tuple[Any, ...]], conditions: Conditions | None
    ) -> Select[tuple[Any, ...]]:
        """Apply equality (dict) or expression (list) conditions."""
        match conditions:
            case dict():
                for field, value in conditions.items():
                    stmt = stmt.where(equals(getattr(self.model_class, field), value))
            case list():
                for condition in conditions:
                    stmt = stmt.where(condition)
        return stmt

    def paginate(
        self, stmt: Select[tuple[TDBModel]], limit: int | None, offset: int = 0
    ) -> Select[tuple[TDBModel]]:
        """Add limit/offset to a select statement.

        An offset beyond the INTEGER range cannot be bound; no rows lie there.
        """
        if not fits_integer_column(offset):
            return stmt.where(false())
        if offset > 0:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    def order_by(
        self, stmt: Select[tuple[TDBModel]], field: str, ascending: bool = True
    ) -> Select[tuple[TDBModel]]:
        """Add ordering to a select statement."""
        order_col = getattr(self.model_class, field)
        return stmt.order_by(order_col if ascending else order_col.desc())

    def count(self, conditions: Conditions | None = None) -> Select:
        """Create a count statement for records matching conditions."""
        stmt = select(func.count(self.model_class.id))
        return self.where(stmt, conditions)

    # -------------------------------------------------------------------------
    # DIRECT DATABASE OPERATIONS (non-decorated helpers)
    # -------------------------------------------------------------------------

    async def _execute_query(self, stmt: Select[tuple[TDBModel]]) -> list[TDBModel]:
        """Execute a query and return all results directly."""
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _execute_scalar(self, stmt: Select) -> Any:
        """Execute a scalar query and return the first result."""
        return await self.session.scalar(stmt)

    async def _get_row(self, id_: int) -> TDBModel:
        """Fetch one row by primary key or raise ``NotFound``."""
        result = await self.session.execute(self.select_by_id(id_))
        db_entity = result.scalar_one_or_none()
        if db_entity is None:
            raise NotFound(self.entity_name, id_)
        return db_entity

    # -------------------------------------------------------------------------
    # DECORATED DATABASE OPERATIONS
    # -------------------------------------------------------------------------

    @db_operation("count_entities")
    async def count_entities(self, conditions: Conditions | None = None) -> int:
        """Count entities matching the given conditions."""
        count = await self._execute_scalar(self.count(conditions))
        return count or 0

    @db_operation("get_by_id")
    async def get_by_id(self, id_: int) -> TDomainModel:
        """Get entity by ID.

        Raises:
            NotFound: when no row has this id
        """
        return self.mapper.to_domain(await self._get_row(id_))

    @db_operation("get_by_ids")
    async def get_by_ids(self, ids: list[int]) -> list[TDomainModel]:
        """Get multiple entities by IDs; missing ids are skipped."""
        if not ids:
            return []
        db_entities = await self._execute_query(self.select_by_ids(ids))
        return self.mapper.map_collection(db_entities)

    @db_operation("find_by")
    async def find_by(
        self,
        conditions: Conditions | None = None,
        limit: int | None = None,
        offset: int = 0,
        order_by: tuple[str, bool] | None = None,
    ) -> list[TDomainModel]:
        """Find entities matching conditions."""
        stmt = self.where(self.select(), conditions)

        if order_by:
            field, ascending = order_by
            stmt = self.order_by(stmt, field, ascending)

        stmt = self.paginate(stmt, limit, offset)

        db_entities = await self._execute_query(stmt)
        return self.mapper.map_collection(db_entities)

    # -------------------------------------------------------------------------
    # CORE CRUD OPERATIONS
    # -------------------------------------------------------------------------

    @db_operation("insert_values")
    async def insert_values(self, values: dict[str, Any]) -> TDomainModel:
        """Insert one row and return it with its generated id."""
        db_entity = self.model_class(**values)
        self.session.add(db_entity)
        await self.session.flush()
        await self.session.refresh(db_entity)
        return self.mapper.to_domain(db_entity)

    @db_operation("replace_values")
    async def replace_values(self, id_: int, values: dict[str, Any]) -> TDomainModel:
        """Overwrite the given columns of an existing row.

        Raises:
            NotFound: when no row has this id
        """
        db_entity = await self._get_row(id_)
        for field, value in values.items():
            setattr(db_entity, field, value)
        await self.session.flush()
        return self.mapper.to_domain(db_entity)

    @db_operation("hard_delete")
    async def hard_delete(self, id_: int) -> int:
        """Delete a row.

        Raises:
            NotFound: when no row has this id
        """
        stmt = (
            delete(self.model_class)
            .where(equals(self.model_class.id, id_))
            .returning(self.model_class.id)
            .execution_options(synchronize_session=False)
        )

        result = await self.session.execute(stmt)
        deleted_ids = result.scalars().all()

        if not deleted_ids:
            raise NotFound(self.entity_name, id_)

        return len(deleted_ids)
