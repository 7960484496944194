"""
Generic async repository over a SQLAlchemy AsyncSession.

The repository performs no validation and no error translation: backend
exceptions and results pass through unchanged, and services decide what
they mean.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self, session: AsyncSession):
            super().__init__(User, session)

    repo = UserRepository(db)
    users = await repo.find_many_by_filter(FindOptions(where={"active": True}))
    user = await repo.find_one_by_id(42)
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, inspect, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.models.base import Base
from crudkit.repositories.filters import FindOptions, QueryFilterOptions

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository providing the CRUD surface consumed by BaseService.

    Writes are flushed, never committed.
    """

    def __init__(self, model: type[ModelT], session: AsyncSession):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> AsyncSession:
        """The database session."""
        return self._session

    # =========================================================================
    # Query construction
    # =========================================================================

    def _base_query(self) -> Select:
        """Create base select query."""
        return select(self._model)

    def _apply_find_options(self, query: Select, filter: FindOptions | None) -> Select:
        """Apply predicates, ordering, pagination and loader options."""
        if filter is None:
            return query

        for column_name, value in filter.where.items():
            query = query.where(getattr(self._model, column_name) == value)
        if filter.criteria:
            query = query.where(*filter.criteria)
        if filter.options:
            query = query.options(*filter.options)
        if filter.order_by:
            query = query.order_by(*filter.order_by)
        if filter.offset:
            query = query.offset(filter.offset)
        if filter.limit is not None:
            query = query.limit(filter.limit)
        return query

    def _apply_query_builder(self, query: Select, options: QueryFilterOptions) -> Select:
        """Apply compiled search clauses as raw SQL conjunctions."""
        for clause in options.clauses():
            # Compiled clauses never carry bind parameters, keep colons literal
            query = query.where(text(clause.replace(":", r"\:")))
        if options.limit:
            query = query.limit(options.limit)
        return query

    def _values_for_update(self, entity: ModelT) -> dict[str, Any]:
        """
        Column values set on the instance, primary key excluded.

        Attributes never assigned are skipped so a partially populated
        instance only updates the columns it carries.
        """
        values = {}
        for attr in inspect(self._model).column_attrs:
            if any(column.primary_key for column in attr.columns):
                continue
            if attr.key in entity.__dict__:
                values[attr.key] = entity.__dict__[attr.key]
        return values

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_all(self) -> list[ModelT]:
        """Every row of the table."""
        result = await self._session.scalars(self._base_query())
        return list(result.all())

    async def find_many_by_filter(self, filter: FindOptions) -> list[ModelT]:
        query = self._apply_find_options(self._base_query(), filter)
        result = await self._session.scalars(query)
        return list(result.unique().all())

    async def find_one_by_id(self, entity_id: int) -> ModelT:
        """
        Find entity by primary key.

        Raises:
            sqlalchemy.exc.NoResultFound: If no row has that id.
        """
        return await self._session.get_one(self._model, entity_id)

    async def find_one_by_filter(self, filter: FindOptions) -> ModelT:
        """
        First entity matching the filter.

        Raises:
            sqlalchemy.exc.NoResultFound: If nothing matches.
        """
        query = self._apply_find_options(self._base_query(), filter).limit(1)
        result = await self._session.scalars(query)
        return result.unique().one()

    async def find_one_with_query_builder(self, options: QueryFilterOptions) -> ModelT | None:
        """First entity matching the compiled clauses, or None."""
        query = self._apply_query_builder(self._base_query(), options)
        result = await self._session.scalars(query)
        return result.first()

    async def find_many_with_query_builder(self, options: QueryFilterOptions) -> list[ModelT]:
        query = self._apply_query_builder(self._base_query(), options)
        result = await self._session.scalars(query)
        return list(result.all())

    # =========================================================================
    # Writes
    # =========================================================================

    async def save(self, entity: ModelT) -> ModelT:
        """Insert or update entity and reload server-side values."""
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity

    async def save_all(self, entities: Sequence[ModelT]) -> list[ModelT]:
        """Insert or update entities in a single flush."""
        self._session.add_all(entities)
        await self._session.flush()
        return list(entities)

    async def update_one_by_id(self, entity_id: int, entity: ModelT) -> ModelT:
        """
        Update the row with the given id from the entity's column values.

        Raises:
            sqlalchemy.exc.NoResultFound: If no row has that id.
        """
        values = self._values_for_update(entity)
        if values:
            statement = (
                update(self._model)
                .where(self._model.id == entity_id)
                .values(**values)
                .execution_options(synchronize_session="fetch")
            )
            await self._session.execute(statement)
        return await self._session.get_one(self._model, entity_id, populate_existing=True)

    async def delete(self, entity: ModelT) -> None:
        await self._session.delete(entity)
        await self._session.flush()
