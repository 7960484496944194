"""
Base service layering validation, error normalization and search on top
of a repository.

Architecture:
    Host (router / gRPC handler) → Service → Repository → Model

Every public coroutine raises only InvalidArgumentError, NotFoundError or
InternalError.

Usage:
    from crudkit.services import BaseService

    class UserSchema(BaseModel):
        name: str = Field(min_length=1, max_length=100)
        email: EmailStr

    class UserService(BaseService[User]):
        validation_schema = UserSchema

        def __init__(self, db: AsyncSession):
            super().__init__(BaseRepository(User, db), entity_name="User")

        async def _before_save(self, entity: User) -> User:
            entity.email = entity.email.lower()
            return entity

    users = await UserService(db).search(10, [{"field": "name", "value": "bob"}])
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from crudkit.config.constants import Messages
from crudkit.config.logging import get_logger
from crudkit.config.settings import get_settings
from crudkit.models.base import Base
from crudkit.repositories.base import BaseRepository
from crudkit.repositories.filters import FindOptions, QueryFilterOptions
from crudkit.services.search import SearchTermInput, get_search_filter
from crudkit.utils.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    normalize_errors,
)
from crudkit.utils.metadata import Metadata

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class BaseService(Generic[ModelT]):
    """
    Base service for entities with CRUD operations.

    Subclasses set `validation_schema` (a pydantic model read with
    from_attributes) and may override the lifecycle hooks:

    - _validate(entity): extra (field, message) failures
    - _before_save(entity), _before_update(entity_id, entity),
      _before_delete(entity): run before the repository write
    - _before_result(entity): run on every entity handed back to the caller
    """

    validation_schema: type[BaseModel] | None = None

    def __init__(
        self,
        repository: BaseRepository[ModelT],
        *,
        validation_schema: type[BaseModel] | None = None,
        entity_name: str | None = None,
    ):
        self._repository = repository
        if validation_schema is not None:
            self.validation_schema = validation_schema
        self._entity_name = entity_name or type(self).__name__.removesuffix("Service")

    @property
    def repository(self) -> BaseRepository[ModelT]:
        """Repository for data access."""
        return self._repository

    @property
    def entity_name(self) -> str:
        """Entity name used in log messages."""
        return self._entity_name

    # =========================================================================
    # Validation
    # =========================================================================

    def valid_id(self, entity_id: Any) -> bool:
        """True iff entity_id is an integer greater than 0."""
        return (
            entity_id is not None
            and isinstance(entity_id, int)
            and not isinstance(entity_id, bool)
            and entity_id > 0
        )

    async def is_valid(self, entity: ModelT) -> bool:
        """
        Validate entity against the schema and the _validate hook.

        Returns:
            True when the entity is valid.

        Raises:
            InvalidArgumentError: With one metadata entry per failing field,
                or a generic message if validation itself broke.
        """
        try:
            failures = self._schema_failures(entity) + list(self._validate(entity))
            if failures:
                metadata = Metadata()
                for field_name, message in failures:
                    # First message per field wins
                    if field_name not in metadata:
                        metadata.add(field_name, message or Messages.UNKNOWN_ERROR)
                raise InvalidArgumentError(
                    Messages.VALIDATION_FAILED,
                    metadata,
                    entity=self._entity_name,
                )
            return True
        except ServiceError:
            raise
        except Exception as e:
            raise InvalidArgumentError(f"{Messages.UNABLE_TO_VALIDATE}: {e}") from e

    def _schema_failures(self, entity: ModelT) -> list[tuple[str, str]]:
        if self.validation_schema is None:
            return []
        try:
            self.validation_schema.model_validate(entity, from_attributes=True)
        except ValidationError as e:
            return [
                (str(error["loc"][0]) if error["loc"] else "entity", error["msg"])
                for error in e.errors()
            ]
        return []

    def _validate(self, entity: ModelT) -> Sequence[tuple[str, str]]:
        """
        Extra validation rules.

        Override to return (field, message) pairs for rules the schema
        cannot express.
        """
        return ()

    # =========================================================================
    # Lifecycle hooks (override in subclasses)
    # =========================================================================

    async def _before_save(self, entity: ModelT) -> ModelT:
        return entity

    async def _before_update(self, entity_id: int, entity: ModelT) -> ModelT:
        return entity

    async def _before_delete(self, entity: ModelT) -> None:
        pass

    async def _before_result(self, entity: ModelT) -> ModelT:
        """Hook applied to every entity returned to the caller."""
        return entity

    async def _results(self, entities: Sequence[ModelT]) -> list[ModelT]:
        return [await self._before_result(entity) for entity in entities]

    # =========================================================================
    # Read operations
    # =========================================================================

    @normalize_errors
    async def find_all(self) -> list[ModelT]:
        entities = await self._repository.get_all()
        logger.debug(f"Found {len(entities)} {self._entity_name} entities")
        return await self._results(entities)

    @normalize_errors
    async def find_all_by_filter(self, filter: FindOptions) -> list[ModelT]:
        entities = await self._repository.find_many_by_filter(filter)
        logger.debug(
            f"Found {len(entities)} {self._entity_name} entities by filter",
            limit=filter.limit,
            offset=filter.offset,
        )
        return await self._results(entities)

    @normalize_errors
    async def find_one_by_id(self, entity_id: int) -> ModelT:
        """
        Raises:
            InvalidArgumentError: If entity_id is not a positive integer.
            InternalError: If the repository fails, missing rows included.
        """
        if not self.valid_id(entity_id):
            raise InvalidArgumentError(Messages.INVALID_PARAMETERS, entity_id=entity_id)
        entity = await self._repository.find_one_by_id(entity_id)
        logger.debug(f"Found {self._entity_name}", entity_id=entity_id)
        return await self._before_result(entity)

    @normalize_errors
    async def find_one_by_filter(self, filter: FindOptions) -> ModelT:
        entity = await self._repository.find_one_by_filter(filter)
        logger.debug(f"Found {self._entity_name} by filter", entity_id=getattr(entity, "id", None))
        return await self._before_result(entity)

    @normalize_errors
    async def find_one_with_query_builder(self, options: QueryFilterOptions) -> ModelT:
        """
        Raises:
            NotFoundError: If no entity matches.
        """
        entity = await self._repository.find_one_with_query_builder(options)
        if entity is None:
            raise NotFoundError(Messages.NOT_FOUND, entity=self._entity_name, where=options.where)
        logger.debug(f"Found {self._entity_name} with query builder", where=options.where)
        return await self._before_result(entity)

    @normalize_errors
    async def find_many_with_query_builder(self, options: QueryFilterOptions) -> list[ModelT]:
        entities = await self._repository.find_many_with_query_builder(options)
        logger.debug(
            f"Found {len(entities)} {self._entity_name} entities with query builder",
            where=options.where,
            and_where=options.and_where,
            limit=options.limit,
        )
        return await self._results(entities)

    @normalize_errors
    async def search(
        self, limit: int | None, search_terms: Sequence[SearchTermInput]
    ) -> list[ModelT]:
        """
        Compile search terms and run them through the query builder.

        A limit of None falls back to settings.default_search_limit.
        """
        if limit is None:
            limit = get_settings().default_search_limit
        options = self.get_search_filter(limit, search_terms)
        logger.debug(f"Searching {self._entity_name}", terms=len(options.clauses()), limit=limit)
        return await self.find_many_with_query_builder(options)

    def get_search_filter(
        self, limit: int, search_terms: Sequence[SearchTermInput]
    ) -> QueryFilterOptions:
        return get_search_filter(limit, search_terms)

    # =========================================================================
    # Write operations
    # =========================================================================

    @normalize_errors
    async def save(self, entity: ModelT) -> ModelT:
        """
        Validate then persist entity.

        Raises:
            InvalidArgumentError: If validation fails.
        """
        await self.is_valid(entity)
        entity = await self._before_save(entity)
        saved = await self._repository.save(entity)
        logger.debug(f"Saved {self._entity_name}", entity_id=getattr(saved, "id", None))
        return await self._before_result(saved)

    @normalize_errors
    async def save_all(self, entities: Sequence[ModelT]) -> list[ModelT]:
        """
        Validate every entity, then persist them in one batch.

        Nothing is written if any entity is invalid. A backend failure
        during the batch is not rolled back here.
        """
        for entity in entities:
            await self.is_valid(entity)
        prepared = [await self._before_save(entity) for entity in entities]
        saved = await self._repository.save_all(prepared)
        logger.debug(f"Saved {len(saved)} {self._entity_name} entities")
        return await self._results(saved)

    @normalize_errors
    async def update(self, entity: ModelT, entity_id: int) -> ModelT:
        """
        Validate entity and id, then update the row with that id.

        Raises:
            InvalidArgumentError: If the entity or the id is invalid.
        """
        await self.is_valid(entity)
        if not self.valid_id(entity_id):
            raise InvalidArgumentError(Messages.INVALID_PARAMETERS, entity_id=entity_id)
        entity = await self._before_update(entity_id, entity)
        updated = await self._repository.update_one_by_id(entity_id, entity)
        logger.debug(f"Updated {self._entity_name}", entity_id=entity_id)
        return await self._before_result(updated)

    @normalize_errors
    async def delete(self, entity_id: int) -> ModelT:
        """
        Delete the entity with that id.

        Returns:
            The entity as it was before deletion.

        Raises:
            InvalidArgumentError: If entity_id is invalid.
            InternalError: If the entity does not exist or the delete fails.
        """
        if not self.valid_id(entity_id):
            raise InvalidArgumentError(Messages.INVALID_PARAMETERS, entity_id=entity_id)
        entity = await self._repository.find_one_by_id(entity_id)
        await self._before_delete(entity)
        await self._repository.delete(entity)
        logger.debug(f"Deleted {self._entity_name}", entity_id=entity_id)
        return await self._before_result(entity)
