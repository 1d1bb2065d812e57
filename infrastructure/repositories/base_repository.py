from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Type, Optional, Any, Dict, Sequence
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from infrastructure.utils.logging_config import logger

# Type variable for the SQLAlchemy model (subclass of Base)
ModelType = TypeVar('ModelType')
# Type variable for the Pydantic domain entity (subclass of BaseModel)
EntityType = TypeVar('EntityType', bound=BaseModel)

# Fields storage assigns itself; never copied from an entity on insert
STORAGE_ASSIGNED_FIELDS = {'id', 'public_id', 'created_at', 'updated_at'}


# --- Base Repository Interface (Defines the contract) ---
class BaseRepositoryInterface(ABC, Generic[ModelType, EntityType]):
    """Defines the common interface for all repositories."""

    @property
    @abstractmethod
    def model_class(self) -> Type[ModelType]:
        """The SQLAlchemy model class associated with the repository."""
        raise NotImplementedError

    @property
    @abstractmethod
    def entity_class(self) -> Type[EntityType]: pass

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Finds an entity by its primary key."""
        raise NotImplementedError

    @abstractmethod
    async def get_all(self) -> Sequence[EntityType]:
        """Retrieves every entity ordered by primary key."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, entity: EntityType) -> EntityType:
        """Inserts a new entity and returns it with storage-assigned fields filled in."""
        raise NotImplementedError


# --- Concrete SQLAlchemy Base Repository Implementation ---
class BaseRepository(BaseRepositoryInterface[ModelType, EntityType]):
    """Core SQLAlchemy implementation over an AsyncSession."""

    def __init__(self, db_session: AsyncSession):
        self._db = db_session

    @property
    @abstractmethod
    def model_class(self) -> Type[ModelType]:
        raise NotImplementedError("Subclasses must define model_class property")

    @property
    @abstractmethod
    def entity_class(self) -> Type[EntityType]: raise NotImplementedError("Subclass must implement entity_class property")

    def _map_model_to_entity(self, model: Optional[ModelType]) -> Optional[EntityType]:
        if model is None: return None
        return self.entity_class.model_validate(model)

    def _map_models_to_entities(self, models: Sequence[ModelType]) -> Sequence[EntityType]:
        return [self.entity_class.model_validate(model) for model in models]

    async def _get_model_by(self, column: Any, value: Any) -> Optional[ModelType]:
        stmt = select(self.model_class).where(column == value)
        result = await self._db.execute(stmt)
        return result.scalars().first()

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        logger.debug(f"Getting {self.model_class.__name__} by ID: {entity_id}")
        model = await self._db.get(self.model_class, entity_id)
        return self._map_model_to_entity(model)

    async def get_all(self) -> Sequence[EntityType]:
        logger.debug(f"Getting all {self.model_class.__name__}")
        stmt = select(self.model_class).order_by(self.model_class.id)
        result = await self._db.execute(stmt)
        return self._map_models_to_entities(result.scalars().all())

    async def add(self, entity: EntityType) -> EntityType:
        logger.debug(f"Adding new {type(entity).__name__} entity.")
        model_data = entity.model_dump(exclude=STORAGE_ASSIGNED_FIELDS)
        db_model = self.model_class(**model_data)
        self._db.add(db_model)
        # Flush to send INSERT and get DB-generated values
        await self._db.flush()
        await self._db.refresh(db_model)
        mapped_entity = self._map_model_to_entity(db_model)
        logger.info(f"Added {self.model_class.__name__} ID: {mapped_entity.id}")
        return mapped_entity

    async def _update_by(self, column: Any, value: Any, patch: Dict[str, Any]) -> Optional[EntityType]:
        """Applies ``patch`` to the row matching ``column == value``; other columns are untouched."""
        db_model = await self._get_model_by(column, value)
        if db_model is None:
            logger.warning(f"Update failed: {self.model_class.__name__} {column.key}={value} not found.")
            return None

        for key, new_value in patch.items():
            if key in STORAGE_ASSIGNED_FIELDS or not hasattr(db_model, key):
                logger.warning(f"'{key}' is not updatable on {self.model_class.__name__}. Skipping.")
                continue
            setattr(db_model, key, new_value)
        db_model.updated_at = func.now()

        await self._db.flush()
        await self._db.refresh(db_model)
        logger.info(f"Updated {self.model_class.__name__} {column.key}={value}")
        return self._map_model_to_entity(db_model)

    async def _delete_by(self, column: Any, value: Any) -> int:
        """Deletes rows matching ``column == value`` and returns the affected row count."""
        result = await self._db.execute(delete(self.model_class).where(column == value))
        await self._db.flush()
        return result.rowcount or 0
