from typing import Type, TypeVar, Dict
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.repositories.base_repository import BaseRepositoryInterface, BaseRepository
from infrastructure.utils.logging_config import logger

# --- Import Domain Entities ---
from features.users.domain.entities.user import User as UserEntity

# --- Import Concrete Repository Implementations ---
from infrastructure.repositories.user_repository import UserRepository


EntityType = TypeVar('EntityType', bound=BaseModel)

# Maps Domain Entity Type -> Concrete Repository Implementation Class
_repository_map: Dict[Type[BaseModel], Type[BaseRepository]] = {
    UserEntity: UserRepository,
}


class RepositoryFactoryError(ValueError):
    """Custom exception for repository factory errors."""
    pass


def get_repository(entity_type: Type[EntityType], db_session: AsyncSession) -> BaseRepositoryInterface:
    """
    Factory function to get a repository instance for a given domain entity type.

    Args:
        entity_type: The domain entity class (e.g., UserEntity).
        db_session: The SQLAlchemy async session to inject.

    Returns:
        An instance of the concrete repository implementation for the entity type.

    Raises:
        RepositoryFactoryError: If no repository mapping is registered.
    """
    repo_class = _repository_map.get(entity_type)

    if repo_class is None:
        registered_keys = [k.__name__ for k in _repository_map.keys()]
        logger.error(f"No repository implementation registered for entity type: {entity_type.__name__}")
        raise RepositoryFactoryError(
            f"Repository implementation not found for {entity_type.__name__}. "
            f"Registered types: {registered_keys}."
        )

    instance = repo_class(db_session)
    logger.debug(f"Instantiated repository: {repo_class.__name__} for {entity_type.__name__}")
    return instance
