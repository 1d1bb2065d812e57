from typing import Any, Dict, Optional, Type
from uuid import UUID

from features.users.domain.entities.user import User as UserEntity
from features.users.domain.errors import NoRowsAffectedError
from infrastructure.database.models.user_model import User as UserModel
from infrastructure.repositories.base_repository import BaseRepository
from infrastructure.utils.logging_config import logger


class UserRepository(BaseRepository[UserModel, UserEntity]):
    """Storage for users keyed by internal id, public UUID or username.

    Lookups return ``None`` when no row matches. Delete raises
    NoRowsAffectedError instead, so callers can tell it apart from a
    validation failure.
    """

    @property
    def model_class(self) -> Type[UserModel]:
        return UserModel

    @property
    def entity_class(self) -> Type[UserEntity]:
        return UserEntity

    async def get_by_username(self, username: str) -> Optional[UserEntity]:
        logger.debug(f"Getting user by username: {username}")
        model = await self._get_model_by(self.model_class.username, username)
        return self._map_model_to_entity(model)

    async def get_by_public_id(self, public_id: str) -> Optional[UserEntity]:
        logger.debug(f"Getting user by public id: {public_id}")
        model = await self._get_model_by(self.model_class.public_id, UUID(public_id))
        return self._map_model_to_entity(model)

    async def update(self, public_id: str, patch: Dict[str, Any]) -> Optional[UserEntity]:
        return await self._update_by(self.model_class.public_id, UUID(public_id), patch)

    async def delete(self, public_id: str) -> None:
        deleted = await self._delete_by(self.model_class.public_id, UUID(public_id))
        if deleted == 0:
            logger.warning("Delete matched no user", extra={"public_id": public_id})
            raise NoRowsAffectedError()
        logger.info("Deleted user", extra={"public_id": public_id})
