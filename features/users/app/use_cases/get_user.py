from features.users.domain.entities.user import User as UserEntity
from features.users.domain.errors import UserValidationError
from features.users.domain.validation import validate_id, validate_username, validate_uuid
from infrastructure.repositories.user_repository import UserRepository
from infrastructure.utils.logging_config import logger

# Lookups report a missing user with the same error class as malformed input
USER_NOT_FOUND = "user not found"

class GetUserByIdUseCase:
    def __init__(self, repository: UserRepository):
        self._repository = repository
    async def execute(self, user_id: int) -> UserEntity:
        logger.info("Executing GetUserByIdUseCase", extra={"user_id": user_id})
        validate_id(user_id)
        user = await self._repository.get_by_id(user_id)
        if user is None: logger.warning("User not found", extra={"user_id": user_id}); raise UserValidationError(USER_NOT_FOUND)
        return user

class GetUserByUsernameUseCase:
    def __init__(self, repository: UserRepository):
        self._repository = repository
    async def execute(self, username: str) -> UserEntity:
        logger.info("Executing GetUserByUsernameUseCase", extra={"username": username})
        validate_username(username)
        user = await self._repository.get_by_username(username)
        if user is None: logger.warning("User not found", extra={"username": username}); raise UserValidationError(USER_NOT_FOUND)
        return user

class GetUserByPublicIdUseCase:
    def __init__(self, repository: UserRepository):
        self._repository = repository
    async def execute(self, public_id: str) -> UserEntity:
        logger.info("Executing GetUserByPublicIdUseCase", extra={"public_id": public_id})
        validate_uuid(public_id)
        user = await self._repository.get_by_public_id(public_id)
        if user is None: logger.warning("User not found", extra={"public_id": public_id}); raise UserValidationError(USER_NOT_FOUND)
        return user
