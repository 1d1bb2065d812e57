from typing import Sequence
from features.users.domain.entities.user import User as UserEntity
from infrastructure.repositories.user_repository import UserRepository
from infrastructure.utils.logging_config import logger

class ListUsersUseCase:
    def __init__(self, repository: UserRepository):
        self._repository = repository
    async def execute(self) -> Sequence[UserEntity]:
        logger.info("Executing ListUsersUseCase")
        users = await self._repository.get_all()
        logger.info(f"Found {len(users)} users.")
        return users
