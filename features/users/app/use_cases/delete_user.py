from features.users.domain.validation import validate_uuid
from infrastructure.repositories.user_repository import UserRepository
from infrastructure.uow.uow import AbstractUnitOfWork
from infrastructure.utils.logging_config import logger

class DeleteUserUseCase:
    def __init__(self, repository: UserRepository, uow: AbstractUnitOfWork):
        self._repository = repository; self._uow = uow
    async def execute(self, public_id: str) -> None:
        """Deletes by public id. NoRowsAffectedError from the repository is passed through as is."""
        log_extra = {"public_id": public_id}
        logger.info("Executing DeleteUserUseCase", extra=log_extra)
        validate_uuid(public_id)
        async with self._uow:
            await self._repository.delete(public_id)
        logger.info("User deleted successfully", extra=log_extra)
