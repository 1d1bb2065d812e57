from features.users.domain.entities.user import User as UserEntity, UpdateUserRequest
from features.users.domain.errors import UserValidationError
from features.users.domain.validation import validate_update_user_input, validate_uuid
from features.users.app.use_cases.get_user import USER_NOT_FOUND
from infrastructure.repositories.user_repository import UserRepository
from infrastructure.uow.uow import AbstractUnitOfWork
from infrastructure.utils.logging_config import logger

class UpdateUserUseCase:
    def __init__(self, user_repository: UserRepository, uow: AbstractUnitOfWork):
        self._repository = user_repository; self._uow = uow
    async def execute(self, public_id: str, request: UpdateUserRequest) -> UserEntity:
        validate_uuid(public_id)
        validate_update_user_input(request.username, request.email, request.full_name)
        # Only the provided fields are sent so omitted ones keep their stored value
        patch = request.provided_fields()
        log_extra = {"public_id": public_id, "update_keys": sorted(patch)}
        logger.info("Executing UpdateUserUseCase", extra=log_extra)
        async with self._uow:
            updated = await self._repository.update(public_id, patch)
        if updated is None: logger.warning("User not found for update", extra=log_extra); raise UserValidationError(USER_NOT_FOUND)
        logger.info("User updated successfully", extra=log_extra)
        return updated
