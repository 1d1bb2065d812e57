from features.users.domain.entities.user import User as UserEntity, CreateUserRequest
from features.users.domain.validation import validate_create_user_input
from infrastructure.repositories.user_repository import UserRepository
from infrastructure.uow.uow import AbstractUnitOfWork
from infrastructure.utils.logging_config import logger

class CreateUserUseCase:
    def __init__(self, user_repository: UserRepository, uow: AbstractUnitOfWork):
        self._repository = user_repository; self._uow = uow
    async def execute(self, request: CreateUserRequest) -> UserEntity:
        log_extra = {"username": request.username}
        logger.info("Executing CreateUserUseCase", extra=log_extra)
        validate_create_user_input(request.username, request.email, request.full_name)
        # Identity and timestamps are assigned by storage
        skeleton = UserEntity(username=request.username, email=request.email, full_name=request.full_name)
        async with self._uow:
            created = await self._repository.add(skeleton)
        logger.info("User created successfully", extra={"user_id": created.id, "public_id": str(created.public_id)})
        return created
