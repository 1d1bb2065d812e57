from typing import Annotated, AsyncGenerator, Callable, Type
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.session import AsyncSessionLocal
from infrastructure.uow.uow import AsyncUnitOfWork
from infrastructure.repositories.base_repository import BaseRepositoryInterface
from infrastructure.repositories.factory import get_repository
from infrastructure.utils.logging_config import logger


# --- Database Session Dependency Provider ---
async def get_db_session_async() -> AsyncGenerator[AsyncSession, None]:
    """Dependency provider for an asynchronous SQLAlchemy session."""
    if AsyncSessionLocal is None:
        raise RuntimeError("Asynchronous DB session factory not available.")
    session: AsyncSession = AsyncSessionLocal()
    logger.debug(f"DB Async Session [{id(session)}] created.")
    try:
        yield session
    finally:
        logger.debug(f"DB Async Session [{id(session)}] closed.")
        await session.close()

DBSession = Annotated[AsyncSession, Depends(get_db_session_async)]


# --- Unit of Work Dependency Provider ---
async def get_uow_async(session: DBSession) -> AsyncUnitOfWork:
    """Dependency provider for an asynchronous Unit of Work sharing the request session."""
    return AsyncUnitOfWork(session)

UoW = Annotated[AsyncUnitOfWork, Depends(get_uow_async)]


# --- Repository Dependency Factory ---
def get_repo(entity_type: Type) -> Callable[[AsyncSession], BaseRepositoryInterface]:
    """
    Returns a dependency function (provider) that, when called by FastAPI,
    will inject the repository registered for the given entity type,
    bound to the request's session.
    """
    def _get_specific_repository(session: DBSession) -> BaseRepositoryInterface:
        repo = get_repository(entity_type, session)
        logger.debug(f"Repository [{type(repo).__name__}] injected for entity [{entity_type.__name__}] with session [{id(session)}]")
        return repo

    return _get_specific_repository
