import abc
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.utils.logging_config import logger


class AbstractUnitOfWork(abc.ABC):
    """Abstract Base Class for the Unit of Work pattern."""

    async def __aenter__(self):
        logger.debug(f"Entering UoW context ({type(self).__name__})")
        return self

    async def __aexit__(self, exc_type, exc_val, traceback):
        """Commits on a clean exit, rolls back and re-raises otherwise."""
        if exc_type:
            logger.debug(f"Exception occurred within UoW context: {exc_type.__name__}. Rolling back.")
            try:
                await self.rollback()
            except Exception as rb_exc:
                logger.exception(f"Exception during UoW rollback: {rb_exc}")
        else:
            logger.debug("Committing UoW context.")
            try:
                await self.commit()
            except Exception as commit_exc:
                logger.exception(f"Exception during UoW commit. Rolling back. Error: {commit_exc}")
                try:
                    await self.rollback()
                except Exception as rb_exc_on_commit_fail:
                    logger.exception(f"Exception during UoW rollback after commit failure: {rb_exc_on_commit_fail}")
                raise
        logger.debug(f"Exiting UoW context ({type(self).__name__})")

    @abc.abstractmethod
    async def commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self):
        raise NotImplementedError


class AsyncUnitOfWork(AbstractUnitOfWork):
    """Unit of Work over a SQLAlchemy AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def commit(self):
        await self._session.commit()
        logger.debug("Async session commit successful.")

    async def rollback(self):
        await self._session.rollback()
        logger.debug("Async session rollback successful.")
