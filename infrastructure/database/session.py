from typing import Any, Dict, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import settings
from infrastructure.utils.logging_config import logger

db_url_str = str(settings.DATABASE_URL)
is_sqlite = db_url_str.startswith("sqlite")

AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None
async_engine: Optional[AsyncEngine] = None


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Applies PRAGMA settings for SQLite connections."""
    if not is_sqlite:
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA busy_timeout = 5000;")
        cursor.execute("PRAGMA synchronous = NORMAL;")
        logger.debug("SQLite PRAGMAs applied: busy_timeout=5000, synchronous=NORMAL")
    finally:
        cursor.close()


def build_engine_kwargs(url: str) -> Dict[str, Any]:
    """Pool options for the configured driver; SQLite in-memory needs a single shared connection."""
    kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO_LOG}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
    return kwargs


try:
    logger.info(f"Initializing Async Database Engine ({'sqlite' if is_sqlite else 'postgresql'})...")
    async_engine = create_async_engine(db_url_str, **build_engine_kwargs(db_url_str))
    AsyncSessionLocal = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    logger.info("Async Database Engine and AsyncSessionLocal configured.")
except Exception as e:
    logger.exception(f"FATAL: Database initialization failed: {e}")
    raise RuntimeError(f"Database initialization failed: {e}") from e


async def create_db_and_tables_async(engine: Optional[AsyncEngine] = None):
    """Creates all tables defined in Base metadata."""
    engine = engine or async_engine
    if engine is None:
        raise RuntimeError("Async engine not initialized, cannot create tables.")
    from infrastructure.database.base_model import Base
    from infrastructure.database.models import user_model  # noqa: F401
    logger.info("Attempting to create database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created successfully.")


async def close_db_connections():
    """Dispose of database engine connections."""
    if async_engine:
        logger.info("Disposing async database engine...")
        await async_engine.dispose()
        logger.info("Async database engine disposed.")
