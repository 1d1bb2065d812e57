"""Root conftest: shared test configuration.

Environment is set before any application module is imported, since
settings, logging and the engine are all built at import time.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("USE_JSON_LOGGING", "false")
os.environ.setdefault("API_KEY", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.dependencies import get_db_session_async
from infrastructure.database.base_model import Base
from infrastructure.database.models import user_model  # noqa: F401
from presentation.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def settings_override():
    """Mutable copy of the settings injected into request-time dependencies."""
    return get_settings().model_copy(update={"API_KEY": ""})


@pytest.fixture
async def client(test_session_factory, settings_override):
    """FastAPI test client with the DB session and settings dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session_async] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
