"""
Pytest configuration and fixtures for quizdesk tests.
"""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "false")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

import quizdesk.models  # noqa: F401
from quizdesk.db.base import Base
from quizdesk.db.session import enable_sqlite_foreign_keys, get_db
from quizdesk.main import app
from quizdesk.services.pin_service import pin_service


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'quizdesk_test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, one committed unit of work per request"""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    pin_service.invalidate_cache()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    pin_service.invalidate_cache()
