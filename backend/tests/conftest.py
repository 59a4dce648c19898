"""
StudyHub Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Points DATABASE_URL at a throwaway SQLite file before any studyhub
       import, so the module-level engine is created against it.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database (autouse): drop + create all tables, dispose engine afterwards
    ├── db_session: real AsyncSession on the test database
    ├── mock_db_session: AsyncMock session for database-failure paths
    └── test_client: HTTPX AsyncClient wired to the FastAPI app
"""

import os
import tempfile

# Must run before studyhub.config is imported anywhere
_TEST_DIR = tempfile.mkdtemp(prefix="studyhub_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "*"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import studyhub.models  # noqa: E402,F401
from studyhub.database import Base, async_session_factory, engine  # noqa: E402


@pytest_asyncio.fixture(autouse=True)
async def database():
    """
    Fresh schema for every test.

    The engine is disposed afterwards because each test runs on its own
    event loop and pooled aiosqlite connections are bound to the loop that
    opened them.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session():
    """
    Real async session on the test database.

    Usage:
        async def test_create(db_session):
            subject = await subject_service.create_subject(db_session, SubjectCreate(name="Math"))
    """
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_db_session():
    """
    Mock async session for forcing database errors.

    Usage:
        mock_db_session.execute.side_effect = SQLAlchemyError("connection lost")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the app through ASGITransport (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    from studyhub.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
