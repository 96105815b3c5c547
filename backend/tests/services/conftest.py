"""Service test fixtures — async DB, seeded users, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - file_session_factory gives independent connections for interleaving tests
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness check sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the conditional UPDATEs and
      association-table keys behave the same as on PostgreSQL
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import huddle.infrastructure.database as db_module
import huddle.models  # noqa: F401
from huddle.db.base import Base
from huddle.infrastructure.database import get_db, DatabaseSessionManager
from huddle.main import app
from huddle.services.authing import Authing


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def file_session_factory(tmp_path):
    """Sessions on a file-backed database: each session gets its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'huddle.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def alice(test_db):
    user = await Authing(test_db).create("alice")
    await test_db.commit()
    return user


@pytest.fixture
async def bob(test_db):
    user = await Authing(test_db).create("bob")
    await test_db.commit()
    return user


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def create_user(client):
    """Register a user through the API; returns its id as a string."""
    async def _create(username: str) -> str:
        res = await client.post("/api/v1/users", json={"username": username})
        assert res.status_code == 201, res.text
        return res.json()["user"]["id"]
    return _create
