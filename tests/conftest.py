"""Pytest configuration and fixtures for the hierarchy service.

Every test gets a fresh in-memory SQLite database (aiosqlite, one shared
connection). HTTP tests use app.main:app with get_db / get_db_transactional
overridden to sessions on that database. All imports use app.*.
"""

import os

# Settings are read lazily; set test values before anything calls get_settings().
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.core.limiter import limiter
from app.domain.enums import TenantStatus
from app.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
    get_db,
    get_db_transactional,
)
from app.infrastructure.persistence.repositories import TenantRepository
from app.main import app

get_settings.cache_clear()
limiter.enabled = False


@pytest.fixture
async def engine() -> AsyncEngine:
    """Fresh in-memory database with the full schema."""
    test_engine = build_engine("sqlite+aiosqlite://")
    await create_schema(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), bound to the test database."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create_tenant(session_factory, code: str):
    async with session_factory() as session:
        async with session.begin():
            return await TenantRepository(session).create_tenant(
                code=code, name=f"Tenant {code}", status=TenantStatus.ACTIVE
            )


@pytest.fixture
async def tenant(session_factory):
    """An active tenant, committed."""
    return await _create_tenant(session_factory, "acme")


@pytest.fixture
async def other_tenant(session_factory):
    return await _create_tenant(session_factory, "globex")


@pytest.fixture
def tenant_headers(tenant) -> dict[str, str]:
    """Headers for tenant-scoped requests."""
    return {"X-Tenant-ID": tenant.id}
