"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Any SQLAlchemy async URL is accepted: sqlite+aiosqlite for development and
tests, postgresql+asyncpg in production. The schema is created from the ORM
metadata with create_schema() (called at startup when
create_schema_on_startup is set).

Engine and session factory are created lazily on first use (get_db /
get_db_transactional) so import does not trigger Settings validation.

On PostgreSQL, get_db and get_db_transactional set app.current_tenant_id
from the tenant context (set by TenantContextMiddleware) so row-level
security policies, when installed, restrict rows to the current tenant.
"""

import logging
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.request_context import get_tenant_id as get_current_tenant_id
from app.core.tenant_validation import is_valid_tenant_id_format

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """SQLite ignores FOREIGN KEY clauses unless enabled per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend."""
    settings = get_settings()
    if database_url.startswith("sqlite"):
        kwargs: dict[str, Any] = {}
        if database_url.rstrip("/").endswith(("sqlite+aiosqlite:", ":memory:")):
            # In-memory databases live per connection; share a single one.
            kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        new_engine = create_async_engine(database_url, echo=echo, **kwargs)
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine
    connect_args: dict[str, Any] = {}
    if "asyncpg" in database_url:
        connect_args["command_timeout"] = settings.db_command_timeout
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


def _ensure_engine() -> async_sessionmaker[AsyncSession]:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return AsyncSessionLocal
    settings = get_settings()
    engine = build_engine(settings.database_url, echo=settings.database_echo)
    AsyncSessionLocal = build_session_factory(engine)

    from app.shared.telemetry.telemetry import instrument_engine

    instrument_engine(engine)
    return AsyncSessionLocal


async def create_schema(bind: AsyncEngine | None = None) -> None:
    """Create all tables and indexes that do not exist yet."""
    # Register every model on Base.metadata.
    import app.infrastructure.persistence.models  # noqa: F401

    if bind is None:
        _ensure_engine()
        bind = engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _set_tenant_context(session: AsyncSession) -> None:
    """Set app.current_tenant_id on PostgreSQL sessions (when tenant context is set).

    SET LOCAL does not support bound parameters in PostgreSQL; the value must be
    interpolated, so it is format-validated first.
    """
    bind = session.get_bind()
    if bind.dialect.name != "postgresql":
        return
    tenant_id = get_current_tenant_id()
    if not tenant_id:
        return
    if not is_valid_tenant_id_format(tenant_id):
        logger.warning(
            "Skipping SET LOCAL app.current_tenant_id: tenant_id failed format validation"
        )
        return
    await session.execute(text(f"SET LOCAL app.current_tenant_id = '{tenant_id}'"))


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        await _set_tenant_context(session)
        yield session


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Use for POST, PUT, PATCH, DELETE endpoints; every relationship mutation
    (including demote + promote) runs inside this single transaction.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        async with session.begin():
            await _set_tenant_context(session)
            yield session
