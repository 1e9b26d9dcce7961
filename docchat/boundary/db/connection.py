"""
Database connection management.

Async engine and session factory for the API process, a pool-less variant
for Celery tasks (each task runs its own event loop), and the FastAPI
session dependency.

Dependencies: sqlalchemy, asyncpg, docchat.configs
System role: Database connection lifecycle management
"""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from docchat.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect broken
    connections early.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = get_settings().database
    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def create_task_engine() -> AsyncEngine:
    """
    Create an engine without pooling for one-shot event loops (workers, scripts).

    Returns:
        AsyncEngine: Engine that opens a fresh connection per checkout
    """
    db_config = get_settings().database
    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        poolclass=NullPool,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Build a session factory with explicit transaction control.

    Args:
        engine: Engine the sessions bind to

    Returns:
        async_sessionmaker: Factory producing AsyncSession objects
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the process-wide engine."""
    return make_session_factory(get_async_engine())


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped async session.

    Yields:
        AsyncSession: Session closed after the route completes

    Usage:
        @router.get("/doc-status")
        async def doc_status(db: AsyncSession = Depends(get_async_db)):
            ...
    """
    session_factory = get_async_session_factory()
    async with session_factory() as session:
        yield session
