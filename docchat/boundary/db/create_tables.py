"""
Database schema bootstrap.

Creates the pgvector extension, the ORM tables and the search functions.
Idempotent: safe to run on every deploy.

Dependencies: sqlalchemy, docchat.configs
System role: Database schema initialization

Usage:
    python -m docchat.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from docchat.boundary.db.base import Base
from docchat.boundary.db.connection import create_task_engine
from docchat.boundary.db.sql_functions import (
    CREATE_HYBRID_MATCH_CHUNKS,
    CREATE_MATCH_CHUNKS,
    CREATE_VECTOR_EXTENSION,
)

# Import all models to register them with Base.metadata
from docchat.boundary.db.models import ChunkModel, DocumentModel  # noqa: F401
from docchat.observability.logger import configure_logging

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine) -> None:
    """
    Create tables and, on PostgreSQL, the extension and search functions.

    Args:
        engine: Target engine

    Raises:
        SQLAlchemyError: If the connection or any DDL statement fails
    """
    is_postgres = engine.dialect.name == "postgresql"
    async with engine.begin() as conn:
        if is_postgres:
            await conn.execute(text(CREATE_VECTOR_EXTENSION))
        await conn.run_sync(Base.metadata.create_all)
        if is_postgres:
            await conn.execute(text(CREATE_MATCH_CHUNKS))
            await conn.execute(text(CREATE_HYBRID_MATCH_CHUNKS))
    logger.info("Schema ready", extra={"dialect": engine.dialect.name})


async def _main() -> None:
    engine = create_task_engine()
    try:
        await create_all_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(_main())
