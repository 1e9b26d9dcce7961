"""Database boundary: ORM models, CRUD helpers and connection management."""

from docchat.boundary.db.base import Base
from docchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
