"""
SQLAlchemy declarative base and common mixins.

Uses the generic `Uuid` type so the same models run on PostgreSQL (native
uuid) and on SQLite in tests.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for ORM model registration.

    All database models inherit from this class so they are included in
    table creation.
    """

    pass


class UUIDMixin:
    """
    Mixin providing a UUID v4 primary key.

    Attributes:
        id: UUID primary key, generated on insert
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """
    Mixin providing creation and modification timestamps (UTC).

    Attributes:
        created_at: Row creation timestamp, immutable
        updated_at: Last modification timestamp, refreshed on update
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
