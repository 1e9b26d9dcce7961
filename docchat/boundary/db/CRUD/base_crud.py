"""
Base CRUD operations for SQLAlchemy models.

Generic create, lookup and count helpers inherited by model-specific
CRUD classes. Methods never commit; callers own the transaction.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations on models with an `id` key.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **kwargs: Any) -> ModelT:
        """
        Insert a new row and return it with generated defaults populated.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID | int) -> ModelT | None:
        """
        Retrieve a single row by primary key, bypassing stale identity-map state.

        Args:
            session: Async database session
            id: Primary key

        Returns:
            Model instance if found, None otherwise
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self, session: AsyncSession) -> int:
        """Return the number of rows in the table."""
        result = await session.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())
