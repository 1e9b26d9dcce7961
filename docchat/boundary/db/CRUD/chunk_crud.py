"""
Chunk CRUD operations.

Batch inserts, wholesale deletes and the "current generation" queries used
by the status endpoint, diagnostics and the local retrieval tier.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Chunk persistence operations
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Select, and_, delete, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.chunk_model import ChunkModel
from docchat.boundary.db.models.document_model import DocumentModel


def _current(stmt: Select) -> Select:
    """Restrict a chunk query to rows written by their document's current run."""
    return stmt.join(
        DocumentModel,
        and_(
            DocumentModel.id == ChunkModel.document_id,
            DocumentModel.generation == ChunkModel.generation,
        ),
    )


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        super().__init__(ChunkModel)

    async def insert_many(self, session: AsyncSession, rows: Sequence[dict[str, Any]]) -> None:
        """
        Insert chunk rows with a single executemany statement.

        Args:
            session: Async database session
            rows: Column mappings (document_id, chunk_index, content, embedding, generation)
        """
        if rows:
            await session.execute(insert(ChunkModel), list(rows))

    async def delete_for_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        generation: int | None = None,
    ) -> int:
        """
        Delete a document's chunks.

        Args:
            session: Async database session
            document_id: Owning document
            generation: Only delete rows of this run (None deletes all)

        Returns:
            Number of rows deleted
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        if generation is not None:
            stmt = stmt.where(ChunkModel.generation == generation)
        result = await session.execute(stmt)
        return result.rowcount

    async def count_current(self, session: AsyncSession, document_id: UUID | None = None) -> int:
        """
        Count searchable chunks, for one document or overall.

        Args:
            session: Async database session
            document_id: Restrict to a document (None for all)

        Returns:
            Number of chunks of the current generation
        """
        stmt = _current(select(func.count(ChunkModel.id)).select_from(ChunkModel))
        if document_id is not None:
            stmt = stmt.where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def get_pool(
        self,
        session: AsyncSession,
        limit: int,
        keywords: Sequence[str] = (),
    ) -> Sequence[ChunkModel]:
        """
        Fetch a bounded pool of searchable chunks with embeddings.

        Args:
            session: Async database session
            limit: Maximum rows
            keywords: Keep rows containing any of these words (case-insensitive)

        Returns:
            Sequence of chunks, newest documents first
        """
        stmt = _current(select(ChunkModel)).where(ChunkModel.embedding.is_not(None))
        if keywords:
            stmt = stmt.where(or_(*(ChunkModel.content.ilike(f"%{word}%") for word in keywords)))
        stmt = stmt.order_by(DocumentModel.created_at.desc(), ChunkModel.chunk_index).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_sample_embedding(self, session: AsyncSession) -> list[float] | None:
        """Return one stored embedding, used to probe the vector tier."""
        stmt = (
            _current(select(ChunkModel.embedding))
            .where(ChunkModel.embedding.is_not(None))
            .limit(1)
        )
        result = await session.execute(stmt)
        embedding = result.scalar_one_or_none()
        return [float(value) for value in embedding] if embedding is not None else None


chunk_crud = ChunkCRUD()
