"""
Document CRUD operations.

Document queries plus the generation-guarded updates the ingestion
orchestrator relies on: every write made on behalf of a run matches the
run's generation, so a superseded run cannot overwrite a newer one.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Document persistence operations
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_many(
        self,
        session: AsyncSession,
        ids: Sequence[UUID],
    ) -> Sequence[DocumentModel]:
        """
        Retrieve the documents whose ids are in `ids`, in one query.

        Args:
            session: Async database session
            ids: Document UUIDs

        Returns:
            Sequence of matching documents (missing ids are omitted)
        """
        if not ids:
            return []
        stmt = select(DocumentModel).where(DocumentModel.id.in_(list(ids)))
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_ids(
        self,
        session: AsyncSession,
        statuses: Sequence[DocumentStatus] | None = None,
        limit: int | None = None,
    ) -> list[UUID]:
        """
        List document ids, newest first.

        Args:
            session: Async database session
            statuses: Only documents in these states (None for all)
            limit: Maximum number of ids

        Returns:
            list[UUID]: Document ids ordered by created_at descending
        """
        stmt = select(DocumentModel.id).order_by(DocumentModel.created_at.desc())
        if statuses:
            stmt = stmt.where(DocumentModel.status.in_(list(statuses)))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self, session: AsyncSession) -> dict[str, int]:
        """Return a {status: count} breakdown."""
        stmt = select(DocumentModel.status, func.count()).group_by(DocumentModel.status)
        result = await session.execute(stmt)
        return {status.value: int(count) for status, count in result.all()}

    async def begin_generation(
        self,
        session: AsyncSession,
        id: UUID,
        stage: str,
    ) -> int | None:
        """
        Start a new ingestion run: bump the generation and enter PROCESSING.

        The increment happens in SQL so concurrent runs always receive
        distinct generations.

        Args:
            session: Async database session
            id: Document UUID
            stage: Initial progress text

        Returns:
            The new generation, or None if the document does not exist
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == id)
            .values(
                generation=DocumentModel.generation + 1,
                status=DocumentStatus.PROCESSING,
                error=None,
                stage=stage,
                checkpoint_offset=None,
                checkpoint_total=None,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_generation(session, id)

    async def get_generation(self, session: AsyncSession, id: UUID) -> int | None:
        """Read the current generation straight from the database."""
        result = await session.execute(
            select(DocumentModel.generation).where(DocumentModel.id == id)
        )
        return result.scalar_one_or_none()

    async def update_for_generation(
        self,
        session: AsyncSession,
        id: UUID,
        generation: int,
        **fields: Any,
    ) -> bool:
        """
        Update a document only while `generation` is still current.

        Args:
            session: Async database session
            id: Document UUID
            generation: Generation of the run making the write
            **fields: Columns to update

        Returns:
            True if the run is current and the row was updated
        """
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == id, DocumentModel.generation == generation)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def mark_queued(self, session: AsyncSession, ids: Sequence[UUID]) -> int:
        """
        Reset documents to QUEUED ahead of a (re)ingestion.

        Returns:
            Number of documents updated
        """
        if not ids:
            return 0
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id.in_(list(ids)))
            .values(status=DocumentStatus.QUEUED, error=None, stage="queued")
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount


document_crud = DocumentCRUD()
