"""
Bulk re-index service.

Resolves the target documents, marks them QUEUED, then dispatches one
ingestion per document with bounded concurrency and aggregates the
outcomes.

Dependencies: asyncio, sqlalchemy, docchat.application.services.ingestion_dispatcher
System role: Bulk (re)ingestion
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.application.services.ingestion_dispatcher import IngestionDispatcher
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.core.exceptions import DocChatException
from docchat.models.ingestion import ReindexFailure, ReindexReport, ReindexScope

logger = logging.getLogger(__name__)

PENDING_STATUSES = (DocumentStatus.UPLOADED, DocumentStatus.QUEUED, DocumentStatus.ERROR)


class ReindexService:
    """Re-ingest many documents with a concurrency bound."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: IngestionDispatcher,
        concurrency: int = 4,
    ) -> None:
        """
        Initialize reindex service.

        Args:
            session_factory: Session factory for target resolution
            dispatcher: Ingestion dispatcher
            concurrency: Maximum ingestions in flight
        """
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self._session_factory = session_factory
        self._dispatcher = dispatcher
        self._concurrency = concurrency

    async def resolve_targets(
        self,
        scope: ReindexScope = ReindexScope.PENDING,
        ids: list[UUID] | None = None,
        limit: int | None = None,
    ) -> list[UUID]:
        """Explicit ids win over scope; `limit` caps the list."""
        if ids:
            targets = list(dict.fromkeys(ids))
            return targets[:limit] if limit else targets

        statuses = PENDING_STATUSES if scope == ReindexScope.PENDING else None
        async with self._session_factory() as session:
            return await document_crud.list_ids(session, statuses=statuses, limit=limit)

    async def reindex(
        self,
        scope: ReindexScope = ReindexScope.PENDING,
        ids: list[UUID] | None = None,
        limit: int | None = None,
    ) -> ReindexReport:
        """
        Re-ingest the selected documents.

        Args:
            scope: all or pending (uploaded, queued, error)
            ids: Explicit targets
            limit: Cap on targets

        Returns:
            ReindexReport: ok is False when any document failed
        """
        targets = await self.resolve_targets(scope, ids, limit)
        if not targets:
            return ReindexReport(ok=True, queued=0)

        await self._dispatcher.orchestrator.mark_queued(targets)
        logger.info(
            "Reindex started",
            extra={"targets": len(targets), "scope": scope.value, "concurrency": self._concurrency},
        )

        semaphore = asyncio.Semaphore(self._concurrency)

        async def _one(document_id: UUID) -> ReindexFailure | None:
            async with semaphore:
                try:
                    result = await self._dispatcher.dispatch(document_id)
                except DocChatException as e:
                    return ReindexFailure(doc_id=document_id, error=e.message)
                except Exception as e:
                    logger.exception("Reindex dispatch failed", extra={"document_id": str(document_id)})
                    return ReindexFailure(doc_id=document_id, error=f"{type(e).__name__}: {e}")
            if not result.ok:
                return ReindexFailure(doc_id=document_id, error=result.message or "ingestion failed")
            return None

        outcomes = await asyncio.gather(*(_one(document_id) for document_id in targets))

        failed = [outcome for outcome in outcomes if outcome is not None]
        failed_ids = {failure.doc_id for failure in failed}
        succeeded = [document_id for document_id in targets if document_id not in failed_ids]

        logger.info(
            "Reindex finished",
            extra={"targets": len(targets), "succeeded": len(succeeded), "failed": len(failed)},
        )
        return ReindexReport(
            ok=not failed,
            queued=len(targets),
            succeeded=succeeded,
            failed=failed,
        )
