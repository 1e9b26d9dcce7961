"""
Ingestion dispatcher.

Decides where an ingestion runs: inline in the calling process (the API
request or a reindex batch) or on a Celery worker.

Inline resumable mode drives the checkpointed variant to completion in
the same process by draining continuations from an in-memory queue.

Dependencies: fastapi.concurrency, docchat.core.document_processing
System role: Ingestion trigger used by upload, ingest and reindex
"""

import logging
from collections import deque
from enum import Enum
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from docchat.core.document_processing.models import (
    IngestionCheckpoint,
    IngestionOutcome,
    IngestionResult,
)
from docchat.core.document_processing.orchestrator import IngestionOrchestrator
from docchat.core.exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)


class DispatchMode(str, Enum):
    INLINE = "inline"
    CELERY = "celery"


class InlineContinuationScheduler:
    """Collect continuation checkpoints for the dispatcher to run next."""

    def __init__(self) -> None:
        self.pending: deque[IngestionCheckpoint] = deque()

    async def schedule(self, checkpoint: IngestionCheckpoint) -> None:
        self.pending.append(checkpoint)


class IngestionDispatcher:
    """Run or enqueue document ingestion according to configuration."""

    def __init__(
        self,
        orchestrator: IngestionOrchestrator,
        mode: DispatchMode | str = DispatchMode.INLINE,
        resumable: bool = False,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            orchestrator: Ingestion orchestrator
            mode: inline or celery
            resumable: Use checkpointed windows in inline mode
        """
        self.orchestrator = orchestrator
        self.mode = DispatchMode(mode)
        self.resumable = resumable

    async def dispatch(self, document_id: UUID) -> IngestionResult:
        """
        Ingest a document, or enqueue it in celery mode.

        Args:
            document_id: Document to ingest

        Returns:
            IngestionResult: Final outcome inline, QUEUED in celery mode

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        if self.mode == DispatchMode.CELERY:
            return await self._enqueue(document_id)
        if self.resumable:
            return await self._run_resumable(document_id)
        return await self.orchestrator.ingest(document_id)

    async def _run_resumable(self, document_id: UUID) -> IngestionResult:
        scheduler = InlineContinuationScheduler()
        orchestrator = self.orchestrator.with_scheduler(scheduler)

        result = await orchestrator.start_resumable(document_id)
        while scheduler.pending and result.status == IngestionOutcome.CONTINUING:
            result = await orchestrator.continue_ingestion(scheduler.pending.popleft())
        return result

    async def _enqueue(self, document_id: UUID) -> IngestionResult:
        # Imported here so inline deployments never load the Celery app
        from docchat.workers.tasks.document_ingestion import ingest_document

        if not await self.orchestrator.mark_queued([document_id]):
            raise DocumentNotFoundError(document_id)

        async_result = await run_in_threadpool(ingest_document.delay, str(document_id))
        logger.info(
            "Ingestion enqueued",
            extra={"document_id": str(document_id), "task_id": async_result.id},
        )
        return IngestionResult(
            document_id=document_id,
            status=IngestionOutcome.QUEUED,
            message=f"task {async_result.id}",
        )
