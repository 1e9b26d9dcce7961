"""
Document ingestion Celery tasks.

Tasks:
- ingest_document(document_id): full run, or the first window when
  INGEST_RESUMABLE is set
- continue_document_ingestion(checkpoint): next window of a resumable run

Each task runs its coroutine in a fresh event loop with a pool-less engine
that is disposed before the task returns. Tasks do not retry; a failed run
is recorded on the document and re-triggered explicitly.

Dependencies: celery, docchat.application.builders, docchat.boundary.db
System role: Async document processing task
"""

import asyncio
import logging
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from docchat.application import builders
from docchat.boundary.db.connection import create_task_engine, make_session_factory
from docchat.configs import get_settings
from docchat.core.document_processing.models import IngestionCheckpoint, IngestionResult
from docchat.core.document_processing.orchestrator import IngestionOrchestrator
from docchat.workers import celery_app

logger = logging.getLogger(__name__)


class CeleryContinuationScheduler:
    """Schedule the next window of a resumable run as a Celery task."""

    async def schedule(self, checkpoint: IngestionCheckpoint) -> None:
        await run_in_threadpool(
            continue_document_ingestion.delay,
            checkpoint.model_dump(mode="json"),
        )


async def _run(operation) -> dict:
    """Build an orchestrator on a task-scoped engine and run `operation` with it."""
    settings = get_settings()
    engine = create_task_engine()
    try:
        orchestrator: IngestionOrchestrator = builders.build_ingestion_orchestrator(
            settings,
            make_session_factory(engine),
            builders.build_object_store(settings),
            builders.build_embedding_gateway(settings),
            scheduler=CeleryContinuationScheduler(),
        )
        result: IngestionResult = await operation(orchestrator)
        return result.model_dump(mode="json")
    finally:
        await engine.dispose()


@celery_app.task(name="docchat.ingest_document")
def ingest_document(document_id: str) -> dict:
    """
    Ingest a document.

    Args:
        document_id: Document UUID as string

    Returns:
        dict: Serialized IngestionResult
    """
    resumable = get_settings().ingestion.resumable
    logger.info("Ingestion task started", extra={"document_id": document_id, "resumable": resumable})

    async def _operation(orchestrator: IngestionOrchestrator) -> IngestionResult:
        if resumable:
            return await orchestrator.start_resumable(UUID(document_id))
        return await orchestrator.ingest(UUID(document_id))

    return asyncio.run(_run(_operation))


@celery_app.task(name="docchat.continue_document_ingestion")
def continue_document_ingestion(checkpoint: dict) -> dict:
    """
    Process the next window of a resumable run.

    Args:
        checkpoint: Serialized IngestionCheckpoint

    Returns:
        dict: Serialized IngestionResult
    """
    parsed = IngestionCheckpoint.model_validate(checkpoint)
    logger.info(
        "Continuation task started",
        extra={"document_id": str(parsed.document_id), "next_offset": parsed.next_offset},
    )

    async def _operation(orchestrator: IngestionOrchestrator) -> IngestionResult:
        return await orchestrator.continue_ingestion(parsed)

    return asyncio.run(_run(_operation))
