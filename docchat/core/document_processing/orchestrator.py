"""
Ingestion orchestrator.

Owns the per-document lifecycle:
uploaded/queued -> processing -> ready | error

A run bumps the document's generation, downloads and extracts the file,
chunks the text, deletes the document's old chunks, then embeds and stores
chunks batch by batch. Every write of a run is guarded by its generation;
a run that finds a newer generation discards its own rows and stops
without touching the document status. Failures are recorded on the
document and returned, never raised.

The resumable variant processes a bounded window of chunks per call and
hands an `IngestionCheckpoint` to a `ContinuationScheduler` when chunks
remain; the call that stores the last chunk marks the document ready.

Dependencies: sqlalchemy, fastapi.concurrency, docchat.core.ports
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from dataclasses import dataclass
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from docchat.core.document_processing.chunker import TextChunker
from docchat.core.document_processing.extraction import FormatExtractor
from docchat.core.document_processing.models import (
    IngestionCheckpoint,
    IngestionOutcome,
    IngestionResult,
)
from docchat.core.exceptions import (
    DocChatException,
    DocumentNotFoundError,
    DocumentProcessingError,
    NoChunksError,
    StaleGenerationError,
)
from docchat.core.ports import ContinuationScheduler, EmbeddingProvider, ObjectStore
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 2000


@dataclass(frozen=True)
class IngestionRun:
    """Identity and file metadata of one ingestion run."""

    document_id: UUID
    generation: int
    filename: str
    mime_type: str
    storage_path: str


class IngestionOrchestrator:
    """Coordinate extraction, chunking, embedding and chunk storage for documents."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        object_store: ObjectStore,
        embedder: EmbeddingProvider,
        extractor: FormatExtractor | None = None,
        chunker: TextChunker | None = None,
        batch_size: int = 32,
        insert_batch_size: int = 16,
        max_chunks: int = 0,
        resumable_window: int = 64,
        scheduler: ContinuationScheduler | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            session_factory: Factory for short-lived database sessions
            object_store: Source of uploaded file bytes
            embedder: Embedding provider
            extractor: Format extractor (defaults to PDF enabled)
            chunker: Text chunker (defaults to 900/150)
            batch_size: Chunks per embedding request
            insert_batch_size: Rows per insert statement
            max_chunks: Cap on chunks per document, 0 for none
            resumable_window: Chunks stored per resumable call
            scheduler: Continuation scheduler for resumable runs
        """
        if batch_size <= 0 or insert_batch_size <= 0 or resumable_window <= 0:
            raise ValueError("batch sizes and resumable_window must be positive")

        self._session_factory = session_factory
        self._object_store = object_store
        self._embedder = embedder
        self._extractor = extractor or FormatExtractor()
        self._chunker = chunker or TextChunker()
        self._batch_size = batch_size
        self._insert_batch_size = insert_batch_size
        self._max_chunks = max_chunks
        self._resumable_window = resumable_window
        self._scheduler = scheduler

    def with_scheduler(self, scheduler: ContinuationScheduler) -> "IngestionOrchestrator":
        """Return a copy of this orchestrator that uses `scheduler` for continuations."""
        return IngestionOrchestrator(
            self._session_factory,
            self._object_store,
            self._embedder,
            extractor=self._extractor,
            chunker=self._chunker,
            batch_size=self._batch_size,
            insert_batch_size=self._insert_batch_size,
            max_chunks=self._max_chunks,
            resumable_window=self._resumable_window,
            scheduler=scheduler,
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def ingest(self, document_id: UUID) -> IngestionResult:
        """
        Ingest a document end to end in one call.

        Args:
            document_id: Document to (re)ingest

        Returns:
            IngestionResult: ready, error or superseded

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        start_time = time.perf_counter()
        run = await self._begin_run(document_id)
        try:
            chunks, text_length = await self._prepare_chunks(run)
            await self._clear_chunks(run)
            await self._write_window(run, chunks, 0, len(chunks))
            return await self._finish(run, len(chunks), text_length, start_time)
        except StaleGenerationError:
            return await self._discard(run, start_time)
        except Exception as e:
            return await self._fail(run, e, start_time)

    async def start_resumable(self, document_id: UUID) -> IngestionResult:
        """
        Begin a checkpointed run: store the first window and schedule the rest.

        Args:
            document_id: Document to (re)ingest

        Returns:
            IngestionResult: ready (small document), continuing, error or superseded

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        start_time = time.perf_counter()
        run = await self._begin_run(document_id)
        try:
            chunks, text_length = await self._prepare_chunks(run)
            await self._clear_chunks(run)
            return await self._advance(run, chunks, 0, text_length, start_time)
        except StaleGenerationError:
            return await self._discard(run, start_time)
        except Exception as e:
            return await self._fail(run, e, start_time)

    async def continue_ingestion(self, checkpoint: IngestionCheckpoint) -> IngestionResult:
        """
        Store the next window of a checkpointed run.

        Text is re-extracted and re-chunked; chunking is deterministic, so the
        chunk list matches the one the checkpoint was computed from unless the
        stored file changed, which fails the run.

        Args:
            checkpoint: Checkpoint produced by the previous call

        Returns:
            IngestionResult: ready, continuing, error or superseded

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        start_time = time.perf_counter()
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, checkpoint.document_id)
        if document is None:
            raise DocumentNotFoundError(checkpoint.document_id)

        run = self._run_for(document, checkpoint.generation)
        if document.generation != checkpoint.generation:
            return await self._discard(run, start_time)
        if document.checkpoint_offset != checkpoint.next_offset:
            logger.warning(
                "Ignoring checkpoint that no longer matches the document",
                extra={
                    "document_id": str(checkpoint.document_id),
                    "expected_offset": document.checkpoint_offset,
                    "checkpoint_offset": checkpoint.next_offset,
                },
            )
            return IngestionResult(
                document_id=checkpoint.document_id,
                status=IngestionOutcome.SUPERSEDED,
                message="checkpoint already consumed",
                processing_time_ms=_elapsed_ms(start_time),
            )

        try:
            chunks, text_length = await self._prepare_chunks(run)
            if len(chunks) != checkpoint.total_chunks:
                raise DocumentProcessingError(
                    f"Chunk count changed from {checkpoint.total_chunks} to {len(chunks)}",
                    run.document_id,
                )
            return await self._advance(run, chunks, checkpoint.next_offset, text_length, start_time)
        except StaleGenerationError:
            return await self._discard(run, start_time)
        except Exception as e:
            return await self._fail(run, e, start_time)

    async def mark_queued(self, document_ids: list[UUID]) -> int:
        """
        Reset documents to QUEUED and clear their errors.

        Returns:
            Number of documents updated
        """
        async with self._session_factory() as session:
            updated = await document_crud.mark_queued(session, document_ids)
            await session.commit()
        return updated

    # ------------------------------------------------------------------
    # Run steps
    # ------------------------------------------------------------------

    @staticmethod
    def _run_for(document: DocumentModel, generation: int) -> IngestionRun:
        return IngestionRun(
            document_id=document.id,
            generation=generation,
            filename=document.filename,
            mime_type=document.mime_type,
            storage_path=document.storage_path,
        )

    async def _begin_run(self, document_id: UUID) -> IngestionRun:
        async with self._session_factory() as session:
            generation = await document_crud.begin_generation(session, document_id, stage="starting")
            if generation is None:
                raise DocumentNotFoundError(document_id)
            document = await document_crud.get_by_id(session, document_id)
            await session.commit()

        logger.info(
            "Ingestion run started",
            extra={"document_id": str(document_id), "generation": generation},
        )
        return self._run_for(document, generation)

    async def _set_stage(self, run: IngestionRun, stage: str, **fields) -> None:
        async with self._session_factory() as session:
            current = await document_crud.update_for_generation(
                session, run.document_id, run.generation, stage=stage, **fields
            )
            if not current:
                raise StaleGenerationError(run.document_id, run.generation)
            await session.commit()

    async def _prepare_chunks(self, run: IngestionRun) -> tuple[list[str], int]:
        """Download, extract and chunk the document's file."""
        await self._set_stage(run, "downloading")
        data = await self._object_store.get(run.storage_path)

        await self._set_stage(run, "extracting")
        text = await run_in_threadpool(
            self._extractor.extract,
            data,
            run.mime_type,
            run.filename,
        )

        await self._set_stage(run, "chunking")
        chunks = self._chunker.chunk(text)
        if self._max_chunks and len(chunks) > self._max_chunks:
            logger.warning(
                "Truncating chunk list",
                extra={"document_id": str(run.document_id), "chunks": len(chunks), "cap": self._max_chunks},
            )
            chunks = chunks[: self._max_chunks]
        if not chunks:
            raise NoChunksError("Chunking produced no chunks", run.document_id)

        return chunks, len(text)

    async def _clear_chunks(self, run: IngestionRun) -> None:
        """Delete every chunk of the document before the run writes its own."""
        async with self._session_factory() as session:
            if await document_crud.get_generation(session, run.document_id) != run.generation:
                raise StaleGenerationError(run.document_id, run.generation)
            deleted = await chunk_crud.delete_for_document(session, run.document_id)
            await session.commit()
        logger.debug("Cleared old chunks", extra={"document_id": str(run.document_id), "deleted": deleted})

    async def _write_window(self, run: IngestionRun, chunks: list[str], start: int, stop: int) -> None:
        """Embed and insert chunks[start:stop] batch by batch, in index order."""
        total = len(chunks)
        for batch_start in range(start, stop, self._batch_size):
            batch = chunks[batch_start : min(batch_start + self._batch_size, stop)]
            vectors = await self._embedder.embed(batch)

            rows = [
                {
                    "document_id": run.document_id,
                    "chunk_index": batch_start + offset,
                    "content": content,
                    "embedding": vector,
                    "generation": run.generation,
                }
                for offset, (content, vector) in enumerate(zip(batch, vectors))
            ]
            done = batch_start + len(batch)

            async with self._session_factory() as session:
                current = await document_crud.get_generation(session, run.document_id)
                if current != run.generation:
                    raise StaleGenerationError(run.document_id, run.generation, current)
                for row_start in range(0, len(rows), self._insert_batch_size):
                    await chunk_crud.insert_many(session, rows[row_start : row_start + self._insert_batch_size])
                await document_crud.update_for_generation(
                    session, run.document_id, run.generation, stage=f"embedding {done}/{total}"
                )
                await session.commit()

            logger.debug(
                "Stored chunk batch",
                extra={"document_id": str(run.document_id), "done": done, "total": total},
            )

    async def _advance(
        self,
        run: IngestionRun,
        chunks: list[str],
        offset: int,
        text_length: int,
        start_time: float,
    ) -> IngestionResult:
        """Store one window starting at `offset`; finish or checkpoint and reschedule."""
        total = len(chunks)
        stop = min(offset + self._resumable_window, total)
        await self._write_window(run, chunks, offset, stop)
        if stop >= total:
            return await self._finish(run, total, text_length, start_time)

        if self._scheduler is None:
            raise DocumentProcessingError("No continuation scheduler configured", run.document_id)

        checkpoint = IngestionCheckpoint(
            document_id=run.document_id,
            generation=run.generation,
            next_offset=stop,
            total_chunks=total,
        )
        await self._set_stage(
            run,
            f"indexed {stop}/{total}",
            checkpoint_offset=stop,
            checkpoint_total=total,
        )
        await self._scheduler.schedule(checkpoint)

        logger.info(
            "Ingestion window stored, continuation scheduled",
            extra={"document_id": str(run.document_id), "next_offset": stop, "total": total},
        )
        return IngestionResult(
            document_id=run.document_id,
            status=IngestionOutcome.CONTINUING,
            chunk_count=stop,
            text_length=text_length,
            message=f"indexed {stop}/{total}",
            processing_time_ms=_elapsed_ms(start_time),
        )

    async def _finish(
        self,
        run: IngestionRun,
        chunk_count: int,
        text_length: int,
        start_time: float,
    ) -> IngestionResult:
        async with self._session_factory() as session:
            current = await document_crud.update_for_generation(
                session,
                run.document_id,
                run.generation,
                status=DocumentStatus.READY,
                error=None,
                stage="done",
                original_text_len=text_length,
                checkpoint_offset=None,
                checkpoint_total=None,
            )
            if not current:
                raise StaleGenerationError(run.document_id, run.generation)
            await session.commit()

        elapsed = _elapsed_ms(start_time)
        logger.info(
            "Document ready",
            extra={
                "document_id": str(run.document_id),
                "chunk_count": chunk_count,
                "text_length": text_length,
                "processing_time_ms": round(elapsed, 2),
            },
        )
        return IngestionResult(
            document_id=run.document_id,
            status=IngestionOutcome.READY,
            chunk_count=chunk_count,
            text_length=text_length,
            processing_time_ms=elapsed,
        )

    async def _discard(self, run: IngestionRun, start_time: float) -> IngestionResult:
        """Delete the rows a superseded run wrote; leave the document alone."""
        async with self._session_factory() as session:
            deleted = await chunk_crud.delete_for_document(session, run.document_id, run.generation)
            await session.commit()

        logger.info(
            "Ingestion run superseded",
            extra={"document_id": str(run.document_id), "generation": run.generation, "discarded": deleted},
        )
        return IngestionResult(
            document_id=run.document_id,
            status=IngestionOutcome.SUPERSEDED,
            message=f"run {run.generation} superseded by a newer ingestion",
            processing_time_ms=_elapsed_ms(start_time),
        )

    async def _fail(self, run: IngestionRun, exc: Exception, start_time: float) -> IngestionResult:
        """Record a failure on the document if the run is still current."""
        message = exc.message if isinstance(exc, DocChatException) else f"{type(exc).__name__}: {exc}"
        message = message[:MAX_ERROR_LENGTH]
        log_exception_with_context(
            logger,
            "Ingestion failed",
            exc,
            document_id=run.document_id,
            generation=run.generation,
        )

        try:
            async with self._session_factory() as session:
                await document_crud.update_for_generation(
                    session,
                    run.document_id,
                    run.generation,
                    status=DocumentStatus.ERROR,
                    error=message,
                    stage="failed",
                    checkpoint_offset=None,
                    checkpoint_total=None,
                )
                await session.commit()
        except Exception as db_exc:
            log_exception_with_context(
                logger,
                "Could not record ingestion failure",
                db_exc,
                document_id=run.document_id,
            )

        return IngestionResult(
            document_id=run.document_id,
            status=IngestionOutcome.ERROR,
            message=message,
            processing_time_ms=_elapsed_ms(start_time),
        )


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000
