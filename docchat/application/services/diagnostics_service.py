"""
Diagnostics service.

Probes each collaborator independently so one failure does not hide the
others: index counts, the embedding provider, the vector search function
(queried with a stored embedding) and, optionally, a retrieval dry run.

Dependencies: sqlalchemy, docchat.core.retrieval, docchat.core.ports
System role: Operational self-check behind GET /diag
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.core.exceptions import DocChatException
from docchat.core.ports import EmbeddingProvider, SearchIndex
from docchat.core.retrieval import RetrievalOrchestrator
from docchat.models.diagnostics import (
    DiagnosticsReport,
    IndexStats,
    ProbeResult,
    QueryDryRun,
    QueryPreview,
)
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 160
VECTOR_PROBE_COUNT = 3


def _describe(exc: Exception) -> str:
    return exc.message if isinstance(exc, DocChatException) else f"{type(exc).__name__}: {exc}"


class DiagnosticsService:
    """Collect a health snapshot of the retrieval stack."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        embedder: EmbeddingProvider,
        retriever: RetrievalOrchestrator,
        vector_index: SearchIndex | None = None,
        provider: str = "unknown",
        top_k: int = 12,
    ) -> None:
        self._session_factory = session_factory
        self._embedder = embedder
        self._retriever = retriever
        self._vector_index = vector_index
        self._provider = provider
        self._top_k = top_k

    async def run(self, q: str | None = None) -> DiagnosticsReport:
        """
        Run all probes.

        Args:
            q: Optional question for a retrieval dry run

        Returns:
            DiagnosticsReport: Probe outcomes; never raises for probe failures
        """
        stats, sample = await self._index_stats()
        report = DiagnosticsReport(
            stats=stats,
            sample_chunk_exists=sample is not None,
            vector_probe=await self._probe_vector(sample),
            embeddings=await self._probe_embeddings(),
            tiers=self._retriever.tier_names,
        )

        q = (q or "").strip()
        if q:
            report.query = await self._dry_run(q)
        return report

    async def _index_stats(self) -> tuple[IndexStats, list[float] | None]:
        stats = IndexStats()
        sample = None
        try:
            async with self._session_factory() as session:
                stats.documents = await document_crud.count(session)
                stats.by_status = await document_crud.count_by_status(session)
                stats.chunks = await chunk_crud.count_current(session)
                sample = await chunk_crud.get_sample_embedding(session)
        except Exception as e:
            log_exception_with_context(logger, "Index stats probe failed", e, level=logging.WARNING)
        return stats, sample

    async def _probe_vector(self, sample: list[float] | None) -> ProbeResult:
        if self._vector_index is None or sample is None:
            return ProbeResult()
        try:
            rows = await self._vector_index.search("", sample, VECTOR_PROBE_COUNT)
        except Exception as e:
            return ProbeResult(error=_describe(e))
        return ProbeResult(ok=bool(rows), count=len(rows))

    async def _probe_embeddings(self) -> ProbeResult:
        try:
            vector = await self._embedder.embed_query("ping")
        except Exception as e:
            return ProbeResult(error=_describe(e))
        return ProbeResult(ok=len(vector) == self._embedder.dimension)

    async def _dry_run(self, q: str) -> QueryDryRun:
        dry_run = QueryDryRun(text=q, provider=self._provider)
        try:
            trace = await self._retriever.retrieve_traced(q, self._top_k)
        except Exception as e:
            dry_run.error = _describe(e)
            return dry_run

        dry_run.tier = trace.tier
        dry_run.attempted = trace.attempted
        dry_run.errors = trace.errors
        dry_run.top = [
            QueryPreview(similarity=fragment.similarity, preview=fragment.content[:PREVIEW_LENGTH])
            for fragment in trace.fragments
        ]
        return dry_run
