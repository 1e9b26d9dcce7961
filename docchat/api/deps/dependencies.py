"""
Dependency injection container.

Factory functions for FastAPI dependencies. Expensive collaborators
(provider clients, S3 client, orchestrators) are built once per process
and cached; database sessions are per request.

Dependencies: docchat.configs, docchat.application, docchat.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.application import builders
from docchat.application.services import (
    ChatService,
    DiagnosticsService,
    DocumentService,
    IngestionDispatcher,
    ReindexService,
)
from docchat.boundary.db import get_async_db, get_async_session_factory
from docchat.boundary.search import VectorSearchIndex
from docchat.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._object_store = None
        self._embedder = None
        self._completion = None
        self._orchestrator = None
        self._dispatcher = None
        self._retriever = None
        self._assembler = None

    @property
    def settings(self) -> Settings:
        return get_settings()

    @property
    def session_factory(self):
        return get_async_session_factory()

    @property
    def object_store(self):
        """Get cached S3 object store."""
        if self._object_store is None:
            self._object_store = builders.build_object_store(self.settings)
        return self._object_store

    @property
    def embedder(self):
        """Get cached embedding gateway."""
        if self._embedder is None:
            self._embedder = builders.build_embedding_gateway(self.settings)
        return self._embedder

    @property
    def completion(self):
        """Get cached completion gateway."""
        if self._completion is None:
            self._completion = builders.build_completion_gateway(self.settings)
        return self._completion

    @property
    def orchestrator(self):
        """Get cached ingestion orchestrator."""
        if self._orchestrator is None:
            scheduler = None
            if self.settings.ingestion.dispatch_mode == "celery":
                from docchat.workers.tasks.document_ingestion import CeleryContinuationScheduler

                scheduler = CeleryContinuationScheduler()
            self._orchestrator = builders.build_ingestion_orchestrator(
                self.settings,
                self.session_factory,
                self.object_store,
                self.embedder,
                scheduler=scheduler,
            )
        return self._orchestrator

    @property
    def dispatcher(self):
        """Get cached ingestion dispatcher."""
        if self._dispatcher is None:
            ingest_config = self.settings.ingestion
            self._dispatcher = IngestionDispatcher(
                self.orchestrator,
                mode=ingest_config.dispatch_mode,
                resumable=ingest_config.resumable,
            )
        return self._dispatcher

    @property
    def retriever(self):
        """Get cached retrieval orchestrator."""
        if self._retriever is None:
            self._retriever = builders.build_retrieval_orchestrator(
                self.settings, self.session_factory, self.embedder
            )
        return self._retriever

    @property
    def assembler(self):
        """Get cached citation assembler."""
        if self._assembler is None:
            self._assembler = builders.build_citation_assembler(
                self.settings, self.session_factory, self.object_store
            )
        return self._assembler

    def clear(self) -> None:
        """Clear all cached instances."""
        self._object_store = None
        self._embedder = None
        self._completion = None
        self._orchestrator = None
        self._dispatcher = None
        self._retriever = None
        self._assembler = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentService: Document service bound to the request session
    """
    return DocumentService(db=db, object_store=get_service_cache().object_store)


def get_ingestion_dispatcher() -> IngestionDispatcher:
    """Get the process-wide ingestion dispatcher."""
    return get_service_cache().dispatcher


def get_reindex_service() -> ReindexService:
    """Get reindex service instance."""
    cache = get_service_cache()
    return ReindexService(
        cache.session_factory,
        cache.dispatcher,
        concurrency=cache.settings.ingestion.reindex_concurrency,
    )


def get_chat_service() -> ChatService:
    """
    Get chat service instance.

    Returns:
        ChatService: Chat service with retrieval, assembly and completion wired
    """
    cache = get_service_cache()
    return ChatService(
        retriever=cache.retriever,
        assembler=cache.assembler,
        completion=cache.completion,
        max_context_chunks=cache.settings.retrieval.max_context_chunks,
    )


def get_diagnostics_service() -> DiagnosticsService:
    """Get diagnostics service instance."""
    cache = get_service_cache()
    settings = cache.settings
    return DiagnosticsService(
        cache.session_factory,
        cache.embedder,
        cache.retriever,
        vector_index=VectorSearchIndex(cache.session_factory),
        provider=cache.embedder.provider,
        top_k=settings.retrieval.max_context_chunks,
    )
