"""
Component factories.

Build the core components with their boundary adapters from settings. The
API service cache and the Celery tasks both go through these functions so
the two processes are wired the same way.

Dependencies: docchat.configs, docchat.boundary, docchat.core
System role: Composition root helpers
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.aws.s3_client import S3ObjectStore
from docchat.boundary.db.document_directory import SqlDocumentDirectory
from docchat.boundary.llm.completion import CompletionGateway, create_chat_model
from docchat.boundary.llm.embeddings import EmbeddingGateway, create_embedding_gateway
from docchat.boundary.search import HybridSearchIndex, LocalCosineSearchIndex, VectorSearchIndex
from docchat.configs import Settings
from docchat.core.document_processing.chunker import TextChunker
from docchat.core.document_processing.extraction import FormatExtractor, PdfMode
from docchat.core.document_processing.orchestrator import IngestionOrchestrator
from docchat.core.ports import ContinuationScheduler, EmbeddingProvider, ObjectStore, SearchIndex
from docchat.core.retrieval import CitationAssembler, RetrievalOrchestrator

logger = logging.getLogger(__name__)


def build_object_store(settings: Settings) -> S3ObjectStore:
    s3_config = settings.s3_documents
    return S3ObjectStore(
        bucket=s3_config.bucket,
        region=s3_config.region,
        endpoint_url=s3_config.endpoint_url,
    )


def build_embedding_gateway(settings: Settings) -> EmbeddingGateway:
    return create_embedding_gateway(settings.embedding)


def build_completion_gateway(settings: Settings) -> CompletionGateway:
    return CompletionGateway(create_chat_model(settings.llm))


def build_ingestion_orchestrator(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    object_store: ObjectStore,
    embedder: EmbeddingProvider,
    scheduler: ContinuationScheduler | None = None,
) -> IngestionOrchestrator:
    """
    Build the ingestion orchestrator from ingestion settings.

    Args:
        settings: Application settings
        session_factory: Session factory for the process
        object_store: Source of uploaded files
        embedder: Embedding provider
        scheduler: Continuation scheduler for resumable runs

    Returns:
        IngestionOrchestrator: Configured orchestrator
    """
    ingest_config = settings.ingestion
    extractor = FormatExtractor(
        pdf_mode=PdfMode(ingest_config.pdf_mode),
        pdf_max_pages=ingest_config.pdf_max_pages,
        pdf_max_bytes=ingest_config.pdf_max_bytes,
    )
    return IngestionOrchestrator(
        session_factory,
        object_store,
        embedder,
        extractor=extractor,
        chunker=TextChunker(ingest_config.chunk_size, ingest_config.chunk_overlap),
        batch_size=ingest_config.batch_size,
        insert_batch_size=ingest_config.insert_batch_size,
        max_chunks=ingest_config.max_chunks,
        resumable_window=ingest_config.resumable_window,
        scheduler=scheduler,
    )


def build_search_tiers(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> list[SearchIndex]:
    """Enabled search tiers, most preferred first."""
    retrieval_config = settings.retrieval
    tiers: list[SearchIndex] = []
    if retrieval_config.enable_hybrid:
        tiers.append(HybridSearchIndex(session_factory))
    if retrieval_config.enable_vector:
        tiers.append(VectorSearchIndex(session_factory))
    if retrieval_config.enable_local_fallback:
        tiers.append(LocalCosineSearchIndex(session_factory, pool_size=retrieval_config.local_pool_size))
    if not tiers:
        logger.warning("All retrieval tiers are disabled; chat will find no context")
    return tiers


def build_retrieval_orchestrator(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    embedder: EmbeddingProvider,
) -> RetrievalOrchestrator:
    return RetrievalOrchestrator(embedder, build_search_tiers(settings, session_factory))


def build_citation_assembler(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    object_store: ObjectStore,
) -> CitationAssembler:
    retrieval_config = settings.retrieval
    return CitationAssembler(
        SqlDocumentDirectory(session_factory),
        object_store,
        url_ttl=retrieval_config.citation_url_ttl,
        chunk_clip_len=retrieval_config.chunk_clip_len,
        preview_len=retrieval_config.preview_len,
        max_context_chars=retrieval_config.max_context_chars,
    )
