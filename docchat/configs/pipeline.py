"""
Ingestion and retrieval configuration.

Chunking, batching, PDF policy and bulk re-index limits for the ingestion
pipeline; context budget and fallback tiers for retrieval.

Dependencies: pydantic, pydantic_settings
System role: Pipeline tuning knobs
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestionSettings(BaseSettings):
    """Settings for the document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="INGEST_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=900, description="Characters per chunk window")
    chunk_overlap: int = Field(default=150, description="Characters shared by neighbouring chunks")
    batch_size: int = Field(default=32, description="Chunks per embedding request")
    insert_batch_size: int = Field(default=16, description="Chunk rows per insert statement")
    max_chunks: int = Field(default=0, description="Cap on chunks per document (0 = no cap)")

    pdf_mode: str = Field(default="enabled", description="enabled, alternate or disabled")
    pdf_max_pages: int = Field(default=200, description="Pages read from a PDF")
    pdf_max_bytes: int = Field(default=25 * 1024 * 1024, description="Largest PDF accepted")

    resumable: bool = Field(
        default=False,
        description="Process documents in checkpointed windows",
    )
    resumable_window: int = Field(default=64, description="Chunks per resumable invocation")

    reindex_concurrency: int = Field(default=4, description="Parallel ingestions during reindex")
    dispatch_mode: str = Field(default="inline", description="inline or celery")

    @model_validator(mode="after")
    def _check_chunking(self) -> "IngestionSettings":
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError("chunk_overlap must be in [0, chunk_size)")
        return self


class RetrievalSettings(BaseSettings):
    """Settings for retrieval and citation assembly."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    max_context_chunks: int = Field(default=12, description="Fragments requested per question")
    max_context_chars: int = Field(default=16000, description="Character budget for the context block")
    chunk_clip_len: int = Field(default=1200, description="Longest fragment text placed in context")
    citation_url_ttl: int = Field(default=3600, description="Signed URL lifetime in seconds")
    preview_len: int = Field(default=180, description="Citation preview length")

    enable_hybrid: bool = Field(default=True, description="Use the hybrid search function")
    enable_vector: bool = Field(default=True, description="Use the vector search function")
    enable_local_fallback: bool = Field(default=True, description="Score a chunk pool in process")
    local_pool_size: int = Field(default=500, description="Chunk rows scored by the local tier")
