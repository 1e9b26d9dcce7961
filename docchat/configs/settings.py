"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and the Celery workers.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from docchat.configs.base import BaseSettings
from docchat.configs.celery_config import CelerySettings
from docchat.configs.database import DatabaseSettings
from docchat.configs.models import EmbeddingSettings, LLMSettings
from docchat.configs.pipeline import IngestionSettings, RetrievalSettings
from docchat.configs.s3_documents import S3DocumentsSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    s3_documents: S3DocumentsSettings = Field(default_factory=S3DocumentsSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables (and `.env`) are read once, on first call.

    Returns:
        Settings: Application settings instance

    Usage:
        from docchat.configs import get_settings
        settings = get_settings()
    """
    return Settings()
