"""FastAPI dependency providers."""

from docchat.api.deps.dependencies import (
    get_chat_service,
    get_diagnostics_service,
    get_document_service,
    get_ingestion_dispatcher,
    get_reindex_service,
    get_service_cache,
)

__all__ = [
    "get_chat_service",
    "get_diagnostics_service",
    "get_document_service",
    "get_ingestion_dispatcher",
    "get_reindex_service",
    "get_service_cache",
]
