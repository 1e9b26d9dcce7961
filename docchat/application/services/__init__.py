"""Application services."""

from docchat.application.services.chat_service import ChatService
from docchat.application.services.diagnostics_service import DiagnosticsService
from docchat.application.services.document_service import DocumentService, sanitize_filename
from docchat.application.services.ingestion_dispatcher import DispatchMode, IngestionDispatcher
from docchat.application.services.reindex_service import ReindexService

__all__ = [
    "ChatService",
    "DiagnosticsService",
    "DispatchMode",
    "DocumentService",
    "IngestionDispatcher",
    "ReindexService",
    "sanitize_filename",
]
