"""ORM models; importing this package registers every table on Base.metadata."""

from docchat.boundary.db.models.chunk_model import ChunkModel
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus

__all__ = ["ChunkModel", "DocumentModel", "DocumentStatus"]
