"""
Document domain models and schemas.

Request/response schemas for upload, status and listing.

Dependencies: pydantic
System role: Document API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from docchat.core.document_processing.models import IngestionResult


class UploadedFile(BaseModel):
    """Outcome for one file of a multipart upload."""

    name: str = Field(description="Original file name")
    size: int = Field(description="Size in bytes")
    type: str = Field(description="Declared MIME type")
    doc_id: UUID | None = Field(default=None, description="Assigned document id")
    storage_path: str | None = Field(default=None, description="Object-store key")
    ingest: IngestionResult | None = Field(default=None, description="Ingestion dispatch outcome")
    error: str | None = Field(default=None, description="Failure for this file")

    @property
    def ok(self) -> bool:
        return self.error is None and self.ingest is not None and self.ingest.ok


class UploadResponse(BaseModel):
    """Response schema for POST /upload."""

    ok: bool = Field(description="True when every file was stored and ingested")
    results: list[UploadedFile]


class DocumentView(BaseModel):
    """Document fields exposed by the status endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    mime_type: str
    size_bytes: int | None = None
    status: str
    stage: str | None = None
    error: str | None = None
    original_text_len: int | None = None
    created_at: datetime


class DocumentStatusResponse(BaseModel):
    """Response schema for GET /doc-status."""

    ok: bool = True
    doc: DocumentView
    chunks: int = Field(description="Searchable chunks of the current ingestion run")


class DocumentListResponse(BaseModel):
    """Response schema for GET /list-docs."""

    ids: list[UUID] = Field(description="Document ids, newest first")
