"""
Ingestion request/response schemas.

Dependencies: pydantic
System role: Ingest and re-index API contracts
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from docchat.core.document_processing.models import IngestionResult


class IngestRequest(BaseModel):
    """Body of POST /ingest: one document or all of them."""

    model_config = ConfigDict(populate_by_name=True)

    doc_id: UUID | None = Field(default=None, alias="docId", description="Document to ingest")
    all: bool = Field(default=False, description="Ingest every document")


class IngestResponse(BaseModel):
    """Response schema for POST /ingest."""

    ok: bool
    queued: list[UUID] = Field(description="Documents handed to the dispatcher")
    results: list[IngestionResult] = Field(default_factory=list)


class ReindexScope(str, Enum):
    """Which documents a bulk re-index targets."""

    ALL = "all"
    PENDING = "pending"


class ReindexRequest(BaseModel):
    """Body of POST /reindex."""

    scope: ReindexScope = Field(default=ReindexScope.PENDING, description="all or pending")
    ids: list[UUID] | None = Field(default=None, description="Explicit targets, overriding scope")
    limit: int | None = Field(default=None, ge=1, description="Cap on targets")


class ReindexFailure(BaseModel):
    """A document the re-index could not ingest."""

    doc_id: UUID
    error: str


class ReindexReport(BaseModel):
    """Aggregated outcome of a bulk re-index."""

    ok: bool
    queued: int = Field(description="Documents targeted")
    succeeded: list[UUID] = Field(default_factory=list)
    failed: list[ReindexFailure] = Field(default_factory=list)
