"""
Ingestion result and checkpoint models.

Dependencies: pydantic
System role: Return and hand-off types of the ingestion orchestrator
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class IngestionOutcome(str, Enum):
    """Terminal or intermediate state reported by one ingestion call."""

    READY = "ready"
    ERROR = "error"
    CONTINUING = "continuing"
    SUPERSEDED = "superseded"
    QUEUED = "queued"


class IngestionCheckpoint(BaseModel):
    """Progress of a resumable ingestion run, persisted on the document."""

    document_id: UUID = Field(description="Document being ingested")
    generation: int = Field(description="Ingestion run that owns this checkpoint")
    next_offset: int = Field(ge=0, description="Index of the first chunk not yet stored")
    total_chunks: int = Field(ge=0, description="Chunk count of the run")


class IngestionResult(BaseModel):
    """Outcome of an ingestion call."""

    document_id: UUID = Field(description="Document identifier")
    status: IngestionOutcome = Field(description="Outcome of this call")
    chunk_count: int = Field(default=0, description="Chunks stored so far by the run")
    text_length: int | None = Field(default=None, description="Extracted text length")
    message: str | None = Field(default=None, description="Error or progress detail")
    processing_time_ms: float = Field(default=0.0, description="Wall time of this call")

    @property
    def ok(self) -> bool:
        """True unless the run failed."""
        return self.status != IngestionOutcome.ERROR
