"""
Diagnostics response schema.

Dependencies: pydantic
System role: GET /diag contract
"""

from pydantic import BaseModel, Field


class ProbeResult(BaseModel):
    """Outcome of a single collaborator probe."""

    ok: bool = False
    error: str | None = None
    count: int | None = Field(default=None, description="Rows returned, where applicable")


class IndexStats(BaseModel):
    documents: int | None = None
    chunks: int | None = None
    by_status: dict[str, int] = Field(default_factory=dict)


class QueryPreview(BaseModel):
    similarity: float | None = None
    preview: str


class QueryDryRun(BaseModel):
    """Retrieval run for the `q` parameter."""

    text: str
    provider: str
    tier: str | None = Field(default=None, description="Tier that produced results")
    attempted: list[str] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)
    top: list[QueryPreview] = Field(default_factory=list)
    error: str | None = None


class DiagnosticsReport(BaseModel):
    """Response schema for GET /diag."""

    ok: bool = True
    stats: IndexStats
    sample_chunk_exists: bool = False
    vector_probe: ProbeResult
    embeddings: ProbeResult
    tiers: list[str] = Field(default_factory=list)
    query: QueryDryRun | None = None
