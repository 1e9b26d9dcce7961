"""
Retrieval and citation domain models.

Dependencies: pydantic
System role: Data passed between retrieval, citation assembly and the chat API
"""

from uuid import UUID

from pydantic import BaseModel, Field


class RetrievedFragment(BaseModel):
    """A scored chunk returned by a search tier."""

    document_id: UUID = Field(description="Source document")
    chunk_index: int | None = Field(default=None, description="Position within the document")
    content: str = Field(description="Chunk text")
    similarity: float | None = Field(default=None, description="Cosine similarity, when known")
    rank: float | None = Field(default=None, description="Fused rank score, when known")


class Citation(BaseModel):
    """Numbered source reference for one chat response."""

    n: int = Field(ge=1, description="Citation number used as [#n] in the answer")
    doc_id: UUID = Field(description="Source document")
    filename: str = Field(description="Original file name")
    url: str | None = Field(default=None, description="Signed download URL")
    preview: str | None = Field(default=None, description="Short excerpt of the first fragment")


class AssembledContext(BaseModel):
    """Prompt context plus the citations it refers to."""

    context_block: str = Field(description="Tagged fragments joined for the prompt")
    citations: list[Citation] = Field(default_factory=list)
    citation_numbers: dict[UUID, int] = Field(
        default_factory=dict,
        description="Citation number per document, including documents without metadata",
    )
    fragments_used: int = Field(default=0, description="Fragments that fit the budget")
