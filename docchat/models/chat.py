"""
Chat request/response schemas.

Dependencies: pydantic
System role: Chat API contracts
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from docchat.models.citation import Citation


class ChatMessage(BaseModel):
    """One turn of the client-side conversation."""

    role: Literal["user", "assistant", "system"]
    content: str = ""


class ChatRequest(BaseModel):
    """Body of POST /chat: `text`, or the last user message of `messages`."""

    messages: list[ChatMessage] = Field(default_factory=list)
    text: str | None = None

    def question(self) -> str:
        """Return the question to answer, stripped (may be empty)."""
        if self.text and self.text.strip():
            return self.text.strip()
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content.strip()
        return ""


class TopFragment(BaseModel):
    """Debug view of a fragment used for the answer."""

    n: int | None = Field(default=None, description="Citation number of its document")
    doc_id: UUID
    chunk_index: int | None = None
    similarity: float | None = None
    preview: str


class ChatResponse(BaseModel):
    """Response schema for POST /chat."""

    answer: str
    answer_linked: str = Field(description="Answer with [#N] rewritten to links")
    citations: list[Citation] = Field(default_factory=list)
    top: list[TopFragment] = Field(default_factory=list)
