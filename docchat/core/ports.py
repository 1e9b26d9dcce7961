"""
Collaborator interfaces used by the core.

Ingestion and retrieval only talk to these protocols; adapters live in
`docchat.boundary` and fakes in the test suite.

Dependencies: typing
System role: Port definitions (port/adapter seam)
"""

from collections.abc import Mapping, Sequence
from typing import NamedTuple, Protocol
from uuid import UUID

from langchain_core.messages import BaseMessage

from docchat.core.document_processing.models import IngestionCheckpoint
from docchat.models.citation import RetrievedFragment


class EmbeddingProvider(Protocol):
    """Text to fixed-dimension vectors."""

    dimension: int

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed texts, one vector per input in the same order."""

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single search query."""


class CompletionProvider(Protocol):
    """Prompt messages to answer text."""

    async def complete(self, messages: Sequence[BaseMessage]) -> str:
        """Return the model's answer."""


class ObjectStore(Protocol):
    """Blob storage with signed URL issuance."""

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key."""

    async def get(self, key: str) -> bytes:
        """Fetch bytes stored under key."""

    async def signed_url(self, key: str, expires_in: int) -> str:
        """Return a time-limited download URL."""


class SearchIndex(Protocol):
    """One ranked-retrieval tier."""

    name: str

    async def search(
        self,
        query_text: str,
        embedding: Sequence[float],
        k: int,
    ) -> list[RetrievedFragment]:
        """Return up to k fragments, best first. Raises SearchError on failure."""


class DocumentRef(NamedTuple):
    """Metadata the citation assembler needs about a document."""

    filename: str
    storage_path: str


class DocumentDirectory(Protocol):
    """Lookup of document metadata by id."""

    async def describe(self, document_ids: Sequence[UUID]) -> Mapping[UUID, DocumentRef]:
        """Return metadata for the ids that exist."""


class ContinuationScheduler(Protocol):
    """Queues the next window of a resumable ingestion run."""

    async def schedule(self, checkpoint: IngestionCheckpoint) -> None:
        """Arrange for continue_ingestion(checkpoint) to run later."""
