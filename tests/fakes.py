"""
In-memory fakes for the collaborator interfaces.

Dependencies: langchain_core
System role: Deterministic stand-ins for storage, embeddings, search and scheduling
"""

import string
from collections.abc import Mapping, Sequence
from uuid import UUID

from langchain_core.embeddings import Embeddings

from docchat.core.document_processing.models import IngestionCheckpoint
from docchat.core.exceptions import SearchError, StorageError
from docchat.core.ports import DocumentRef
from docchat.models.citation import RetrievedFragment

LETTERS = string.ascii_lowercase


class InMemoryObjectStore:
    """Dict-backed object store issuing fake signed URLs."""

    def __init__(self, fail_signing_for: set[str] | None = None) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_signing_for = fail_signing_for or set()

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self.objects[key] = (data, content_type)

    async def get(self, key: str) -> bytes:
        if key not in self.objects:
            raise StorageError(f"No such key: {key}", operation="get", key=key)
        return self.objects[key][0]

    async def signed_url(self, key: str, expires_in: int) -> str:
        if key in self.fail_signing_for:
            raise StorageError("signing disabled", operation="sign", key=key)
        return f"https://files.test/{key}?ttl={expires_in}"


class LetterCountEmbeddings(Embeddings):
    """26-dimensional letter histogram; similar texts get similar vectors."""

    dimension = len(LETTERS)

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(letter)) for letter in LETTERS]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._vector(text)


class FakeSearchIndex:
    """Search tier returning canned fragments or raising."""

    def __init__(self, name: str, fragments: list[RetrievedFragment] | None = None, error: Exception | None = None):
        self.name = name
        self.fragments = fragments or []
        self.error = error
        self.calls = 0

    async def search(self, query_text: str, embedding: Sequence[float], k: int) -> list[RetrievedFragment]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.fragments[:k]


class FakeDocumentDirectory:
    """Fixed id -> DocumentRef mapping."""

    def __init__(self, refs: Mapping[UUID, DocumentRef]) -> None:
        self.refs = dict(refs)
        self.calls: list[list[UUID]] = []

    async def describe(self, document_ids: Sequence[UUID]) -> Mapping[UUID, DocumentRef]:
        self.calls.append(list(document_ids))
        return {document_id: self.refs[document_id] for document_id in document_ids if document_id in self.refs}


class RecordingScheduler:
    """Continuation scheduler that records checkpoints."""

    def __init__(self) -> None:
        self.checkpoints: list[IngestionCheckpoint] = []

    async def schedule(self, checkpoint: IngestionCheckpoint) -> None:
        self.checkpoints.append(checkpoint)


def failing_tier(name: str) -> FakeSearchIndex:
    return FakeSearchIndex(name, error=SearchError(f"{name} is down", tier=name))
