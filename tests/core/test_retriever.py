"""
Test suite for multi-tier fallback retrieval.

System role: Verification of tier ordering, failure handling and tracing
"""

import uuid
from unittest.mock import AsyncMock

import pytest

from docchat.boundary.llm.embeddings import EmbeddingGateway
from docchat.core.exceptions import EmbeddingError
from docchat.core.retrieval.retriever import RetrievalOrchestrator
from docchat.models.citation import RetrievedFragment
from fakes import FakeSearchIndex, LetterCountEmbeddings, failing_tier


def _fragments(count: int) -> list[RetrievedFragment]:
    document_id = uuid.uuid4()
    return [
        RetrievedFragment(document_id=document_id, chunk_index=i, content=f"chunk {i}", similarity=1 - i / 10)
        for i in range(count)
    ]


@pytest.fixture
def embedder() -> EmbeddingGateway:
    return EmbeddingGateway(LetterCountEmbeddings(), LetterCountEmbeddings.dimension, "fake")


class TestRetrievalOrchestrator:
    """Test suite for RetrievalOrchestrator."""

    @pytest.mark.asyncio
    async def test_first_non_empty_tier_should_win(self, embedder) -> None:
        hybrid = FakeSearchIndex("hybrid", _fragments(2))
        vector = FakeSearchIndex("vector", _fragments(3))
        retriever = RetrievalOrchestrator(embedder, [hybrid, vector])

        fragments = await retriever.retrieve("question", 5)

        assert fragments == hybrid.fragments
        assert vector.calls == 0

    @pytest.mark.asyncio
    async def test_failing_tier_should_fall_through(self, embedder) -> None:
        vector = FakeSearchIndex("vector", _fragments(1))
        retriever = RetrievalOrchestrator(embedder, [failing_tier("hybrid"), vector])

        trace = await retriever.retrieve_traced("question", 5)

        assert trace.tier == "vector"
        assert trace.attempted == ["hybrid", "vector"]
        assert trace.errors == {"hybrid": "hybrid is down"}
        assert trace.fragments == vector.fragments

    @pytest.mark.asyncio
    async def test_empty_tier_should_fall_through(self, embedder) -> None:
        local = FakeSearchIndex("local", _fragments(1))
        retriever = RetrievalOrchestrator(embedder, [FakeSearchIndex("hybrid"), FakeSearchIndex("vector"), local])

        trace = await retriever.retrieve_traced("question", 5)

        assert trace.tier == "local"

    @pytest.mark.asyncio
    async def test_unexpected_exception_should_fall_through(self, embedder) -> None:
        broken = FakeSearchIndex("hybrid", error=RuntimeError("boom"))
        retriever = RetrievalOrchestrator(embedder, [broken, FakeSearchIndex("vector", _fragments(1))])

        trace = await retriever.retrieve_traced("question", 5)

        assert trace.tier == "vector"
        assert "RuntimeError" in trace.errors["hybrid"]

    @pytest.mark.asyncio
    async def test_all_tiers_empty_should_return_empty_list(self, embedder) -> None:
        retriever = RetrievalOrchestrator(embedder, [failing_tier("hybrid"), FakeSearchIndex("vector")])

        assert await retriever.retrieve("question", 5) == []

    @pytest.mark.asyncio
    async def test_no_tiers_should_return_empty_list(self, embedder) -> None:
        assert await RetrievalOrchestrator(embedder, []).retrieve("question", 5) == []

    @pytest.mark.asyncio
    async def test_result_should_be_capped_at_top_k(self, embedder) -> None:
        retriever = RetrievalOrchestrator(embedder, [FakeSearchIndex("hybrid", _fragments(10))])

        assert len(await retriever.retrieve("question", 3)) == 3

    @pytest.mark.asyncio
    async def test_embedding_failure_should_propagate(self) -> None:
        embedder = AsyncMock()
        embedder.embed_query = AsyncMock(side_effect=EmbeddingError("down", provider="fake"))
        tier = FakeSearchIndex("hybrid", _fragments(1))

        with pytest.raises(EmbeddingError):
            await RetrievalOrchestrator(embedder, [tier]).retrieve("question", 5)
        assert tier.calls == 0

    def test_tier_names_should_follow_order(self, embedder) -> None:
        retriever = RetrievalOrchestrator(embedder, [FakeSearchIndex("hybrid"), FakeSearchIndex("local")])

        assert retriever.tier_names == ["hybrid", "local"]
