"""
PostgreSQL ranked-search tiers.

Call the `hybrid_match_chunks` and `match_chunks` SQL functions. The query
embedding is sent as pgvector's text literal and cast in SQL.

Dependencies: sqlalchemy, asyncpg
System role: Hybrid and vector-only retrieval tiers
"""

from collections.abc import Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.core.exceptions import SearchError
from docchat.models.citation import RetrievedFragment

HYBRID_QUERY = text(
    "SELECT document_id, chunk_index, content, similarity, rank "
    "FROM hybrid_match_chunks(:query_text, CAST(CAST(:query_embedding AS text) AS vector), :match_count)"
)

VECTOR_QUERY = text(
    "SELECT document_id, chunk_index, content, similarity "
    "FROM match_chunks(CAST(CAST(:query_embedding AS text) AS vector), :match_count)"
)


def to_vector_literal(embedding: Sequence[float]) -> str:
    """Format a vector as pgvector's text input, e.g. "[0.1,0.2]"."""
    return "[" + ",".join(repr(float(value)) for value in embedding) + "]"


class _SqlFunctionSearch:
    name = "sql"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _run(self, statement, params: dict) -> list[RetrievedFragment]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement, params)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise SearchError(f"{self.name} search failed: {e}", tier=self.name) from e

        return [
            RetrievedFragment(
                document_id=row["document_id"],
                chunk_index=row.get("chunk_index"),
                content=row["content"],
                similarity=row.get("similarity"),
                rank=row.get("rank"),
            )
            for row in rows
        ]


class HybridSearchIndex(_SqlFunctionSearch):
    """Lexical plus vector ranking in one SQL call."""

    name = "hybrid"

    async def search(
        self,
        query_text: str,
        embedding: Sequence[float],
        k: int,
    ) -> list[RetrievedFragment]:
        return await self._run(
            HYBRID_QUERY,
            {
                "query_text": query_text,
                "query_embedding": to_vector_literal(embedding),
                "match_count": k,
            },
        )


class VectorSearchIndex(_SqlFunctionSearch):
    """Embedding-only nearest neighbours."""

    name = "vector"

    async def search(
        self,
        query_text: str,
        embedding: Sequence[float],
        k: int,
    ) -> list[RetrievedFragment]:
        return await self._run(
            VECTOR_QUERY,
            {"query_embedding": to_vector_literal(embedding), "match_count": k},
        )
