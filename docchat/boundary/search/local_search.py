"""
In-process cosine retrieval tier.

Last-resort tier for when the SQL search functions are missing or failing:
loads a bounded pool of chunk rows (optionally pre-filtered by query
keywords) and ranks them locally.

Dependencies: sqlalchemy, numpy (via docchat.core.retrieval.similarity)
System role: Local fallback retrieval tier
"""

import logging
import re
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.core.exceptions import SearchError
from docchat.core.retrieval.similarity import cosine_similarity
from docchat.models.citation import RetrievedFragment

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\w+")
MIN_KEYWORD_LENGTH = 4
MAX_KEYWORDS = 8


def extract_keywords(query_text: str) -> list[str]:
    """Distinct lower-cased words of at least MIN_KEYWORD_LENGTH characters, in query order."""
    words = [word.lower() for word in _WORD.findall(query_text) if len(word) >= MIN_KEYWORD_LENGTH]
    return list(dict.fromkeys(words))[:MAX_KEYWORDS]


class LocalCosineSearchIndex:
    """Score a bounded chunk pool with cosine similarity."""

    name = "local"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        pool_size: int = 500,
    ) -> None:
        """
        Initialize local tier.

        Args:
            session_factory: Session factory for reading chunk rows
            pool_size: Maximum rows scored per query
        """
        self._session_factory = session_factory
        self._pool_size = pool_size

    async def search(
        self,
        query_text: str,
        embedding: Sequence[float],
        k: int,
    ) -> list[RetrievedFragment]:
        """
        Rank pooled chunks by similarity to `embedding`.

        Raises:
            SearchError: If the chunk pool cannot be loaded
        """
        keywords = extract_keywords(query_text)
        try:
            async with self._session_factory() as session:
                rows = await chunk_crud.get_pool(session, self._pool_size, keywords)
                if not rows and keywords:
                    rows = await chunk_crud.get_pool(session, self._pool_size)
        except SQLAlchemyError as e:
            raise SearchError(f"local search failed: {e}", tier=self.name) from e

        scored = []
        for row in rows:
            if row.embedding is None or len(row.embedding) != len(embedding):
                continue
            scored.append((cosine_similarity(embedding, row.embedding), row))

        # list.sort is stable, so ties keep pool order
        scored.sort(key=lambda pair: pair[0], reverse=True)
        logger.debug(
            "Local tier scored pool",
            extra={"pool_size": len(rows), "scored": len(scored), "keywords": len(keywords)},
        )
        return [
            RetrievedFragment(
                document_id=row.document_id,
                chunk_index=row.chunk_index,
                content=row.content,
                similarity=score,
            )
            for score, row in scored[:k]
        ]
