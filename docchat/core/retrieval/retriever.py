"""
Retrieval orchestrator.

Embeds the question once, then walks an ordered list of search tiers. The
first tier that succeeds with at least one fragment wins. A failing tier
is logged and skipped. When every tier comes back empty the result is an
empty list, never an exception.

Dependencies: docchat.core.ports
System role: Multi-tier fallback retrieval
"""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field

from docchat.core.exceptions import SearchError
from docchat.core.ports import EmbeddingProvider, SearchIndex
from docchat.models.citation import RetrievedFragment
from docchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class RetrievalTrace(BaseModel):
    """Fragments plus how they were obtained."""

    fragments: list[RetrievedFragment] = Field(default_factory=list)
    tier: str | None = Field(default=None, description="Tier that produced the fragments")
    attempted: list[str] = Field(default_factory=list, description="Tiers tried, in order")
    errors: dict[str, str] = Field(default_factory=dict, description="Failure message per tier")


class RetrievalOrchestrator:
    """Fallback retrieval over an ordered list of search tiers."""

    def __init__(self, embedder: EmbeddingProvider, tiers: Sequence[SearchIndex]) -> None:
        """
        Initialize orchestrator.

        Args:
            embedder: Query embedding provider
            tiers: Search tiers, most preferred first
        """
        self._embedder = embedder
        self._tiers = list(tiers)

    @property
    def tier_names(self) -> list[str]:
        return [tier.name for tier in self._tiers]

    async def retrieve(self, query: str, top_k: int) -> list[RetrievedFragment]:
        """
        Return up to `top_k` fragments for `query`, or [] when nothing matches.

        Raises:
            EmbeddingError: If the query cannot be embedded
        """
        trace = await self.retrieve_traced(query, top_k)
        return trace.fragments

    async def retrieve_traced(self, query: str, top_k: int) -> RetrievalTrace:
        """
        Same as `retrieve`, also reporting the tier used and per-tier errors.

        Args:
            query: User question
            top_k: Maximum fragments

        Returns:
            RetrievalTrace: Fragments and tier bookkeeping

        Raises:
            EmbeddingError: If the query cannot be embedded
        """
        embedding = await self._embedder.embed_query(query)
        trace = RetrievalTrace()

        for tier in self._tiers:
            trace.attempted.append(tier.name)
            try:
                fragments = await tier.search(query, embedding, top_k)
            except SearchError as e:
                logger.warning(
                    f"{__name__}:retrieve - tier {tier.name} failed: {e.message}",
                    extra={"tier": tier.name},
                )
                trace.errors[tier.name] = e.message
                continue
            except Exception as e:
                log_exception_with_context(logger, f"Unexpected failure in tier {tier.name}", e, tier=tier.name)
                trace.errors[tier.name] = f"{type(e).__name__}: {e}"
                continue

            if fragments:
                trace.fragments = fragments[:top_k]
                trace.tier = tier.name
                logger.info(
                    "Retrieved fragments",
                    extra={"tier": tier.name, "count": len(trace.fragments)},
                )
                return trace

        logger.info("No tier returned fragments", extra={"attempted": len(trace.attempted)})
        return trace
