"""Retrieval tiers implementing the SearchIndex port."""

from docchat.boundary.search.local_search import LocalCosineSearchIndex
from docchat.boundary.search.pg_search import HybridSearchIndex, VectorSearchIndex

__all__ = ["HybridSearchIndex", "LocalCosineSearchIndex", "VectorSearchIndex"]
