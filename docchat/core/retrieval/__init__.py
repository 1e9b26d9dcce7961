"""Retrieval orchestration, similarity scoring and citation assembly."""

from docchat.core.retrieval.citation_assembler import CitationAssembler, clip, linkify
from docchat.core.retrieval.retriever import RetrievalOrchestrator, RetrievalTrace
from docchat.core.retrieval.similarity import cosine_similarity

__all__ = [
    "CitationAssembler",
    "RetrievalOrchestrator",
    "RetrievalTrace",
    "clip",
    "cosine_similarity",
    "linkify",
]
