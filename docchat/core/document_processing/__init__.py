"""
Document processing: normalization, extraction, chunking and ingestion.

The orchestrator lives in `docchat.core.document_processing.orchestrator`
and is imported from there.
"""

from docchat.core.document_processing.chunker import TextChunker, iter_chunks
from docchat.core.document_processing.extraction import DocumentFormat, FormatExtractor, PdfMode, classify
from docchat.core.document_processing.models import IngestionCheckpoint, IngestionOutcome, IngestionResult
from docchat.core.document_processing.normalizer import normalize

__all__ = [
    "DocumentFormat",
    "FormatExtractor",
    "IngestionCheckpoint",
    "IngestionOutcome",
    "IngestionResult",
    "PdfMode",
    "TextChunker",
    "classify",
    "iter_chunks",
    "normalize",
]
