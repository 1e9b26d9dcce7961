"""
Format-aware text extraction.

A pure classifier maps (MIME type, file name) to a document format; each
format has an extractor variant behind the `TextExtractor` interface.
`FormatExtractor` picks the variant, normalizes the output and turns every
failure into an `ExtractionError` with a reason code.

Dependencies: pypdf, pdfplumber, python-docx
System role: First stage of the ingestion pipeline
"""

import io
import logging
from enum import Enum
from typing import Protocol

import docx
import pdfplumber
from pypdf import PdfReader

from docchat.core.document_processing.normalizer import normalize
from docchat.core.exceptions import (
    EmptyExtractionError,
    ExtractionError,
    ExtractionReason,
)

logger = logging.getLogger(__name__)


class DocumentFormat(str, Enum):
    """Formats the pipeline knows how to read."""

    PDF = "pdf"
    WORD = "word"
    PLAIN_TEXT = "plain_text"
    UNSUPPORTED = "unsupported"


class PdfMode(str, Enum):
    """PDF handling policy."""

    ENABLED = "enabled"
    ALTERNATE = "alternate"
    DISABLED = "disabled"


def classify(mime_type: str | None, filename: str | None) -> DocumentFormat:
    """
    Classify a file by declared MIME type and name, most specific first.

    Args:
        mime_type: Declared content type (may be empty)
        filename: File name or storage key

    Returns:
        DocumentFormat: Detected format, UNSUPPORTED when nothing matches
    """
    mime = (mime_type or "").lower()
    name = (filename or "").lower()

    if "pdf" in mime or name.endswith(".pdf"):
        return DocumentFormat.PDF
    if "word" in mime or name.endswith(".docx"):
        return DocumentFormat.WORD
    if mime.startswith("text/") or name.endswith(".txt"):
        return DocumentFormat.PLAIN_TEXT
    return DocumentFormat.UNSUPPORTED


class TextExtractor(Protocol):
    """Turns raw file bytes into (unnormalized) text."""

    def extract(self, data: bytes) -> str:
        """Return the text content of `data`."""


class PlainTextExtractor:
    """UTF-8 passthrough; undecodable bytes are replaced."""

    def extract(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace")


class WordDocumentExtractor:
    """Paragraph and table text from .docx files via python-docx."""

    def extract(self, data: bytes) -> str:
        document = docx.Document(io.BytesIO(data))
        parts = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                parts.append(" ".join(cell.text for cell in row.cells))
        return "\n".join(parts)


class PdfPagesExtractor:
    """Page-by-page PDF text via pypdf, bounded by pages and bytes."""

    def __init__(self, max_pages: int = 200, max_bytes: int = 25 * 1024 * 1024) -> None:
        """
        Initialize PDF extractor.

        Args:
            max_pages: Pages read before stopping
            max_bytes: Largest accepted file size
        """
        self._max_pages = max_pages
        self._max_bytes = max_bytes

    def _check_size(self, data: bytes) -> None:
        if len(data) > self._max_bytes:
            raise ExtractionError(
                f"PDF is {len(data)} bytes, limit is {self._max_bytes}",
                ExtractionReason.TOO_LARGE,
                details={"size_bytes": len(data)},
            )

    def extract(self, data: bytes) -> str:
        self._check_size(data)
        reader = PdfReader(io.BytesIO(data))
        pages = []
        for page in reader.pages[: self._max_pages]:
            pages.append(page.extract_text() or "")
        return "\n".join(pages)


class PdfPlumberExtractor(PdfPagesExtractor):
    """Alternate PDF extractor built on pdfplumber's layout analysis."""

    def extract(self, data: bytes) -> str:
        self._check_size(data)
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages[: self._max_pages]]
        return "\n".join(pages)


class FormatExtractor:
    """Select an extractor by format, normalize, and fail explicitly."""

    def __init__(
        self,
        pdf_mode: PdfMode | str = PdfMode.ENABLED,
        pdf_max_pages: int = 200,
        pdf_max_bytes: int = 25 * 1024 * 1024,
    ) -> None:
        """
        Initialize extractor registry.

        Args:
            pdf_mode: enabled (pypdf), alternate (pdfplumber) or disabled
            pdf_max_pages: Page budget for PDF extraction
            pdf_max_bytes: Size budget for PDF extraction
        """
        self._pdf_mode = PdfMode(pdf_mode)
        self._extractors: dict[DocumentFormat, TextExtractor] = {
            DocumentFormat.PLAIN_TEXT: PlainTextExtractor(),
            DocumentFormat.WORD: WordDocumentExtractor(),
        }
        if self._pdf_mode == PdfMode.ENABLED:
            self._extractors[DocumentFormat.PDF] = PdfPagesExtractor(pdf_max_pages, pdf_max_bytes)
        elif self._pdf_mode == PdfMode.ALTERNATE:
            self._extractors[DocumentFormat.PDF] = PdfPlumberExtractor(pdf_max_pages, pdf_max_bytes)

    def extractor_for(self, document_format: DocumentFormat) -> TextExtractor | None:
        """Return the extractor for a format, or None when it is not handled."""
        return self._extractors.get(document_format)

    def extract(
        self,
        data: bytes,
        mime_type: str | None,
        filename: str | None,
        allow_empty: bool = False,
    ) -> str:
        """
        Extract normalized text from a stored file.

        Args:
            data: File bytes
            mime_type: Declared MIME type
            filename: Original name or storage key
            allow_empty: Return "" instead of failing for unsupported or
                empty files (diagnostic callers)

        Returns:
            str: Normalized text

        Raises:
            ExtractionError: Unsupported format, library failure or oversize file
            EmptyExtractionError: Text is empty after normalization
        """
        document_format = classify(mime_type, filename)
        extractor = self.extractor_for(document_format)
        details = {"mime_type": mime_type, "file_name": filename, "format": document_format.value}

        if extractor is None:
            if allow_empty:
                logger.info("Skipping unsupported file", extra=details)
                return ""
            raise ExtractionError(
                f"Unsupported format for {filename or 'file'} ({mime_type or 'unknown type'})",
                ExtractionReason.UNSUPPORTED_FORMAT,
                details=details,
            )

        try:
            raw = extractor.extract(data)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"{document_format.value} extraction failed: {type(e).__name__}: {e}",
                ExtractionReason.LIBRARY_FAILURE,
                details=details,
            ) from e

        text = normalize(raw)
        if not text and not allow_empty:
            raise EmptyExtractionError(details=details)

        logger.debug(
            "Extracted text",
            extra={**details, "raw_length": len(raw), "text_length": len(text)},
        )
        return text
