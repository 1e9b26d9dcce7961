"""
Test suite for format classification and text extraction.

System role: Verification of extractor dispatch and failure reasons
"""

import io

import docx
import pytest
from pypdf import PdfWriter

from docchat.core.document_processing.extraction import (
    DocumentFormat,
    FormatExtractor,
    PdfMode,
    PdfPagesExtractor,
    PdfPlumberExtractor,
    classify,
)
from docchat.core.exceptions import EmptyExtractionError, ExtractionError, ExtractionReason


def _docx_bytes(*paragraphs: str) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "cell one"
    table.rows[0].cells[1].text = "cell two"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestClassify:
    """Test suite for classify()."""

    @pytest.mark.parametrize(
        "mime,name,expected",
        [
            ("application/pdf", "x.bin", DocumentFormat.PDF),
            ("", "report.PDF", DocumentFormat.PDF),
            (
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "x",
                DocumentFormat.WORD,
            ),
            ("application/msword", "", DocumentFormat.WORD),
            (None, "letter.docx", DocumentFormat.WORD),
            ("text/markdown", "readme.md", DocumentFormat.PLAIN_TEXT),
            ("application/octet-stream", "notes.txt", DocumentFormat.PLAIN_TEXT),
            ("image/png", "photo.png", DocumentFormat.UNSUPPORTED),
            (None, None, DocumentFormat.UNSUPPORTED),
        ],
    )
    def test_classify_should_map_mime_and_name(self, mime, name, expected) -> None:
        assert classify(mime, name) == expected

    def test_pdf_mime_should_win_over_txt_extension(self) -> None:
        assert classify("application/pdf", "notes.txt") == DocumentFormat.PDF


class TestFormatExtractor:
    """Test suite for FormatExtractor.extract()."""

    def test_plain_text_should_be_decoded_and_normalized(self) -> None:
        extractor = FormatExtractor()

        text = extractor.extract("Hello\r\n\r\n\r\nWorld  !".encode(), "text/plain", "a.txt")

        assert text == "Hello\n\nWorld !"

    def test_invalid_utf8_should_be_replaced_not_fail(self) -> None:
        text = FormatExtractor().extract(b"caf\xe9 latte", "text/plain", "a.txt")

        assert text.startswith("caf")
        assert "latte" in text

    def test_word_document_should_include_paragraphs_and_tables(self) -> None:
        data = _docx_bytes("First paragraph", "Second paragraph")

        text = FormatExtractor().extract(data, None, "doc.docx")

        assert "First paragraph" in text
        assert "Second paragraph" in text
        assert "cell one cell two" in text

    def test_unsupported_format_should_raise_with_reason(self) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            FormatExtractor().extract(b"\x89PNG", "image/png", "photo.png")

        assert exc_info.value.reason == ExtractionReason.UNSUPPORTED_FORMAT

    def test_unsupported_format_should_return_empty_when_allowed(self) -> None:
        assert FormatExtractor().extract(b"\x89PNG", "image/png", "photo.png", allow_empty=True) == ""

    def test_empty_text_should_raise_empty_extraction(self) -> None:
        with pytest.raises(EmptyExtractionError) as exc_info:
            FormatExtractor().extract(b"   \n\n  ", "text/plain", "blank.txt")

        assert exc_info.value.reason == ExtractionReason.EMPTY_RESULT

    def test_blank_pdf_should_raise_empty_extraction(self) -> None:
        with pytest.raises(EmptyExtractionError):
            FormatExtractor().extract(_blank_pdf_bytes(), "application/pdf", "scan.pdf")

    def test_corrupt_pdf_should_raise_library_failure(self) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            FormatExtractor().extract(b"not a pdf at all", "application/pdf", "broken.pdf")

        assert exc_info.value.reason == ExtractionReason.LIBRARY_FAILURE

    def test_oversized_pdf_should_raise_too_large(self) -> None:
        extractor = FormatExtractor(pdf_max_bytes=10)

        with pytest.raises(ExtractionError) as exc_info:
            extractor.extract(_blank_pdf_bytes(), "application/pdf", "big.pdf")

        assert exc_info.value.reason == ExtractionReason.TOO_LARGE

    def test_disabled_pdf_mode_should_treat_pdf_as_unsupported(self) -> None:
        extractor = FormatExtractor(pdf_mode=PdfMode.DISABLED)

        with pytest.raises(ExtractionError) as exc_info:
            extractor.extract(_blank_pdf_bytes(), "application/pdf", "doc.pdf")

        assert exc_info.value.reason == ExtractionReason.UNSUPPORTED_FORMAT
        assert extractor.extractor_for(DocumentFormat.PDF) is None

    def test_pdf_mode_should_select_extractor_variant(self) -> None:
        assert isinstance(
            FormatExtractor(pdf_mode="enabled").extractor_for(DocumentFormat.PDF), PdfPagesExtractor
        )
        assert isinstance(
            FormatExtractor(pdf_mode="alternate").extractor_for(DocumentFormat.PDF), PdfPlumberExtractor
        )
