"""
Overlapping window chunker.

Splits canonical text into fixed-size windows that overlap, preferring to
cut on a space near the end of the window.

Dependencies: None
System role: Second stage of the ingestion pipeline
"""

from collections.abc import Iterator

DEFAULT_CHUNK_SIZE = 900
DEFAULT_CHUNK_OVERLAP = 150

# A soft cut must land at least this far before the window end...
SOFT_CUT_MARGIN = 20
# ...and at least this far after the window start.
MIN_SOFT_CUT_OFFSET = 200


def iter_chunks(
    text: str,
    size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> Iterator[str]:
    """
    Lazily yield overlapping chunks of `text`.

    Each step takes the window [i, i + size). Unless the window already
    reaches the end of the text, the cut moves back to the last space at or
    before `end - SOFT_CUT_MARGIN` when that space lies more than
    `MIN_SOFT_CUT_OFFSET` characters after `i`. The stripped window is
    yielded when non-empty, and the cursor moves to
    `max(i + 1, cut - overlap)` so it always advances.

    Args:
        text: Normalized document text
        size: Maximum window length in characters
        overlap: Characters repeated between consecutive windows

    Yields:
        str: Non-empty chunk text

    Raises:
        ValueError: When size is not positive or overlap is outside [0, size)
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")
    if not 0 <= overlap < size:
        raise ValueError(f"overlap must be in [0, {size}), got {overlap}")

    length = len(text)
    i = 0
    while i < length:
        end = min(i + size, length)
        cut = end
        if end < length:
            soft = text.rfind(" ", 0, max(end - SOFT_CUT_MARGIN + 1, 0))
            if soft > i + MIN_SOFT_CUT_OFFSET:
                cut = soft

        piece = text[i:cut].strip()
        if piece:
            yield piece

        if cut >= length:
            break
        i = max(i + 1, cut - overlap)


class TextChunker:
    """Chunk documents with a fixed size and overlap."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ) -> None:
        """
        Initialize chunker.

        Args:
            chunk_size: Window length in characters
            chunk_overlap: Overlap between windows

        Raises:
            ValueError: When the parameters cannot guarantee progress
        """
        if chunk_size <= 0 or not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be smaller than a positive chunk_size")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    def chunk(self, text: str) -> list[str]:
        """Return every chunk of `text` in order."""
        return list(iter_chunks(text, self._chunk_size, self._chunk_overlap))
