"""
Citation assembly.

Turns retrieved fragments into a numbered prompt context and the matching
citation list, and rewrites `[#n]` markers in the model answer into
markdown links.

Numbering follows the first appearance of each document among the
fragments (retrieval order, not score). Signed URL failures leave the
citation without a URL.

Dependencies: docchat.core.ports
System role: Context and citation builder for the chat endpoint
"""

import asyncio
import logging
import re
from collections.abc import Sequence
from uuid import UUID

from docchat.core.exceptions import NoContextError, StorageError
from docchat.core.ports import DocumentDirectory, ObjectStore
from docchat.models.citation import AssembledContext, Citation, RetrievedFragment

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"
CITATION_MARKER = re.compile(r"\[#(\d+)\]")


def clip(text: str, limit: int) -> str:
    """Cut `text` to `limit` characters, marking the cut with " ..."."""
    if len(text) <= limit:
        return text
    return text[:limit] + " ..."


def citation_order(fragments: Sequence[RetrievedFragment]) -> dict[UUID, int]:
    """Number distinct documents 1..n by first appearance."""
    order = dict.fromkeys(fragment.document_id for fragment in fragments)
    return {document_id: index + 1 for index, document_id in enumerate(order)}


def linkify(answer: str, citations: Sequence[Citation]) -> str:
    """
    Replace `[#n]` with `[\\#n](url "filename")` for citations that have a URL.

    Markers without a matching citation, or whose citation has no URL, are
    left as they are. The `#` is escaped so markdown does not read a heading.

    Args:
        answer: Raw model answer
        citations: Citations of the same response

    Returns:
        str: Answer with links
    """
    by_number = {citation.n: citation for citation in citations if citation.url}

    def _replace(match: re.Match) -> str:
        citation = by_number.get(int(match.group(1)))
        if citation is None:
            return match.group(0)
        title = citation.filename.replace('"', "'")
        return f'[\\#{citation.n}]({citation.url} "{title}")'

    return CITATION_MARKER.sub(_replace, answer)


class CitationAssembler:
    """Build prompt context and citations for one chat response."""

    def __init__(
        self,
        documents: DocumentDirectory,
        object_store: ObjectStore,
        url_ttl: int = 3600,
        chunk_clip_len: int = 1200,
        preview_len: int = 180,
        max_context_chars: int = 16000,
    ) -> None:
        """
        Initialize assembler.

        Args:
            documents: Document metadata lookup
            object_store: Signed URL issuer
            url_ttl: Signed URL lifetime in seconds
            chunk_clip_len: Longest fragment text placed in the context
            preview_len: Citation preview length
            max_context_chars: Character budget of the context block
        """
        self._documents = documents
        self._object_store = object_store
        self._url_ttl = url_ttl
        self._chunk_clip_len = chunk_clip_len
        self._preview_len = preview_len
        self._max_context_chars = max_context_chars

    async def assemble(self, fragments: Sequence[RetrievedFragment]) -> AssembledContext:
        """
        Number sources, resolve URLs and build the context block.

        Args:
            fragments: Retrieved fragments, best first

        Returns:
            AssembledContext: Context block and citations ordered by number

        Raises:
            NoContextError: When `fragments` is empty
        """
        if not fragments:
            raise NoContextError()

        numbers = citation_order(fragments)
        refs = await self._documents.describe(list(numbers))

        first_fragment: dict[UUID, RetrievedFragment] = {}
        for fragment in fragments:
            first_fragment.setdefault(fragment.document_id, fragment)

        cited = [document_id for document_id in numbers if document_id in refs]
        missing = len(numbers) - len(cited)
        if missing:
            logger.warning("Fragments reference unknown documents", extra={"missing": missing})

        urls = await asyncio.gather(
            *(self._resolve_url(refs[document_id].storage_path) for document_id in cited)
        )
        citations = [
            Citation(
                n=numbers[document_id],
                doc_id=document_id,
                filename=refs[document_id].filename,
                url=url,
                preview=clip(first_fragment[document_id].content, self._preview_len),
            )
            for document_id, url in zip(cited, urls)
        ]

        context_block, used = self._build_context(fragments, numbers)
        return AssembledContext(
            context_block=context_block,
            citations=citations,
            citation_numbers=numbers,
            fragments_used=used,
        )

    async def _resolve_url(self, storage_path: str) -> str | None:
        try:
            return await self._object_store.signed_url(storage_path, self._url_ttl)
        except StorageError as e:
            logger.warning(f"{__name__}:_resolve_url - {e.message}", extra={"key": storage_path})
            return None

    def _build_context(
        self,
        fragments: Sequence[RetrievedFragment],
        numbers: dict[UUID, int],
    ) -> tuple[str, int]:
        """
        Join tagged fragments greedily within the character budget.

        Whole fragments are added in order until the next one would not fit.
        If not even the first fits, it is hard-truncated to the budget.
        """
        parts: list[str] = []
        total = 0
        for fragment in fragments:
            part = f"[#{numbers[fragment.document_id]}] {clip(fragment.content, self._chunk_clip_len)}"
            cost = len(part) + (len(CONTEXT_SEPARATOR) if parts else 0)
            if total + cost > self._max_context_chars:
                if not parts:
                    parts.append(part[: self._max_context_chars])
                break
            parts.append(part)
            total += cost
        return CONTEXT_SEPARATOR.join(parts), len(parts)
