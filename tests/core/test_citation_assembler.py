"""
Test suite for citation numbering, context building and link rewriting.

System role: Verification of the citation assembler
"""

import uuid

import pytest

from docchat.core.exceptions import NoContextError
from docchat.core.ports import DocumentRef
from docchat.core.retrieval.citation_assembler import (
    CONTEXT_SEPARATOR,
    CitationAssembler,
    citation_order,
    clip,
    linkify,
)
from docchat.models.citation import Citation, RetrievedFragment
from fakes import FakeDocumentDirectory, InMemoryObjectStore

D1, D2, D3 = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()


def _fragment(document_id: uuid.UUID, content: str, index: int = 0) -> RetrievedFragment:
    return RetrievedFragment(document_id=document_id, chunk_index=index, content=content, similarity=0.5)


@pytest.fixture
def directory() -> FakeDocumentDirectory:
    return FakeDocumentDirectory(
        {
            D1: DocumentRef(filename="one.txt", storage_path="k1"),
            D2: DocumentRef(filename="two.pdf", storage_path="k2"),
            D3: DocumentRef(filename="three.docx", storage_path="k3"),
        }
    )


@pytest.fixture
def assembler(directory) -> CitationAssembler:
    return CitationAssembler(directory, InMemoryObjectStore(), url_ttl=60)


class TestClip:
    def test_clip_should_keep_short_text(self) -> None:
        assert clip("short", 10) == "short"

    def test_clip_should_cut_and_mark(self) -> None:
        assert clip("abcdefghij", 4) == "abcd ..."


class TestCitationOrder:
    def test_numbers_follow_first_appearance(self) -> None:
        fragments = [_fragment(D2, "a"), _fragment(D1, "b"), _fragment(D2, "c"), _fragment(D3, "d")]

        assert citation_order(fragments) == {D2: 1, D1: 2, D3: 3}


class TestCitationAssembler:
    """Test suite for CitationAssembler.assemble()."""

    @pytest.mark.asyncio
    async def test_assemble_should_number_documents_by_first_appearance(self, assembler) -> None:
        fragments = [_fragment(D2, "two first"), _fragment(D1, "one"), _fragment(D2, "two again"), _fragment(D3, "three")]

        context = await assembler.assemble(fragments)

        assert [(c.n, c.doc_id) for c in context.citations] == [(1, D2), (2, D1), (3, D3)]
        assert context.context_block.split(CONTEXT_SEPARATOR) == [
            "[#1] two first",
            "[#2] one",
            "[#1] two again",
            "[#3] three",
        ]
        assert context.fragments_used == 4

    @pytest.mark.asyncio
    async def test_assemble_should_fetch_metadata_in_one_call(self, assembler, directory) -> None:
        await assembler.assemble([_fragment(D1, "a"), _fragment(D2, "b"), _fragment(D1, "c")])

        assert directory.calls == [[D1, D2]]

    @pytest.mark.asyncio
    async def test_preview_should_come_from_first_fragment_of_document(self, assembler) -> None:
        fragments = [_fragment(D1, "x" * 300), _fragment(D1, "later")]

        context = await assembler.assemble(fragments)

        assert context.citations[0].preview == "x" * 180 + " ..."

    @pytest.mark.asyncio
    async def test_citation_should_carry_signed_url(self, assembler) -> None:
        context = await assembler.assemble([_fragment(D1, "a")])

        assert context.citations[0].url == "https://files.test/k1?ttl=60"
        assert context.citations[0].filename == "one.txt"

    @pytest.mark.asyncio
    async def test_signing_failure_should_leave_url_empty(self, directory) -> None:
        assembler = CitationAssembler(directory, InMemoryObjectStore(fail_signing_for={"k2"}))

        context = await assembler.assemble([_fragment(D1, "a"), _fragment(D2, "b")])

        urls = {c.doc_id: c.url for c in context.citations}
        assert urls[D1] is not None
        assert urls[D2] is None

    @pytest.mark.asyncio
    async def test_unknown_document_should_keep_number_without_citation(self, assembler) -> None:
        ghost = uuid.uuid4()
        fragments = [_fragment(ghost, "orphan"), _fragment(D1, "known")]

        context = await assembler.assemble(fragments)

        assert [(c.n, c.doc_id) for c in context.citations] == [(2, D1)]
        assert context.citation_numbers[ghost] == 1
        assert context.context_block.startswith("[#1] orphan")

    @pytest.mark.asyncio
    async def test_empty_fragments_should_raise_no_context(self, assembler) -> None:
        with pytest.raises(NoContextError):
            await assembler.assemble([])

    @pytest.mark.asyncio
    async def test_fragment_text_should_be_clipped(self, directory) -> None:
        assembler = CitationAssembler(directory, InMemoryObjectStore(), chunk_clip_len=5)

        context = await assembler.assemble([_fragment(D1, "abcdefghij")])

        assert context.context_block == "[#1] abcde ..."

    @pytest.mark.asyncio
    async def test_context_should_stop_at_budget(self, directory) -> None:
        assembler = CitationAssembler(directory, InMemoryObjectStore(), max_context_chars=40)
        fragments = [_fragment(D1, "a" * 20), _fragment(D2, "b" * 20), _fragment(D3, "c")]

        context = await assembler.assemble(fragments)

        assert context.context_block == "[#1] " + "a" * 20
        assert context.fragments_used == 1
        assert len(context.citations) == 3

    @pytest.mark.asyncio
    async def test_oversized_first_fragment_should_be_truncated(self, directory) -> None:
        assembler = CitationAssembler(directory, InMemoryObjectStore(), max_context_chars=10)

        context = await assembler.assemble([_fragment(D1, "z" * 100)])

        assert context.context_block == "[#1] zzzzz"
        assert context.fragments_used == 1


class TestLinkify:
    """Test suite for linkify()."""

    def test_marker_should_become_markdown_link(self) -> None:
        citations = [Citation(n=1, doc_id=D1, filename="one.txt", url="https://u/1")]

        assert linkify("Fact [#1].", citations) == 'Fact [\\#1](https://u/1 "one.txt").'

    def test_marker_without_url_should_be_left_alone(self) -> None:
        citations = [Citation(n=1, doc_id=D1, filename="one.txt", url=None)]

        assert linkify("Fact [#1].", citations) == "Fact [#1]."

    def test_unknown_number_should_be_left_alone(self) -> None:
        citations = [Citation(n=1, doc_id=D1, filename="one.txt", url="https://u/1")]

        assert linkify("See [#7]", citations) == "See [#7]"

    def test_quotes_in_filename_should_be_replaced(self) -> None:
        citations = [Citation(n=2, doc_id=D2, filename='my "best" notes.txt', url="https://u/2")]

        assert linkify("[#2]", citations) == "[\\#2](https://u/2 \"my 'best' notes.txt\")"

    def test_every_occurrence_should_be_rewritten(self) -> None:
        citations = [
            Citation(n=1, doc_id=D1, filename="a", url="https://u/1"),
            Citation(n=2, doc_id=D2, filename="b", url="https://u/2"),
        ]

        linked = linkify("[#1] then [#2] then [#1]", citations)

        assert linked.count("https://u/1") == 2
        assert linked.count("https://u/2") == 1
