"""
Test suite for the overlapping window chunker.

System role: Verification of chunk boundaries, overlap and progress
"""

import random

import pytest

from docchat.core.document_processing.chunker import TextChunker, iter_chunks


class TestIterChunks:
    """Test suite for iter_chunks()."""

    def test_short_text_should_yield_single_chunk(self) -> None:
        assert list(iter_chunks("short text")) == ["short text"]

    def test_empty_text_should_yield_nothing(self) -> None:
        assert list(iter_chunks("")) == []

    def test_3000_chars_without_spaces_should_give_four_chunks(self) -> None:
        """Windows start at 0, 750, 1500 and 2250 with size 900 and overlap 150."""
        text = "a" * 3000

        chunks = list(iter_chunks(text, 900, 150))

        assert [len(chunk) for chunk in chunks] == [900, 900, 900, 750]

    def test_chunks_should_cover_every_character(self) -> None:
        text = "".join(chr(ord("a") + i % 26) for i in range(2500))

        chunks = list(iter_chunks(text, 900, 150))

        assert chunks[0] == text[:900]
        assert text.endswith(chunks[-1])
        # Each chunk overlaps the next by the configured amount
        for current, following in zip(chunks, chunks[1:]):
            assert current[-150:] == following[:150]

    def test_should_prefer_cutting_on_a_space(self) -> None:
        words = " ".join(["word"] * 400)

        chunks = list(iter_chunks(words, 900, 150))

        assert all(len(chunk) <= 900 for chunk in chunks)
        assert all(not chunk.endswith(" wor") for chunk in chunks[:-1])
        assert all(chunk.split(" ")[-1] == "word" for chunk in chunks[:-1])

    def test_should_not_soft_cut_close_to_window_start(self) -> None:
        """A space only 100 chars into the window is ignored."""
        text = "x" * 100 + " " + "y" * 2000

        chunks = list(iter_chunks(text, 900, 150))

        assert len(chunks[0]) == 900

    def test_should_always_make_progress(self) -> None:
        text = "ab " * 5000

        chunks = list(iter_chunks(text, 50, 49))

        assert len(chunks) < len(text)
        assert chunks

    def test_random_texts_should_yield_bounded_non_empty_chunks(self) -> None:
        """Seeded word and space texts across many size and overlap pairs."""
        rng = random.Random(7)
        words = ["a", "an", "the", "word", "chunker", "overlapping", "window"]

        for _ in range(300):
            # Arrange
            parts = [rng.choice(words + [" ", "  "]) for _ in range(rng.randint(0, 80))]
            text = " ".join(parts)
            size = rng.randint(1, 120)
            overlap = rng.randint(0, size - 1)

            # Act
            chunks = list(iter_chunks(text, size, overlap))

            # Assert
            assert all(chunks)
            assert all(len(chunk) <= size for chunk in chunks)
            if text.strip():
                assert chunks
                if len(text) <= size:
                    assert chunks == [text.strip()]
            else:
                assert chunks == []

    @pytest.mark.parametrize("size,overlap", [(0, 0), (100, 100), (100, -1), (-5, 0)])
    def test_invalid_parameters_should_raise(self, size: int, overlap: int) -> None:
        with pytest.raises(ValueError):
            list(iter_chunks("text", size, overlap))


class TestTextChunker:
    """Test suite for TextChunker."""

    def test_chunk_should_return_list(self) -> None:
        chunker = TextChunker(100, 20)

        chunks = chunker.chunk("z" * 250)

        assert chunks == ["z" * 100, "z" * 100, "z" * 90]

    def test_init_should_reject_overlap_not_below_size(self) -> None:
        with pytest.raises(ValueError):
            TextChunker(100, 100)
