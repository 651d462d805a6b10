"""Tests for sentence-aware text chunking."""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from docveil.core.chunking import Chunk, TextSegmenter, chunk_text, find_sentence_boundary
from docveil.core.config import ChunkingConfig, reset_chunking_config


def texts(max_size: int = 400) -> st.SearchStrategy[str]:
    """Prose-like text with sentence terminators and line breaks."""
    return st.text(
        alphabet=st.sampled_from(list("abcdefghij ABC.!?\n")),
        max_size=max_size,
    )


class TestFindSentenceBoundary:
    """Test locating the last sentence terminator in a window."""

    def test_last_terminator_wins(self):
        assert find_sentence_boundary("a. b! c") == 4

    def test_newline_counts_as_whitespace(self):
        assert find_sentence_boundary("line one.\nline") == 8

    def test_terminator_needs_following_whitespace(self):
        assert find_sentence_boundary("version 1.2.3") == -1
        assert find_sentence_boundary("The end.") == -1


class TestChunkText:
    """Test the chunking algorithm."""

    def test_short_text_is_single_untrimmed_chunk(self):
        assert chunk_text("  hi  ", size=10, overlap=2) == [Chunk(0, "  hi  ")]

    def test_text_exactly_window_size(self):
        assert chunk_text("abcde", size=5, overlap=0) == [Chunk(0, "abcde")]

    def test_empty_text_yields_one_empty_chunk(self):
        assert chunk_text("", size=10, overlap=0) == [Chunk(0, "")]

    def test_cuts_after_sentence_terminators(self):
        chunks = chunk_text("One. Two. Three.", size=8, overlap=0)
        assert [c.text for c in chunks] == ["One.", "Two.", "Three."]

    def test_overlapping_windows(self):
        """Overlap re-reads the tail of the previous window."""
        chunks = chunk_text("Hello world. This is a test.", size=15, overlap=5)
        assert [c.text for c in chunks] == ["Hello world.", "rld.", "s is a test.", "est."]

    def test_exclamation_and_question_marks(self):
        chunks = chunk_text("Wow! Really? Yes.", size=10, overlap=0)
        assert [c.text for c in chunks] == ["Wow!", "Really?", "Yes."]

    def test_newline_terminated_sentences(self):
        chunks = chunk_text("First line.\nSecond line here.", size=20, overlap=0)
        assert [c.text for c in chunks] == ["First line.", "Second line here."]

    def test_hard_cut_without_boundary(self):
        chunks = chunk_text("abcdefghij", size=4, overlap=1)
        assert [c.text for c in chunks] == ["abcd", "defg", "ghij", "j"]

    def test_overlap_larger_than_window_terminates(self):
        """The advance never drops below half the window size."""
        chunks = chunk_text("a" * 20, size=4, overlap=10)
        assert len(chunks) == 10
        assert chunks[-1].text == "aa"

    def test_whitespace_only_windows_are_dropped(self):
        chunks = chunk_text("Hi." + " " * 20 + "Yo.", size=10, overlap=0)
        assert chunks[0].text == "Hi."
        assert all(chunk.text for chunk in chunks)

    def test_indices_are_sequential(self):
        chunks = chunk_text("One. Two. Three. Four. Five.", size=10, overlap=2)
        assert [c.index for c in chunks] == list(range(len(chunks)))

    @settings(max_examples=200, deadline=None)
    @given(
        text=texts(),
        size=st.integers(min_value=1, max_value=60),
        overlap=st.integers(min_value=0, max_value=80),
    )
    def test_chunk_properties(self, text, size, overlap):
        """Chunks are trimmed, bounded substrings of the input."""
        chunks = chunk_text(text, size=size, overlap=overlap)

        if len(text) <= size:
            assert chunks == [Chunk(0, text)]
            return

        for position, chunk in enumerate(chunks):
            assert chunk.index == position
            assert chunk.text
            assert chunk.text == chunk.text.strip()
            assert chunk.length <= size
            assert chunk.text in text

        # every step advances at least ceil(size / 2) characters
        assert len(chunks) <= math.ceil(len(text) / (size / 2))

    @settings(max_examples=100, deadline=None)
    @given(text=texts(), size=st.integers(min_value=1, max_value=60))
    def test_deterministic(self, text, size):
        assert chunk_text(text, size, 3) == chunk_text(text, size, 3)


class TestTextSegmenter:
    """Test the configured segmenter."""

    def test_defaults(self):
        segmenter = TextSegmenter()
        assert segmenter.chunk_size == 1500
        assert segmenter.chunk_overlap == 200

    def test_explicit_values_override_config(self):
        config = ChunkingConfig(chunk_size=50, chunk_overlap=10)
        segmenter = TextSegmenter(chunk_size=20, config=config)
        assert segmenter.chunk_size == 20
        assert segmenter.chunk_overlap == 10

    def test_environment_configuration(self, monkeypatch):
        monkeypatch.setenv("DOCVEIL_CHUNK_SIZE", "100")
        monkeypatch.setenv("DOCVEIL_CHUNK_OVERLAP", "0")
        reset_chunking_config()

        segmenter = TextSegmenter()
        assert segmenter.chunk_size == 100
        assert segmenter.chunk_overlap == 0

    def test_chunk_matches_function(self):
        segmenter = TextSegmenter(chunk_size=8, chunk_overlap=0)
        text = "One. Two. Three."
        assert segmenter.chunk(text) == chunk_text(text, 8, 0)
        assert list(segmenter.iterate_chunks(text)) == segmenter.chunk(text)

    def test_statistics(self):
        segmenter = TextSegmenter(chunk_size=10, chunk_overlap=0)
        stats = segmenter.get_chunk_statistics(segmenter.chunk("Wow! Really? Yes."))
        assert stats == {
            "total_chunks": 3,
            "total_size": 15,
            "average_chunk_size": 5,
            "min_chunk_size": 4,
            "max_chunk_size": 7,
            "target_chunk_size": 10,
            "chunk_overlap": 0,
        }

    def test_statistics_for_no_chunks(self):
        assert TextSegmenter().get_chunk_statistics([]) == {"total_chunks": 0, "total_size": 0}

    @pytest.mark.parametrize("size", [1, 2, 3])
    def test_tiny_windows(self, size):
        chunks = TextSegmenter(chunk_size=size, chunk_overlap=0).chunk("abc. def")
        assert all(chunk.length <= size for chunk in chunks)
