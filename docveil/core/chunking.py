"""Sentence-aware text chunking for oracle-sized segments."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional

from .config import ChunkingConfig, get_chunking_config

logger = logging.getLogger(__name__)

# A sentence terminator only counts when followed by whitespace
SENTENCE_ENDERS = (". ", "! ", "? ", ".\n", "!\n", "?\n")


@dataclass(frozen=True)
class Chunk:
    """
    A bounded segment of flat text.

    Attributes:
        index: Position of the chunk in the produced sequence
        text: The chunk text, trimmed of surrounding whitespace
    """

    index: int
    text: str

    @property
    def length(self) -> int:
        """Get the length of the chunk text."""
        return len(self.text)


def find_sentence_boundary(window: str) -> int:
    """
    Find the last sentence terminator inside a window.

    Returns:
        Index of the terminator character, or -1 when the window holds no
        terminator followed by a space or newline
    """
    return max(window.rfind(ender) for ender in SENTENCE_ENDERS)


def chunk_text(text: str, size: int, overlap: int) -> list[Chunk]:
    """
    Split text into overlapping chunks that prefer sentence boundaries.

    A window of ``size`` characters slides across the text. Windows that end
    before the end of the text are cut right after their last sentence
    terminator and its following whitespace, when one exists. Each window is
    trimmed and dropped if nothing is left. The start advances by the window
    length minus ``overlap``, but never by less than half the window size.

    That floor is ``ceil(size / 2)`` whole characters, not a fractional
    ``size / 2`` step whose start is truncated when slicing; for odd sizes
    the two can land one character apart. Rounding up keeps every start an
    integer and bounds the chunk count by ``ceil(2 * len(text) / size)``.

    Args:
        text: Flat text to split
        size: Window length in characters
        overlap: Characters to re-read from the previous window

    Returns:
        list[Chunk]: Chunks in order; a text that fits in one window is
        returned unchanged as a single chunk

    Examples:
        >>> [c.text for c in chunk_text("One. Two. Three.", size=8, overlap=0)]
        ['One.', 'Two.', 'Three.']
    """
    if len(text) <= size:
        return [Chunk(index=0, text=text)]

    # ceil(size / 2), and never zero so the loop always terminates
    min_advance = max(-(-size // 2), 1)
    text_length = len(text)

    chunks: list[Chunk] = []
    start = 0

    while start < text_length:
        end = min(start + size, text_length)
        window = text[start:end]

        if end < text_length:
            boundary = find_sentence_boundary(window)
            if boundary != -1:
                window = window[: boundary + 2]

        trimmed = window.strip()
        if trimmed:
            chunks.append(Chunk(index=len(chunks), text=trimmed))

        start += max(len(window) - overlap, min_advance)

    return chunks


class TextSegmenter:
    """
    Splits flat text into oracle-sized chunks.

    Thin stateful wrapper around :func:`chunk_text` that carries the
    configured window size and overlap.

    Examples:
        >>> segmenter = TextSegmenter(chunk_size=1500, chunk_overlap=200)
        >>> chunks = segmenter.chunk(document_text)
        >>> print(segmenter.get_chunk_statistics(chunks))
    """

    def __init__(
        self,
        chunk_size: Optional[int] = None,
        chunk_overlap: Optional[int] = None,
        config: Optional[ChunkingConfig] = None,
    ) -> None:
        """
        Initialize the segmenter.

        Args:
            chunk_size: Window length (None for the configured default)
            chunk_overlap: Window overlap (None for the configured default)
            config: Explicit configuration (None for the environment-backed one)
        """
        base = config or get_chunking_config()
        self.config = ChunkingConfig(
            chunk_size=chunk_size if chunk_size is not None else base.chunk_size,
            chunk_overlap=(
                chunk_overlap if chunk_overlap is not None else base.chunk_overlap
            ),
        )

        logger.debug(
            f"TextSegmenter initialized: chunk_size={self.chunk_size}, "
            f"chunk_overlap={self.chunk_overlap}"
        )

    @property
    def chunk_size(self) -> int:
        return self.config.chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self.config.chunk_overlap

    def chunk(self, text: str) -> list[Chunk]:
        """Split text using the configured window size and overlap."""
        chunks = chunk_text(text, self.chunk_size, self.chunk_overlap)
        logger.info(f"Split {len(text)} characters into {len(chunks)} chunks")
        return chunks

    def iterate_chunks(self, text: str) -> Iterator[Chunk]:
        """Iterate through chunks for streaming processing."""
        yield from self.chunk(text)

    def get_chunk_statistics(self, chunks: list[Chunk]) -> dict[str, Any]:
        """Get statistics about a chunking operation."""
        if not chunks:
            return {"total_chunks": 0, "total_size": 0}

        chunk_sizes = [chunk.length for chunk in chunks]
        total_size = sum(chunk_sizes)

        return {
            "total_chunks": len(chunks),
            "total_size": total_size,
            "average_chunk_size": total_size // len(chunks),
            "min_chunk_size": min(chunk_sizes),
            "max_chunk_size": max(chunk_sizes),
            "target_chunk_size": self.chunk_size,
            "chunk_overlap": self.chunk_overlap,
        }
