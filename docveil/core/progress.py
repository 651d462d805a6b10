"""Lifecycle events reported while a document is anonymized."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ProgressEventType(Enum):
    """Lifecycle stages of one document pipeline."""

    STARTED = "started"
    CHUNK_PROCESSING = "chunk_processing"
    CHUNK_COMPLETED = "chunk_completed"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class ProgressEvent:
    """
    A single progress notification.

    Attributes:
        type: Lifecycle stage
        progress: Integer completion percentage, 0-100
        message: Human-readable status line
        chunk_index: Chunk the event refers to, for chunk events
        total_chunks: Number of chunks in the document, once known
    """

    type: ProgressEventType
    progress: int
    message: str
    chunk_index: Optional[int] = None
    total_chunks: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 <= self.progress <= 100:
            raise ValueError(f"progress must be within 0-100, got {self.progress}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape streamed to clients."""
        data: dict[str, Any] = {
            "type": self.type.value,
            "progress": self.progress,
            "message": self.message,
        }
        if self.chunk_index is not None:
            data["chunkIndex"] = self.chunk_index
        if self.total_chunks is not None:
            data["totalChunks"] = self.total_chunks
        return data


ProgressSink = Callable[[ProgressEvent], None]


class ProgressReporter:
    """
    Emits progress events to an optional sink.

    Chunk progress is proportional to the number of completed chunks and
    stays below 100 until the document has been fully assembled.
    """

    def __init__(self, sink: Optional[ProgressSink] = None) -> None:
        self._sink = sink
        self.total_chunks: Optional[int] = None

    def _emit(self, event: ProgressEvent) -> None:
        logger.debug(f"Progress {event.type.value} {event.progress}%: {event.message}")
        if self._sink is not None:
            self._sink(event)

    def _percent(self, done: int) -> int:
        if not self.total_chunks:
            return 0
        return min(99, (done * 100) // self.total_chunks)

    def started(self, message: str = "Starting anonymization...") -> None:
        self._emit(ProgressEvent(ProgressEventType.STARTED, 0, message))

    def chunk_processing(self, chunk_index: int) -> None:
        self._emit(
            ProgressEvent(
                ProgressEventType.CHUNK_PROCESSING,
                self._percent(chunk_index),
                f"Processing chunk {chunk_index + 1} of {self.total_chunks}...",
                chunk_index=chunk_index,
                total_chunks=self.total_chunks,
            )
        )

    def chunk_completed(self, chunk_index: int, completed: int) -> None:
        self._emit(
            ProgressEvent(
                ProgressEventType.CHUNK_COMPLETED,
                self._percent(completed),
                f"Completed chunk {chunk_index + 1} of {self.total_chunks}",
                chunk_index=chunk_index,
                total_chunks=self.total_chunks,
            )
        )

    def completed(self, message: str = "Anonymization complete") -> None:
        self._emit(
            ProgressEvent(
                ProgressEventType.COMPLETED,
                100,
                message,
                total_chunks=self.total_chunks,
            )
        )

    def error(self, message: str) -> None:
        self._emit(ProgressEvent(ProgressEventType.ERROR, 0, message))
