"""Core building blocks: chunking, configuration, progress and errors."""

from .chunking import Chunk, TextSegmenter, chunk_text, find_sentence_boundary
from .config import ChunkingConfig, EngineConfig, get_chunking_config, reset_chunking_config
from .exceptions import (
    ConfigurationError,
    DocVeilError,
    MalformedTreeError,
    OracleError,
    ProcessingError,
    UnsupportedContainerError,
    ValidationError,
    create_oracle_error,
    create_validation_error,
)
from .progress import ProgressEvent, ProgressEventType, ProgressReporter, ProgressSink

__all__ = [
    "Chunk",
    "TextSegmenter",
    "chunk_text",
    "find_sentence_boundary",
    "ChunkingConfig",
    "EngineConfig",
    "get_chunking_config",
    "reset_chunking_config",
    "DocVeilError",
    "ValidationError",
    "ConfigurationError",
    "ProcessingError",
    "MalformedTreeError",
    "UnsupportedContainerError",
    "OracleError",
    "create_oracle_error",
    "create_validation_error",
    "ProgressEvent",
    "ProgressEventType",
    "ProgressReporter",
    "ProgressSink",
]
