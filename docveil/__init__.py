"""DocVeil: chunked PII anonymization for text, PDF and Word documents.

DocVeil splits text into oracle-sized chunks, asks a PII oracle (an LLM or
Presidio) what to replace, and writes the literal replacements back into
``.docx`` documents run by run, so every bit of formatting survives.
"""

__version__ = "0.1.0"
__author__ = "DocVeil Team"
__email__ = "contact@example.com"

from .core import (
    Chunk,
    ChunkingConfig,
    ConfigurationError,
    DocVeilError,
    EngineConfig,
    MalformedTreeError,
    OracleError,
    ProcessingError,
    ProgressEvent,
    ProgressEventType,
    TextSegmenter,
    UnsupportedContainerError,
    ValidationError,
    chunk_text,
)
from .document import (
    Body,
    Opaque,
    Paragraph,
    Projection,
    RichTextProjector,
    Run,
    TextReference,
    flatten,
)
from .engine import AnonymizationEngine, DocxAnonymizationResult, TextAnonymizationResult
from .formats import DocxPackage, OoxmlDocument, extract_pdf_text, extract_text, parse_document
from .masking import ApplicationStats, Replacement, ReplacementApplier
from .oracles import (
    ClaudeOracle,
    LLMOracle,
    Oracle,
    OracleRegistry,
    OracleResult,
    OracleSettings,
    PiiDetections,
    PresidioOracle,
)

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    # Engine
    "AnonymizationEngine",
    "TextAnonymizationResult",
    "DocxAnonymizationResult",
    # Chunking
    "Chunk",
    "chunk_text",
    "TextSegmenter",
    "ChunkingConfig",
    "EngineConfig",
    # Rich-text tree
    "Body",
    "Paragraph",
    "Run",
    "Opaque",
    "RichTextProjector",
    "Projection",
    "TextReference",
    "flatten",
    # Replacement
    "Replacement",
    "ReplacementApplier",
    "ApplicationStats",
    # Formats
    "DocxPackage",
    "OoxmlDocument",
    "extract_text",
    "extract_pdf_text",
    "parse_document",
    # Oracles
    "Oracle",
    "OracleResult",
    "PiiDetections",
    "LLMOracle",
    "ClaudeOracle",
    "PresidioOracle",
    "OracleRegistry",
    "OracleSettings",
    # Progress
    "ProgressEvent",
    "ProgressEventType",
    # Errors
    "DocVeilError",
    "ValidationError",
    "ConfigurationError",
    "ProcessingError",
    "MalformedTreeError",
    "UnsupportedContainerError",
    "OracleError",
]
