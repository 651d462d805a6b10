"""Text extraction dispatched on document type."""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from ..core.exceptions import UnsupportedContainerError
from .docx import DOCX_MIME_TYPE, extract_text
from .pdf import PDF_MIME_TYPE, extract_pdf_text

logger = logging.getLogger(__name__)

TEXT_MIME_TYPE = "text/plain"

SUFFIX_MIME_TYPES = {
    ".pdf": PDF_MIME_TYPE,
    ".docx": DOCX_MIME_TYPE,
    ".txt": TEXT_MIME_TYPE,
}


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise UnsupportedContainerError(
            f"Text file is not valid UTF-8: {e}",
            processing_stage="parsing",
        ) from e


_EXTRACTORS: dict[str, Callable[[bytes], str]] = {
    PDF_MIME_TYPE: extract_pdf_text,
    DOCX_MIME_TYPE: extract_text,
    TEXT_MIME_TYPE: _decode_text,
}


def mime_type_for(path: Union[str, Path]) -> str:
    """
    Get the MIME type of a supported file from its suffix.

    Raises:
        UnsupportedContainerError: If the suffix is not a supported type
    """
    suffix = Path(path).suffix.lower()
    if suffix not in SUFFIX_MIME_TYPES:
        raise UnsupportedContainerError(
            f"Unsupported file type: {suffix or Path(path).name}",
            processing_stage="parsing",
            recovery_suggestions=[
                f"Use one of: {', '.join(sorted(SUFFIX_MIME_TYPES))}"
            ],
        )
    return SUFFIX_MIME_TYPES[suffix]


def parse_bytes(data: bytes, mime_type: str) -> str:
    """
    Extract the plain text of a document held in memory.

    Args:
        data: Raw file contents
        mime_type: One of the PDF, DOCX or plain-text MIME types

    Raises:
        UnsupportedContainerError: If the type is unsupported or the data
            cannot be read as that type
    """
    extractor = _EXTRACTORS.get(mime_type)
    if extractor is None:
        raise UnsupportedContainerError(
            f"Unsupported file type: {mime_type}",
            processing_stage="parsing",
        )
    return extractor(data)


def parse_document(path: Union[str, Path], mime_type: Optional[str] = None) -> str:
    """
    Extract the plain text of a PDF, Word or text file.

    Args:
        path: File to read
        mime_type: Explicit MIME type (None to infer it from the suffix)
    """
    file_path = Path(path)
    try:
        resolved = mime_type or mime_type_for(file_path)
        text = parse_bytes(file_path.read_bytes(), resolved)
    except UnsupportedContainerError as e:
        e.add_context("document_path", str(file_path))
        raise

    logger.info(f"Parsed {file_path} ({resolved}): {len(text)} characters")
    return text
