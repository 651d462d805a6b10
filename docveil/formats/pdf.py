"""Plain-text extraction from PDF documents."""

import logging

import fitz  # PyMuPDF

from ..core.exceptions import UnsupportedContainerError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


def extract_pdf_text(data: bytes) -> str:
    """
    Get the text of every page of a PDF, in page order.

    Layout, fonts and images are discarded; anonymized output of a PDF is
    always plain text.

    Raises:
        UnsupportedContainerError: If the data is not a readable PDF or is
            password protected
    """
    try:
        document = fitz.open(stream=data, filetype="pdf")
    except RuntimeError as e:
        raise UnsupportedContainerError(
            f"Not a readable PDF document: {e}",
            processing_stage="parsing",
        ) from e

    with document:
        if document.needs_pass:
            raise UnsupportedContainerError(
                "PDF document is password protected",
                processing_stage="parsing",
                recovery_suggestions=["Remove the password and try again"],
            )
        pages = [page.get_text() for page in document]

    logger.debug(f"Extracted text from {len(pages)} PDF pages")
    return "".join(pages)
