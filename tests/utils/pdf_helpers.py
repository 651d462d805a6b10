"""Builders for in-memory PDF documents."""

import fitz  # PyMuPDF


def build_pdf(*pages: str) -> bytes:
    """Build a PDF with one page per text."""
    document = fitz.open()
    for text in pages:
        page = document.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data
