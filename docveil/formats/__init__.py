"""Document package, markup and text extraction handling."""

from .docx import DOCX_MIME_TYPE, MAIN_ENTRY, DocxPackage, extract_text
from .ooxml import OoxmlDocument, OoxmlTreeBuilder
from .parser import SUFFIX_MIME_TYPES, TEXT_MIME_TYPE, mime_type_for, parse_bytes, parse_document
from .pdf import PDF_MIME_TYPE, extract_pdf_text

__all__ = [
    "DOCX_MIME_TYPE",
    "PDF_MIME_TYPE",
    "TEXT_MIME_TYPE",
    "SUFFIX_MIME_TYPES",
    "MAIN_ENTRY",
    "DocxPackage",
    "extract_text",
    "extract_pdf_text",
    "mime_type_for",
    "parse_bytes",
    "parse_document",
    "OoxmlDocument",
    "OoxmlTreeBuilder",
]
