"""Zip package access for ``.docx`` files.

Only the main document entry is ever read or replaced; every other entry is
written back with its original bytes and zip metadata.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Union

from ..core.exceptions import UnsupportedContainerError
from ..document.projector import RichTextProjector
from .ooxml import OoxmlDocument

logger = logging.getLogger(__name__)

MAIN_ENTRY = "word/document.xml"
DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


def _clone_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    clone = zipfile.ZipInfo(info.filename, date_time=info.date_time)
    clone.compress_type = info.compress_type
    clone.comment = info.comment
    clone.create_system = info.create_system
    clone.external_attr = info.external_attr
    return clone


class DocxPackage:
    """
    In-memory view of a ``.docx`` zip package.

    Examples:
        >>> package = DocxPackage.from_file("contract.docx")
        >>> xml = package.read_main_entry()
        >>> package.write_main_entry(new_xml)
        >>> package.save("contract_anonymized.docx")
    """

    def __init__(
        self,
        entries: list[tuple[zipfile.ZipInfo, bytes]],
        main_entry: str = MAIN_ENTRY,
    ) -> None:
        self._entries = entries
        self.main_entry = main_entry
        if main_entry not in self.entry_names:
            raise UnsupportedContainerError(
                f"Invalid DOCX file: {main_entry} not found",
                entry_name=main_entry,
                recovery_suggestions=["Check that the file is a Word (.docx) document"],
            )

    @classmethod
    def from_bytes(cls, data: bytes, main_entry: str = MAIN_ENTRY) -> "DocxPackage":
        """
        Read a package from raw bytes.

        Raises:
            UnsupportedContainerError: If the data is not a zip archive or lacks
                the main entry
        """
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                entries = [(info, archive.read(info)) for info in archive.infolist()]
        except zipfile.BadZipFile as e:
            raise UnsupportedContainerError(
                f"Not a zip-compatible package: {e}",
                entry_name=main_entry,
            ) from e

        logger.debug(f"Loaded package with {len(entries)} entries")
        return cls(entries, main_entry=main_entry)

    @classmethod
    def from_file(cls, path: Union[str, Path], main_entry: str = MAIN_ENTRY) -> "DocxPackage":
        """Read a package from disk."""
        file_path = Path(path)
        logger.info(f"Reading package {file_path}")
        try:
            return cls.from_bytes(file_path.read_bytes(), main_entry=main_entry)
        except UnsupportedContainerError as e:
            e.add_context("document_path", str(file_path))
            raise

    @property
    def entry_names(self) -> list[str]:
        return [info.filename for info, _ in self._entries]

    def read_entry(self, name: str) -> bytes:
        """Get the raw bytes of an entry."""
        for info, payload in self._entries:
            if info.filename == name:
                return payload
        raise KeyError(name)

    def read_main_entry(self) -> bytes:
        """Get the raw bytes of the main document entry."""
        return self.read_entry(self.main_entry)

    def write_main_entry(self, data: Union[bytes, str]) -> None:
        """Replace the main document entry."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._entries = [
            (info, data if info.filename == self.main_entry else payload)
            for info, payload in self._entries
        ]

    def to_bytes(self) -> bytes:
        """Serialize the package, keeping entry order and metadata."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for info, payload in self._entries:
                archive.writestr(_clone_info(info), payload)
        return buffer.getvalue()

    def save(self, path: Union[str, Path]) -> Path:
        """Write the package to disk."""
        file_path = Path(path)
        file_path.write_bytes(self.to_bytes())
        logger.info(f"Wrote package {file_path}")
        return file_path


def extract_text(data: bytes) -> str:
    """
    Get the flat text of a ``.docx`` document.

    Paragraphs end with a newline; formatting and non-text content are
    skipped.
    """
    package = DocxPackage.from_bytes(data)
    document = OoxmlDocument.parse(package.read_main_entry())
    return RichTextProjector().project(document.tree).text
