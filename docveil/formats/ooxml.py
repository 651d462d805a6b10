"""OOXML word-processing markup to rich-text tree conversion.

``w:p`` elements become Paragraphs and ``w:t`` elements become Runs backed
by their element. Elements that hold no paragraph or text descendant become
Opaque nodes. Every other element (runs, hyperlinks, tables, rows, cells,
content controls, ...) is transparent: its children are lifted into the
enclosing node. The lxml tree itself is never restructured; serialization
only copies Run text back into the backing ``w:t`` elements.
"""

import logging
from typing import Optional, Union

from lxml import etree

from ..core.exceptions import MalformedTreeError
from ..document.tree import Body, Node, Opaque, Paragraph, Run, iter_runs

logger = logging.getLogger(__name__)

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
XML_NS = "http://www.w3.org/XML/1998/namespace"

W_BODY = f"{{{W_NS}}}body"
W_P = f"{{{W_NS}}}p"
W_T = f"{{{W_NS}}}t"
XML_SPACE = f"{{{XML_NS}}}space"


def safe_fromstring(xml_bytes: bytes) -> etree._Element:
    """Parse XML with entity resolution and network access disabled."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    return etree.fromstring(xml_bytes, parser)


def _local_name(element: etree._Element) -> str:
    if not isinstance(element.tag, str):
        return "#comment" if isinstance(element, etree._Comment) else "#special"
    return etree.QName(element).localname


class OoxmlTreeBuilder:
    """Builds a :class:`Body` tree from a parsed ``w:document`` element."""

    def build(self, root: etree._Element) -> Body:
        """
        Convert the document body into a rich-text tree.

        Args:
            root: Parsed ``w:document`` (or ``w:body``) element

        Returns:
            Body: Tree whose Runs are backed by the ``w:t`` elements

        Raises:
            MalformedTreeError: If the markup has no ``w:body``
        """
        body = root if root.tag == W_BODY else root.find(W_BODY)
        if body is None:
            raise MalformedTreeError(
                "Document markup has no w:body element",
                node_type=_local_name(root),
                processing_stage="parsing",
            )
        return Body(children=self._convert_children(body))

    def _convert_children(self, element: etree._Element) -> list[Node]:
        nodes: list[Node] = []
        for child in element:
            nodes.extend(self._convert(child))
        return nodes

    def _convert(self, element: etree._Element) -> list[Node]:
        if not isinstance(element.tag, str):
            return [Opaque(tag=_local_name(element), element=element)]

        if element.tag == W_P:
            return [Paragraph(children=self._convert_children(element), element=element)]

        if element.tag == W_T:
            return [Run(text=element.text or "", element=element)]

        if next(element.iter(W_P, W_T), None) is not None:
            return self._convert_children(element)

        return [Opaque(tag=_local_name(element), element=element)]


class OoxmlDocument:
    """
    A parsed main document part together with its rich-text tree.

    Examples:
        >>> document = OoxmlDocument.parse(package.read_main_entry())
        >>> ReplacementApplier().apply(document.tree, replacements)
        >>> package.write_main_entry(document.to_bytes())
    """

    def __init__(self, root: etree._Element, tree: Optional[Body] = None) -> None:
        self.root = root
        self.tree = tree if tree is not None else OoxmlTreeBuilder().build(root)

    @classmethod
    def parse(cls, xml: Union[bytes, str]) -> "OoxmlDocument":
        """
        Parse main document markup.

        Raises:
            MalformedTreeError: If the markup is not well-formed XML or has no body
        """
        if isinstance(xml, str):
            xml = xml.encode("utf-8")
        try:
            root = safe_fromstring(xml)
        except etree.XMLSyntaxError as e:
            raise MalformedTreeError(
                f"Main document entry is not well-formed XML: {e}",
                processing_stage="parsing",
            ) from e
        document = cls(root)
        logger.debug(f"Parsed main document part with {len(list(iter_runs(document.tree)))} runs")
        return document

    def sync(self) -> int:
        """
        Copy Run text back into the backing ``w:t`` elements.

        Returns:
            int: Number of elements whose text changed
        """
        changed = 0
        for run in iter_runs(self.tree):
            element = run.element
            if element is None or (element.text or "") == run.text:
                continue
            element.text = run.text
            if run.text != run.text.strip():
                element.set(XML_SPACE, "preserve")
            changed += 1
        return changed

    def to_bytes(self) -> bytes:
        """Serialize the markup after syncing Run text."""
        changed = self.sync()
        logger.debug(f"Serializing main document part ({changed} text elements changed)")
        tree = self.root.getroottree()
        return etree.tostring(
            tree,
            xml_declaration=True,
            encoding="UTF-8",
            standalone=tree.docinfo.standalone,
        )
