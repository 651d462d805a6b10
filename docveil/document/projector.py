"""Projection of a rich-text tree onto flat logical text."""

import logging
from dataclasses import dataclass

from ..core.exceptions import MalformedTreeError
from .tree import PARAGRAPH_BREAK, Body, Opaque, Paragraph, Run, Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextReference:
    """
    Ties a span of the flat text to the Run that produced it.

    References stay valid while the tree keeps its structure; Run text may
    change underneath them.

    Attributes:
        node: The exact Run node
        sequence_index: Position of the Run among all Runs, in document order
        start_offset: Start of the Run's text in the flat text
        end_offset: End (exclusive) of the Run's text in the flat text
    """

    node: Run
    sequence_index: int
    start_offset: int
    end_offset: int

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset

    def contains_offset(self, offset: int) -> bool:
        """Check if a flat-text offset falls within this Run's span."""
        return self.start_offset <= offset < self.end_offset


@dataclass(frozen=True)
class Projection:
    """Flat text of a tree plus the ordered Run references."""

    text: str
    references: tuple[TextReference, ...]

    def reference_at(self, offset: int) -> TextReference | None:
        """Find the reference whose Run produced the character at ``offset``."""
        for reference in self.references:
            if reference.contains_offset(offset):
                return reference
        return None


class RichTextProjector:
    """
    Flattens a rich-text tree without mutating it.

    Traversal is depth-first in document order. A Paragraph contributes its
    children's text followed by one paragraph break; a Run contributes its
    text verbatim and is recorded as a :class:`TextReference`; an Opaque
    node contributes nothing and is not entered. Projection is read-only, so
    projecting the same unmodified tree twice gives equal results.

    Examples:
        >>> tree = Body([Paragraph([Run("Hello "), Opaque("w:tab"), Run("world")])])
        >>> projection = RichTextProjector().project(tree)
        >>> projection.text
        'Hello world\\n'
        >>> len(projection.references)
        2
    """

    def __init__(self, paragraph_break: str = PARAGRAPH_BREAK) -> None:
        self.paragraph_break = paragraph_break

    def project(self, tree: Tree) -> Projection:
        """
        Produce the flat text and Run references of a tree.

        Args:
            tree: Root node (normally a :class:`Body`)

        Returns:
            Projection: Flat text and references in traversal order

        Raises:
            MalformedTreeError: If a node of an unknown kind is encountered
        """
        parts: list[str] = []
        references: list[TextReference] = []
        offset = 0

        # Explicit stack; a marker entry stands for the break owed by a Paragraph
        stack: list[object] = [tree]
        while stack:
            node = stack.pop()

            if node is _BREAK:
                parts.append(self.paragraph_break)
                offset += len(self.paragraph_break)
            elif isinstance(node, Run):
                parts.append(node.text)
                references.append(
                    TextReference(
                        node=node,
                        sequence_index=len(references),
                        start_offset=offset,
                        end_offset=offset + len(node.text),
                    )
                )
                offset += len(node.text)
            elif isinstance(node, Paragraph):
                stack.append(_BREAK)
                stack.extend(reversed(node.children))
            elif isinstance(node, Opaque):
                continue
            elif isinstance(node, Body) and node is tree:
                stack.extend(reversed(node.children))
            else:
                raise MalformedTreeError(
                    f"Cannot project node of type {type(node).__name__}",
                    node_type=type(node).__name__,
                    processing_stage="projection",
                )

        text = "".join(parts)
        logger.debug(
            f"Projected tree to {len(text)} characters from {len(references)} runs"
        )
        return Projection(text=text, references=tuple(references))


_BREAK = object()


def flatten(tree: Tree) -> str:
    """Get the flat text of a tree."""
    return RichTextProjector().project(tree).text
