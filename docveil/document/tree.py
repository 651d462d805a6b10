"""Rich-text tree model shared by the projector and the replacement applier.

The tree is a closed set of node kinds:

- ``Paragraph``: container; its flattened text is followed by one break marker
- ``Run``: leaf owning a mutable literal text string
- ``Opaque``: anything else (styling, metadata, drawings); never inspected
- ``Body``: the root holding the top-level nodes; contributes nothing itself

Nodes compare by identity so a reference always designates the exact node
that produced a piece of text.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..core.exceptions import MalformedTreeError

PARAGRAPH_BREAK = "\n"


@dataclass(eq=False)
class Run:
    """
    Leaf node carrying a contiguous literal text fragment.

    Attributes:
        text: Current text of the run; the only field the applier mutates
        element: Backing source element (e.g. an OOXML ``w:t``), if any
    """

    text: str
    element: Optional[Any] = field(default=None, repr=False)


@dataclass(eq=False)
class Opaque:
    """
    Non-text node preserved verbatim.

    Attributes:
        tag: Source tag name, for diagnostics only
        element: Backing source element, never read or written
    """

    tag: str = ""
    element: Optional[Any] = field(default=None, repr=False)


@dataclass(eq=False)
class Paragraph:
    """Container node followed by a paragraph break in the flat text."""

    children: list["Node"] = field(default_factory=list)
    element: Optional[Any] = field(default=None, repr=False)


@dataclass(eq=False)
class Body:
    """Root of a rich-text tree."""

    children: list["Node"] = field(default_factory=list)


Node = Union[Paragraph, Run, Opaque]
Tree = Union[Body, Paragraph, Run, Opaque]


def children_of(node: Tree) -> list[Node]:
    """Return the child list of a container, or raise for unknown nodes."""
    if isinstance(node, (Body, Paragraph)):
        return node.children
    if isinstance(node, (Run, Opaque)):
        return []
    raise MalformedTreeError(
        f"Unexpected node of type {type(node).__name__} in rich-text tree",
        node_type=type(node).__name__,
    )


def iter_runs(tree: Tree) -> Iterator[Run]:
    """Yield every Run in document order without entering Opaque nodes."""
    if isinstance(tree, Run):
        yield tree
        return
    for child in children_of(tree):
        if isinstance(child, Body):
            raise MalformedTreeError("Body may only appear as the tree root", node_type="Body")
        yield from iter_runs(child)


def tree_shape(tree: Tree) -> tuple[tuple[str, int], ...]:
    """
    Describe the structure of a tree, ignoring Run text.

    Returns a depth-first tuple of ``(kind, id(node))`` pairs; two calls
    return equal tuples exactly when no node was added, removed, replaced
    or moved.
    """
    shape: list[tuple[str, int]] = []

    def walk(node: Tree) -> None:
        if isinstance(node, Body) and node is not tree:
            raise MalformedTreeError(
                "Body may only appear as the tree root", node_type="Body"
            )
        shape.append((type(node).__name__, id(node)))
        for child in children_of(node):
            walk(child)

    walk(tree)
    return tuple(shape)


def count_nodes(tree: Tree) -> dict[str, int]:
    """Count nodes by kind."""
    counts: dict[str, int] = {}
    for kind, _ in tree_shape(tree):
        counts[kind] = counts.get(kind, 0) + 1
    return counts


def run_texts(tree: Tree) -> list[str]:
    """Get the text of every Run in document order."""
    return [run.text for run in iter_runs(tree)]
