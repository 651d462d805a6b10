"""Rich-text tree model and its projection onto flat text."""

from .projector import Projection, RichTextProjector, TextReference, flatten
from .tree import (
    PARAGRAPH_BREAK,
    Body,
    Node,
    Opaque,
    Paragraph,
    Run,
    Tree,
    count_nodes,
    iter_runs,
    run_texts,
    tree_shape,
)

__all__ = [
    "PARAGRAPH_BREAK",
    "Body",
    "Paragraph",
    "Run",
    "Opaque",
    "Node",
    "Tree",
    "iter_runs",
    "run_texts",
    "tree_shape",
    "count_nodes",
    "RichTextProjector",
    "Projection",
    "TextReference",
    "flatten",
]
