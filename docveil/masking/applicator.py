"""ReplacementApplier for writing anonymized substrings back into a tree."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..core.exceptions import MalformedTreeError, create_validation_error
from ..document.tree import Body, Opaque, Paragraph, Run, Tree, tree_shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Replacement:
    """
    A literal substitution produced by an oracle.

    Attributes:
        original: Exact substring to look for (case-sensitive)
        anonymized: Text that replaces every occurrence of ``original``
    """

    original: str
    anonymized: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Replacement":
        """Create a Replacement from an ``{"original", "anonymized"}`` mapping."""
        try:
            original = data["original"]
            anonymized = data["anonymized"]
        except KeyError as e:
            raise create_validation_error(
                f"Replacement is missing required key {e}",
                field_name=str(e).strip("'"),
                expected=str,
                actual=dict(data),
            ) from e
        if not isinstance(original, str) or not isinstance(anonymized, str):
            raise create_validation_error(
                "Replacement values must be strings",
                field_name="original" if not isinstance(original, str) else "anonymized",
                expected=str,
                actual=dict(data),
            )
        return cls(original=original, anonymized=anonymized)

    def to_dict(self) -> dict[str, str]:
        return {"original": self.original, "anonymized": self.anonymized}


ReplacementLike = Union[Replacement, tuple[str, str], Mapping[str, Any]]


def _coerce(item: ReplacementLike) -> Replacement:
    if isinstance(item, Replacement):
        return item
    if isinstance(item, Mapping):
        return Replacement.from_dict(item)
    original, anonymized = item
    return Replacement(original=original, anonymized=anonymized)


def sort_replacements(
    replacements: Optional[Iterable[ReplacementLike]],
) -> list[Replacement]:
    """
    Order replacements longest original first.

    The sort is stable, so originals of equal length keep the order in
    which they were discovered. Empty originals are dropped because they
    would match between every pair of characters.
    """
    if not replacements:
        return []

    candidates: list[Replacement] = []
    for item in replacements:
        replacement = _coerce(item)
        if not replacement.original:
            logger.warning(
                f"Ignoring replacement with empty original (anonymized={replacement.anonymized!r})"
            )
            continue
        candidates.append(replacement)

    return sorted(candidates, key=lambda r: len(r.original), reverse=True)


def replace_all(text: str, ordered: list[Replacement]) -> str:
    """
    Apply already-ordered replacements to one string.

    Each replacement is a literal, global substitution on the result of the
    previous one, so a shorter original can still act on text that a longer
    one left alone.
    """
    result = text
    for replacement in ordered:
        if replacement.original in result:
            result = result.replace(replacement.original, replacement.anonymized)
    return result


@dataclass
class ApplicationStats:
    """Counters from one :meth:`ReplacementApplier.apply` call."""

    replacements: int = 0
    runs_visited: int = 0
    runs_modified: int = 0


class ReplacementApplier:
    """
    Rewrites Run text in place from a set of literal replacements.

    Only Run text changes: no node is added, removed or replaced, Paragraph
    nodes are entered only to reach their Runs and Opaque nodes are skipped.
    A Run whose text matches no original keeps the very same string object.

    A sensitive span that pre-existing formatting split across adjacent Runs
    is only replaced where a registered original lies entirely inside one
    Run; fragments spanning a Run boundary are not reassembled.

    Examples:
        >>> tree = Body([Paragraph([Run("Contact "), Run("John Smith"), Run(" at work.")])])
        >>> ReplacementApplier().apply(tree, [Replacement("John Smith", "[NAME]")])
        ApplicationStats(replacements=1, runs_visited=3, runs_modified=1)
    """

    def apply(
        self,
        tree: Tree,
        replacements: Optional[Iterable[ReplacementLike]],
    ) -> ApplicationStats:
        """
        Apply replacements to every Run of a tree.

        Args:
            tree: Root node to rewrite in place
            replacements: Replacement candidates in discovery order; None or
                empty is a no-op

        Returns:
            ApplicationStats: How many Runs were visited and modified

        Raises:
            MalformedTreeError: If a node of an unknown kind is encountered
        """
        ordered = sort_replacements(replacements)
        stats = ApplicationStats(replacements=len(ordered))

        if not ordered:
            logger.debug("No replacements to apply")
            return stats

        # Reject malformed trees before any Run is rewritten
        tree_shape(tree)

        stack: list[object] = [tree]
        while stack:
            node = stack.pop()

            if isinstance(node, Run):
                stats.runs_visited += 1
                updated = replace_all(node.text, ordered)
                if updated != node.text:
                    node.text = updated
                    stats.runs_modified += 1
            elif isinstance(node, Paragraph):
                stack.extend(reversed(node.children))
            elif isinstance(node, Opaque):
                continue
            elif isinstance(node, Body) and node is tree:
                stack.extend(reversed(node.children))
            else:
                raise MalformedTreeError(
                    f"Cannot apply replacements to node of type {type(node).__name__}",
                    node_type=type(node).__name__,
                    processing_stage="replacement",
                )

        logger.info(
            f"Applied {stats.replacements} replacements: "
            f"{stats.runs_modified} of {stats.runs_visited} runs modified"
        )
        return stats
