"""Structure-preserving replacement of sensitive text."""

from .applicator import (
    ApplicationStats,
    Replacement,
    ReplacementApplier,
    replace_all,
    sort_replacements,
)

__all__ = [
    "Replacement",
    "ReplacementApplier",
    "ApplicationStats",
    "replace_all",
    "sort_replacements",
]
