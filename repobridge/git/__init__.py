"""Diff, patch and structure comparison helpers."""

from .diff import DiffLimits, LineDiffer, compute_line_diff
from .patch import (
    PatchConflictError,
    PatchError,
    PatchValidationError,
    apply_search_replace,
    apply_unified_diff,
)
from .structure import compare_structure

__all__ = [
    "DiffLimits",
    "LineDiffer",
    "PatchConflictError",
    "PatchError",
    "PatchValidationError",
    "apply_search_replace",
    "apply_unified_diff",
    "compare_structure",
    "compute_line_diff",
]
