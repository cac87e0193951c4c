"""Bounded line diffs between two blobs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..logging import get_logger
from ..models import DiffLine, DiffResult

logger = get_logger("git.diff")


@dataclass(frozen=True)
class DiffLimits:
    """Resource bounds for a single diff computation."""

    max_diff_lines: int = 200
    large_file_lines: int = 500
    max_lcs_cells: int = 250_000


class LineDiffer:
    """Computes line diffs, degrading to cheaper summaries on large input."""

    def __init__(self, limits: DiffLimits | None = None) -> None:
        self._limits = limits or DiffLimits()

    @property
    def limits(self) -> DiffLimits:
        return self._limits

    def compute(self, source: Optional[str], target: Optional[str]) -> DiffResult:
        if source is None and target is None:
            return DiffResult(status="both_missing")
        if source is None:
            return self._one_sided("source_missing", "add", (target or "").split("\n"))
        if target is None:
            return self._one_sided("target_missing", "remove", source.split("\n"))
        if source == target:
            return DiffResult(status="identical", unchanged=len(source.split("\n")))

        source_lines = source.split("\n")
        target_lines = target.split("\n")
        threshold = self._limits.large_file_lines
        if len(source_lines) > threshold or len(target_lines) > threshold:
            return self._summary(source_lines, target_lines)
        return self._line_by_line(source_lines, target_lines)

    # ------------------------------------------------------------------
    # Internals

    def _one_sided(self, status: str, op: str, lines: List[str]) -> DiffResult:
        cap = self._limits.max_diff_lines
        diff_lines = [DiffLine(op=op, line_num=index, line=line) for index, line in enumerate(lines[:cap], start=1)]
        truncated = len(lines) > cap
        return DiffResult(
            status=status,
            added=len(lines) if op == "add" else 0,
            removed=len(lines) if op == "remove" else 0,
            lines=diff_lines,
            truncated=truncated,
            total_changes=len(lines) if truncated else None,
        )

    def _summary(self, source_lines: List[str], target_lines: List[str]) -> DiffResult:
        """Set-membership statistics for files too large for an LCS table."""
        source_set = set(source_lines)
        target_set = set(target_lines)
        shared = sum(1 for line in source_lines if line in target_set)
        only_in_source = len(source_lines) - shared
        only_in_target = sum(1 for line in target_lines if line not in source_set)

        logger.debug(
            "Falling back to summary diff (%d vs %d lines)", len(source_lines), len(target_lines)
        )
        return DiffResult(
            status="different",
            added=only_in_target,
            removed=only_in_source,
            unchanged=shared,
            truncated=True,
            note=(
                f"Files too large for line-by-line diff ({len(source_lines)} vs "
                f"{len(target_lines)} lines). Summary only."
            ),
        )

    def _line_by_line(self, source_lines: List[str], target_lines: List[str]) -> DiffResult:
        common = longest_common_subsequence(source_lines, target_lines, self._limits.max_lcs_cells)
        changes: List[DiffLine] = []
        added = removed = unchanged = 0
        si = ti = li = 0

        while si < len(source_lines) or ti < len(target_lines):
            if (
                li < len(common)
                and si < len(source_lines)
                and ti < len(target_lines)
                and source_lines[si] == common[li]
                and target_lines[ti] == common[li]
            ):
                unchanged += 1
                si += 1
                ti += 1
                li += 1
            elif si < len(source_lines) and (li >= len(common) or source_lines[si] != common[li]):
                changes.append(DiffLine(op="remove", line_num=si + 1, line=source_lines[si]))
                removed += 1
                si += 1
            elif ti < len(target_lines):
                changes.append(DiffLine(op="add", line_num=ti + 1, line=target_lines[ti]))
                added += 1
                ti += 1
            else:  # pragma: no cover - walk always advances one pointer above
                break

        cap = self._limits.max_diff_lines
        truncated = len(changes) > cap
        return DiffResult(
            status="different",
            added=added,
            removed=removed,
            unchanged=unchanged,
            lines=changes[:cap],
            truncated=truncated,
            total_changes=len(changes) if truncated else None,
        )


def longest_common_subsequence(
    a: Sequence[str], b: Sequence[str], max_cells: int = DiffLimits.max_lcs_cells
) -> List[str]:
    """Classic dynamic-programming LCS; returns ``[]`` above ``max_cells``."""
    m, n = len(a), len(b)
    if m * n > max_cells:
        return []

    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row, previous = table[i], table[i - 1]
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                row[j] = previous[j - 1] + 1
            else:
                row[j] = max(previous[j], row[j - 1])

    result: List[str] = []
    i, j = m, n
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            result.append(a[i - 1])
            i -= 1
            j -= 1
        elif table[i - 1][j] > table[i][j - 1]:
            i -= 1
        else:
            j -= 1
    result.reverse()
    return result


def compute_line_diff(
    source: Optional[str],
    target: Optional[str],
    *,
    limits: DiffLimits | None = None,
) -> DiffResult:
    """Diff ``source`` against ``target``; ``None`` means the side is missing."""
    return LineDiffer(limits).compute(source, target)


__all__ = ["DiffLimits", "LineDiffer", "compute_line_diff", "longest_common_subsequence"]
