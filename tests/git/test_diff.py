"""Tests for bounded line diffs."""

from __future__ import annotations

import pytest

from repobridge.git import DiffLimits, LineDiffer, compute_line_diff
from repobridge.git.diff import longest_common_subsequence


def _ops(result):  # type: ignore[no-untyped-def]
    return [(line.op, line.line_num, line.line) for line in result.lines]


@pytest.mark.parametrize("content", ["", "a", "a\nb\n", "x\r\ny"])
def test_identical_content(content: str) -> None:
    result = compute_line_diff(content, content)
    assert result.status == "identical"
    assert result.added == 0
    assert result.removed == 0
    assert result.unchanged == len(content.split("\n"))
    assert result.lines == []


def test_both_sides_missing() -> None:
    assert compute_line_diff(None, None).status == "both_missing"


def test_missing_source_lists_every_target_line_as_added() -> None:
    result = compute_line_diff(None, "x\ny")
    assert result.status == "source_missing"
    assert result.added == 2
    assert _ops(result) == [("add", 1, "x"), ("add", 2, "y")]
    assert result.truncated is False


def test_missing_target_is_capped() -> None:
    source = "\n".join(f"line {n}" for n in range(250))
    result = compute_line_diff(source, None)
    assert result.status == "target_missing"
    assert result.removed == 250
    assert len(result.lines) == 200
    assert result.truncated is True
    assert result.total_changes == 250


def test_line_by_line_diff() -> None:
    result = compute_line_diff("a\nb\nc", "a\nx\nc")
    assert result.status == "different"
    assert _ops(result) == [("remove", 2, "b"), ("add", 2, "x")]
    assert (result.added, result.removed, result.unchanged) == (1, 1, 2)
    assert result.truncated is False
    assert result.total_changes is None


def test_change_list_is_truncated() -> None:
    result = compute_line_diff("a\nb\nc\nd", "w\nx\ny\nz", limits=DiffLimits(max_diff_lines=3))
    assert len(result.lines) == 3
    assert result.truncated is True
    assert result.total_changes == 8
    assert (result.added, result.removed) == (4, 4)


def test_large_files_fall_back_to_summary() -> None:
    source = "\n".join(str(n) for n in range(1, 7))
    target = "\n".join(["1", "2", "3", "4", "5", "7"])
    result = LineDiffer(DiffLimits(large_file_lines=5)).compute(source, target)
    assert result.truncated is True
    assert result.lines == []
    assert (result.added, result.removed, result.unchanged) == (1, 1, 5)
    assert result.note == "Files too large for line-by-line diff (6 vs 6 lines). Summary only."


def test_lcs_cell_ceiling_degrades_to_full_replacement() -> None:
    result = compute_line_diff("a\nb", "a\nc", limits=DiffLimits(max_lcs_cells=1))
    assert (result.added, result.removed, result.unchanged) == (2, 2, 0)


def test_longest_common_subsequence() -> None:
    assert longest_common_subsequence(["a", "b", "c", "d"], ["b", "d"]) == ["b", "d"]
    assert longest_common_subsequence(["a"], ["b"]) == []
    assert longest_common_subsequence(["a", "b"], ["a", "b"], max_cells=3) == []
