"""Line maps and line-range extraction over normalized content."""

from __future__ import annotations

from typing import List, Optional

from ..models import LineRange, LineRecord, LineView, NumberedLine
from .normalize import normalize_content


def compute_line_map(content: object) -> List[LineRecord]:
    """Return one record per LF-delimited line.

    Empty content maps to no records. A trailing LF produces a final empty
    record, matching editors that count the line after the last newline.
    """
    if not isinstance(content, str) or not content:
        return []

    records: List[LineRecord] = []
    offset = 0
    for index, text in enumerate(content.split("\n"), start=1):
        records.append(
            LineRecord(
                line_number=index,
                start_offset=offset,
                end_offset=offset + len(text),
                text=text,
            )
        )
        offset += len(text) + 1
    return records


def extract_line_range(
    content: object, start_line: int, end_line: Optional[int] = None
) -> LineRange:
    """Return the inclusive range ``start_line..end_line`` clamped to the document."""
    if not isinstance(content, str):
        return LineRange(lines=[], total_lines=0)

    all_lines = content.split("\n")
    total = len(all_lines)
    start, end = _clamp(start_line, end_line, total)
    lines = [NumberedLine(line_number=number, text=all_lines[number - 1]) for number in range(start, end + 1)]
    return LineRange(lines=lines, total_lines=total)


def read_with_line_map(
    content: object,
    *,
    start_line: Optional[int] = None,
    end_line: Optional[int] = None,
    normalize: bool = True,
) -> LineView:
    """Build a line-accurate view of raw file content.

    Without ``start_line`` the whole file is returned with numbered lines.
    With it, only the clamped range is returned and ``content`` holds just
    those lines joined by LF.
    """
    text = content if isinstance(content, str) else ""
    if normalize:
        text = normalize_content(text)

    all_lines = text.split("\n")
    total = len(all_lines)

    if not start_line:
        numbered = [NumberedLine(line_number=index, text=line) for index, line in enumerate(all_lines, start=1)]
        return LineView(content=text, total_lines=total, lines=numbered, normalized=normalize)

    start, end = _clamp(start_line, end_line, total)
    numbered = [NumberedLine(line_number=number, text=all_lines[number - 1]) for number in range(start, end + 1)]
    return LineView(
        content="\n".join(line.text for line in numbered),
        total_lines=total,
        lines=numbered,
        normalized=normalize,
        start_line=start,
        end_line=end,
    )


def _clamp(start_line: int, end_line: Optional[int], total: int) -> tuple[int, int]:
    start = max(1, int(start_line or 0))
    end = min(total, int(end_line or start_line or 0))
    return start, end


__all__ = ["compute_line_map", "extract_line_range", "read_with_line_map"]
