"""Line-accurate text search."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import MatchContext, SearchMatch

DEFAULT_CONTEXT_LINES = 2
DEFAULT_MAX_RESULTS = 50

logger = get_logger("content.search")


def search_content(
    content: object,
    pattern: str,
    *,
    regex: bool = False,
    case_sensitive: bool = True,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> List[SearchMatch]:
    """Find the first occurrence of ``pattern`` on each line.

    Matching never spans lines. An invalid regular expression produces no
    matches instead of an error, so callers cannot tell it apart from a
    search that legitimately found nothing.
    """
    if not isinstance(content, str) or not content or not pattern:
        return []

    compiled: Optional[re.Pattern[str]] = None
    if regex:
        try:
            compiled = re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)
        except re.error as exc:
            logger.debug("Ignoring invalid search pattern %r: %s", pattern, exc)
            return []

    needle = pattern if case_sensitive else pattern.lower()
    lines = content.split("\n")
    results: List[SearchMatch] = []

    for index, line in enumerate(lines):
        if len(results) >= max_results:
            break
        span = _find(line, needle, compiled, case_sensitive)
        if span is None:
            continue
        results.append(
            SearchMatch(
                line_number=index + 1,
                text=line,
                match_start=span[0],
                match_end=span[1],
                context=surrounding_lines(lines, index, context_lines),
            )
        )
    return results


def surrounding_lines(lines: Sequence[str], index: int, count: int) -> MatchContext:
    """Return up to ``count`` lines either side of ``lines[index]``."""
    count = max(0, count)
    before = list(lines[max(0, index - count) : index])
    after = list(lines[index + 1 : index + 1 + count])
    return MatchContext(before=before, after=after)


def _find(
    line: str,
    needle: str,
    compiled: Optional[re.Pattern[str]],
    case_sensitive: bool,
) -> Optional[Tuple[int, int]]:
    if compiled is not None:
        match = compiled.search(line)
        return match.span() if match else None
    haystack = line if case_sensitive else line.lower()
    position = haystack.find(needle)
    if position == -1:
        return None
    return position, position + len(needle)


__all__ = ["search_content", "surrounding_lines"]
