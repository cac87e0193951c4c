"""Shared helper utilities for pattern-based analyzers."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

_NAME_SEPARATORS = re.compile(r"[,{}()]")
_ALIAS = re.compile(r"\s+as\s+|\s*:\s*")
_TYPE_PREFIX = re.compile(r"^type\s+")


def line_number_at(content: str, position: int) -> int:
    """Return the 1-based line containing character ``position``."""
    return content.count("\n", 0, max(0, position)) + 1


def line_text(lines: Sequence[str], line_number: int) -> str:
    """Return line ``line_number`` (1-based) or an empty string when out of range."""
    if 1 <= line_number <= len(lines):
        return lines[line_number - 1]
    return ""


def statement_start(match: re.Match[str]) -> int:
    """Return the offset of the first non-whitespace character of ``match``."""
    text = match.group(0)
    return match.start() + (len(text) - len(text.lstrip()))


def split_names(clause: Optional[str]) -> List[str]:
    """Split an import name list such as ``{ a, b as c }`` into ``["a", "b"]``.

    Braces and parentheses are dropped, ``as`` aliases and ``:`` renames keep
    the imported name, and a leading ``type`` modifier is ignored.
    """
    if not clause:
        return []
    names: List[str] = []
    for part in _NAME_SEPARATORS.split(clause):
        part = _TYPE_PREFIX.sub("", part.strip())
        if not part:
            continue
        name = _ALIAS.split(part, maxsplit=1)[0].strip()
        if name:
            names.append(name)
    return names


def last_segment(path: str, separator: str) -> str:
    return path.rsplit(separator, 1)[-1]


__all__ = ["last_segment", "line_number_at", "line_text", "split_names", "statement_start"]
