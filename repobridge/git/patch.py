"""Search/replace and unified-diff patch application."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..logging import get_logger
from ..models import AppliedOperation, PatchResult

logger = get_logger("git.patch")

_HUNK_HEADER = re.compile(r"^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@")
_FILE_HEADERS = ("--- ", "+++ ", "diff ", "index ")


class PatchError(ValueError):
    """Base class for patch application failures."""

    status_code = 400


class PatchValidationError(PatchError):
    """Raised when an operation is malformed."""

    status_code = 400


class PatchConflictError(PatchError):
    """Raised when the content no longer contains the text a patch expects."""

    status_code = 409


@dataclass
class Hunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[str] = field(default_factory=list)

    def split(self) -> Tuple[List[str], List[str]]:
        """Return the (expected, replacement) line lists for this hunk."""
        old: List[str] = []
        new: List[str] = []
        for line in self.lines:
            marker, body = line[:1], line[1:]
            if marker == "-":
                old.append(body)
            elif marker == "+":
                new.append(body)
            else:
                old.append(body)
                new.append(body)
        return old, new


def apply_search_replace(
    content: str, operations: Iterable[Mapping[str, Any]]
) -> Tuple[str, List[AppliedOperation]]:
    """Apply ``{search, replace, replaceAll}`` operations in order.

    Without ``replaceAll`` only the first occurrence is replaced and a missing
    search string is a conflict. With it, every occurrence is replaced and a
    missing string simply leaves the content untouched.
    """
    applied: List[AppliedOperation] = []
    for index, operation in enumerate(operations):
        search = operation.get("search")
        replace = operation.get("replace")
        replace_all = bool(operation.get("replaceAll", operation.get("replace_all", False)))

        if not isinstance(search, str) or not search:
            raise PatchValidationError(f"Operation {index}: 'search' must be a non-empty string")
        if not isinstance(replace, str):
            raise PatchValidationError(f"Operation {index}: 'replace' must be a string")

        before = content
        if replace_all:
            content = content.replace(search, replace)
        else:
            position = content.find(search)
            if position == -1:
                preview = json.dumps(search[:100]) + ("..." if len(search) > 100 else "")
                raise PatchConflictError(
                    f"Operation {index}: search string not found in file. Search: {preview}"
                )
            content = content[:position] + replace + content[position + len(search) :]

        applied.append(
            AppliedOperation(
                index=index,
                applied=before != content,
                search_length=len(search),
                replace_length=len(replace),
            )
        )
    return content, applied


def parse_hunks(patch: str) -> List[Hunk]:
    """Parse ``@@`` hunks from a unified diff, ignoring file headers."""
    patch_lines = patch.split("\n")
    if patch.endswith("\n"):
        patch_lines.pop()

    hunks: List[Hunk] = []
    current: Optional[Hunk] = None
    for line in patch_lines:
        if line.startswith(_FILE_HEADERS):
            continue
        header = _HUNK_HEADER.match(line)
        if header:
            old_start, old_count, new_start, new_count = header.groups()
            current = Hunk(
                old_start=int(old_start),
                old_count=int(old_count) if old_count is not None else 1,
                new_start=int(new_start),
                new_count=int(new_count) if new_count is not None else 1,
            )
            hunks.append(current)
            continue
        # An empty line inside a hunk is an empty context line.
        if current is not None and (line == "" or line[0] in "+- "):
            current.lines.append(line)
    return hunks


def apply_unified_diff(content: str, patch: str) -> PatchResult:
    """Apply a unified diff, verifying every context and removed line first.

    Hunks are applied from the bottom of the file upwards so earlier line
    numbers stay valid. Failures are reported in the result, never raised.
    """
    hunks = parse_hunks(patch)
    if not hunks:
        return PatchResult(
            ok=False,
            error="No valid hunks found in patch. Expected @@ -start,count +start,count @@ format.",
        )

    result = content.split("\n")
    applied = 0
    for hunk in reversed(hunks):
        start = hunk.old_start - 1
        old_lines, new_lines = hunk.split()
        if start < 0:
            # Only a pure insertion (-0,0) may target line zero.
            if old_lines:
                return PatchResult(
                    ok=False,
                    error=(
                        f"Hunk at line {hunk.old_start}: removed and context lines "
                        "must start at line 1 or later"
                    ),
                )
            start = 0

        for offset, expected in enumerate(old_lines):
            position = start + offset
            if position >= len(result):
                return PatchResult(
                    ok=False,
                    error=(
                        f"Hunk at line {hunk.old_start}: file has {len(result)} lines "
                        f"but hunk expects line {position + 1}"
                    ),
                )
            if result[position] != expected:
                logger.debug("Context mismatch applying hunk at line %d", hunk.old_start)
                return PatchResult(
                    ok=False,
                    error=(
                        f"Context mismatch at line {position + 1}: expected {json.dumps(expected)}, "
                        f"found {json.dumps(result[position])}. "
                        "File may have changed since patch was created."
                    ),
                )

        result[start : start + len(old_lines)] = new_lines
        applied += 1

    return PatchResult(ok=True, content="\n".join(result), hunks_applied=applied)


__all__ = [
    "Hunk",
    "PatchConflictError",
    "PatchError",
    "PatchValidationError",
    "apply_search_replace",
    "apply_unified_diff",
    "parse_hunks",
]
