"""Import statement discovery and relative path resolution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterator, List, Optional, Set, Tuple

from ..models import ImportRecord
from .language import detect_language
from .patterns import IMPORT_PATTERNS, ImportPattern
from .utils import line_number_at, line_text, split_names, statement_start


@dataclass(frozen=True)
class ImportMatch:
    """Import record plus the bookkeeping the graph and reference finder need."""

    record: ImportRecord
    offset: int
    end_line: int
    implicit_relative: bool


def parse_imports(
    content: object,
    file_path: Optional[str],
    *,
    language: Optional[str] = None,
) -> List[ImportRecord]:
    """Return import statements in ``content`` ordered by line number."""
    return [item.record for item in scan_imports(content, file_path, language=language)]


def scan_imports(
    content: object,
    file_path: Optional[str],
    *,
    language: Optional[str] = None,
) -> List[ImportMatch]:
    if not isinstance(content, str):
        return []
    lang = language or detect_language(file_path)
    patterns = IMPORT_PATTERNS.get(lang or "")
    if not patterns:
        return []

    lines = content.split("\n")
    found: List[ImportMatch] = []
    seen: Set[Tuple[str, str, int]] = set()
    for entry in patterns:
        for item in _matches_for(entry, content, lines):
            record = item.record
            key = (record.module, record.type, item.offset)
            if key in seen:
                continue
            seen.add(key)
            found.append(item)

    found.sort(key=lambda item: (item.record.line_number, item.offset))
    return found


def resolve_import_path(import_path: str, current_file_path: str) -> str:
    """Resolve a relative import against the importing file's directory.

    Non-relative paths are returned unchanged. A leading ``/`` is treated as
    relative to the repository root. Only path arithmetic is performed.
    """
    if not import_path:
        return import_path
    if import_path.startswith("/"):
        return _join_segments([], import_path.split("/"))
    if not import_path.startswith("."):
        return import_path

    directory = PurePosixPath(current_file_path.replace("\\", "/")).parent
    base = [part for part in directory.as_posix().split("/") if part not in ("", ".")]
    return _join_segments(base, import_path.split("/"))


def is_relative_module(module: str) -> bool:
    return module.startswith((".", "/"))


def _join_segments(base: List[str], segments: List[str]) -> str:
    parts = list(base)
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)
    return "/".join(parts)


def _matches_for(entry: ImportPattern, content: str, lines: List[str]) -> Iterator[ImportMatch]:
    for match in entry.pattern.finditer(content):
        kind = entry.refine_type(match) if entry.refine_type else entry.type
        end_line = line_number_at(content, match.end())

        if entry.inner is not None:
            block_start = match.start(entry.module_group)
            for inner in entry.inner.finditer(match.group(entry.module_group)):
                position = block_start + inner.start(1)
                line = line_number_at(content, position)
                yield _build(inner.group(1), [], kind, line, lines, position, line, entry)
            continue

        start = statement_start(match)
        line = line_number_at(content, start)
        symbols = entry.symbols(match) if entry.symbols else []
        raw = match.group(entry.module_group)
        modules = split_names(raw) if entry.split_modules else [raw]
        for module in modules:
            yield _build(module, symbols, kind, line, lines, start, end_line, entry)


def _build(
    module: str,
    symbols: List[str],
    kind: str,
    line: int,
    lines: List[str],
    offset: int,
    end_line: int,
    entry: ImportPattern,
) -> ImportMatch:
    record = ImportRecord(
        module=module,
        symbols=list(symbols),
        type=kind,
        line_number=line,
        text=line_text(lines, line),
        is_relative=is_relative_module(module),
    )
    return ImportMatch(
        record=record,
        offset=offset,
        end_line=max(line, end_line),
        implicit_relative=entry.implicit_relative,
    )


__all__ = ["ImportMatch", "parse_imports", "resolve_import_path", "scan_imports"]
