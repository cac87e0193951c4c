"""Symbol definition discovery and reference classification."""

from __future__ import annotations

import re
from typing import Collection, Dict, List, Optional, Set, Tuple

from ..content.search import surrounding_lines
from ..models import Symbol, SymbolReference
from .imports import scan_imports
from .language import detect_language
from .patterns import SYMBOL_PATTERNS
from .utils import line_number_at, line_text


def find_symbols(
    content: object,
    file_path: Optional[str],
    *,
    language: Optional[str] = None,
    name_filter: Optional[str] = None,
    type_filter: Optional[Collection[str]] = None,
) -> List[Symbol]:
    """Locate symbol definitions in ``content``.

    Every pattern for the file's language runs over the whole text. The line
    of a symbol is derived from the offset of its name group rather than the
    start of the match, which may begin with whitespace or earlier newlines.
    """
    if not isinstance(content, str):
        return []
    lang = language or detect_language(file_path)
    patterns = SYMBOL_PATTERNS.get(lang or "")
    if not patterns:
        return []

    lines = content.split("\n")
    needle = name_filter.lower() if name_filter else None
    symbols: List[Symbol] = []

    for entry in patterns:
        if type_filter and entry.type not in type_filter:
            continue
        for match in entry.pattern.finditer(content):
            name = match.group(1)
            if not name:
                continue
            if needle and needle not in name.lower():
                continue
            line = line_number_at(content, match.start(1))
            symbols.append(Symbol(name=name, type=entry.type, line_number=line, text=line_text(lines, line)))

    symbols.sort(key=lambda symbol: symbol.line_number)
    seen: Set[Tuple[str, int]] = set()
    unique: List[Symbol] = []
    for symbol in symbols:
        key = (symbol.name, symbol.line_number)
        if key in seen:
            continue
        seen.add(key)
        unique.append(symbol)
    return unique


def find_references(
    content: object,
    symbol_name: str,
    file_path: Optional[str],
    *,
    context_lines: int = 1,
    language: Optional[str] = None,
) -> List[SymbolReference]:
    """Return every line mentioning ``symbol_name``, classified by role.

    Matching only anchors the start of the name to a word boundary, so
    ``foo`` is reported inside ``fooBar`` but not inside ``myfoo``.
    """
    if not isinstance(content, str) or not content or not symbol_name:
        return []

    word = re.compile(r"\b" + re.escape(symbol_name))
    definitions = {
        symbol.line_number
        for symbol in find_symbols(content, file_path, language=language)
        if symbol.name == symbol_name
    }
    import_lines = _import_lines_mentioning(content, file_path, language, word)

    lines = content.split("\n")
    references: List[SymbolReference] = []
    for index, text in enumerate(lines):
        if not word.search(text):
            continue
        number = index + 1
        if number in definitions:
            kind = "definition"
        elif number in import_lines:
            kind = "import"
        else:
            kind = "usage"
        references.append(
            SymbolReference(
                line_number=number,
                text=text,
                type=kind,
                context=surrounding_lines(lines, index, context_lines),
            )
        )
    return references


def summarize_references(references: List[SymbolReference]) -> Dict[str, int]:
    summary = {"definitions": 0, "imports": 0, "usages": 0}
    for reference in references:
        summary[f"{reference.type}s"] = summary.get(f"{reference.type}s", 0) + 1
    return summary


def _import_lines_mentioning(
    content: str,
    file_path: Optional[str],
    language: Optional[str],
    word: re.Pattern[str],
) -> Set[int]:
    lines: Set[int] = set()
    for item in scan_imports(content, file_path, language=language):
        record = item.record
        if word.search(record.module) or any(word.search(name) for name in record.symbols):
            lines.update(range(record.line_number, item.end_line + 1))
    return lines


__all__ = ["find_references", "find_symbols", "summarize_references"]
