"""Per-language regular expression tables for symbol and import discovery.

The tables are plain data keyed by language (see ``language.EXT_TO_LANG``).
Extraction code in ``symbols`` and ``imports`` never branches on a language
key, so supporting another language only means adding entries here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Tuple

from .utils import last_segment, split_names

_FLAGS = re.MULTILINE

SymbolsStrategy = Callable[[re.Match[str]], List[str]]


@dataclass(frozen=True)
class SymbolPattern:
    """Pattern whose first group captures a symbol name."""

    type: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class ImportPattern:
    """Pattern locating an import statement.

    ``module_group`` holds the module path. When ``inner`` is set the group
    holds a block (Go ``import (...)``) that is re-scanned, each ``inner``
    match yielding its own module. ``split_modules`` splits a comma list of
    modules (Python ``import a, b``). ``implicit_relative`` marks syntaxes
    whose targets are relative to the importing file even without a leading
    dot (Ruby ``require_relative``).
    """

    type: str
    pattern: re.Pattern[str]
    module_group: int = 1
    symbols: Optional[SymbolsStrategy] = None
    refine_type: Optional[Callable[[re.Match[str]], str]] = None
    inner: Optional[re.Pattern[str]] = None
    split_modules: bool = False
    implicit_relative: bool = False


def _symbol(type_: str, pattern: str) -> SymbolPattern:
    return SymbolPattern(type=type_, pattern=re.compile(pattern, _FLAGS))


def _names_in(group: int) -> SymbolsStrategy:
    def _strategy(match: re.Match[str]) -> List[str]:
        return split_names(match.group(group))

    return _strategy


def _last_segment_of(group: int, separator: str) -> SymbolsStrategy:
    def _strategy(match: re.Match[str]) -> List[str]:
        value = match.group(group)
        return [last_segment(value, separator)] if value else []

    return _strategy


def _rust_use_symbols(match: re.Match[str]) -> List[str]:
    if match.group(2):
        return split_names(match.group(2))
    return [last_segment(match.group(1), "::")]


def _require_type(match: re.Match[str]) -> str:
    binding = (match.group(1) or "").lstrip()
    return "destructured_require" if binding.startswith("{") else "require"


SYMBOL_PATTERNS: Mapping[str, Tuple[SymbolPattern, ...]] = MappingProxyType(
    {
        "js": (
            _symbol("function", r"(?:^|\s)(?:export\s+)?(?:default\s+)?(?:async\s+)?function\b\s*\*?\s*([\w$]+)"),
            _symbol("class", r"(?:^|\s)(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+([\w$]+)"),
            _symbol(
                "const_fn",
                r"(?:^|\s)(?:export\s+)?(?:const|let|var)\s+([\w$]+)\s*=\s*(?:async\s+)?"
                r"(?:\([^)]*\)|[A-Za-z_$][\w$]*)\s*=>",
            ),
            _symbol(
                "method",
                r"^[ \t]+(?:static\s+)?(?:async\s+)?"
                r"(?!(?:if|for|while|switch|catch|return|function|else)\b)([\w$]+)\s*\([^)]*\)\s*\{",
            ),
            _symbol("interface", r"(?:^|\s)(?:export\s+)?interface\s+([\w$]+)"),
            _symbol("type", r"(?:^|\s)(?:export\s+)?type\s+([\w$]+)\s*(?:<[^>]*>)?\s*="),
            _symbol("enum", r"(?:^|\s)(?:export\s+)?(?:const\s+)?enum\s+([\w$]+)"),
        ),
        "py": (
            _symbol("function", r"^[ \t]*(?:async\s+)?def\s+(\w+)"),
            _symbol("class", r"^[ \t]*class\s+(\w+)"),
        ),
        "go": (
            _symbol("function", r"^func\s+(\w+)"),
            _symbol("method", r"^func\s+\([^)]+\)\s+(\w+)"),
            _symbol("type", r"^type\s+(\w+)\s+(?:struct|interface)\b"),
        ),
        "rb": (
            _symbol("function", r"^[ \t]*def\s+(?:self\.)?(\w+[?!]?)"),
            _symbol("class", r"^[ \t]*class\s+(\w+)"),
            _symbol("module", r"^[ \t]*module\s+(\w+)"),
        ),
        "java": (
            _symbol(
                "class",
                r"(?:(?:public|private|protected|internal)\s+)?(?:static\s+)?(?:abstract\s+)?"
                r"(?:final\s+|sealed\s+|data\s+|open\s+)?\bclass\s+(\w+)",
            ),
            _symbol("interface", r"(?:(?:public|private|protected|internal)\s+)?\binterface\s+(\w+)"),
            _symbol(
                "method",
                r"(?:public|private|protected)\s+(?:static\s+)?(?:final\s+)?(?:abstract\s+)?"
                r"[\w.]+(?:<[^>]+>)?(?:\[\])*\s+(\w+)\s*\(",
            ),
            _symbol("enum", r"(?:(?:public|private|protected|internal)\s+)?\benum\s+(?:class\s+)?(\w+)"),
        ),
        "rs": (
            _symbol("function", r"(?:pub(?:\([^)]*\))?\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?\bfn\s+(\w+)"),
            _symbol("struct", r"(?:pub(?:\([^)]*\))?\s+)?\bstruct\s+(\w+)"),
            _symbol("trait", r"(?:pub(?:\([^)]*\))?\s+)?\btrait\s+(\w+)"),
            _symbol("enum", r"(?:pub(?:\([^)]*\))?\s+)?\benum\s+(\w+)"),
            _symbol("impl", r"\bimpl(?:<[^>]+>)?\s+(\w+)"),
        ),
    }
)


IMPORT_PATTERNS: Mapping[str, Tuple[ImportPattern, ...]] = MappingProxyType(
    {
        "js": (
            ImportPattern(
                type="import",
                pattern=re.compile(
                    r"^[ \t]*import\s+(?:type\s+)?([\w$*{}\s,]+?)\s+from\s+['\"]([^'\"\n]+)['\"]", _FLAGS
                ),
                module_group=2,
                symbols=_names_in(1),
            ),
            ImportPattern(
                type="side_effect",
                pattern=re.compile(r"^[ \t]*import\s+['\"]([^'\"\n]+)['\"]", _FLAGS),
            ),
            ImportPattern(
                type="require",
                pattern=re.compile(
                    r"(?:(?:const|let|var)\s+(\{[^}]*\}|[\w$]+)\s*=\s*)?"
                    r"\brequire\(\s*['\"]([^'\"\n]+)['\"]\s*\)",
                    _FLAGS,
                ),
                module_group=2,
                symbols=_names_in(1),
                refine_type=_require_type,
            ),
            ImportPattern(
                type="dynamic_import",
                pattern=re.compile(r"\bimport\(\s*['\"]([^'\"\n]+)['\"]\s*\)", _FLAGS),
            ),
            ImportPattern(
                type="export_from",
                pattern=re.compile(
                    r"^[ \t]*export\s+(?:type\s+)?(\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s+from\s+['\"]([^'\"\n]+)['\"]",
                    _FLAGS,
                ),
                module_group=2,
                symbols=_names_in(1),
            ),
        ),
        "py": (
            ImportPattern(
                type="from_import",
                pattern=re.compile(r"^[ \t]*from\s+(\.+[\w.]*|[\w.]+)\s+import\s+(\([^)]*\)|[^\n#]+)", _FLAGS),
                symbols=_names_in(2),
            ),
            ImportPattern(
                type="import",
                pattern=re.compile(
                    r"^[ \t]*import\s+([\w.]+(?:\s+as\s+\w+)?(?:[ \t]*,[ \t]*[\w.]+(?:\s+as\s+\w+)?)*)", _FLAGS
                ),
                split_modules=True,
            ),
        ),
        "go": (
            ImportPattern(
                type="import",
                pattern=re.compile(r"^[ \t]*import[ \t]+(?:[\w.]+[ \t]+)?\"([^\"\n]+)\"", _FLAGS),
            ),
            ImportPattern(
                type="import_block",
                pattern=re.compile(r"^[ \t]*import\s*\(([^)]*)\)", _FLAGS),
                inner=re.compile(r"(?:[\w.]+[ \t]+)?\"([^\"\n]+)\""),
            ),
        ),
        "rb": (
            ImportPattern(
                type="require",
                pattern=re.compile(r"^[ \t]*require\s*\(?\s*['\"]([^'\"\n]+)['\"]", _FLAGS),
            ),
            ImportPattern(
                type="require_relative",
                pattern=re.compile(r"^[ \t]*require_relative\s*\(?\s*['\"]([^'\"\n]+)['\"]", _FLAGS),
                implicit_relative=True,
            ),
        ),
        "java": (
            ImportPattern(
                type="import",
                pattern=re.compile(r"^[ \t]*import\s+(?:static\s+)?([\w.]+(?:\.\*)?)(?:\s+as\s+\w+)?[ \t]*;?", _FLAGS),
                symbols=_last_segment_of(1, "."),
            ),
            ImportPattern(
                type="using",
                pattern=re.compile(r"^[ \t]*using\s+(?:static\s+)?(?:\w+\s*=\s*)?([\w.]+)\s*;", _FLAGS),
                symbols=_last_segment_of(1, "."),
            ),
        ),
        "rs": (
            ImportPattern(
                type="use",
                pattern=re.compile(
                    r"^[ \t]*(?:pub(?:\([^)]*\))?\s+)?use\s+((?:::)?[\w:]*\w(?:::\*)?)"
                    r"(?:::\{([^}]*)\})?(?:\s+as\s+\w+)?\s*;",
                    _FLAGS,
                ),
                symbols=_rust_use_symbols,
            ),
            ImportPattern(
                type="mod",
                pattern=re.compile(r"^[ \t]*(?:pub(?:\([^)]*\))?\s+)?mod\s+(\w+)\s*;", _FLAGS),
            ),
            ImportPattern(
                type="extern_crate",
                pattern=re.compile(r"^[ \t]*extern\s+crate\s+(\w+)", _FLAGS),
            ),
        ),
    }
)


__all__ = ["IMPORT_PATTERNS", "ImportPattern", "SYMBOL_PATTERNS", "SymbolPattern"]
