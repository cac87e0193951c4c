"""Regex-driven static analysis: symbols, imports and dependency graphs."""

from .dependencies import build_dependency_graph, find_cycles
from .imports import parse_imports, resolve_import_path
from .language import EXT_TO_LANG, detect_language
from .patterns import IMPORT_PATTERNS, SYMBOL_PATTERNS
from .symbols import find_references, find_symbols, summarize_references

__all__ = [
    "EXT_TO_LANG",
    "IMPORT_PATTERNS",
    "SYMBOL_PATTERNS",
    "build_dependency_graph",
    "detect_language",
    "find_cycles",
    "find_references",
    "find_symbols",
    "parse_imports",
    "resolve_import_path",
    "summarize_references",
]
