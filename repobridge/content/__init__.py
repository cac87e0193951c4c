"""Normalization, line maps and search over raw file content."""

from .lines import compute_line_map, extract_line_range, read_with_line_map
from .normalize import normalize_content
from .search import search_content

__all__ = [
    "compute_line_map",
    "extract_line_range",
    "normalize_content",
    "read_with_line_map",
    "search_content",
]
