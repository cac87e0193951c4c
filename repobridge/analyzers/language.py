"""File extension to pattern-set language mapping."""

from __future__ import annotations

from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping, Optional

# TS/JSX/TSX share the JavaScript pattern set, Kotlin/C# share Java's.
EXT_TO_LANG: Mapping[str, str] = MappingProxyType(
    {
        ".js": "js",
        ".mjs": "js",
        ".cjs": "js",
        ".ts": "js",
        ".tsx": "js",
        ".jsx": "js",
        ".py": "py",
        ".pyw": "py",
        ".go": "go",
        ".rb": "rb",
        ".java": "java",
        ".kt": "java",
        ".kts": "java",
        ".cs": "java",
        ".rs": "rs",
    }
)


def detect_language(file_path: Optional[str]) -> Optional[str]:
    """Return the language key for ``file_path`` or ``None`` when unsupported."""
    if not file_path:
        return None
    suffix = PurePosixPath(file_path.replace("\\", "/")).suffix.lower()
    return EXT_TO_LANG.get(suffix)


__all__ = ["EXT_TO_LANG", "detect_language"]
