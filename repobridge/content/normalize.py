"""Content normalization applied before any line numbering."""

from __future__ import annotations

_BOM = "\ufeff"


def normalize_content(
    content: object,
    *,
    strip_trailing_whitespace: bool = False,
    strip_bom: bool = True,
) -> str:
    """Return ``content`` with a single LF line ending convention.

    Steps run in a fixed order: leading BOM removal, CRLF then lone CR
    conversion to LF, and (optionally) per-line trailing whitespace removal.
    Non-string input yields an empty string.
    """
    if not isinstance(content, str):
        return ""

    result = content
    if strip_bom and result.startswith(_BOM):
        result = result[1:]

    # CRLF first so a CRLF pair never turns into two line breaks.
    result = result.replace("\r\n", "\n").replace("\r", "\n")

    if strip_trailing_whitespace:
        result = "\n".join(line.rstrip() for line in result.split("\n"))

    return result


__all__ = ["normalize_content"]
