"""Directory listing comparison."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from ..models import StructureComparison


def compare_structure(
    source_entries: Iterable[Mapping[str, Any]],
    target_entries: Iterable[Mapping[str, Any]],
) -> StructureComparison:
    """Compare two directory listings of ``{name, type, size}`` entries by name."""
    source = _by_name(source_entries)
    target = _by_name(target_entries)
    comparison = StructureComparison()

    for name, entry in source.items():
        other = target.get(name)
        if other is None:
            comparison.only_in_source.append(
                {"name": name, "type": entry.get("type"), "size": entry.get("size")}
            )
            continue
        comparison.in_both.append(
            {
                "name": name,
                "type": entry.get("type"),
                "sourceSize": entry.get("size"),
                "targetSize": other.get("size"),
            }
        )
        if entry.get("type") == "file" and other.get("type") == "file" and entry.get("size") != other.get("size"):
            comparison.size_differences.append(
                {"name": name, "sourceSize": entry.get("size"), "targetSize": other.get("size")}
            )

    for name, entry in target.items():
        if name not in source:
            comparison.only_in_target.append(
                {"name": name, "type": entry.get("type"), "size": entry.get("size")}
            )
    return comparison


def _by_name(entries: Iterable[Mapping[str, Any]]) -> Dict[str, Mapping[str, Any]]:
    listing: Dict[str, Mapping[str, Any]] = {}
    for entry in entries:
        name = entry.get("name")
        if isinstance(name, str) and name:
            listing[name] = entry
    return listing


__all__ = ["compare_structure"]
