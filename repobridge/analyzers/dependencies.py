"""Cross-file dependency graph construction."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from ..logging import get_logger
from ..models import (
    DependencyEdge,
    DependencyGraph,
    DependencyNode,
    ExportedSymbol,
    ResolvedImport,
)
from .imports import ImportMatch, resolve_import_path, scan_imports
from .language import detect_language
from .symbols import find_symbols

# Tried in order when an import omits its extension.
RESOLVE_EXTENSIONS: Tuple[str, ...] = (
    ".js",
    ".ts",
    ".jsx",
    ".tsx",
    ".mjs",
    ".cjs",
    ".py",
    ".go",
    ".rb",
    ".rs",
    ".java",
    ".kt",
    ".cs",
)

_LEADING_DOTS = re.compile(r"^(\.+)(.*)$")

FileInput = Union[Tuple[str, str], Mapping[str, object]]

logger = get_logger("analyzers.dependencies")


def build_dependency_graph(files: Iterable[FileInput]) -> DependencyGraph:
    """Build the import graph for a batch of ``(path, content)`` files.

    Imports resolving to a file in the batch become edges; everything else
    is flagged external. Entry points are files nothing imports, leaf nodes
    are files importing nothing in the batch.
    """
    batch = _coerce_files(files)
    known_paths = [path for path, _ in batch]
    index = _PathIndex(known_paths)

    nodes: List[DependencyNode] = []
    edges: List[DependencyEdge] = []
    outgoing: Dict[str, List[str]] = {path: [] for path in known_paths}
    incoming: Dict[str, Set[str]] = {path: set() for path in known_paths}

    for path, content in batch:
        language = detect_language(path)
        node = DependencyNode(path=path)
        for item in scan_imports(content, path, language=language):
            target = index.resolve(_candidate_path(item, path, language))
            record = item.record
            node.imports.append(
                ResolvedImport(
                    module=record.module,
                    symbols=list(record.symbols),
                    type=record.type,
                    line_number=record.line_number,
                    is_relative=record.is_relative,
                    resolved_path=target,
                    is_external=target is None,
                )
            )
            if target is None:
                continue
            edges.append(
                DependencyEdge(
                    source=path,
                    target=target,
                    symbols=list(record.symbols),
                    import_type=record.type,
                    line_number=record.line_number,
                )
            )
            if target not in outgoing[path]:
                outgoing[path].append(target)
            incoming[target].add(path)

        node.exports = [
            ExportedSymbol(name=symbol.name, type=symbol.type, line_number=symbol.line_number)
            for symbol in find_symbols(content, path, language=language)
        ]
        nodes.append(node)

    entry_points = [path for path in known_paths if not incoming[path]]
    leaf_nodes = [path for path in known_paths if not outgoing[path]]
    circular = find_cycles(known_paths, outgoing)

    logger.debug(
        "Dependency graph: %d files, %d edges, %d cycles",
        len(nodes),
        len(edges),
        len(circular),
    )
    return DependencyGraph(
        nodes=nodes,
        edges=edges,
        entry_points=entry_points,
        leaf_nodes=leaf_nodes,
        circular=circular,
    )


def find_cycles(order: Sequence[str], adjacency: Mapping[str, Sequence[str]]) -> List[List[str]]:
    """Detect cycles by depth-first search with an explicit on-stack set.

    Reaching a node that is still on the stack closes a cycle, recorded as
    the stack slice from that node through the current one.
    """
    visited: Set[str] = set()
    on_stack: Set[str] = set()
    stack: List[str] = []
    cycles: List[List[str]] = []

    def visit(node: str) -> None:
        visited.add(node)
        on_stack.add(node)
        stack.append(node)
        for neighbour in adjacency.get(node, ()):
            if neighbour in on_stack:
                cycles.append(stack[stack.index(neighbour) :])
            elif neighbour not in visited:
                visit(neighbour)
        stack.pop()
        on_stack.discard(node)

    for node in order:
        if node not in visited:
            visit(node)
    return cycles


class _PathIndex:
    """Lookup of batch paths by exact path, extension-less path and index files."""

    def __init__(self, paths: Sequence[str]) -> None:
        self._exact: Set[str] = set(paths)
        self._by_stem: Dict[str, str] = {}
        for path in paths:
            self._by_stem.setdefault(_strip_extension(path), path)

    def resolve(self, candidate: Optional[str]) -> Optional[str]:
        if not candidate:
            return None
        if candidate in self._exact:
            return candidate
        stem = _strip_extension(candidate)
        if stem in self._by_stem:
            return self._by_stem[stem]
        index_stem = f"{candidate.rstrip('/')}/index"
        if index_stem in self._by_stem:
            return self._by_stem[index_stem]
        for extension in RESOLVE_EXTENSIONS:
            if f"{candidate}{extension}" in self._exact:
                return f"{candidate}{extension}"
        return None


def _candidate_path(item: ImportMatch, path: str, language: Optional[str]) -> str:
    module = item.record.module
    if language == "py":
        module = _python_module_path(module)
    elif item.implicit_relative and not module.startswith((".", "/")):
        module = f"./{module}"
    return resolve_import_path(module, path)


def _python_module_path(module: str) -> str:
    """Translate dotted Python module names into import paths.

    ``.mod`` becomes ``./mod``, ``..pkg.mod`` becomes ``../pkg/mod`` and a bare
    dot sequence points at the package ``__init__``.
    """
    match = _LEADING_DOTS.match(module)
    if not match:
        return module.replace(".", "/")
    dots, rest = match.groups()
    prefix = "./" if len(dots) == 1 else "../" * (len(dots) - 1)
    tail = rest.replace(".", "/") if rest else "__init__"
    return f"{prefix}{tail}"


def _strip_extension(path: str) -> str:
    suffix = PurePosixPath(path).suffix
    return path[: -len(suffix)] if suffix else path


def _coerce_files(files: Iterable[FileInput]) -> List[Tuple[str, str]]:
    batch: List[Tuple[str, str]] = []
    seen: Set[str] = set()
    for entry in files:
        if isinstance(entry, Mapping):
            path, content = entry.get("path"), entry.get("content")
        else:
            path, content = entry
        if not isinstance(path, str) or not path or path in seen:
            continue
        seen.add(path)
        batch.append((path, content if isinstance(content, str) else ""))
    return batch


__all__ = ["RESOLVE_EXTENSIONS", "build_dependency_graph", "find_cycles"]
