"""Core data models shared across repobridge components."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LineRecord:
    """One line of normalized content with its character offsets."""

    line_number: int
    start_offset: int
    end_offset: int
    text: str


@dataclass(frozen=True)
class NumberedLine:
    line_number: int
    text: str


@dataclass(frozen=True)
class LineRange:
    """Clamped slice of a document."""

    lines: List[NumberedLine]
    total_lines: int


@dataclass(frozen=True)
class LineView:
    """Line-accurate view of a file, optionally restricted to a range."""

    content: str
    total_lines: int
    lines: List[NumberedLine]
    normalized: bool
    start_line: Optional[int] = None
    end_line: Optional[int] = None


@dataclass(frozen=True)
class MatchContext:
    before: List[str] = field(default_factory=list)
    after: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SearchMatch:
    """First match of a search pattern on a single line."""

    line_number: int
    text: str
    match_start: int
    match_end: int
    context: MatchContext


@dataclass(frozen=True)
class Symbol:
    """Symbol definition located by pattern matching."""

    name: str
    type: str
    line_number: int
    text: str


@dataclass(frozen=True)
class ImportRecord:
    """Import/require statement located by pattern matching."""

    module: str
    symbols: List[str]
    type: str
    line_number: int
    text: str
    is_relative: bool


@dataclass(frozen=True)
class SymbolReference:
    """Line mentioning a symbol, classified as definition, import or usage."""

    line_number: int
    text: str
    type: str
    context: MatchContext


@dataclass(frozen=True)
class LineReference:
    """Shareable pointer to a line range pinned to a blob SHA."""

    ref: str
    owner: str
    repo: str
    path: str
    blob_sha: str
    commit_sha: Optional[str]
    start_line: int
    end_line: int
    github_url: str


@dataclass(frozen=True)
class DriftCheck:
    drifted: bool
    reference_sha: Optional[str]
    current_sha: Optional[str]


@dataclass(frozen=True)
class ResolvedImport:
    """Import record annotated with the file it resolved to, if any."""

    module: str
    symbols: List[str]
    type: str
    line_number: int
    is_relative: bool
    resolved_path: Optional[str]
    is_external: bool


@dataclass(frozen=True)
class ExportedSymbol:
    name: str
    type: str
    line_number: int


@dataclass
class DependencyNode:
    path: str
    imports: List[ResolvedImport] = field(default_factory=list)
    exports: List[ExportedSymbol] = field(default_factory=list)

    @property
    def import_count(self) -> int:
        return len(self.imports)

    @property
    def export_count(self) -> int:
        return len(self.exports)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "imports": to_payload(self.imports),
            "exports": to_payload(self.exports),
            "importCount": self.import_count,
            "exportCount": self.export_count,
        }


@dataclass(frozen=True)
class DependencyEdge:
    source: str
    target: str
    symbols: List[str]
    import_type: str
    line_number: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "symbols": list(self.symbols),
            "importType": self.import_type,
            "lineNumber": self.line_number,
        }


@dataclass
class DependencyGraph:
    """Directed import graph over a batch of files."""

    nodes: List[DependencyNode]
    edges: List[DependencyEdge]
    entry_points: List[str]
    leaf_nodes: List[str]
    circular: List[List[str]]

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "totalNodes": len(self.nodes),
            "totalEdges": len(self.edges),
            "entryPoints": len(self.entry_points),
            "leafNodes": len(self.leaf_nodes),
            "circularDependencies": len(self.circular),
        }

    def to_payload(self) -> Dict[str, Any]:
        return {
            "nodes": to_payload(self.nodes),
            "edges": to_payload(self.edges),
            "entryPoints": list(self.entry_points),
            "leafNodes": list(self.leaf_nodes),
            "circular": [list(cycle) for cycle in self.circular],
            "summary": self.summary,
        }


@dataclass(frozen=True)
class DiffLine:
    op: str
    line_num: int
    line: str


@dataclass(frozen=True)
class DiffResult:
    """Bounded line diff between two blobs."""

    status: str
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    lines: List[DiffLine] = field(default_factory=list)
    truncated: bool = False
    total_changes: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class AppliedOperation:
    index: int
    applied: bool
    search_length: int
    replace_length: int


@dataclass(frozen=True)
class PatchResult:
    """Outcome of applying a unified diff to content."""

    ok: bool
    content: Optional[str] = None
    hunks_applied: int = 0
    error: Optional[str] = None


@dataclass
class StructureComparison:
    """Entry-level comparison between two directory listings."""

    only_in_source: List[Dict[str, Any]] = field(default_factory=list)
    only_in_target: List[Dict[str, Any]] = field(default_factory=list)
    in_both: List[Dict[str, Any]] = field(default_factory=list)
    size_differences: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return not (self.only_in_source or self.only_in_target or self.size_differences)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "identical": self.identical,
            "onlyInSource": to_payload(self.only_in_source),
            "onlyInTarget": to_payload(self.only_in_target),
            "inBoth": to_payload(self.in_both),
            "sizeDifferences": to_payload(self.size_differences),
        }


def to_payload(value: Any) -> Any:
    """Convert models into JSON-ready structures with camelCase keys."""
    custom = getattr(value, "to_payload", None)
    if callable(custom):
        return custom()
    if is_dataclass(value) and not isinstance(value, type):
        return {
            _camel_case(item.name): to_payload(getattr(value, item.name))
            for item in fields(value)
        }
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    return value


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)
