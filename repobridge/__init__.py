"""Content normalization and static analysis for repository file gateways."""

__version__ = "0.1.0"

from .analyzers import (  # noqa: E402
    build_dependency_graph,
    detect_language,
    find_references,
    find_symbols,
    parse_imports,
    resolve_import_path,
)
from .content import (  # noqa: E402
    compute_line_map,
    extract_line_range,
    normalize_content,
    read_with_line_map,
    search_content,
)
from .git import (  # noqa: E402
    DiffLimits,
    PatchConflictError,
    PatchError,
    PatchValidationError,
    apply_search_replace,
    apply_unified_diff,
    compare_structure,
    compute_line_diff,
)
from .references import build_line_reference, check_drift  # noqa: E402

__all__ = [
    "DiffLimits",
    "PatchConflictError",
    "PatchError",
    "PatchValidationError",
    "__version__",
    "apply_search_replace",
    "apply_unified_diff",
    "build_dependency_graph",
    "build_line_reference",
    "check_drift",
    "compare_structure",
    "compute_line_diff",
    "compute_line_map",
    "detect_language",
    "extract_line_range",
    "find_references",
    "find_symbols",
    "normalize_content",
    "parse_imports",
    "read_with_line_map",
    "resolve_import_path",
    "search_content",
]
