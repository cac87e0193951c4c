"""CLI entrypoints for repobridge commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from .analyzers import build_dependency_graph, find_references, find_symbols, parse_imports
from .analyzers.symbols import summarize_references
from .config import ConfigError, RepoBridgeConfig, load_config
from .content import normalize_content, read_with_line_map, search_content
from .git import compute_line_diff
from .logging import configure_logging, get_logger
from .models import to_payload
from .references import build_line_reference, check_drift

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="File to analyse, or '-' to read standard input.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repobridge",
        description="Normalize, search and analyse repository files.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .repobridge.yml or the directory holding it (defaults to cwd).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize_parser = subparsers.add_parser("normalize", help="Print normalized file content.")
    _add_verbose_option(normalize_parser, suppress_default=True)
    _add_file_argument(normalize_parser)
    normalize_parser.add_argument(
        "--strip-trailing-whitespace",
        action="store_true",
        default=None,
        help="Remove trailing whitespace from every line.",
    )
    normalize_parser.add_argument(
        "--keep-bom",
        action="store_true",
        help="Keep a leading byte order mark.",
    )

    lines_parser = subparsers.add_parser("lines", help="Show numbered lines, optionally a range.")
    _add_verbose_option(lines_parser, suppress_default=True)
    _add_file_argument(lines_parser)
    lines_parser.add_argument("--start", type=int, default=None, help="First line (1-based).")
    lines_parser.add_argument("--end", type=int, default=None, help="Last line (inclusive).")

    search_parser = subparsers.add_parser("search", help="Search file content line by line.")
    _add_verbose_option(search_parser, suppress_default=True)
    _add_file_argument(search_parser)
    search_parser.add_argument("pattern", help="Literal text or regular expression.")
    search_parser.add_argument("--regex", action="store_true", help="Treat pattern as a regex.")
    search_parser.add_argument(
        "-i", "--ignore-case", action="store_true", help="Match case-insensitively."
    )
    search_parser.add_argument("--context", type=int, default=None, help="Context lines per match.")
    search_parser.add_argument("--max-results", type=int, default=None, help="Stop after N matches.")

    symbols_parser = subparsers.add_parser("symbols", help="List symbol definitions.")
    _add_verbose_option(symbols_parser, suppress_default=True)
    _add_file_argument(symbols_parser)
    symbols_parser.add_argument("--name", default=None, help="Case-insensitive name filter.")
    symbols_parser.add_argument(
        "--type",
        dest="types",
        action="append",
        default=None,
        help="Restrict to a symbol type; may be repeated.",
    )
    symbols_parser.add_argument("--language", default=None, help="Override language detection.")

    imports_parser = subparsers.add_parser("imports", help="List import statements.")
    _add_verbose_option(imports_parser, suppress_default=True)
    _add_file_argument(imports_parser)
    imports_parser.add_argument("--language", default=None, help="Override language detection.")

    refs_parser = subparsers.add_parser("refs", help="Find references to a symbol.")
    _add_verbose_option(refs_parser, suppress_default=True)
    _add_file_argument(refs_parser)
    refs_parser.add_argument("symbol", help="Symbol name to look for.")
    refs_parser.add_argument("--context", type=int, default=1, help="Context lines per reference.")
    refs_parser.add_argument("--language", default=None, help="Override language detection.")

    graph_parser = subparsers.add_parser("graph", help="Build a dependency graph for files.")
    _add_verbose_option(graph_parser, suppress_default=True)
    graph_parser.add_argument("files", nargs="+", help="Files to include in the graph.")

    diff_parser = subparsers.add_parser("diff", help="Line diff between two files.")
    _add_verbose_option(diff_parser, suppress_default=True)
    diff_parser.add_argument("source", help="Source file (a missing path counts as absent).")
    diff_parser.add_argument("target", help="Target file (a missing path counts as absent).")

    ref_parser = subparsers.add_parser("ref", help="Build a permalink line reference.")
    _add_verbose_option(ref_parser, suppress_default=True)
    ref_parser.add_argument("--owner", required=True)
    ref_parser.add_argument("--repo", required=True)
    ref_parser.add_argument("--path", required=True)
    ref_parser.add_argument("--blob-sha", required=True)
    ref_parser.add_argument("--start", type=int, required=True, help="First line (1-based).")
    ref_parser.add_argument("--end", type=int, default=None, help="Last line (inclusive).")
    ref_parser.add_argument("--commit-sha", default=None)

    drift_parser = subparsers.add_parser("drift", help="Compare a referenced SHA to the current one.")
    _add_verbose_option(drift_parser, suppress_default=True)
    drift_parser.add_argument("reference_sha")
    drift_parser.add_argument("current_sha")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Bind address.")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repobridge commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config or Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"repobridge: {exc}\n")

    configure_logging(
        verbose=bool(args.verbose),
        level=config.logging.level,
        json_lines=config.logging.json,
    )

    try:
        result = _dispatch(args, config)
    except FileNotFoundError as exc:
        parser.exit(1, f"repobridge: file not found: {exc.filename or exc}\n")
    except (OSError, ValueError) as exc:
        parser.exit(1, f"repobridge {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    if result is not None:
        _emit(result)


def _dispatch(args: argparse.Namespace, config: RepoBridgeConfig) -> Any:
    limits = config.limits
    command = args.command

    if command == "normalize":
        strip_trailing = args.strip_trailing_whitespace
        if strip_trailing is None:
            strip_trailing = config.normalize.strip_trailing_whitespace
        sys.stdout.write(
            normalize_content(
                _read_source(args.file),
                strip_trailing_whitespace=strip_trailing,
                strip_bom=config.normalize.strip_bom and not args.keep_bom,
            )
        )
        return None
    if command == "lines":
        text = normalize_content(
            _read_source(args.file),
            strip_trailing_whitespace=config.normalize.strip_trailing_whitespace,
            strip_bom=config.normalize.strip_bom,
        )
        return read_with_line_map(text, start_line=args.start, end_line=args.end)
    if command == "search":
        matches = search_content(
            _read_source(args.file),
            args.pattern,
            regex=args.regex,
            case_sensitive=not args.ignore_case,
            context_lines=limits.context_lines if args.context is None else args.context,
            max_results=args.max_results or limits.max_search_results,
        )
        return {"matches": matches, "count": len(matches)}
    if command == "symbols":
        symbols = find_symbols(
            _read_source(args.file),
            args.file,
            language=args.language,
            name_filter=args.name,
            type_filter=args.types,
        )
        return {"path": args.file, "symbols": symbols, "count": len(symbols)}
    if command == "imports":
        imports = parse_imports(_read_source(args.file), args.file, language=args.language)
        return {"path": args.file, "imports": imports, "count": len(imports)}
    if command == "refs":
        references = find_references(
            _read_source(args.file),
            args.symbol,
            args.file,
            context_lines=args.context,
            language=args.language,
        )
        return {
            "symbol": args.symbol,
            "references": references,
            "summary": summarize_references(references),
        }
    if command == "graph":
        batch = [(Path(name).as_posix(), _read_source(name)) for name in args.files]
        return build_dependency_graph(batch)
    if command == "diff":
        return compute_line_diff(
            _read_optional(args.source),
            _read_optional(args.target),
            limits=limits.diff_limits(),
        )
    if command == "ref":
        return build_line_reference(
            owner=args.owner,
            repo=args.repo,
            path=args.path,
            blob_sha=args.blob_sha,
            start_line=args.start,
            end_line=args.end,
            commit_sha=args.commit_sha,
        )
    if command == "drift":
        return check_drift(args.reference_sha, args.current_sha)
    if command == "serve":
        from .service import run_service

        run_service(
            host=args.host or config.service.host,
            port=args.port or config.service.port,
            config_factory=lambda: config,
        )
        return None
    raise ValueError(f"Unknown command: {command}")  # pragma: no cover - argparse enforces choices


def _read_source(name: str) -> str:
    """Read a file (or stdin for '-') without translating line endings."""
    if name == "-":
        return sys.stdin.buffer.read().decode("utf-8", errors="replace")
    return Path(name).read_bytes().decode("utf-8", errors="replace")


def _read_optional(name: str) -> Optional[str]:
    path = Path(name)
    if not path.exists():
        logger.debug("Treating missing file %s as absent", name)
        return None
    return _read_source(name)


def _emit(result: Any) -> None:
    print(json.dumps(to_payload(result), indent=2))


if __name__ == "__main__":
    main(sys.argv[1:])
