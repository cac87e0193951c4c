"""FastAPI application exposing repobridge operations over HTTP."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .. import __version__
from ..analyzers import build_dependency_graph, find_references, find_symbols, parse_imports
from ..analyzers.symbols import summarize_references
from ..config import ConfigError, RepoBridgeConfig, load_config
from ..content import normalize_content, read_with_line_map, search_content
from ..git import (
    PatchConflictError,
    PatchError,
    apply_search_replace,
    apply_unified_diff,
    compare_structure,
    compute_line_diff,
)
from ..logging import get_logger
from ..models import to_payload
from ..references import build_line_reference, check_drift

logger = get_logger("service")

T = TypeVar("T")


class CamelModel(BaseModel):
    """Request body accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NormalizeRequest(CamelModel):
    content: str
    strip_trailing_whitespace: Optional[bool] = None
    strip_bom: Optional[bool] = None


class LinesRequest(CamelModel):
    content: str
    start_line: Optional[int] = None
    end_line: Optional[int] = None


class SearchRequest(CamelModel):
    content: str
    pattern: str
    regex: bool = False
    case_sensitive: bool = True
    context_lines: Optional[int] = Field(default=None, ge=0)
    max_results: Optional[int] = Field(default=None, ge=1)


class SymbolsRequest(CamelModel):
    content: str
    path: str
    language: Optional[str] = None
    name: Optional[str] = None
    types: Optional[List[str]] = None


class ImportsRequest(CamelModel):
    content: str
    path: str
    language: Optional[str] = None


class ReferencesRequest(CamelModel):
    content: str
    path: str
    symbol: str = Field(min_length=1)
    context_lines: int = Field(default=1, ge=0)
    language: Optional[str] = None


class FileEntry(CamelModel):
    path: str = Field(min_length=1)
    content: str = ""


class DependenciesRequest(CamelModel):
    files: List[FileEntry]


class DiffRequest(CamelModel):
    source: Optional[str] = None
    target: Optional[str] = None


class ReferenceRequest(CamelModel):
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    path: str = Field(min_length=1)
    blob_sha: str = Field(min_length=1)
    start_line: int = Field(ge=1)
    end_line: Optional[int] = Field(default=None, ge=1)
    commit_sha: Optional[str] = None


class DriftRequest(CamelModel):
    reference_sha: Optional[str] = None
    current_sha: Optional[str] = None


class StructureEntry(CamelModel):
    name: str
    type: str = "file"
    size: Optional[int] = None


class CompareStructureRequest(CamelModel):
    source: List[StructureEntry] = Field(default_factory=list)
    target: List[StructureEntry] = Field(default_factory=list)


class ReplaceOperation(CamelModel):
    search: str
    replace: str
    replace_all: bool = False


class PatchReplaceRequest(CamelModel):
    content: str
    operations: List[ReplaceOperation]


class PatchDiffRequest(CamelModel):
    content: str
    patch: str


class HealthResponse(BaseModel):
    status: str
    version: str


def _default_config() -> RepoBridgeConfig:
    return load_config(Path.cwd())


async def _run(func: Callable[[], T]) -> T:
    """Run CPU-bound analysis off the event loop."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def _ok(payload: Any = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"ok": True}
    if payload is not None:
        body.update(to_payload(payload))
    body.update({key: to_payload(value) for key, value in extra.items()})
    return body


def create_app(
    config_factory: Callable[[], RepoBridgeConfig] = _default_config,
) -> FastAPI:
    """Create the FastAPI application exposing repobridge operations."""

    app = FastAPI(title="RepoBridge Service", version=__version__)

    async def get_config() -> RepoBridgeConfig:
        return config_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    @app.post("/normalize")
    async def normalize(
        payload: NormalizeRequest, config: RepoBridgeConfig = Depends(get_config)
    ) -> Dict[str, Any]:
        strip_trailing = payload.strip_trailing_whitespace
        if strip_trailing is None:
            strip_trailing = config.normalize.strip_trailing_whitespace
        strip_bom = payload.strip_bom
        if strip_bom is None:
            strip_bom = config.normalize.strip_bom

        content = await _run(
            lambda: normalize_content(
                payload.content,
                strip_trailing_whitespace=strip_trailing,
                strip_bom=strip_bom,
            )
        )
        return _ok(content=content, changed=content != payload.content)

    @app.post("/lines")
    async def lines(
        payload: LinesRequest, config: RepoBridgeConfig = Depends(get_config)
    ) -> Dict[str, Any]:
        def _read() -> Any:
            text = normalize_content(
                payload.content,
                strip_trailing_whitespace=config.normalize.strip_trailing_whitespace,
                strip_bom=config.normalize.strip_bom,
            )
            return read_with_line_map(text, start_line=payload.start_line, end_line=payload.end_line)

        return _ok(await _run(_read))

    @app.post("/search")
    async def search(
        payload: SearchRequest, config: RepoBridgeConfig = Depends(get_config)
    ) -> Dict[str, Any]:
        limits = config.limits
        max_results = payload.max_results or limits.max_search_results
        context_lines = (
            limits.context_lines if payload.context_lines is None else payload.context_lines
        )
        matches = await _run(
            lambda: search_content(
                payload.content,
                payload.pattern,
                regex=payload.regex,
                case_sensitive=payload.case_sensitive,
                context_lines=context_lines,
                max_results=max_results,
            )
        )
        return _ok(
            matches=matches,
            count=len(matches),
            truncated=len(matches) >= max_results,
        )

    @app.post("/symbols")
    async def symbols(payload: SymbolsRequest) -> Dict[str, Any]:
        found = await _run(
            lambda: find_symbols(
                payload.content,
                payload.path,
                language=payload.language,
                name_filter=payload.name,
                type_filter=payload.types,
            )
        )
        return _ok(path=payload.path, symbols=found, count=len(found))

    @app.post("/imports")
    async def imports(payload: ImportsRequest) -> Dict[str, Any]:
        found = await _run(
            lambda: parse_imports(payload.content, payload.path, language=payload.language)
        )
        return _ok(path=payload.path, imports=found, count=len(found))

    @app.post("/references")
    async def references(payload: ReferencesRequest) -> Dict[str, Any]:
        found = await _run(
            lambda: find_references(
                payload.content,
                payload.symbol,
                payload.path,
                context_lines=payload.context_lines,
                language=payload.language,
            )
        )
        return _ok(
            symbol=payload.symbol,
            references=found,
            summary=summarize_references(found),
        )

    @app.post("/dependencies")
    async def dependencies(
        payload: DependenciesRequest, config: RepoBridgeConfig = Depends(get_config)
    ) -> Dict[str, Any]:
        limit = config.limits.max_batch_files
        if len(payload.files) > limit:
            raise HTTPException(
                status_code=400,
                detail=f"Too many files: {len(payload.files)} exceeds the limit of {limit}",
            )
        batch = [(entry.path, entry.content) for entry in payload.files]
        graph = await _run(lambda: build_dependency_graph(batch))
        return _ok(graph)

    @app.post("/diff")
    async def diff(
        payload: DiffRequest, config: RepoBridgeConfig = Depends(get_config)
    ) -> Dict[str, Any]:
        limits = config.limits.diff_limits()
        result = await _run(lambda: compute_line_diff(payload.source, payload.target, limits=limits))
        return _ok(result)

    @app.post("/reference")
    async def reference(payload: ReferenceRequest) -> Dict[str, Any]:
        result = build_line_reference(
            owner=payload.owner,
            repo=payload.repo,
            path=payload.path,
            blob_sha=payload.blob_sha,
            start_line=payload.start_line,
            end_line=payload.end_line,
            commit_sha=payload.commit_sha,
        )
        return _ok(result)

    @app.post("/drift")
    async def drift(payload: DriftRequest) -> Dict[str, Any]:
        return _ok(check_drift(payload.reference_sha, payload.current_sha))

    @app.post("/compareStructure")
    async def compare(payload: CompareStructureRequest) -> Dict[str, Any]:
        source = [entry.model_dump() for entry in payload.source]
        target = [entry.model_dump() for entry in payload.target]
        return _ok(compare_structure(source, target))

    @app.post("/patch/replace")
    async def patch_replace(payload: PatchReplaceRequest) -> Dict[str, Any]:
        operations = [operation.model_dump(by_alias=True) for operation in payload.operations]
        content, applied = await _run(lambda: apply_search_replace(payload.content, operations))
        return _ok(content=content, changed=content != payload.content, operations=applied)

    @app.post("/patch/diff")
    async def patch_diff(payload: PatchDiffRequest) -> Dict[str, Any]:
        result = await _run(lambda: apply_unified_diff(payload.content, payload.patch))
        if not result.ok:
            raise PatchConflictError(f"Patch failed: {result.error}")
        return _ok(
            content=result.content,
            changed=result.content != payload.content,
            hunksApplied=result.hunks_applied,
        )

    @app.exception_handler(PatchError)
    async def patch_error_handler(_: Any, exc: PatchError) -> JSONResponse:
        logger.info("Patch rejected: %s", exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": type(exc).__name__, "message": str(exc)},
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": "ConfigError", "message": str(exc)},
        )

    return app


def run_service(
    host: str = "0.0.0.0",
    port: int = 8000,
    config_factory: Callable[[], RepoBridgeConfig] = _default_config,
) -> None:
    import uvicorn

    app = create_app(config_factory)
    logger.info("Starting repobridge service on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
