"""Immutable line references pinned to blob SHAs, and drift checks."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from .models import DriftCheck, LineReference

GITHUB_BASE_URL = "https://github.com"


def build_line_reference(
    *,
    owner: str,
    repo: str,
    path: str,
    blob_sha: str,
    start_line: int,
    end_line: Optional[int] = None,
    commit_sha: Optional[str] = None,
) -> LineReference:
    """Return a shareable reference to ``start_line..end_line`` of ``path``.

    The permalink prefers ``commit_sha`` since a commit pins the whole tree;
    ``blob_sha`` is used when no commit is known. An ``end_line`` before
    ``start_line`` collapses to a single-line reference.
    """
    end = max(start_line, end_line or start_line)
    multi_line = end != start_line

    anchor = f"#L{start_line}-L{end}" if multi_line else f"#L{start_line}"
    revision = commit_sha or blob_sha
    github_url = f"{GITHUB_BASE_URL}/{owner}/{repo}/blob/{revision}/{quote(path, safe='/')}{anchor}"
    span = f"{start_line}-{end}" if multi_line else f"{start_line}"

    return LineReference(
        ref=f"{owner}/{repo}:{path}:{span}",
        owner=owner,
        repo=repo,
        path=path,
        blob_sha=blob_sha,
        commit_sha=commit_sha or None,
        start_line=start_line,
        end_line=end,
        github_url=github_url,
    )


def check_drift(reference_sha: Optional[str], current_sha: Optional[str]) -> DriftCheck:
    """Report whether content changed since the reference was minted.

    The caller fetches ``current_sha`` from upstream before calling.
    """
    return DriftCheck(
        drifted=reference_sha != current_sha,
        reference_sha=reference_sha,
        current_sha=current_sha,
    )


__all__ = ["build_line_reference", "check_drift"]
