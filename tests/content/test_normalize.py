"""Tests for content normalization."""

from __future__ import annotations

import pytest

from repobridge.content import normalize_content


def test_normalize_converts_crlf_and_lone_cr() -> None:
    assert normalize_content("line1\r\nline2\r") == "line1\nline2\n"


def test_normalize_strips_leading_bom() -> None:
    assert normalize_content("\ufeffhello\r\n") == "hello\n"


def test_normalize_can_keep_bom() -> None:
    assert normalize_content("\ufeffhello", strip_bom=False) == "\ufeffhello"


def test_normalize_only_strips_bom_at_start() -> None:
    assert normalize_content("a\ufeffb") == "a\ufeffb"


def test_normalize_strips_trailing_whitespace_when_requested() -> None:
    result = normalize_content("a  \r\nb\t\r\n  c", strip_trailing_whitespace=True)
    assert result == "a\nb\n  c"


def test_normalize_keeps_trailing_whitespace_by_default() -> None:
    assert normalize_content("a  \nb") == "a  \nb"


@pytest.mark.parametrize("value", [None, 42, b"bytes", ["a"]])
def test_normalize_non_string_returns_empty(value: object) -> None:
    assert normalize_content(value) == ""


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "plain",
        "\ufeffbom\r\nwindows\r\n",
        "old\rmac\r",
        "mixed\r\n\r\rtail  \t",
    ],
)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_content(raw, strip_trailing_whitespace=True)
    assert normalize_content(once, strip_trailing_whitespace=True) == once
    assert "\r" not in once
