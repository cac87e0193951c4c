"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from repobridge import __version__
from repobridge.config import LimitsConfig, RepoBridgeConfig
from repobridge.service import create_app


@pytest.fixture
def config(tmp_path: Path) -> RepoBridgeConfig:
    return RepoBridgeConfig(root=tmp_path)


@pytest.fixture
def client(config: RepoBridgeConfig) -> TestClient:
    return TestClient(create_app(lambda: config))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_normalize_endpoint(client: TestClient) -> None:
    response = client.post("/normalize", json={"content": "line1\r\nline2\r"})
    assert response.status_code == 200
    assert response.json() == {"ok": True, "content": "line1\nline2\n", "changed": True}


def test_normalize_endpoint_accepts_camel_case_options(client: TestClient) -> None:
    response = client.post(
        "/normalize", json={"content": "a  \nb", "stripTrailingWhitespace": True}
    )
    assert response.json()["content"] == "a\nb"


def test_lines_endpoint(client: TestClient) -> None:
    response = client.post("/lines", json={"content": "a\nb\nc", "startLine": 2, "endLine": 3})
    data = response.json()
    assert data["ok"] is True
    assert data["content"] == "b\nc"
    assert data["totalLines"] == 3
    assert data["lines"] == [{"lineNumber": 2, "text": "b"}, {"lineNumber": 3, "text": "c"}]
    assert data["startLine"] == 2


def test_search_endpoint_uses_configured_context(client: TestClient) -> None:
    response = client.post("/search", json={"content": "foo\nbar\nfoo", "pattern": "foo"})
    data = response.json()
    assert data["count"] == 2
    assert data["truncated"] is False
    assert data["matches"][0]["lineNumber"] == 1
    assert data["matches"][0]["context"]["after"] == ["bar", "foo"]
    assert data["matches"][1]["matchStart"] == 0


def test_symbols_endpoint(client: TestClient, symbol_sample: str) -> None:
    response = client.post("/symbols", json={"content": symbol_sample, "path": "src/app.js"})
    data = response.json()
    assert [(s["name"], s["lineNumber"]) for s in data["symbols"]] == [("foo", 3), ("bar", 7)]
    assert data["path"] == "src/app.js"


def test_imports_endpoint(client: TestClient) -> None:
    response = client.post(
        "/imports", json={"content": "from .models import User\n", "path": "pkg/service.py"}
    )
    imports = response.json()["imports"]
    assert imports == [
        {
            "module": ".models",
            "symbols": ["User"],
            "type": "from_import",
            "lineNumber": 1,
            "text": "from .models import User",
            "isRelative": True,
        }
    ]


def test_references_endpoint(client: TestClient, symbol_sample: str) -> None:
    response = client.post(
        "/references", json={"content": symbol_sample, "path": "a.js", "symbol": "foo"}
    )
    data = response.json()
    assert data["summary"] == {"definitions": 1, "imports": 0, "usages": 0}
    assert data["references"][0]["type"] == "definition"


def test_dependencies_endpoint(client: TestClient) -> None:
    response = client.post(
        "/dependencies",
        json={
            "files": [
                {"path": "a.js", "content": "const b = require('./b');"},
                {"path": "b.js", "content": "const a = require('./a');"},
            ]
        },
    )
    data = response.json()
    assert data["circular"] == [["a.js", "b.js"]]
    assert data["summary"]["totalEdges"] == 2
    assert data["edges"][0]["from"] == "a.js"


def test_dependencies_endpoint_enforces_batch_limit(tmp_path: Path) -> None:
    config = RepoBridgeConfig(root=tmp_path, limits=LimitsConfig(max_batch_files=1))
    client = TestClient(create_app(lambda: config))

    response = client.post(
        "/dependencies",
        json={"files": [{"path": "a.js", "content": ""}, {"path": "b.js", "content": ""}]},
    )
    assert response.status_code == 400


def test_diff_endpoint(client: TestClient) -> None:
    identical = client.post("/diff", json={"source": "a\nb", "target": "a\nb"}).json()
    assert identical["status"] == "identical"
    assert identical["unchanged"] == 2

    created = client.post("/diff", json={"target": "new"}).json()
    assert created["status"] == "source_missing"
    assert created["lines"] == [{"op": "add", "lineNum": 1, "line": "new"}]


def test_reference_endpoint(client: TestClient) -> None:
    response = client.post(
        "/reference",
        json={
            "owner": "octo",
            "repo": "demo",
            "path": "src/app.py",
            "blobSha": "abc",
            "startLine": 10,
            "endLine": 20,
        },
    )
    data = response.json()
    assert data["githubUrl"] == "https://github.com/octo/demo/blob/abc/src/app.py#L10-L20"
    assert data["ref"] == "octo/demo:src/app.py:10-20"


def test_reference_endpoint_validates_lines(client: TestClient) -> None:
    response = client.post(
        "/reference",
        json={"owner": "octo", "repo": "demo", "path": "a", "blobSha": "abc", "startLine": 0},
    )
    assert response.status_code == 422


def test_drift_endpoint(client: TestClient) -> None:
    data = client.post("/drift", json={"referenceSha": "abc", "currentSha": "abc"}).json()
    assert data == {"ok": True, "drifted": False, "referenceSha": "abc", "currentSha": "abc"}


def test_compare_structure_endpoint(client: TestClient) -> None:
    response = client.post(
        "/compareStructure",
        json={
            "source": [{"name": "a.py", "type": "file", "size": 1}],
            "target": [{"name": "a.py", "type": "file", "size": 2}, {"name": "b.py"}],
        },
    )
    data = response.json()
    assert data["identical"] is False
    assert data["sizeDifferences"] == [{"name": "a.py", "sourceSize": 1, "targetSize": 2}]
    assert data["onlyInTarget"] == [{"name": "b.py", "type": "file", "size": None}]


def test_patch_replace_endpoint(client: TestClient) -> None:
    response = client.post(
        "/patch/replace",
        json={"content": "a a", "operations": [{"search": "a", "replace": "b", "replaceAll": True}]},
    )
    data = response.json()
    assert data["content"] == "b b"
    assert data["changed"] is True
    assert data["operations"][0]["searchLength"] == 1


def test_patch_replace_conflict_maps_to_409(client: TestClient) -> None:
    response = client.post(
        "/patch/replace",
        json={"content": "abc", "operations": [{"search": "zzz", "replace": "y"}]},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "PatchConflictError"
    assert response.json()["ok"] is False


def test_patch_replace_validation_maps_to_400(client: TestClient) -> None:
    response = client.post(
        "/patch/replace",
        json={"content": "abc", "operations": [{"search": "", "replace": "y"}]},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "PatchValidationError"


def test_patch_diff_endpoint(client: TestClient) -> None:
    response = client.post(
        "/patch/diff", json={"content": "one\ntwo", "patch": "@@ -2 +2 @@\n-two\n+TWO\n"}
    )
    data = response.json()
    assert data["content"] == "one\nTWO"
    assert data["hunksApplied"] == 1


def test_patch_diff_failure_maps_to_409(client: TestClient) -> None:
    response = client.post("/patch/diff", json={"content": "one", "patch": "garbage"})
    assert response.status_code == 409
    assert "No valid hunks" in response.json()["message"]


def test_missing_fields_are_rejected(client: TestClient) -> None:
    assert client.post("/symbols", json={"content": "x"}).status_code == 422
