"""Tests for import discovery and relative path resolution."""

from __future__ import annotations

import pytest

from repobridge.analyzers import parse_imports, resolve_import_path


def _summary(records):  # type: ignore[no-untyped-def]
    return [(record.line_number, record.type, record.module) for record in records]


def test_javascript_import_forms() -> None:
    content = "\n".join(
        [
            "import React, { useState as useS } from 'react';",
            "import './styles.css';",
            "const { join } = require('path');",
            "const fs = require('fs');",
            "const lazy = import('./lazy');",
            "export { helper } from './helper';",
            "export * from './all';",
        ]
    )
    records = parse_imports(content, "src/app.js")
    assert _summary(records) == [
        (1, "import", "react"),
        (2, "side_effect", "./styles.css"),
        (3, "destructured_require", "path"),
        (4, "require", "fs"),
        (5, "dynamic_import", "./lazy"),
        (6, "export_from", "./helper"),
        (7, "export_from", "./all"),
    ]
    assert records[0].symbols == ["React", "useState"]
    assert records[2].symbols == ["join"]
    assert records[5].symbols == ["helper"]
    assert records[0].is_relative is False
    assert records[1].is_relative is True


def test_multiline_javascript_import_uses_statement_line() -> None:
    content = "// header\nimport {\n  alpha,\n  beta,\n} from './lib';\n"
    records = parse_imports(content, "main.js")
    assert _summary(records) == [(2, "import", "./lib")]
    assert records[0].symbols == ["alpha", "beta"]
    assert records[0].text == "import {"


def test_python_import_forms() -> None:
    content = "\n".join(
        [
            "import os, sys as system",
            "from . import utils",
            "from ..core.models import (",
            "    User,",
            "    Group as G,",
            ")",
            "from typing import List  # comment",
        ]
    )
    records = parse_imports(content, "pkg/service.py")
    assert _summary(records) == [
        (1, "import", "os"),
        (1, "import", "sys"),
        (2, "from_import", "."),
        (3, "from_import", "..core.models"),
        (7, "from_import", "typing"),
    ]
    assert records[2].symbols == ["utils"]
    assert records[3].symbols == ["User", "Group"]
    assert records[4].symbols == ["List"]
    assert records[3].is_relative is True


def test_go_grouped_imports_get_their_own_lines() -> None:
    content = 'package main\n\nimport "fmt"\n\nimport (\n\t"os"\n\tstr "strings"\n)\n'
    records = parse_imports(content, "main.go")
    assert [(r.line_number, r.module) for r in records] == [(3, "fmt"), (6, "os"), (7, "strings")]


def test_go_single_and_block_imports_are_kept_apart() -> None:
    content = 'import "fmt"\nimport (\n\t"fmt"\n)\nimport "fmt"\n'
    records = parse_imports(content, "main.go")
    assert _summary(records) == [
        (1, "import", "fmt"),
        (3, "import_block", "fmt"),
        (5, "import", "fmt"),
    ]


def test_csharp_using_directives() -> None:
    content = "\n".join(
        [
            "using System;",
            "using System.Collections.Generic;",
            "using static System.Math;",
            "using Json = Newtonsoft.Json;",
        ]
    )
    records = parse_imports(content, "App.cs")
    assert _summary(records) == [
        (1, "using", "System"),
        (2, "using", "System.Collections.Generic"),
        (3, "using", "System.Math"),
        (4, "using", "Newtonsoft.Json"),
    ]
    assert [record.symbols for record in records] == [["System"], ["Generic"], ["Math"], ["Json"]]
    assert not any(record.is_relative for record in records)


def test_ruby_requires() -> None:
    content = "require 'json'\nrequire_relative 'lib/helper'\n"
    assert _summary(parse_imports(content, "app.rb")) == [
        (1, "require", "json"),
        (2, "require_relative", "lib/helper"),
    ]


def test_java_imports_record_last_segment() -> None:
    records = parse_imports("package app;\n\nimport java.util.List;\n", "App.java")
    assert _summary(records) == [(3, "import", "java.util.List")]
    assert records[0].symbols == ["List"]


def test_rust_use_statements() -> None:
    content = "\n".join(
        [
            "use std::collections::HashMap;",
            "use crate::util::{parse, render as draw};",
            "mod config;",
            "extern crate serde;",
        ]
    )
    records = parse_imports(content, "src/main.rs")
    assert _summary(records) == [
        (1, "use", "std::collections::HashMap"),
        (2, "use", "crate::util"),
        (3, "mod", "config"),
        (4, "extern_crate", "serde"),
    ]
    assert records[0].symbols == ["HashMap"]
    assert records[1].symbols == ["parse", "render"]


def test_unsupported_files_have_no_imports() -> None:
    assert parse_imports("import x", "notes.txt") == []
    assert parse_imports(None, "a.py") == []


@pytest.mark.parametrize(
    ("import_path", "current", "expected"),
    [
        ("./utils", "src/app.js", "src/utils"),
        ("../lib/x", "src/app/main.js", "src/lib/x"),
        ("./a", "main.js", "a"),
        ("../../../x", "a/b.js", "x"),
        ("/lib/x", "src/a.js", "lib/x"),
        ("react", "src/app.js", "react"),
        ("./nested/./deep/../leaf", "src/app.js", "src/nested/leaf"),
    ],
)
def test_resolve_import_path(import_path: str, current: str, expected: str) -> None:
    assert resolve_import_path(import_path, current) == expected
