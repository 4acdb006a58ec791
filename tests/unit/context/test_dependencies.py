# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for following relative imports."""

from __future__ import annotations

import pytest

from contextweaver.common.logging import PipelineLog
from contextweaver.context.dependencies import (
    DependencyExpander,
    relative_imports,
    resolve_import,
)
from contextweaver.core.chunks import SourceFile
from contextweaver.core.files import InMemoryFileStore


pytestmark = [pytest.mark.unit]


def test_relative_imports() -> None:
    content = (
        'import { a } from "./a";\n'
        "import React from 'react';\n"
        'import "./styles.css";\n'
        "const b = require('../lib/b');\n"
        'import {\n  c,\n} from "./a";\n'
    )
    assert relative_imports(content) == ["./a", "./styles.css", "../lib/b"]


@pytest.mark.parametrize(
    ("importer", "specifier", "expected"),
    [
        ("src/app.ts", "./a", "src/a"),
        ("src/pages/home.ts", "../lib/b", "src/lib/b"),
        ("app.ts", "./a", "a"),
    ],
)
def test_resolve_import(importer: str, specifier: str, expected: str) -> None:
    assert resolve_import(importer, specifier) == expected


@pytest.fixture
def store() -> InMemoryFileStore:
    return InMemoryFileStore({
        "src/app.ts": 'import { a } from "./a";\nimport { ui } from "./ui";\n',
        "src/a.ts": 'import { b } from "./lib/b";\n',
        "src/lib/b.js": "export const b = 1;\n",
        "src/ui/index.tsx": "export const ui = 1;\n",
    })


def test_one_hop(store: InMemoryFileStore) -> None:
    start = SourceFile(path="src/app.ts", content=store.read_file("src/app.ts"))
    files = DependencyExpander(store).expand([start])
    assert [file.path for file in files] == ["src/app.ts", "src/a.ts", "src/ui/index.tsx"]


def test_two_hops(store: InMemoryFileStore) -> None:
    start = SourceFile(path="src/app.ts", content=store.read_file("src/app.ts"))
    files = DependencyExpander(store, max_depth=2).expand([start])
    assert [file.path for file in files][-1] == "src/lib/b.js"


def test_unresolved_imports_are_logged(store: InMemoryFileStore) -> None:
    log = PipelineLog()
    start = SourceFile(path="src/x.ts", content='import { y } from "./missing";\n')
    files = DependencyExpander(store).expand([start], log)
    assert [file.path for file in files] == ["src/x.ts"]
    assert any("./missing" in entry.message for entry in log)


def test_cycles_terminate() -> None:
    store = InMemoryFileStore({
        "a.ts": 'import "./b";\n',
        "b.ts": 'import "./a";\n',
    })
    start = SourceFile(path="a.ts", content=store.read_file("a.ts"))
    files = DependencyExpander(store, max_depth=5).expand([start])
    assert [file.path for file in files] == ["a.ts", "b.ts"]
