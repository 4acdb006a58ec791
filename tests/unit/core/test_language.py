# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for extension-based language detection."""

from __future__ import annotations

import pytest

from contextweaver.core.language import (
    SourceLanguage,
    extension_of,
    is_code_file,
    is_processable,
    is_test_file,
    language_for,
)


pytestmark = [pytest.mark.unit]


@pytest.mark.parametrize(
    ("path", "language"),
    [
        ("src/index.ts", SourceLanguage.TYPESCRIPT),
        ("App.tsx", SourceLanguage.TSX),
        ("lib/util.mjs", SourceLanguage.JAVASCRIPT),
        ("tool.py", SourceLanguage.PYTHON),
        ("page.HTML", SourceLanguage.HTML),
        ("theme.scss", SourceLanguage.SCSS),
        ("README.md", SourceLanguage.UNKNOWN),
        ("Makefile", SourceLanguage.UNKNOWN),
    ],
)
def test_language_for(path: str, language: SourceLanguage) -> None:
    assert language_for(path) is language


def test_grammars() -> None:
    assert SourceLanguage.TSX.grammar == "tsx"
    assert SourceLanguage.SCSS.grammar is None
    assert SourceLanguage.UNKNOWN.grammar is None


def test_language_families() -> None:
    assert SourceLanguage.JAVASCRIPT.is_script
    assert not SourceLanguage.PYTHON.is_script
    assert SourceLanguage.HTML.is_markup
    assert SourceLanguage.CSS.is_style
    assert SourceLanguage.SCSS.is_style


def test_extension_of() -> None:
    assert extension_of("a/b/C.TS") == ".ts"
    assert extension_of("noext") == ""


def test_processable_and_code() -> None:
    assert is_processable("notes.md")
    assert not is_processable("image.png")
    assert is_code_file("a.jsx")
    assert not is_code_file("a.css")


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/app.test.ts", True),
        ("src/app.spec.js", True),
        ("tests/test_tool.py", True),
        ("test_tool.py", True),
        ("src/contest.ts", False),
        ("src/testing/app.ts", False),
    ],
)
def test_is_test_file(path: str, expected: bool) -> None:
    assert is_test_file(path) is expected
