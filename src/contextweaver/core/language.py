# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Language detection by file extension.

Maps file extensions to the tree-sitter grammar names understood by ast-grep,
and classifies which files are worth reading at all.
"""

from __future__ import annotations

import re

from enum import Enum
from pathlib import PurePosixPath
from types import MappingProxyType


class SourceLanguage(str, Enum):
    """Languages the chunkers know how to handle."""

    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    HTML = "html"
    CSS = "css"
    SCSS = "scss"
    UNKNOWN = "unknown"

    @property
    def grammar(self) -> str | None:
        """The ast-grep grammar name, or None if there is no grammar we use."""
        return _GRAMMARS.get(self)

    @property
    def is_script(self) -> bool:
        """Whether the language is one of the JS/TS family."""
        return self in {
            SourceLanguage.TYPESCRIPT,
            SourceLanguage.TSX,
            SourceLanguage.JAVASCRIPT,
        }

    @property
    def is_markup(self) -> bool:
        return self is SourceLanguage.HTML

    @property
    def is_style(self) -> bool:
        return self in {SourceLanguage.CSS, SourceLanguage.SCSS}


_GRAMMARS: MappingProxyType[SourceLanguage, str] = MappingProxyType({
    SourceLanguage.TYPESCRIPT: "typescript",
    SourceLanguage.TSX: "tsx",
    SourceLanguage.JAVASCRIPT: "javascript",
    SourceLanguage.PYTHON: "python",
    SourceLanguage.HTML: "html",
    SourceLanguage.CSS: "css",
})

EXTENSION_LANGUAGES: MappingProxyType[str, SourceLanguage] = MappingProxyType({
    ".ts": SourceLanguage.TYPESCRIPT,
    ".mts": SourceLanguage.TYPESCRIPT,
    ".cts": SourceLanguage.TYPESCRIPT,
    ".tsx": SourceLanguage.TSX,
    ".js": SourceLanguage.JAVASCRIPT,
    ".jsx": SourceLanguage.JAVASCRIPT,
    ".mjs": SourceLanguage.JAVASCRIPT,
    ".cjs": SourceLanguage.JAVASCRIPT,
    ".py": SourceLanguage.PYTHON,
    ".html": SourceLanguage.HTML,
    ".htm": SourceLanguage.HTML,
    ".css": SourceLanguage.CSS,
    ".scss": SourceLanguage.SCSS,
})
"""Extension to language mapping. Extensions are lowercase with a leading dot."""

PROCESSABLE_EXTENSIONS: frozenset[str] = frozenset({
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".py",
    ".html",
    ".css",
    ".scss",
    ".json",
    ".md",
    ".txt",
    ".yaml",
    ".yml",
    ".xml",
    ".svg",
})
"""Extensions of files that are read when building context from a directory tree."""

CODE_EXTENSIONS: frozenset[str] = frozenset({".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py"})

TEST_FILE_PATTERN = re.compile(r"\.(?:test|spec)\.[^./]+$|(?:^|/)test_[^/]+\.py$", re.IGNORECASE)

TEST_FILE_PATTERNS: tuple[str, ...] = (
    "*.test.*",
    "*.spec.*",
    "test_*.py",
    "__tests__",
)
"""Glob patterns for test files, in the form rignore expects for extra ignores."""


def extension_of(path: str) -> str:
    """Return the lowercase extension of `path`, including the dot."""
    return PurePosixPath(path).suffix.lower()


def language_for(path: str) -> SourceLanguage:
    """Detect the language of `path` from its extension."""
    return EXTENSION_LANGUAGES.get(extension_of(path), SourceLanguage.UNKNOWN)


def is_processable(path: str) -> bool:
    """Whether `path` has an extension we read when walking a directory."""
    return extension_of(path) in PROCESSABLE_EXTENSIONS


def is_code_file(path: str) -> bool:
    return extension_of(path) in CODE_EXTENSIONS


def is_test_file(path: str) -> bool:
    """Whether `path` looks like a test file (`*.test.ts`, `*.spec.js`, `test_*.py`)."""
    return bool(TEST_FILE_PATTERN.search(path.replace("\\", "/")))


__all__ = (
    "CODE_EXTENSIONS",
    "EXTENSION_LANGUAGES",
    "PROCESSABLE_EXTENSIONS",
    "TEST_FILE_PATTERNS",
    "SourceLanguage",
    "extension_of",
    "is_code_file",
    "is_processable",
    "is_test_file",
    "language_for",
)
