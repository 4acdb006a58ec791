# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Follow relative imports to pull a file's local dependencies into context."""

from __future__ import annotations

import logging
import posixpath
import re

from collections.abc import Iterable, Sequence
from typing import Final

from contextweaver.common.logging import LogCategory, PipelineLog
from contextweaver.core.chunks import SourceFile
from contextweaver.core.files import FileStore, normalize_path
from contextweaver.exceptions import FileIOError


logger = logging.getLogger(__name__)

_IMPORT_FROM = re.compile(r"""import\s[^;]*?from\s+['"]([^'"]+)['"]|import\s+['"]([^'"]+)['"]""")
_REQUIRE = re.compile(r"""require\(\s*['"]([^'"]+)['"]\s*\)""")

RESOLVE_SUFFIXES: Final[tuple[str, ...]] = (
    "",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    "/index.ts",
    "/index.tsx",
    "/index.js",
    "/index.jsx",
)
"""Suffixes tried, in order, when resolving an extensionless import."""


def relative_imports(content: str) -> list[str]:
    """Relative module specifiers imported or required by `content`, in order."""
    specifiers = [
        first or second for first, second in _IMPORT_FROM.findall(content)
    ] + _REQUIRE.findall(content)
    return list(dict.fromkeys(spec for spec in specifiers if spec.startswith(".")))


def resolve_import(importer: str, specifier: str) -> str:
    """Path of `specifier` relative to the directory of `importer`, without trying extensions."""
    directory = posixpath.dirname(normalize_path(importer))
    return normalize_path(posixpath.normpath(posixpath.join(directory, specifier)))


class DependencyExpander:
    """Adds files reached through relative imports.

    Args:
        store: Where to read dependencies from.
        max_depth: How many import hops to follow from the starting files.
    """

    def __init__(self, store: FileStore, *, max_depth: int = 1) -> None:
        self.store = store
        self.max_depth = max_depth

    def expand(
        self, files: Sequence[SourceFile], log: PipelineLog | None = None
    ) -> list[SourceFile]:
        """Return `files` followed by their local dependencies, breadth first.

        Each file appears once. Imports that cannot be resolved are logged and skipped.
        """
        log = log if log is not None else PipelineLog(logger)
        seen: dict[str, SourceFile] = {normalize_path(file.path): file for file in files}
        frontier: list[SourceFile] = list(files)
        for depth in range(self.max_depth):
            next_frontier: list[SourceFile] = []
            for file in frontier:
                for dependency in self._dependencies_of(file, seen, log):
                    seen[dependency.path] = dependency
                    next_frontier.append(dependency)
            if not next_frontier:
                break
            log.info(
                f"Added {len(next_frontier)} dependencies at depth {depth + 1}", LogCategory.CONTEXT
            )
            frontier = next_frontier
        return list(seen.values())

    def _dependencies_of(
        self, file: SourceFile, seen: dict[str, SourceFile], log: PipelineLog
    ) -> Iterable[SourceFile]:
        for specifier in relative_imports(file.content or ""):
            base = resolve_import(file.path, specifier)
            if (found := self._read_first(base, seen)) is None:
                log.warning(
                    f"Could not resolve {specifier!r} imported by {file.path}", LogCategory.CONTEXT
                )
                continue
            if found.path not in seen:
                yield found

    def _read_first(self, base: str, seen: dict[str, SourceFile]) -> SourceFile | None:
        for suffix in RESOLVE_SUFFIXES:
            candidate = f"{base}{suffix}"
            if candidate in seen:
                return seen[candidate]
            try:
                if self.store.is_directory(candidate):
                    continue
                return SourceFile(path=candidate, content=self.store.read_file(candidate))
            except FileIOError:
                continue
        return None


__all__ = ("RESOLVE_SUFFIXES", "DependencyExpander", "relative_imports", "resolve_import")
