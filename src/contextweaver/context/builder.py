# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Turn user references into source files.

A reference is a file path, a directory path, or one of the whole-tree
markers (`Codebase` or `/`). References may carry a leading `@`, as typed in a
chat box. Directories are walked recursively, skipping hidden entries,
`node_modules` and `dist`, and only files with processable extensions are read.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable
from typing import Final

from contextweaver.common.logging import LogCategory, PipelineLog
from contextweaver.core.chunks import SourceFile
from contextweaver.core.files import FileStore, join_path, normalize_path
from contextweaver.core.language import is_processable, is_test_file
from contextweaver.exceptions import FileIOError, PreconditionError


logger = logging.getLogger(__name__)

WHOLE_TREE_REFERENCES: Final[frozenset[str]] = frozenset({"Codebase", "/"})
SKIPPED_DIRECTORIES: Final[frozenset[str]] = frozenset({"node_modules", "dist"})


def clean_reference(reference: str) -> str:
    """Strip a leading `@` and normalize the path."""
    reference = reference.strip()
    return normalize_path(reference.removeprefix("@"))


class ContextBuilder:
    """Reads the files a set of references points at.

    Args:
        store: Where to read files from.
        include_tests: Whether to read `*.test.*` and `*.spec.*` files when walking directories.
    """

    def __init__(self, store: FileStore, *, include_tests: bool = True) -> None:
        self.store = store
        self.include_tests = include_tests

    def build(self, references: Iterable[str], log: PipelineLog | None = None) -> list[SourceFile]:
        """Resolve `references` into files with content.

        Unresolvable references and unreadable entries are logged and skipped.
        Each file appears once, at its first position.

        Raises:
            PreconditionError: If no file could be read.
        """
        log = log if log is not None else PipelineLog(logger)
        references = list(references)
        files: dict[str, SourceFile] = {}
        if WHOLE_TREE_REFERENCES.intersection(reference.strip() for reference in references):
            log.info("Processing the entire codebase", LogCategory.CONTEXT)
            self._add(files, self._walk("", log))
        else:
            for reference in references:
                self._add(files, self._resolve(reference, log))

        if not files:
            raise PreconditionError(
                "No readable files found for the given references",
                details={"references": references},
                suggestions=["Check the paths or reference a directory with source files"],
            )
        log.success(f"Built context for {len(files)} files", LogCategory.CONTEXT)
        return list(files.values())

    @staticmethod
    def _add(files: dict[str, SourceFile], found: Iterable[SourceFile]) -> None:
        for file in found:
            files.setdefault(file.path, file)

    def _resolve(self, reference: str, log: PipelineLog) -> list[SourceFile]:
        path = clean_reference(reference)
        if not path:
            return self._walk("", log)
        try:
            if self.store.is_directory(path):
                log.info(f"Found directory: {path}", LogCategory.CONTEXT)
                return self._walk(path, log)
            content = self.store.read_file(path)
        except FileIOError as e:
            log.warning(
                f"Unable to resolve reference {reference}: {e.message}", LogCategory.CONTEXT
            )
            return []
        log.success(f"Found file: {path}", LogCategory.CONTEXT)
        return [SourceFile(path=path, content=content)]

    def _walk(self, directory: str, log: PipelineLog) -> list[SourceFile]:
        try:
            entries = self.store.list_directory(directory)
        except FileIOError as e:
            log.error(
                f"Error reading directory {directory or '/'}: {e.message}", LogCategory.CONTEXT
            )
            return []
        log.info(f"Scanning directory: {directory or '/'}", LogCategory.CONTEXT)
        files: list[SourceFile] = []
        for entry in entries:
            if entry.startswith(".") or entry in SKIPPED_DIRECTORIES:
                continue
            path = join_path(directory, entry)
            try:
                if self.store.is_directory(path):
                    files.extend(self._walk(path, log))
                elif is_processable(entry) and (self.include_tests or not is_test_file(path)):
                    files.append(SourceFile(path=path, content=self.store.read_file(path)))
            except FileIOError as e:
                log.warning(f"Error processing entry {path}: {e.message}", LogCategory.CONTEXT)
        return files


__all__ = ("SKIPPED_DIRECTORIES", "WHOLE_TREE_REFERENCES", "ContextBuilder", "clean_reference")
