# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""File access for context building.

The context builder reads through a `FileStore`, so it works the same against a
real project directory (`LocalFileStore`) or an in-memory tree
(`InMemoryFileStore`). Paths handed to a store are POSIX-style and relative to
the store root; an empty path or `/` is the root itself.
"""

from __future__ import annotations

import contextlib
import logging

from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

import rignore

from contextweaver.core.language import TEST_FILE_PATTERNS, is_processable
from contextweaver.exceptions import FileIOError


logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize a store path: forward slashes, no leading `./` or `/`, no trailing `/`."""
    normalized = path.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.strip("/")
    if not normalized or normalized == ".":
        return ""
    return str(PurePosixPath(normalized))


def join_path(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


@runtime_checkable
class FileStore(Protocol):
    """Read-only access to a tree of text files."""

    def read_file(self, path: str) -> str:
        """Return the text of the file at `path`.

        Raises:
            FileIOError: If the file does not exist or cannot be decoded as text.
        """
        ...

    def list_directory(self, path: str) -> list[str]:
        """Return the entry names directly inside the directory at `path`, sorted."""
        ...

    def is_directory(self, path: str) -> bool: ...


class LocalFileStore:
    """A `FileStore` backed by a directory on disk."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        return self.root / normalize_path(path) if normalize_path(path) else self.root

    def read_file(self, path: str) -> str:
        target = self._resolve(path)
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError(
                f"Could not read {path}",
                details={"file_path": str(target), "error": str(e)},
                suggestions=["Check that the file exists and is UTF-8 text"],
            ) from e

    def list_directory(self, path: str) -> list[str]:
        target = self._resolve(path)
        try:
            return sorted(entry.name for entry in target.iterdir())
        except OSError as e:
            raise FileIOError(
                f"Could not list {path or '/'}",
                details={"file_path": str(target), "error": str(e)},
            ) from e

    def is_directory(self, path: str) -> bool:
        return self._resolve(path).is_dir()


class InMemoryFileStore:
    """A `FileStore` over a mapping of file paths to contents.

    Directories exist implicitly for every parent of a file path.
    """

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = {normalize_path(path): content for path, content in files.items()}
        self._directories: set[str] = {""}
        for path in self._files:
            parent = PurePosixPath(path).parent
            while str(parent) != ".":
                self._directories.add(str(parent))
                parent = parent.parent

    def read_file(self, path: str) -> str:
        key = normalize_path(path)
        if key not in self._files:
            raise FileIOError(f"No such file: {path}", details={"file_path": path})
        return self._files[key]

    def list_directory(self, path: str) -> list[str]:
        key = normalize_path(path)
        if key not in self._directories:
            raise FileIOError(f"No such directory: {path or '/'}", details={"file_path": path})
        prefix = f"{key}/" if key else ""
        names = {
            candidate[len(prefix) :].split("/", 1)[0]
            for candidate in (*self._files, *self._directories)
            if candidate and candidate.startswith(prefix) and candidate != key
        }
        return sorted(names)

    def is_directory(self, path: str) -> bool:
        return normalize_path(path) in self._directories


def discover_files(
    root: Path | str,
    *,
    include_tests: bool = False,
    max_file_size: int | None = None,
    read_git_ignore: bool = True,
) -> list[Path]:
    """Discover processable files under `root`, honoring .gitignore rules.

    Args:
        root: Directory to walk.
        include_tests: Whether to keep `*.test.*`, `*.spec.*` and `test_*.py` files.
        max_file_size: Skip files larger than this many bytes.
        read_git_ignore: Whether to apply .gitignore files found while walking.

    Returns:
        Sorted file paths relative to `root`.

    Raises:
        FileIOError: If the directory cannot be walked.
    """
    root_path = Path(root).resolve()
    extra_ignores = ["node_modules/", "dist/"]
    if not include_tests:
        extra_ignores.extend(TEST_FILE_PATTERNS)
    limits = {"max_filesize": max_file_size} if max_file_size else {}
    try:
        walker = rignore.walk(
            root_path,
            case_insensitive=True,
            read_git_ignore=read_git_ignore,
            ignore_hidden=True,
            require_git=False,
            additional_ignores=extra_ignores,
            **limits,
        )
        discovered: list[Path] = []
        for file_path in walker:
            if not file_path.is_file() or not is_processable(file_path.name):
                continue
            with contextlib.suppress(ValueError):
                discovered.append(file_path.relative_to(root_path))
    except Exception as e:
        raise FileIOError(
            f"Failed to discover files in {root_path}",
            details={"file_path": str(root_path), "error": str(e)},
            suggestions=["Check that the directory exists and is readable"],
        ) from e
    logger.debug("Discovered %d files under %s", len(discovered), root_path)
    return sorted(discovered)


__all__ = (
    "FileStore",
    "InMemoryFileStore",
    "LocalFileStore",
    "discover_files",
    "join_path",
    "normalize_path",
)
