# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
import sys

from pathlib import Path
from typing import TYPE_CHECKING, Final, NoReturn

from contextweaver.common.logging import setup_logger
from contextweaver.config.settings import get_settings
from contextweaver.core.chunks import SourceFile
from contextweaver.core.files import LocalFileStore, discover_files
from contextweaver.exceptions import ContextWeaverError, FileIOError, PreconditionError


if TYPE_CHECKING:
    from rich.console import Console


logger = logging.getLogger(__name__)

CONTEXTWEAVER_PREFIX: Final[str] = "[bold magenta]contextweaver[/bold magenta]"


def configure_logging() -> logging.Logger:
    """Install the package logger using the logging settings."""
    settings = get_settings().logging
    return setup_logger("contextweaver", level=settings.level_number, rich=settings.rich)


def load_source_files(path: Path, *, include_tests: bool = False) -> list[SourceFile]:
    """Read `path`, or every processable file under it.

    Directories are walked with .gitignore rules applied. Unreadable files are
    logged and skipped.

    Raises:
        PreconditionError: If nothing could be read.
    """
    path = path.expanduser()
    if path.is_file():
        store = LocalFileStore(path.parent)
        return [SourceFile(path=path.name, content=store.read_file(path.name))]
    store = LocalFileStore(path)
    files: list[SourceFile] = []
    for relative in discover_files(path, include_tests=include_tests):
        try:
            key = relative.as_posix()
            files.append(SourceFile(path=key, content=store.read_file(key)))
        except FileIOError as e:
            logger.warning("Skipping %s: %s", relative, e)
    if not files:
        raise PreconditionError(
            f"No source files found under {path}",
            details={"file_path": str(path)},
            suggestions=["Point the command at a file or a directory containing source code"],
        )
    return files


def exit_with_error(console: Console, error: ContextWeaverError, context: str) -> NoReturn:
    """Print `error` with its suggestions and exit with status 1."""
    console.print(f"{CONTEXTWEAVER_PREFIX} [red]{context} failed: {error}[/red]")
    if error.suggestions:
        console.print(f"{CONTEXTWEAVER_PREFIX} [yellow]Suggestions:[/yellow]")
        for suggestion in error.suggestions:
            console.print(f"  • {suggestion}")
    sys.exit(1)


__all__ = ("CONTEXTWEAVER_PREFIX", "configure_logging", "exit_with_error", "load_source_files")
