# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Core data types: source files, chunks, batches, languages, and file stores."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.core.chunks import (
        Batch,
        CHARS_PER_TOKEN,
        Chunk,
        ChunkKind,
        ScoredChunk,
        SourceFile,
        estimate_tokens,
    )
    from contextweaver.core.files import (
        FileStore,
        InMemoryFileStore,
        LocalFileStore,
        discover_files,
    )
    from contextweaver.core.language import SourceLanguage, language_for

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "Batch": (__spec__.parent, "chunks"),
    "CHARS_PER_TOKEN": (__spec__.parent, "chunks"),
    "Chunk": (__spec__.parent, "chunks"),
    "ChunkKind": (__spec__.parent, "chunks"),
    "FileStore": (__spec__.parent, "files"),
    "InMemoryFileStore": (__spec__.parent, "files"),
    "LocalFileStore": (__spec__.parent, "files"),
    "ScoredChunk": (__spec__.parent, "chunks"),
    "SourceFile": (__spec__.parent, "chunks"),
    "SourceLanguage": (__spec__.parent, "language"),
    "discover_files": (__spec__.parent, "files"),
    "estimate_tokens": (__spec__.parent, "chunks"),
    "language_for": (__spec__.parent, "language"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "Batch",
    "CHARS_PER_TOKEN",
    "Chunk",
    "ChunkKind",
    "FileStore",
    "InMemoryFileStore",
    "LocalFileStore",
    "ScoredChunk",
    "SourceFile",
    "SourceLanguage",
    "discover_files",
    "estimate_tokens",
    "language_for",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
