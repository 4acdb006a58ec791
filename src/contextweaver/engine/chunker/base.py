# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Base chunker definitions.

ContextWeaver splits files with one of two strategies:

1. **Syntax chunking**: parse the file with a tree-sitter grammar (through
   ast-grep) and emit one chunk per top-level declaration.

2. **Heuristic chunking**: walk the file line by line, tracking brace depth,
   and cut at natural break points. Works for any text, including files that
   do not parse.

Both strategies are total: they never raise for a readable file. Every chunk
they return is an exact slice of the file, and a non-empty file always yields
at least one chunk.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog
    from contextweaver.core.chunks import Chunk, SourceFile


class BaseChunker(ABC):
    """Base class for chunkers."""

    strategy: ClassVar[str]
    """Name of the strategy, as used in settings and on the command line."""

    @abstractmethod
    def extract(self, file: SourceFile, log: PipelineLog | None = None) -> list[Chunk]:
        """Split `file` into chunks, in source order.

        Args:
            file: The file to split. Files without content yield no chunks.
            log: Optional pipeline log to record what happened.

        Returns:
            Chunks whose `content` equals `file.content[start_offset:end_offset]`.
        """

    def __call__(self, file: SourceFile, log: PipelineLog | None = None) -> list[Chunk]:
        return self.extract(file, log)


__all__ = ("BaseChunker",)
