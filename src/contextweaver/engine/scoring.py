# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Relevance scoring and ranking of chunks.

A chunk's score is the sum of four independent parts:

- a weight for its kind (classes and functions matter most, imports least),
- a bonus for each architectural keyword found in its lowercased content,
- a bonus for each significant marker in its file path,
- a bonus for the file's extension.

Scores depend only on the chunk itself, so scoring the same chunk twice gives
the same number. Ranking sorts by score, highest first, and keeps the input
order among chunks with equal scores.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Mapping, Sequence
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from contextweaver.common.logging import LogCategory
from contextweaver.core.chunks import ChunkKind, ScoredChunk
from contextweaver.core.language import extension_of, is_code_file


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog
    from contextweaver.core.chunks import Chunk, SourceFile


logger = logging.getLogger(__name__)

KIND_WEIGHTS: Final[MappingProxyType[ChunkKind, int]] = MappingProxyType({
    ChunkKind.CLASS: 5,
    ChunkKind.FUNCTION: 5,
    ChunkKind.INTERFACE: 4,
    ChunkKind.TYPE_ALIAS: 4,
    ChunkKind.EXPORT: 3,
    ChunkKind.ARROW_FUNCTION: 2,
    ChunkKind.IMPORT: 1,
})
"""Weight per chunk kind. Kinds not listed weigh nothing."""

CONTENT_KEYWORDS: Final[MappingProxyType[str, int]] = MappingProxyType({
    "service": 3,
    "api": 2,
    "store": 2,
    "context": 2,
    "hook": 2,
    "async": 1,
    "await": 1,
})
"""Keyword bonuses, each counted at most once per chunk. `component` is configured per scorer."""

FILENAME_BONUSES: Final[MappingProxyType[str, int]] = MappingProxyType({
    "index.": 5,
    "app.": 4,
    "main.": 4,
    "types.": 3,
})
"""Bonuses for markers in the file name."""

PATH_BONUSES: Final[MappingProxyType[str, int]] = MappingProxyType({
    "context": 3,
    "store": 3,
    "component": 2,
    "util": 1,
})
"""Bonuses for markers anywhere in the lowercased path."""

EXTENSION_BONUSES: Final[MappingProxyType[str, int]] = MappingProxyType({
    ".ts": 2,
    ".tsx": 2,
    ".js": 1,
    ".jsx": 1,
})

FOCUS_BONUS: Final[int] = 10
"""Bonus for chunks whose path contains the focus string."""

DEFAULT_COMPONENT_BONUS: Final[int] = 2
DIAGRAM_COMPONENT_BONUS: Final[int] = 3
"""Diagram generation cares more about UI components than chat context does."""


def path_bonus(path: str) -> int:
    """Bonus for the markers in `path` and its extension."""
    lowered = path.replace("\\", "/").lower()
    name = PurePosixPath(lowered).name
    bonus = sum(value for marker, value in FILENAME_BONUSES.items() if marker in name)
    bonus += sum(value for marker, value in PATH_BONUSES.items() if marker in lowered)
    return bonus + EXTENSION_BONUSES.get(extension_of(lowered), 0)


class ChunkScorer:
    """Scores and ranks chunks.

    Args:
        focus: Optional substring; chunks whose path contains it get a large bonus.
        component_bonus: Bonus for chunks that mention `component`.
        keywords: Override the keyword bonuses.
    """

    def __init__(
        self,
        focus: str | None = None,
        *,
        component_bonus: int = DEFAULT_COMPONENT_BONUS,
        keywords: Mapping[str, int] | None = None,
    ) -> None:
        self.focus = focus.lower() if focus else None
        self.keywords: Mapping[str, int] = MappingProxyType({
            "component": component_bonus,
            **(keywords if keywords is not None else CONTENT_KEYWORDS),
        })

    @classmethod
    def for_diagrams(cls) -> ChunkScorer:
        return cls(component_bonus=DIAGRAM_COMPONENT_BONUS)

    def score(self, chunk: Chunk) -> int:
        """Relevance score for `chunk`."""
        content = chunk.content.lower()
        total = KIND_WEIGHTS.get(chunk.kind, 0)
        total += sum(value for keyword, value in self.keywords.items() if keyword in content)
        total += path_bonus(chunk.path)
        if self.focus and self.focus in chunk.path.lower():
            total += FOCUS_BONUS
        return total

    def score_all(self, chunks: Iterable[Chunk]) -> list[ScoredChunk]:
        return [chunk.scored(self.score(chunk)) for chunk in chunks]

    def rank(self, chunks: Iterable[Chunk], log: PipelineLog | None = None) -> list[ScoredChunk]:
        """Score `chunks` and sort them by score, highest first.

        The sort is stable: chunks with equal scores keep their input order.
        """
        ranked = sorted(self.score_all(chunks), key=lambda chunk: chunk.score, reverse=True)
        if log is not None and ranked:
            log.info(
                f"Ranked {len(ranked)} chunks, top score {ranked[0].score}", LogCategory.SCORING
            )
        return ranked

    def top(self, chunks: Iterable[Chunk], limit: int) -> list[ScoredChunk]:
        return self.rank(chunks)[:limit]


def prioritize_files(files: Sequence[SourceFile]) -> list[SourceFile]:
    """Order files for processing: source code first, then by how central the path looks.

    Ties keep their input order.
    """
    return sorted(files, key=lambda file: (not is_code_file(file.path), -path_bonus(file.path)))


__all__ = (
    "CONTENT_KEYWORDS",
    "DEFAULT_COMPONENT_BONUS",
    "DIAGRAM_COMPONENT_BONUS",
    "EXTENSION_BONUSES",
    "FILENAME_BONUSES",
    "FOCUS_BONUS",
    "KIND_WEIGHTS",
    "PATH_BONUSES",
    "ChunkScorer",
    "path_bonus",
    "prioritize_files",
)
