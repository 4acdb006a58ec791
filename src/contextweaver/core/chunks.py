# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Source files, chunks, and the batches chunks are packed into.

All of these are immutable values. A `Chunk` is always an exact slice of the
file it came from: `file.content[chunk.start_offset:chunk.end_offset] == chunk.content`.
"""

from __future__ import annotations

import math

from enum import Enum
from typing import Annotated, Final, Self

from pydantic import Field, NonNegativeInt, computed_field, model_validator

from contextweaver.core.language import SourceLanguage, language_for
from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel


CHARS_PER_TOKEN: Final[int] = 4
"""Characters per token used for every token estimate."""


def estimate_tokens(text: str, chars_per_token: int = CHARS_PER_TOKEN) -> int:
    """Estimate the token count of `text` as ceil(len / chars_per_token)."""
    return math.ceil(len(text) / chars_per_token)


class ChunkKind(str, Enum):
    """What a chunk represents."""

    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type-alias"
    EXPORT = "export"
    IMPORT = "import"
    ARROW_FUNCTION = "arrow-function"
    JSDOC = "jsdoc"
    STYLE = "style"
    HTML = "html"
    SEMANTIC = "semantic"
    FILE = "file"
    ERROR = "error"

    @property
    def is_declaration(self) -> bool:
        return self in {
            ChunkKind.FUNCTION,
            ChunkKind.CLASS,
            ChunkKind.INTERFACE,
            ChunkKind.TYPE_ALIAS,
            ChunkKind.ARROW_FUNCTION,
        }


class SourceFile(BasedModel):
    """A file handed to the chunkers.

    `content` is None when the file could not be read as text.
    """

    model_config = FROZEN_BASEDMODEL_CONFIG

    path: Annotated[str, Field(min_length=1, description="Path of the file, relative or absolute.")]
    content: Annotated[str | None, Field(description="Full text of the file.")] = None

    @property
    def language(self) -> SourceLanguage:
        """Language detected from the file extension."""
        return language_for(self.path)


class Chunk(BasedModel):
    """A contiguous piece of a source file."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    path: Annotated[str, Field(description="Path of the file this chunk was cut from.")]
    content: str
    kind: ChunkKind
    start_offset: NonNegativeInt
    end_offset: NonNegativeInt
    name: Annotated[str | None, Field(description="Declared name, when the chunk has one.")] = None
    error: Annotated[
        str | None, Field(description="Why the file fell back to an error chunk.")
    ] = None

    @model_validator(mode="after")
    def _check_span(self) -> Self:
        if self.start_offset > self.end_offset:
            raise ValueError(
                f"start_offset {self.start_offset} is after end_offset {self.end_offset}"
            )
        if self.end_offset - self.start_offset != len(self.content):
            raise ValueError(
                f"span {self.start_offset}:{self.end_offset} does not match "
                f"content length {len(self.content)}"
            )
        return self

    @computed_field
    @property
    def estimated_tokens(self) -> int:
        return estimate_tokens(self.content)

    @classmethod
    def for_file(
        cls, file: SourceFile, kind: ChunkKind = ChunkKind.FILE, *, error: str | None = None
    ) -> Self:
        """A single chunk covering the whole of `file`."""
        content = file.content or ""
        return cls(
            path=file.path,
            content=content,
            kind=kind,
            start_offset=0,
            end_offset=len(content),
            error=error,
        )

    def scored(self, score: int) -> ScoredChunk:
        return ScoredChunk(**self.model_dump(exclude={"estimated_tokens", "score"}), score=score)


class ScoredChunk(Chunk):
    """A chunk with its relevance score."""

    score: int


class Batch(BasedModel):
    """An ordered group of chunks that fits one model request."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    chunks: tuple[ScoredChunk, ...]
    token_count: NonNegativeInt
    oversized: Annotated[
        bool, Field(description="Whether the chunks were split from a single oversized chunk.")
    ] = False

    def __len__(self) -> int:
        return len(self.chunks)

    @property
    def paths(self) -> tuple[str, ...]:
        """Distinct file paths in the batch, in order of first appearance."""
        return tuple(dict.fromkeys(chunk.path for chunk in self.chunks))


__all__ = (
    "CHARS_PER_TOKEN",
    "Batch",
    "Chunk",
    "ChunkKind",
    "ScoredChunk",
    "SourceFile",
    "estimate_tokens",
)
