# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Pack ranked chunks into batches that fit a token budget.

Chunks are taken in rank order and added to the current batch while its
estimated token count stays within `max_tokens_per_batch`. A chunk that would
overflow closes the batch and starts a new one. A chunk that is too large on
its own is split on line boundaries (and, for a single overlong line, by
characters) into sub-chunks that each get their own batch.

Every batch respects both limits: at most `max_tokens_per_batch` estimated
tokens and at most `max_chunks` chunks. When `max_chunks_total` is set, whole
batches past that many chunks are dropped, so the kept batches are always a
prefix of the ranking.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Annotated

from pydantic import Field, NonNegativeInt

from contextweaver.common.logging import LogCategory
from contextweaver.core.chunks import (
    CHARS_PER_TOKEN,
    Batch,
    Chunk,
    ScoredChunk,
    estimate_tokens,
)
from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel
from contextweaver.exceptions import PreconditionError


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog


logger = logging.getLogger(__name__)


class PackResult(BasedModel):
    """Batches produced by a packing run."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    batches: tuple[Batch, ...]
    dropped_chunks: Annotated[
        NonNegativeInt, Field(description="Chunks left out because of `max_chunks_total`.")
    ] = 0

    @property
    def total_tokens(self) -> int:
        return sum(batch.token_count for batch in self.batches)

    @property
    def chunk_count(self) -> int:
        return sum(len(batch) for batch in self.batches)


def _split_lines(text: str, max_chars: int) -> list[tuple[int, int]]:
    """Spans of `text` that are at most `max_chars` long, cut at line boundaries.

    Lines are kept whole where they fit; a single line longer than `max_chars`
    is cut into `max_chars` pieces.
    """
    spans: list[tuple[int, int]] = []
    start: int | None = None
    offset = 0
    for line in text.splitlines(keepends=True):
        line_start, offset = offset, offset + len(line)
        body_end = line_start + len(line.rstrip("\r\n"))
        if start is not None and body_end - start > max_chars:
            spans.append((start, line_start))
            start = None
        if start is None:
            if body_end - line_start > max_chars:
                piece = line_start
                while body_end - piece > max_chars:
                    spans.append((piece, piece + max_chars))
                    piece += max_chars
                start = piece
            else:
                start = line_start
    if start is not None:
        spans.append((start, len(text)))
    return spans


def split_oversized(chunk: Chunk, max_chars: int) -> list[Chunk]:
    """Split `chunk` into pieces of at most `max_chars` characters.

    Pieces keep the chunk's path, kind, and name. Their offsets are shifted
    from the parent's, so each piece is still an exact slice of the file.
    Trailing line breaks at a cut point stay with the earlier piece and are
    trimmed from it; whitespace-only pieces are dropped.
    """
    if max_chars <= 0:
        raise PreconditionError("max_chars must be positive", details={"max_chars": max_chars})
    if len(chunk.content) <= max_chars:
        return [chunk]
    pieces: list[Chunk] = []
    for start, end in _split_lines(chunk.content, max_chars):
        text = chunk.content[start:end].rstrip("\r\n")
        if not text.strip():
            continue
        update = {
            "content": text,
            "start_offset": chunk.start_offset + start,
            "end_offset": chunk.start_offset + start + len(text),
        }
        pieces.append(chunk.model_copy(update=update))
    return pieces


class TokenBudgetPacker:
    """Greedy, order-preserving packer.

    Args:
        chars_per_token: Characters per estimated token.
    """

    def __init__(self, chars_per_token: int = CHARS_PER_TOKEN) -> None:
        if chars_per_token <= 0:
            raise PreconditionError(
                "chars_per_token must be positive", details={"chars_per_token": chars_per_token}
            )
        self.chars_per_token = chars_per_token

    def estimate(self, text: str) -> int:
        return estimate_tokens(text, self.chars_per_token)

    def pack(
        self,
        chunks: Iterable[ScoredChunk],
        max_tokens_per_batch: int,
        *,
        max_chunks: int | None = None,
        max_chunks_total: int | None = None,
        log: PipelineLog | None = None,
    ) -> PackResult:
        """Pack ranked `chunks` into batches.

        Args:
            chunks: Chunks in rank order, highest first.
            max_tokens_per_batch: Token budget of one batch.
            max_chunks: Most chunks in one batch.
            max_chunks_total: Most chunks across all kept batches. It also caps a single
                batch, so the first batch is always kept.
            log: Optional pipeline log.

        Returns:
            The kept batches, in rank order, and how many chunks were dropped.

        Raises:
            PreconditionError: If any limit is not positive.
        """
        for name, value in (
            ("max_tokens_per_batch", max_tokens_per_batch),
            ("max_chunks", max_chunks),
            ("max_chunks_total", max_chunks_total),
        ):
            if value is not None and value <= 0:
                raise PreconditionError(
                    f"{name} must be positive",
                    details={name: value},
                    suggestions=[f"Pass a {name} of at least 1"],
                )
        per_batch = min(
            (limit for limit in (max_chunks, max_chunks_total) if limit is not None), default=None
        )
        batches = self._fill(list(chunks), max_tokens_per_batch, per_batch)
        kept, dropped = self._limit(batches, max_chunks_total)
        result = PackResult(batches=tuple(kept), dropped_chunks=dropped)
        logger.debug(
            "Packed %d chunks into %d batches (%d dropped)",
            result.chunk_count,
            len(result.batches),
            dropped,
        )
        if log is not None:
            log.info(
                f"Packed {result.chunk_count} chunks into {len(result.batches)} batches"
                + (f", dropped {dropped}" if dropped else ""),
                LogCategory.PACKING,
            )
        return result

    def _fill(
        self, chunks: Sequence[ScoredChunk], max_tokens: int, max_chunks: int | None
    ) -> list[Batch]:
        batches: list[Batch] = []
        current: list[ScoredChunk] = []
        current_tokens = 0

        def close() -> None:
            nonlocal current, current_tokens
            if current:
                batches.append(Batch(chunks=tuple(current), token_count=current_tokens))
            current, current_tokens = [], 0

        for chunk in chunks:
            tokens = self.estimate(chunk.content)
            if tokens > max_tokens:
                close()
                for piece in split_oversized(chunk, max_tokens * self.chars_per_token):
                    batches.append(
                        Batch(
                            chunks=(piece,),
                            token_count=self.estimate(piece.content),
                            oversized=True,
                        )
                    )
                continue
            if current and (
                current_tokens + tokens > max_tokens
                or (max_chunks is not None and len(current) >= max_chunks)
            ):
                close()
            current.append(chunk)
            current_tokens += tokens
        close()
        return batches

    @staticmethod
    def _limit(batches: list[Batch], max_chunks_total: int | None) -> tuple[list[Batch], int]:
        if max_chunks_total is None:
            return batches, 0
        kept: list[Batch] = []
        running = 0
        for index, batch in enumerate(batches):
            if running + len(batch) > max_chunks_total:
                return kept, sum(len(rest) for rest in batches[index:])
            kept.append(batch)
            running += len(batch)
        return kept, 0


__all__ = (
    "CHARS_PER_TOKEN",
    "PackResult",
    "TokenBudgetPacker",
    "estimate_tokens",
    "split_oversized",
)
