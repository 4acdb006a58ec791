# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for source files, chunks, and batches."""

from __future__ import annotations

import pytest

from pydantic import ValidationError

from contextweaver.core.chunks import (
    Batch,
    Chunk,
    ChunkKind,
    ScoredChunk,
    SourceFile,
    estimate_tokens,
)
from contextweaver.core.language import SourceLanguage


pytestmark = [pytest.mark.unit]


class TestEstimateTokens:
    @pytest.mark.parametrize(
        ("text", "expected"), [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)]
    )
    def test_rounds_up(self, text: str, expected: int) -> None:
        assert estimate_tokens(text) == expected

    def test_custom_ratio(self) -> None:
        assert estimate_tokens("abcdef", 3) == 2


class TestSourceFile:
    def test_language_from_extension(self) -> None:
        assert SourceFile(path="src/App.TSX", content="").language is SourceLanguage.TSX

    def test_content_may_be_missing(self) -> None:
        assert SourceFile(path="a.ts").content is None

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SourceFile(path="", content="x")


class TestChunk:
    def test_span_must_match_content(self) -> None:
        with pytest.raises(ValidationError, match="does not match content length"):
            Chunk(path="a.ts", content="abc", kind=ChunkKind.FILE, start_offset=0, end_offset=5)

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Chunk(path="a.ts", content="", kind=ChunkKind.FILE, start_offset=3, end_offset=1)

    def test_chunks_are_frozen(self, make_chunk) -> None:
        chunk = make_chunk("abc")
        with pytest.raises(ValidationError):
            chunk.content = "xyz"

    def test_estimated_tokens(self, make_chunk) -> None:
        assert make_chunk("x" * 9).estimated_tokens == 3

    def test_for_file_covers_whole_file(self, make_file) -> None:
        file = make_file("src/a.ts", "line one\nline two\n")
        chunk = Chunk.for_file(file)
        assert chunk.kind is ChunkKind.FILE
        assert (chunk.start_offset, chunk.end_offset) == (0, len(file.content))
        assert chunk.content == file.content

    def test_for_file_error_chunk(self, make_file) -> None:
        chunk = Chunk.for_file(make_file(), ChunkKind.ERROR, error="boom")
        assert chunk.kind is ChunkKind.ERROR
        assert chunk.error == "boom"

    def test_scored_keeps_fields(self, make_chunk) -> None:
        chunk = make_chunk("class A {}", kind=ChunkKind.CLASS, start=10, name="A")
        scored = chunk.scored(7)
        assert isinstance(scored, ScoredChunk)
        assert scored.score == 7
        assert (scored.start_offset, scored.end_offset, scored.name) == (10, 20, "A")

    def test_rescoring_a_scored_chunk(self, make_chunk) -> None:
        assert make_chunk("abc").scored(1).scored(4).score == 4

    def test_declaration_kinds(self) -> None:
        assert ChunkKind.CLASS.is_declaration
        assert ChunkKind.ARROW_FUNCTION.is_declaration
        assert not ChunkKind.IMPORT.is_declaration
        assert not ChunkKind.FILE.is_declaration


class TestBatch:
    def test_len_and_paths(self, make_scored) -> None:
        batch = Batch(
            chunks=(
                make_scored("a", path="x.ts"),
                make_scored("b", path="y.ts"),
                make_scored("c", path="x.ts"),
            ),
            token_count=3,
        )
        assert len(batch) == 3
        assert batch.paths == ("x.ts", "y.ts")
        assert not batch.oversized
