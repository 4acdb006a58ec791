# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for ContextWeaver tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from contextweaver.common.logging import PipelineLog
from contextweaver.core.chunks import Chunk, ChunkKind, ScoredChunk, SourceFile


@pytest.fixture
def make_file() -> Callable[..., SourceFile]:
    """Factory for source files."""

    def _make(path: str = "src/app.ts", content: str | None = "const a = 1;\n") -> SourceFile:
        return SourceFile(path=path, content=content)

    return _make


@pytest.fixture
def make_chunk() -> Callable[..., Chunk]:
    """Factory for standalone chunks whose offsets start at zero."""

    def _make(
        content: str = "function run() {}",
        *,
        path: str = "src/app.ts",
        kind: ChunkKind = ChunkKind.FUNCTION,
        start: int = 0,
        name: str | None = None,
    ) -> Chunk:
        return Chunk(
            path=path,
            content=content,
            kind=kind,
            start_offset=start,
            end_offset=start + len(content),
            name=name,
        )

    return _make


@pytest.fixture
def make_scored(make_chunk: Callable[..., Chunk]) -> Callable[..., ScoredChunk]:
    """Factory for scored chunks."""

    def _make(content: str, score: int = 1, **kwargs: object) -> ScoredChunk:
        return make_chunk(content, **kwargs).scored(score)

    return _make


@pytest.fixture
def pipeline_log() -> PipelineLog:
    return PipelineLog()


@pytest.fixture
def assert_exact_slices() -> Callable[[SourceFile, list[Chunk]], None]:
    """Checker that every chunk is the exact slice of the file its offsets describe."""

    def _check(file: SourceFile, chunks: list[Chunk]) -> None:
        assert file.content is not None
        for chunk in chunks:
            assert chunk.path == file.path
            assert file.content[chunk.start_offset : chunk.end_offset] == chunk.content

    return _check
