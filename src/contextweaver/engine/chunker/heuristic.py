# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Line and brace based chunker.

Works on any text, parsed or not. Script-like files are walked line by line
while tracking curly-brace depth; a chunk ends when depth is back to zero on a
line that is a natural break point. Markup is cut before structural tags, and
stylesheets are kept whole.

Known limitations, kept on purpose as approximations:

- Braces inside strings and template literals are counted.
- Unbalanced braces keep depth away from zero, so the rest of the file becomes
  one chunk.
"""

from __future__ import annotations

import logging
import re

from typing import TYPE_CHECKING, ClassVar

from contextweaver.common.logging import LogCategory
from contextweaver.core.chunks import Chunk, ChunkKind
from contextweaver.engine.chunker.base import BaseChunker


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog
    from contextweaver.core.chunks import SourceFile


logger = logging.getLogger(__name__)

_OPEN_BRACE = re.compile(r"(?<!\\)\{")
_CLOSE_BRACE = re.compile(r"(?<!\\)\}")
_BREAK_PREFIX = re.compile(r"^(?:import|export|interface|type|function|class|const|let|var)")
_BREAK_SUFFIXES = ("}", ";", "*/")
_MARKUP_BOUNDARY = re.compile(r"(?=</?(?:div|section|article|header|footer|main|nav))")

_CLASS = re.compile(r"\bclass\s+\w")
_FUNCTION = re.compile(r"\bfunction\b|^(?:async\s+)?def\s")
_INTERFACE = re.compile(r"^(?:declare\s+)?interface\s")
_TYPE_ALIAS = re.compile(r"^(?:declare\s+)?type\s+\w+")
_NAME = re.compile(
    r"(?:function\*?|class|interface|type|def)\s+([A-Za-z_$][\w$]*)"
    r"|(?:const|let|var)\s+([A-Za-z_$][\w$]*)"
)


def is_natural_break(line: str) -> bool:
    """Whether a stripped line is a place a chunk may end."""
    return not line or line.endswith(_BREAK_SUFFIXES) or bool(_BREAK_PREFIX.match(line))


def brace_delta(line: str) -> int:
    """Unescaped `{` minus unescaped `}` on a line."""
    return len(_OPEN_BRACE.findall(line)) - len(_CLOSE_BRACE.findall(line))


def classify(text: str) -> ChunkKind:
    """Best-effort chunk kind for a block of stripped source text."""
    if text.startswith("import"):
        return ChunkKind.IMPORT
    if text.startswith("export"):
        return ChunkKind.EXPORT
    if _CLASS.search(text):
        return ChunkKind.CLASS
    if _FUNCTION.search(text):
        return ChunkKind.FUNCTION
    if _INTERFACE.match(text):
        return ChunkKind.INTERFACE
    if _TYPE_ALIAS.match(text):
        return ChunkKind.TYPE_ALIAS
    if "=>" in text:
        return ChunkKind.ARROW_FUNCTION
    return ChunkKind.SEMANTIC


def _name_in(text: str) -> str | None:
    if match := _NAME.search(text):
        return match.group(1) or match.group(2)
    return None


class _Accumulator:
    """Collects a pending span of the file and turns it into a trimmed chunk."""

    def __init__(self, file: SourceFile) -> None:
        self.file = file
        self.content = file.content or ""
        self.start: int | None = None
        self.chunks: list[Chunk] = []

    def open(self, offset: int) -> None:
        if self.start is None:
            self.start = offset

    def pending(self, end: int) -> str:
        return "" if self.start is None else self.content[self.start : end].strip()

    def flush(self, end: int, kind: ChunkKind | None = None) -> None:
        if self.start is None:
            return
        raw = self.content[self.start : end]
        text = raw.strip()
        if text:
            begin = self.start + len(raw) - len(raw.lstrip())
            self.chunks.append(
                Chunk(
                    path=self.file.path,
                    content=self.content[begin : begin + len(text)],
                    kind=kind or classify(text),
                    start_offset=begin,
                    end_offset=begin + len(text),
                    name=_name_in(text),
                )
            )
        self.start = None


class HeuristicChunker(BaseChunker):
    """Chunker that needs no parser."""

    strategy: ClassVar[str] = "heuristic"

    def extract(self, file: SourceFile, log: PipelineLog | None = None) -> list[Chunk]:
        if not file.content:
            return []
        language = file.language
        if language.is_style:
            chunks = [Chunk.for_file(file, ChunkKind.STYLE)]
        elif language.is_markup:
            chunks = self._extract_markup(file)
        else:
            chunks = self._extract_lines(file)
        if not chunks:
            chunks = [Chunk.for_file(file)]
        logger.debug("Heuristic chunker produced %d chunks for %s", len(chunks), file.path)
        if log is not None:
            log.info(f"Split {file.path} into {len(chunks)} chunks", LogCategory.HEURISTIC)
        return chunks

    @staticmethod
    def _extract_markup(file: SourceFile) -> list[Chunk]:
        content = file.content or ""
        boundaries = sorted(
            {0, len(content)} | {match.start() for match in _MARKUP_BOUNDARY.finditer(content)}
        )
        accumulator = _Accumulator(file)
        for start, end in zip(boundaries, boundaries[1:], strict=False):
            accumulator.open(start)
            accumulator.flush(end, ChunkKind.HTML)
        return accumulator.chunks

    @staticmethod
    def _extract_lines(file: SourceFile) -> list[Chunk]:
        content = file.content or ""
        accumulator = _Accumulator(file)
        depth = 0
        in_comment = False
        doc_comment = False
        offset = 0
        for line in content.splitlines(keepends=True):
            line_start, offset = offset, offset + len(line)
            stripped = line.strip()

            if in_comment:
                accumulator.open(line_start)
                if "*/" in stripped:
                    in_comment = False
                    if doc_comment:
                        accumulator.flush(offset, ChunkKind.JSDOC)
                continue

            if depth == 0 and stripped.startswith("/*"):
                if stripped.startswith("/**") and accumulator.pending(line_start):
                    accumulator.flush(line_start)
                accumulator.open(line_start)
                doc_comment = stripped.startswith("/**")
                if "*/" not in stripped[2:]:
                    in_comment = True
                elif doc_comment:
                    accumulator.flush(offset, ChunkKind.JSDOC)
                continue

            accumulator.open(line_start)
            if not stripped.startswith("//"):
                depth += brace_delta(stripped)
            if depth == 0 and is_natural_break(stripped):
                accumulator.flush(offset)

        accumulator.flush(len(content))
        return accumulator.chunks


__all__ = ("HeuristicChunker", "brace_delta", "classify", "is_natural_break")
