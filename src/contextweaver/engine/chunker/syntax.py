# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Syntax-tree chunker.

Parses a file with its tree-sitter grammar through ast-grep-py and emits one
chunk per top-level declaration: functions, classes, interfaces, type aliases,
imports, default exports, and `const`/`let` bindings of arrow functions.

Export handling follows what a reader expects from a module outline:

- `export default ...` becomes a single `export` chunk spanning the whole
  statement, whatever it wraps.
- `export function f() {}` (and other named exports of a declaration) becomes a
  chunk for the inner declaration, without the `export` keyword.
- Re-exports such as `export { a } from "./a"` carry no declaration and are skipped.

Only top-level statements are visited, so chunks never overlap.
"""

from __future__ import annotations

import logging
import re

from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, NamedTuple

from ast_grep_py import SgNode, SgRoot

from contextweaver.common.logging import LogCategory
from contextweaver.core.chunks import Chunk, ChunkKind
from contextweaver.engine.chunker.base import BaseChunker
from contextweaver.exceptions import ParseError


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog
    from contextweaver.core.chunks import SourceFile


logger = logging.getLogger(__name__)

_DEFAULT_EXPORT = re.compile(r"^export\s+default\b")

DECLARATION_KINDS: MappingProxyType[str, ChunkKind] = MappingProxyType({
    # JavaScript / TypeScript
    "function_declaration": ChunkKind.FUNCTION,
    "generator_function_declaration": ChunkKind.FUNCTION,
    "class_declaration": ChunkKind.CLASS,
    "abstract_class_declaration": ChunkKind.CLASS,
    "interface_declaration": ChunkKind.INTERFACE,
    "type_alias_declaration": ChunkKind.TYPE_ALIAS,
    "import_statement": ChunkKind.IMPORT,
    # Python
    "function_definition": ChunkKind.FUNCTION,
    "class_definition": ChunkKind.CLASS,
    "import_from_statement": ChunkKind.IMPORT,
    "future_import_statement": ChunkKind.IMPORT,
})
"""Tree-sitter node kinds that map directly to a chunk kind."""

_BINDING_KINDS = frozenset({"lexical_declaration", "variable_declaration"})
_ARROW_KINDS = frozenset({"arrow_function"})


class _Target(NamedTuple):
    """A node to emit, with the kind and name it is emitted under."""

    node: SgNode
    kind: ChunkKind
    name: str | None


def _name_of(node: SgNode | None) -> str | None:
    if node is None:
        return None
    name = node.field("name")
    return name.text() if name is not None else None


class SyntaxChunker(BaseChunker):
    """Declaration-level chunker backed by tree-sitter grammars."""

    strategy: ClassVar[str] = "syntax"

    def extract(self, file: SourceFile, log: PipelineLog | None = None) -> list[Chunk]:
        """Split `file` into one chunk per top-level declaration.

        Falls back to a single chunk for the whole file when the file's language
        has no grammar, the file declares nothing, or the parser fails. A parser
        failure yields an `error` chunk that carries the failure message.

        Args:
            file: The file to split.
            log: Optional pipeline log.

        Returns:
            Chunks in source order.
        """
        if not file.content:
            return []
        language = file.language
        if language.is_markup:
            return [Chunk.for_file(file, ChunkKind.HTML)]
        if language.is_style:
            return [Chunk.for_file(file, ChunkKind.STYLE)]
        if language.grammar is None:
            logger.debug("No grammar for %s, using a single file chunk", file.path)
            return [Chunk.for_file(file)]

        try:
            chunks = self._extract_declarations(file, language.grammar, log)
        except Exception as e:
            logger.warning("Failed to parse %s: %s", file.path, e)
            if log is not None:
                log.error(f"Parse failed for {file.path}: {e}", LogCategory.SYNTAX)
            return [Chunk.for_file(file, ChunkKind.ERROR, error=str(e))]

        if not chunks:
            if log is not None:
                log.info(
                    f"No declarations in {file.path}, keeping the whole file", LogCategory.SYNTAX
                )
            return [Chunk.for_file(file)]
        if log is not None:
            log.success(f"Extracted {len(chunks)} chunks from {file.path}", LogCategory.SYNTAX)
        return chunks

    def _extract_declarations(
        self, file: SourceFile, grammar: str, log: PipelineLog | None
    ) -> list[Chunk]:
        content = file.content or ""
        try:
            root = SgRoot(content, grammar).root()
        except Exception as e:
            raise ParseError(
                f"Failed to parse {file.path}",
                details={"file_path": file.path, "language": grammar, "error": str(e)},
            ) from e

        encoded = content.encode("utf-8")
        chunks: list[Chunk] = []
        cursor = 0
        error_nodes = 0
        for child in root.children():
            if child.kind() == "ERROR":
                error_nodes += 1
                continue
            try:
                chunk = self._node_chunk(file, content, encoded, child, cursor)
            except Exception as e:
                logger.warning("Skipping %s node in %s: %s", child.kind(), file.path, e)
                if log is not None:
                    log.warning(f"Skipped a {child.kind()} in {file.path}", LogCategory.SYNTAX)
                continue
            if chunk is None:
                continue
            chunks.append(chunk)
            cursor = chunk.end_offset
        if error_nodes:
            logger.debug("%s has %d unparseable top-level regions", file.path, error_nodes)
            if log is not None:
                log.warning(
                    f"{file.path} has {error_nodes} region(s) with syntax errors",
                    LogCategory.SYNTAX,
                )
        return chunks

    def _node_chunk(
        self, file: SourceFile, content: str, encoded: bytes, node: SgNode, cursor: int
    ) -> Chunk | None:
        if (target := self._resolve(node)) is None:
            return None
        start, end = self._char_span(content, encoded, target.node, cursor)
        return Chunk(
            path=file.path,
            content=content[start:end],
            kind=target.kind,
            start_offset=start,
            end_offset=end,
            name=target.name,
        )

    def _resolve(self, node: SgNode) -> _Target | None:
        """Decide whether a top-level node becomes a chunk, and as what."""
        kind = node.kind()
        if kind in DECLARATION_KINDS:
            return _Target(node, DECLARATION_KINDS[kind], _name_of(node))
        if kind in _BINDING_KINDS:
            return self._resolve_binding(node)
        if kind == "decorated_definition":
            definition = node.field("definition")
            if definition is None or definition.kind() not in DECLARATION_KINDS:
                return None
            return _Target(node, DECLARATION_KINDS[definition.kind()], _name_of(definition))
        if kind == "export_statement":
            declaration = node.field("declaration")
            if _DEFAULT_EXPORT.match(node.text()):
                return _Target(node, ChunkKind.EXPORT, _name_of(declaration))
            if declaration is None:
                return None
            if declaration.kind() in _BINDING_KINDS:
                return self._resolve_binding(declaration)
            if declaration.kind() in DECLARATION_KINDS:
                return _Target(
                    declaration, DECLARATION_KINDS[declaration.kind()], _name_of(declaration)
                )
        return None

    @staticmethod
    def _resolve_binding(binding: SgNode) -> _Target | None:
        """A `const`/`let`/`var` statement is a chunk only if it binds an arrow function."""
        for declarator in binding.children():
            if declarator.kind() != "variable_declarator":
                continue
            value = declarator.field("value")
            if value is not None and value.kind() in _ARROW_KINDS:
                return _Target(binding, ChunkKind.ARROW_FUNCTION, _name_of(declarator))
        return None

    @staticmethod
    def _char_span(content: str, encoded: bytes, node: SgNode, cursor: int) -> tuple[int, int]:
        """Character offsets of `node` in `content`.

        ast-grep reports positions as offsets that may count bytes rather than
        characters, so the span is checked against the node text before use.
        """
        text = node.text()
        node_range = node.range()
        start, end = node_range.start.index, node_range.end.index
        if content[start:end] == text:
            return start, end
        if encoded[start:end].decode("utf-8", errors="replace") == text:
            char_start = len(encoded[:start].decode("utf-8", errors="ignore"))
            return char_start, char_start + len(text)
        if (found := content.find(text, cursor)) != -1:
            return found, found + len(text)
        raise ParseError(
            "Node text not found in source", details={"line_number": node_range.start.line + 1}
        )


__all__ = ("DECLARATION_KINDS", "SyntaxChunker")
