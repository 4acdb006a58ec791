# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Chunkers that split source files into declaration-sized pieces."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.engine.chunker.base import BaseChunker
    from contextweaver.engine.chunker.heuristic import HeuristicChunker
    from contextweaver.engine.chunker.selector import STRATEGIES, ChunkerSelector
    from contextweaver.engine.chunker.syntax import SyntaxChunker

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BaseChunker": (__spec__.parent, "base"),
    "ChunkerSelector": (__spec__.parent, "selector"),
    "HeuristicChunker": (__spec__.parent, "heuristic"),
    "STRATEGIES": (__spec__.parent, "selector"),
    "SyntaxChunker": (__spec__.parent, "syntax"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = ("STRATEGIES", "BaseChunker", "ChunkerSelector", "HeuristicChunker", "SyntaxChunker")


def __dir__() -> list[str]:
    """List available attributes for the chunker package."""
    return list(__all__)
