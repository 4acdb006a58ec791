# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Chunker selection by strategy name.

Hosts pick a strategy by name (from settings, the command line, or pipeline
options). The selector maps the name, or one of its aliases, to a fresh
chunker instance.
"""

from __future__ import annotations

import logging

from types import MappingProxyType

from contextweaver.engine.chunker.base import BaseChunker
from contextweaver.engine.chunker.heuristic import HeuristicChunker
from contextweaver.engine.chunker.syntax import SyntaxChunker
from contextweaver.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

STRATEGIES: MappingProxyType[str, type[BaseChunker]] = MappingProxyType({
    "syntax": SyntaxChunker,
    "ast": SyntaxChunker,
    "heuristic": HeuristicChunker,
    "semantic": HeuristicChunker,
})
"""Strategy names and aliases."""


class ChunkerSelector:
    """Builds chunkers from strategy names.

    Examples:
        >>> chunker = ChunkerSelector.for_strategy("heuristic")
        >>> chunks = chunker.extract(SourceFile(path="a.ts", content="const a = 1;"))
    """

    @staticmethod
    def for_strategy(name: str | BaseChunker) -> BaseChunker:
        """Return a chunker for `name`.

        Args:
            name: A strategy name or alias (case-insensitive), or a chunker instance,
                which is returned unchanged.

        Raises:
            ConfigurationError: If the name is not a known strategy.
        """
        if isinstance(name, BaseChunker):
            return name
        key = name.strip().lower()
        if key not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown chunking strategy: {name!r}",
                details={"strategy": name},
                suggestions=[f"Use one of: {', '.join(sorted(STRATEGIES))}"],
            )
        chunker = STRATEGIES[key]()
        logger.debug("Selected %s for strategy %r", type(chunker).__name__, name)
        return chunker

    @staticmethod
    def available() -> tuple[str, ...]:
        return tuple(sorted({cls.strategy for cls in STRATEGIES.values()}))


__all__ = ("STRATEGIES", "ChunkerSelector")
