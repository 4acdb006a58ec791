# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Static extraction of components and their interactions.

Components are classes, and functions typed as UI components
(`function Foo(props): FC`, `JSX.Element`, `SomethingComponent`). An
interaction `A -> B: m()` is recorded when a chunk calls `B.m(` and the same
chunk declares another known component `A`, which is taken as the caller.

Caller resolution is a heuristic. A chunk that declares several components
attributes every call to the first of them in discovery order, and calls made
from code that declares no component are not recorded.
"""

from __future__ import annotations

import logging
import re

from collections.abc import Iterable
from functools import cache
from typing import TYPE_CHECKING, Literal

from contextweaver.common.logging import LogCategory
from contextweaver.core.chunks import Chunk
from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel
from contextweaver.exceptions import DiagramValidationError


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog


logger = logging.getLogger(__name__)

_CLASS_DECLARATION = re.compile(r"class\s+(\w+)")
_COMPONENT_FUNCTION = re.compile(
    r"function\s+(\w+)"
    r"(?:\s*\([^)]*\)\s*:\s*(?:React\.)?(?:FC|FunctionComponent|JSX\.Element|\w+Component))"
)


@cache
def _call_pattern(component: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w$]){re.escape(component)}\.(\w+)\(")


@cache
def _declaration_pattern(component: str) -> re.Pattern[str]:
    return re.compile(rf"\b(?:class|function)\s+{re.escape(component)}\b")


class Component(BasedModel):
    """A participant in the diagram."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    name: str
    declaration: Literal["class", "function"]


class Interaction(BasedModel):
    """A method call from one component to another."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    caller: str
    callee: str
    method: str


class ExtractionResult(BasedModel):
    """Components in discovery order and interactions in discovery order."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    components: tuple[Component, ...] = ()
    interactions: tuple[Interaction, ...] = ()

    @property
    def component_names(self) -> tuple[str, ...]:
        return tuple(component.name for component in self.components)

    @property
    def is_usable(self) -> bool:
        """Whether there is enough here to draw a diagram."""
        return bool(self.components) and bool(self.interactions)

    def require_usable(self) -> ExtractionResult:
        """Return self, or raise if there are no components or no interactions.

        Raises:
            DiagramValidationError: If a diagram cannot be drawn from this result.
        """
        if not self.components:
            raise DiagramValidationError(
                "No components found in the selected code",
                suggestions=["Include files that declare classes or typed function components"],
            )
        if not self.interactions:
            raise DiagramValidationError(
                "No interactions found between components",
                details={"components": ", ".join(self.component_names)},
                suggestions=["Include files where components call each other's methods"],
            )
        return self


class InteractionExtractor:
    """Finds components and the calls between them."""

    def components(self, chunks: Iterable[Chunk]) -> list[Component]:
        """Distinct components, first occurrence wins."""
        found: dict[str, Component] = {}
        for chunk in chunks:
            for name in _CLASS_DECLARATION.findall(chunk.content):
                found.setdefault(name, Component(name=name, declaration="class"))
            for name in _COMPONENT_FUNCTION.findall(chunk.content):
                found.setdefault(name, Component(name=name, declaration="function"))
        return list(found.values())

    def extract(self, chunks: Iterable[Chunk], log: PipelineLog | None = None) -> ExtractionResult:
        """Extract components and interactions from `chunks`.

        Args:
            chunks: Chunks to analyze, usually the top-ranked ones.
            log: Optional pipeline log.

        Returns:
            The components and interactions found. Either may be empty.
        """
        chunks = list(chunks)
        components = self.components(chunks)
        names = [component.name for component in components]
        interactions: list[Interaction] = []
        for chunk in chunks:
            for callee in names:
                methods = _call_pattern(callee).findall(chunk.content)
                if not methods:
                    continue
                caller = next(
                    (
                        name
                        for name in names
                        if name != callee and _declaration_pattern(name).search(chunk.content)
                    ),
                    None,
                )
                if caller is None:
                    continue
                interactions.extend(
                    Interaction(caller=caller, callee=callee, method=method) for method in methods
                )
        result = ExtractionResult(components=tuple(components), interactions=tuple(interactions))
        logger.debug(
            "Extracted %d components and %d interactions", len(components), len(interactions)
        )
        if log is not None:
            log.info(
                f"Found {len(components)} components and {len(interactions)} interactions",
                LogCategory.DIAGRAM,
            )
        return result


__all__ = ("Component", "ExtractionResult", "Interaction", "InteractionExtractor")
