# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Sequence diagram generation from code chunks."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.diagram.agent import DiagramResult, SequenceDiagramAgent
    from contextweaver.diagram.extractor import (
        Component,
        ExtractionResult,
        Interaction,
        InteractionExtractor,
    )
    from contextweaver.diagram.prompts import SYSTEM_PROMPT, build_user_prompt
    from contextweaver.diagram.renderer import PlantUMLRenderer

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "Component": (__spec__.parent, "extractor"),
    "DiagramResult": (__spec__.parent, "agent"),
    "ExtractionResult": (__spec__.parent, "extractor"),
    "Interaction": (__spec__.parent, "extractor"),
    "InteractionExtractor": (__spec__.parent, "extractor"),
    "PlantUMLRenderer": (__spec__.parent, "renderer"),
    "SYSTEM_PROMPT": (__spec__.parent, "prompts"),
    "SequenceDiagramAgent": (__spec__.parent, "agent"),
    "build_user_prompt": (__spec__.parent, "prompts"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "Component",
    "DiagramResult",
    "ExtractionResult",
    "Interaction",
    "InteractionExtractor",
    "PlantUMLRenderer",
    "SYSTEM_PROMPT",
    "SequenceDiagramAgent",
    "build_user_prompt",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
