# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Build source file sets from references and render them as model context."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.context.builder import ContextBuilder
    from contextweaver.context.dependencies import DependencyExpander
    from contextweaver.context.prompt import build_chat_prompt, render_batch

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "ContextBuilder": (__spec__.parent, "builder"),
    "DependencyExpander": (__spec__.parent, "dependencies"),
    "build_chat_prompt": (__spec__.parent, "prompt"),
    "render_batch": (__spec__.parent, "prompt"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "ContextBuilder",
    "DependencyExpander",
    "build_chat_prompt",
    "render_batch",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
