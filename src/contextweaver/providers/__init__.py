# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Language model providers."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.providers.llm import CompletionProvider, OpenAICompletionProvider

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "CompletionProvider": (__spec__.parent, "llm"),
    "OpenAICompletionProvider": (__spec__.parent, "llm"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "CompletionProvider",
    "OpenAICompletionProvider",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
