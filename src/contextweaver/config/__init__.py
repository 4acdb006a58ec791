# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Configuration for ContextWeaver."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.config.settings import (
        ChunkerSettings,
        ContextWeaverSettings,
        LLMSettings,
        LoggingSettings,
        PackerSettings,
        PipelineSettings,
        get_settings,
        reset_settings,
    )

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "ChunkerSettings": (__spec__.parent, "settings"),
    "ContextWeaverSettings": (__spec__.parent, "settings"),
    "LLMSettings": (__spec__.parent, "settings"),
    "LoggingSettings": (__spec__.parent, "settings"),
    "PackerSettings": (__spec__.parent, "settings"),
    "PipelineSettings": (__spec__.parent, "settings"),
    "get_settings": (__spec__.parent, "settings"),
    "reset_settings": (__spec__.parent, "settings"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "ChunkerSettings",
    "ContextWeaverSettings",
    "LLMSettings",
    "LoggingSettings",
    "PackerSettings",
    "PipelineSettings",
    "get_settings",
    "reset_settings",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
