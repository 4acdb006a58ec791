# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Logging and import utilities shared across ContextWeaver."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.common.logging import (
        LogCategory,
        LogEntry,
        LogLevel,
        PipelineLog,
        setup_logger,
    )

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "LogCategory": (__spec__.parent, "logging"),
    "LogEntry": (__spec__.parent, "logging"),
    "LogLevel": (__spec__.parent, "logging"),
    "PipelineLog": (__spec__.parent, "logging"),
    "create_lazy_getattr": (__spec__.parent, "lazy_import"),
    "setup_logger": (__spec__.parent, "logging"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "PipelineLog",
    "create_lazy_getattr",
    "setup_logger",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
