# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared pydantic base models."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.core.types.models import (
        BASEDMODEL_CONFIG,
        BasedModel,
        FROZEN_BASEDMODEL_CONFIG,
    )

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BASEDMODEL_CONFIG": (__spec__.parent, "models"),
    "BasedModel": (__spec__.parent, "models"),
    "FROZEN_BASEDMODEL_CONFIG": (__spec__.parent, "models"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "BASEDMODEL_CONFIG",
    "BasedModel",
    "FROZEN_BASEDMODEL_CONFIG",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
