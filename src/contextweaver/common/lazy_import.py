# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Lazy attribute resolution for package `__init__` modules."""

from __future__ import annotations

from collections.abc import Callable
from importlib import import_module
from types import MappingProxyType


def create_lazy_getattr(
    dynamic_imports: MappingProxyType[str, tuple[str, str]],
    module_globals: dict[str, object],
    module_name: str,
) -> Callable[[str], object]:
    """Create a standardized __getattr__ function for package lazy imports.

    Each entry in `dynamic_imports` maps an exported name to the `(parent, submodule)`
    pair that defines it. The submodule is imported on first access and the
    resolved object is cached in the package globals.
    """

    def __getattr__(name: str) -> object:  # noqa: N807
        if name in dynamic_imports:
            parent_module, submodule_name = dynamic_imports[name]
            module = import_module(f"{parent_module}.{submodule_name}")
            result = getattr(module, name)
            module_globals[name] = result
            return result
        if name in module_globals:
            return module_globals[name]
        raise AttributeError(f"module {module_name!r} has no attribute {name!r}")

    __getattr__.__module__ = module_name
    __getattr__.__doc__ = f"Dynamic __getattr__ for lazy imports in module {module_name!r}."
    return __getattr__


__all__ = ("create_lazy_getattr",)
