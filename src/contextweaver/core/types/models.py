# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Base model implementations for ContextWeaver."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


# ================================================
# *      Pydantic Base Implementations
# ================================================

BASEDMODEL_CONFIG = ConfigDict(
    arbitrary_types_allowed=True,
    serialize_by_alias=True,
    use_attribute_docstrings=True,
    validate_by_alias=True,
    validate_by_name=True,
    cache_strings="all",
)
FROZEN_BASEDMODEL_CONFIG = BASEDMODEL_CONFIG | ConfigDict(frozen=True)


class BasedModel(BaseModel):
    """A pre-customized pydantic BaseModel with common configuration for ContextWeaver."""

    model_config = BASEDMODEL_CONFIG

    def serialize_for_cli(self) -> dict[str, Any]:
        """Serialize the model for CLI output."""
        return self.model_dump(mode="json", exclude_none=True)


__all__ = ("BASEDMODEL_CONFIG", "FROZEN_BASEDMODEL_CONFIG", "BasedModel")
