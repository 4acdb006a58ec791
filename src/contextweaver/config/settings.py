# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Settings for ContextWeaver, following pydantic-settings patterns.

Configuration precedence (highest to lowest):
1. Arguments passed to `ContextWeaverSettings(...)`
2. Environment variables (CONTEXTWEAVER_*, nested with `__`)
3. A `.env` file in the working directory
4. Defaults

For example, `CONTEXTWEAVER_PACKER__MAX_TOKENS_PER_BATCH=4000` sets
`settings.packer.max_tokens_per_batch`.
"""

from __future__ import annotations

import logging

from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveInt, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from contextweaver.core.types.models import BasedModel


logger = logging.getLogger(__name__)

type ChunkerStrategy = Literal["syntax", "heuristic"]


class ChunkerSettings(BasedModel):
    """Settings for splitting files into chunks."""

    strategy: ChunkerStrategy = "syntax"
    """Which chunker to use: `syntax` (tree-sitter) or `heuristic` (lines and braces)."""

    max_chunk_size: Annotated[
        PositiveInt, Field(description="Largest chunk, in characters.")
    ] = 2000
    """Chunks longer than this are split on line boundaries before scoring."""

    skip_test_files: bool = True
    """Leave `*.test.*` and `*.spec.*` files out when discovering files."""


class PackerSettings(BasedModel):
    """Settings for packing ranked chunks into batches."""

    max_tokens_per_batch: PositiveInt = 6000
    max_chunks: PositiveInt = 15
    """Maximum number of chunks in one batch."""

    max_chunks_total: PositiveInt | None = None
    """Maximum number of chunks across all kept batches. Unset keeps every batch."""

    chars_per_token: PositiveInt = 4


class PipelineSettings(BasedModel):
    """Settings for the batch pipeline."""

    group_size: PositiveInt = 5
    """Files processed concurrently before progress is reported."""

    pacing_delay: NonNegativeFloat = 0.1
    """Seconds to wait between groups so hosts can render progress."""


class LLMSettings(BasedModel):
    """Settings for the OpenAI-compatible model used to draft diagrams."""

    api_key: SecretStr | None = None
    base_url: str | None = None
    model: str = "gpt-4o-mini"
    max_tokens: PositiveInt = 2000
    temperature: Annotated[float, Field(ge=0.0, le=2.0)] = 0.3
    max_attempts: PositiveInt = 3
    timeout: Annotated[float, Field(gt=0)] = 60.0
    """Request timeout in seconds."""


class LoggingSettings(BasedModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    rich: bool = True

    @property
    def level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.level]


class ContextWeaverSettings(BaseSettings):
    """Main configuration model."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        env_nested_delimiter="__",
        env_prefix="CONTEXTWEAVER_",
        extra="ignore",
        nested_model_default_partial_update=True,
        str_strip_whitespace=True,
        title="ContextWeaver Settings",
        use_attribute_docstrings=True,
        validate_assignment=True,
    )

    chunker: ChunkerSettings = Field(default_factory=ChunkerSettings)
    packer: PackerSettings = Field(default_factory=PackerSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def redacted(self) -> dict[str, object]:
        """Settings as JSON-ready data with secrets masked."""
        return self.model_dump(mode="json")


_settings: ContextWeaverSettings | None = None
"""The global settings instance. Use `get_settings()` to access it."""


def get_settings() -> ContextWeaverSettings:
    """Get the global settings instance, creating it from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = ContextWeaverSettings()
    return _settings


def reset_settings() -> None:
    """Drop the global instance so the next `get_settings()` reloads from the environment."""
    global _settings
    _settings = None


__all__ = (
    "ChunkerSettings",
    "ChunkerStrategy",
    "ContextWeaverSettings",
    "LLMSettings",
    "LoggingSettings",
    "PackerSettings",
    "PipelineSettings",
    "get_settings",
    "reset_settings",
)
