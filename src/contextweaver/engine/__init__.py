# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The processing engine: chunking, scoring, packing, and the batch pipeline."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from contextweaver.common.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from contextweaver.engine.packer import PackResult, TokenBudgetPacker, split_oversized
    from contextweaver.engine.pipeline import (
        BatchPipeline,
        PipelineOptions,
        PipelineReport,
        PipelineStatus,
        ProgressState,
    )
    from contextweaver.engine.progress import PipelineProgressDisplay
    from contextweaver.engine.scoring import ChunkScorer, prioritize_files

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BatchPipeline": (__spec__.parent, "pipeline"),
    "ChunkScorer": (__spec__.parent, "scoring"),
    "PackResult": (__spec__.parent, "packer"),
    "PipelineOptions": (__spec__.parent, "pipeline"),
    "PipelineProgressDisplay": (__spec__.parent, "progress"),
    "PipelineReport": (__spec__.parent, "pipeline"),
    "PipelineStatus": (__spec__.parent, "pipeline"),
    "ProgressState": (__spec__.parent, "pipeline"),
    "TokenBudgetPacker": (__spec__.parent, "packer"),
    "prioritize_files": (__spec__.parent, "scoring"),
    "split_oversized": (__spec__.parent, "packer"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "BatchPipeline",
    "ChunkScorer",
    "PackResult",
    "PipelineOptions",
    "PipelineProgressDisplay",
    "PipelineReport",
    "PipelineStatus",
    "ProgressState",
    "TokenBudgetPacker",
    "prioritize_files",
    "split_oversized",
)


def __dir__() -> list[str]:
    """List available attributes for the package."""
    return list(__all__)
