# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Render packed batches as model-ready context."""

from __future__ import annotations

from contextweaver.core.chunks import Batch
from contextweaver.diagram.prompts import format_chunk_blocks


def render_batch(batch: Batch) -> str:
    """The chunks of `batch` as `=== path ===` headed blocks."""
    return format_chunk_blocks(batch.chunks).strip()


def build_chat_prompt(batch: Batch, question: str) -> str:
    """A user message that answers `question` using the code in `batch`."""
    return (
        "Use the following code as context.\n\n"
        f"{render_batch(batch)}\n\n"
        f"Question: {question.strip()}"
    )


__all__ = ("build_chat_prompt", "render_batch")
