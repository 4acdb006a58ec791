# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Sequence diagram generation.

Generation tries the cheap, deterministic path first: rank the chunks, extract
components and calls statically, and render them. Only when that yields
nothing usable does the agent ask a language model to draft the diagram. Any
diagram, static or drafted, is validated before it is returned.
"""

from __future__ import annotations

import logging

from collections.abc import Sequence
from typing import TYPE_CHECKING, Final, Literal

from contextweaver.common.logging import LogCategory
from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel
from contextweaver.diagram.extractor import ExtractionResult, InteractionExtractor
from contextweaver.diagram.prompts import SYSTEM_PROMPT, build_user_prompt
from contextweaver.diagram.renderer import PlantUMLRenderer, strip_code_fences
from contextweaver.engine.scoring import ChunkScorer
from contextweaver.exceptions import DiagramValidationError, PreconditionError


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog
    from contextweaver.core.chunks import Chunk
    from contextweaver.providers.llm import CompletionProvider


logger = logging.getLogger(__name__)

DEFAULT_TOP_CHUNKS: Final[int] = 15


class DiagramResult(BasedModel):
    """A validated diagram and where it came from."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    text: str
    source: Literal["static", "llm"]
    extraction: ExtractionResult | None = None
    """The static extraction, when the diagram was rendered from one."""


class SequenceDiagramAgent:
    """Builds PlantUML sequence diagrams from chunks.

    Args:
        provider: Optional model provider for the fallback path. Without one,
            a failed static extraction is final.
        scorer: Scorer used to pick the chunks to analyze.
        top_chunks: How many top-ranked chunks to analyze.
    """

    def __init__(
        self,
        provider: CompletionProvider | None = None,
        *,
        scorer: ChunkScorer | None = None,
        extractor: InteractionExtractor | None = None,
        renderer: PlantUMLRenderer | None = None,
        top_chunks: int = DEFAULT_TOP_CHUNKS,
    ) -> None:
        self.provider = provider
        self.scorer = scorer or ChunkScorer.for_diagrams()
        self.extractor = extractor or InteractionExtractor()
        self.renderer = renderer or PlantUMLRenderer()
        self.top_chunks = top_chunks

    async def generate(
        self, chunks: Sequence[Chunk], log: PipelineLog | None = None
    ) -> DiagramResult:
        """Generate a diagram from `chunks`.

        Args:
            chunks: Candidate chunks, in any order.
            log: Optional pipeline log.

        Returns:
            A diagram that passes `PlantUMLRenderer.validate`.

        Raises:
            PreconditionError: If `chunks` is empty.
            DiagramValidationError: If neither path produced a valid diagram.
            ExternalServiceError: If the model could not be reached.
        """
        if not chunks:
            raise PreconditionError(
                "No code chunks to build a diagram from",
                suggestions=["Select files that contain source code"],
            )
        selected = self.scorer.top(chunks, self.top_chunks)
        if log is not None:
            log.info(
                f"Analyzing the top {len(selected)} of {len(chunks)} chunks", LogCategory.DIAGRAM
            )

        extraction = self.extractor.extract(selected, log)
        if extraction.is_usable:
            text = self.renderer.render(extraction)
            if self.renderer.validate(text):
                if log is not None:
                    log.success("Rendered the diagram from static analysis", LogCategory.DIAGRAM)
                return DiagramResult(text=text, source="static", extraction=extraction)
            logger.warning("Static diagram failed validation, falling back to the model")

        if self.provider is None:
            extraction.require_usable()
            raise DiagramValidationError(
                "Static analysis could not produce a valid diagram and no model is configured"
            )

        if log is not None:
            log.info("Static analysis was inconclusive, asking the model", LogCategory.LLM)
        reply = await self.provider.complete(SYSTEM_PROMPT, build_user_prompt(selected), log=log)
        text = self.renderer.require_valid(strip_code_fences(reply), source="model")
        if log is not None:
            log.success("The model produced a valid diagram", LogCategory.DIAGRAM)
        return DiagramResult(text=text, source="llm")


__all__ = ("DEFAULT_TOP_CHUNKS", "DiagramResult", "SequenceDiagramAgent")
