# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""ContextWeaver CLI - Diagram Command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

import cyclopts

from cyclopts import App
from rich.console import Console

from contextweaver.cli.utils import CONTEXTWEAVER_PREFIX, exit_with_error, load_source_files
from contextweaver.config.settings import get_settings
from contextweaver.diagram.agent import SequenceDiagramAgent
from contextweaver.engine.pipeline import BatchPipeline, PipelineOptions
from contextweaver.exceptions import ContextWeaverError
from contextweaver.providers.llm import OpenAICompletionProvider


console = Console(markup=True, emoji=True)
app = App(
    "diagram", help="Generate a PlantUML sequence diagram from source files.", console=console
)


@app.default
async def diagram(
    path: Path = Path(),
    *,
    output: Annotated[Path | None, cyclopts.Parameter(name=["--output", "-o"])] = None,
    no_llm: bool = False,
    strategy: Literal["syntax", "heuristic"] | None = None,
    include_tests: bool = False,
) -> None:
    """Generate a sequence diagram of how the components at PATH interact.

    Static analysis is tried first. If it finds nothing to draw and a model is
    configured, the model drafts the diagram instead.

    Args:
        path: A file or directory.
        output: Write the diagram here instead of printing it.
        no_llm: Never call the language model.
        strategy: Chunking strategy. Defaults to the configured one.
        include_tests: Also read test files.
    """
    settings = get_settings()
    try:
        provider = (
            None
            if no_llm or settings.llm.api_key is None
            else OpenAICompletionProvider.from_settings(settings.llm)
        )
        files = load_source_files(path, include_tests=include_tests)
        options = PipelineOptions.from_settings(settings, chunker=strategy)
        result = await BatchPipeline.from_settings(settings).run_diagram(
            files, SequenceDiagramAgent(provider), options
        )
    except ContextWeaverError as e:
        exit_with_error(console, e, "Diagram generation")

    if output is None:
        console.print(result.text, markup=False, highlight=False, emoji=False, soft_wrap=True)
        return
    output.write_text(result.text + "\n", encoding="utf-8")
    console.print(
        f"{CONTEXTWEAVER_PREFIX} [green]Wrote {result.source} diagram to {output}[/green]"
    )


__all__ = ("app", "diagram")
