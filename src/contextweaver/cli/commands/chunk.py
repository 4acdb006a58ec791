# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""ContextWeaver CLI - Chunk Command."""

from __future__ import annotations

import logging

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import cyclopts

from cyclopts import App
from rich.console import Console
from rich.table import Table

from contextweaver.cli.utils import exit_with_error, load_source_files
from contextweaver.config.settings import get_settings
from contextweaver.engine.pipeline import BatchPipeline, PipelineOptions
from contextweaver.engine.progress import PipelineProgressDisplay
from contextweaver.exceptions import ContextWeaverError


if TYPE_CHECKING:
    from contextweaver.engine.pipeline import PipelineReport


logger = logging.getLogger(__name__)
console = Console(markup=True, emoji=True)
app = App(
    "chunk",
    help="Chunk, rank, and pack source files into token-budgeted batches.",
    console=console,
)


@app.default
async def chunk(
    path: Path = Path(),
    *,
    strategy: Literal["syntax", "heuristic"] | None = None,
    max_tokens: Annotated[int | None, cyclopts.Parameter(name=["--max-tokens", "-t"])] = None,
    max_chunks: int | None = None,
    focus: str | None = None,
    include_tests: bool = False,
    output_format: Literal["table", "json"] = "table",
) -> None:
    """Split the files at PATH into chunks and pack them into batches.

    Args:
        path: A file or directory.
        strategy: Chunking strategy. Defaults to the configured one.
        max_tokens: Token budget per batch.
        max_chunks: Most chunks per batch.
        focus: Boost chunks whose path contains this text.
        include_tests: Also read test files.
        output_format: `table` for a summary, `json` for the full batches.
    """
    settings = get_settings()
    try:
        files = load_source_files(path, include_tests=include_tests)
        options = PipelineOptions.from_settings(
            settings,
            chunker=strategy,
            max_tokens_per_batch=max_tokens,
            max_chunks=max_chunks,
            focus=focus,
        )
        if output_format == "json":
            report = await BatchPipeline.from_settings(settings).run(files, options)
        else:
            display = PipelineProgressDisplay(console)
            with display:
                report = await BatchPipeline.from_settings(settings, on_progress=display).run(
                    files, options
                )
        report.raise_for_status()
    except ContextWeaverError as e:
        exit_with_error(console, e, "Chunking")

    if output_format == "json":
        console.print_json(report.model_dump_json(exclude={"chunks"}))
        return
    display.display_summary(report)
    _show_batches(report)


def _show_batches(report: PipelineReport) -> None:
    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Batch", justify="right", style="cyan")
    table.add_column("Chunks", justify="right")
    table.add_column("Tokens", justify="right", style="green")
    table.add_column("Files", style="white", max_width=60)
    for index, batch in enumerate(report.batches, start=1):
        table.add_row(
            str(index),
            str(len(batch)),
            str(batch.token_count),
            ", ".join(batch.paths) + (" [yellow](split)[/yellow]" if batch.oversized else ""),
        )
    console.print(table)


__all__ = ("app", "chunk")
