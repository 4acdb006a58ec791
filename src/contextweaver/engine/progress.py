# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Progress display for pipeline runs using Rich library."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from contextweaver.common.logging import LogEntry, LogLevel
from contextweaver.engine.pipeline import PipelineStatus


if TYPE_CHECKING:
    from contextweaver.engine.pipeline import PipelineReport, ProgressState


_LEVEL_STYLES = {
    LogLevel.INFO: "dim",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}


class PipelineProgressDisplay:
    """Renders pipeline progress as a Rich progress bar.

    Pass an instance as the pipeline's `on_progress` callback. New log entries
    are printed above the bar as they arrive.
    """

    def __init__(self, console: Console | None = None, *, show_logs: bool = True) -> None:
        """Initialize the progress display.

        Args:
            console: Optional Rich console instance (creates default if not provided)
            show_logs: Whether to print pipeline log entries as they arrive
        """
        self.console = console or Console()
        self.show_logs = show_logs
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
        )
        self.task_id: TaskID | None = None
        self._last_entry: LogEntry | None = None

    def __enter__(self) -> PipelineProgressDisplay:
        self.progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.progress.stop()

    def __call__(self, state: ProgressState) -> None:
        self.update(state)

    def update(self, state: ProgressState) -> None:
        """Update the bar and print any new log entries from `state`."""
        if self.task_id is None:
            self.task_id = self.progress.add_task(
                "[cyan]Chunking files...", total=state.total_count
            )
        description = {
            PipelineStatus.COMPLETED: "[green]Done",
            PipelineStatus.FAILED: "[red]Failed",
        }.get(state.status, "[cyan]Chunking files...")
        self.progress.update(
            self.task_id,
            total=state.total_count,
            completed=state.processed_count,
            description=description,
        )
        if self.show_logs:
            for entry in self._unseen(state):
                self.progress.console.print(
                    f"[{_LEVEL_STYLES[entry.level]}]{entry.category.value:>10}[/] {entry.message}",
                    markup=True,
                    highlight=False,
                )
            if state.logs:
                self._last_entry = state.logs[-1]

    def _unseen(self, state: ProgressState) -> tuple[LogEntry, ...]:
        """Entries after the last one printed. The log is bounded, so search from the end."""
        if self._last_entry is None:
            return state.logs
        for index in range(len(state.logs) - 1, -1, -1):
            if state.logs[index] == self._last_entry:
                return state.logs[index + 1 :]
        return state.logs

    def display_summary(self, report: PipelineReport) -> None:
        """Display a summary table for a finished run."""
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Metric", style="dim")
        table.add_column("Value", justify="right", style="green")
        table.add_row(
            "Files Processed", f"{report.state.processed_count}/{report.state.total_count}"
        )
        table.add_row("Groups", str(report.groups))
        table.add_row("Chunks", str(len(report.chunks)))
        table.add_row("Batches", str(len(report.batches)))
        table.add_row("Estimated Tokens", str(sum(batch.token_count for batch in report.batches)))
        if report.dropped_chunks:
            table.add_row("Dropped Chunks", f"[yellow]{report.dropped_chunks}[/yellow]")
        if report.failed_files:
            table.add_row("Files with Errors", f"[yellow]{len(report.failed_files)}[/yellow]")
        self.console.print(table)


__all__ = ("PipelineProgressDisplay",)
