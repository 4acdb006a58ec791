# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The batch pipeline: chunk files in groups, then rank and pack the chunks.

Files are processed in groups of `group_size`. The files within a group are
chunked concurrently in worker threads; after each group the pipeline records
progress, reports it to the host, and optionally pauses so the host can render.
A file that fails to chunk still counts as processed and contributes a single
`error` chunk, so one bad file never sinks a run.

The run as a whole fails only when it cannot start (no files, a file without
content, an unknown chunker) or when it is cancelled. Failures are reported in
the returned `PipelineReport` rather than raised.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from collections.abc import AsyncIterator, Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, NamedTuple

from pydantic import Field, NonNegativeInt, PositiveInt, computed_field

from contextweaver.common.logging import LogCategory, LogEntry, PipelineLog
from contextweaver.core.chunks import Batch, Chunk, ChunkKind, ScoredChunk, SourceFile
from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel
from contextweaver.engine.chunker.base import BaseChunker
from contextweaver.engine.chunker.selector import ChunkerSelector
from contextweaver.engine.packer import TokenBudgetPacker, split_oversized
from contextweaver.engine.scoring import ChunkScorer, prioritize_files
from contextweaver.exceptions import (
    ContextWeaverError,
    ErrorReport,
    PipelineCancelledError,
    PreconditionError,
)


if TYPE_CHECKING:
    from contextweaver.config.settings import ContextWeaverSettings
    from contextweaver.diagram.agent import DiagramResult, SequenceDiagramAgent


logger = logging.getLogger(__name__)

type ProgressCallback = Callable[[ProgressState], Any]


class PipelineStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ProgressState(BasedModel):
    """Progress of a pipeline run.

    The pipeline owns and updates one instance per run; hosts receive copies.
    """

    processed_count: NonNegativeInt = 0
    total_count: NonNegativeInt = 0
    status: PipelineStatus = PipelineStatus.IDLE
    logs: tuple[LogEntry, ...] = ()
    error: str | None = None

    @computed_field
    @property
    def percent(self) -> float:
        """Share of files processed, from 0 to 100."""
        if not self.total_count:
            return 100.0 if self.status is PipelineStatus.COMPLETED else 0.0
        return round(100 * self.processed_count / self.total_count, 1)

    @property
    def is_finished(self) -> bool:
        return self.status in {PipelineStatus.COMPLETED, PipelineStatus.FAILED}


class PipelineOptions(BasedModel):
    """Options for one pipeline run."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    chunker: Annotated[
        str | BaseChunker, Field(description="Strategy name or chunker instance.")
    ] = "syntax"
    max_chunk_size: Annotated[
        PositiveInt, Field(description="Chunks longer than this many characters are split.")
    ] = 2000
    max_chunks: Annotated[PositiveInt, Field(description="Most chunks in one batch.")] = 15
    max_chunks_total: Annotated[
        PositiveInt | None, Field(description="Most chunks across all batches.")
    ] = None
    max_tokens_per_batch: PositiveInt = 6000
    focus: Annotated[
        str | None, Field(description="Boost chunks whose path contains this string.")
    ] = None

    @classmethod
    def from_settings(cls, settings: ContextWeaverSettings, **overrides: Any) -> PipelineOptions:
        values: dict[str, Any] = {
            "chunker": settings.chunker.strategy,
            "max_chunk_size": settings.chunker.max_chunk_size,
            "max_chunks": settings.packer.max_chunks,
            "max_chunks_total": settings.packer.max_chunks_total,
            "max_tokens_per_batch": settings.packer.max_tokens_per_batch,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


class PipelineReport(BasedModel):
    """Everything a pipeline run produced."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    state: ProgressState
    batches: tuple[Batch, ...] = ()
    chunks: Annotated[tuple[ScoredChunk, ...], Field(description="All chunks, ranked.")] = ()
    groups: NonNegativeInt = 0
    failed_files: tuple[str, ...] = ()
    dropped_chunks: NonNegativeInt = 0
    error: ErrorReport | None = None
    exception: Annotated[ContextWeaverError | None, Field(exclude=True, repr=False)] = None

    @property
    def succeeded(self) -> bool:
        return self.state.status is PipelineStatus.COMPLETED

    def raise_for_status(self) -> None:
        """Re-raise the error that failed the run, if any."""
        if self.exception is not None:
            raise self.exception


class _FileOutcome(NamedTuple):
    chunks: tuple[Chunk, ...]
    log: PipelineLog
    error: str | None


class BatchPipeline:
    """Chunks, ranks, and packs files.

    Args:
        scorer: Scorer for ranking. Defaults to one built from the run's `focus`.
        packer: Packer for batching.
        group_size: Files per concurrent group.
        pacing_delay: Seconds to pause between groups.
        on_progress: Called with a copy of the progress state after every change.
    """

    def __init__(
        self,
        *,
        scorer: ChunkScorer | None = None,
        packer: TokenBudgetPacker | None = None,
        group_size: int = 5,
        pacing_delay: float = 0.1,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if group_size <= 0:
            raise PreconditionError(
                "group_size must be positive", details={"group_size": group_size}
            )
        self.scorer = scorer
        self.packer = packer or TokenBudgetPacker()
        self.group_size = group_size
        self.pacing_delay = max(pacing_delay, 0.0)
        self.on_progress = on_progress

    @classmethod
    def from_settings(
        cls, settings: ContextWeaverSettings, on_progress: ProgressCallback | None = None
    ) -> BatchPipeline:
        return cls(
            packer=TokenBudgetPacker(settings.packer.chars_per_token),
            group_size=settings.pipeline.group_size,
            pacing_delay=settings.pipeline.pacing_delay,
            on_progress=on_progress,
        )

    async def run(
        self,
        files: Sequence[SourceFile],
        options: PipelineOptions | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PipelineReport:
        """Run the pipeline over `files`.

        Args:
            files: Files to process. Each must have content.
            options: Chunking and packing options.
            cancel_event: When set, the run stops before the next group.
            on_progress: Extra progress callback for this run only.

        Returns:
            A report whose state is `completed`, or `failed` with an error.
        """
        options = options or PipelineOptions()
        callbacks = [callback for callback in (self.on_progress, on_progress) if callback]
        state = ProgressState(total_count=len(files))
        log = PipelineLog(logger)

        def emit() -> None:
            state.logs = log.entries
            for callback in callbacks:
                callback(state.model_copy(deep=True))

        try:
            self._check_files(files)
            chunker = ChunkerSelector.for_strategy(options.chunker)
        except ContextWeaverError as e:
            return self._fail(state, log, e, "Starting pipeline", emit)

        state.status = PipelineStatus.RUNNING
        log.info(f"Processing {len(files)} files with the {chunker.strategy} chunker")
        emit()

        chunks: list[Chunk] = []
        failed: list[str] = []
        groups = 0
        ordered = prioritize_files(files)
        try:
            for start in range(0, len(ordered), self.group_size):
                if cancel_event is not None and cancel_event.is_set():
                    raise PipelineCancelledError(
                        "Pipeline was cancelled",
                        details={"processed": state.processed_count, "total": state.total_count},
                    )
                group = ordered[start : start + self.group_size]
                outcomes = await self._process_group(
                    chunker, group, options.max_chunk_size, state, log, emit
                )
                for file, outcome in zip(group, outcomes, strict=True):
                    chunks.extend(outcome.chunks)
                    if outcome.error is not None:
                        failed.append(file.path)
                groups += 1
                log.info(
                    f"Processed group {groups} ({state.processed_count}/{state.total_count} files)"
                )
                if self.pacing_delay and start + self.group_size < len(ordered):
                    await asyncio.sleep(self.pacing_delay)
        except PipelineCancelledError as e:
            return self._fail(state, log, e, "Processing files", emit)
        except asyncio.CancelledError:
            state.status = PipelineStatus.FAILED
            state.error = "cancelled"
            log.error("Pipeline task was cancelled")
            emit()
            raise

        scorer = self.scorer or ChunkScorer(focus=options.focus)
        ranked = scorer.rank(chunks, log)
        packed = self.packer.pack(
            ranked,
            options.max_tokens_per_batch,
            max_chunks=options.max_chunks,
            max_chunks_total=options.max_chunks_total,
            log=log,
        )
        state.status = PipelineStatus.COMPLETED
        log.success(
            f"Finished: {len(ranked)} chunks in {len(packed.batches)} batches"
            + (f", {len(failed)} files failed" if failed else "")
        )
        emit()
        return PipelineReport(
            state=state.model_copy(deep=True),
            batches=packed.batches,
            chunks=tuple(ranked),
            groups=groups,
            failed_files=tuple(failed),
            dropped_chunks=packed.dropped_chunks,
        )

    async def stream(
        self,
        files: Sequence[SourceFile],
        options: PipelineOptions | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[ProgressState | PipelineReport]:
        """Run the pipeline, yielding progress snapshots and finally the report.

        Closing the iterator early cancels the run.
        """
        queue: asyncio.Queue[ProgressState | None] = asyncio.Queue()
        task = asyncio.create_task(
            self.run(files, options, cancel_event=cancel_event, on_progress=queue.put_nowait)
        )
        task.add_done_callback(lambda _: queue.put_nowait(None))
        try:
            while (snapshot := await queue.get()) is not None:
                yield snapshot
            yield task.result()
        finally:
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    async def run_diagram(
        self,
        files: Sequence[SourceFile],
        agent: SequenceDiagramAgent,
        options: PipelineOptions | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> DiagramResult:
        """Chunk `files` and build a sequence diagram from the chunks.

        Raises:
            ContextWeaverError: The error that failed the run, or any diagram error.
        """
        report = await self.run(files, options, cancel_event=cancel_event)
        report.raise_for_status()
        log = PipelineLog(logger)
        return await agent.generate(report.chunks, log)

    @staticmethod
    def _check_files(files: Sequence[SourceFile]) -> None:
        if not files:
            raise PreconditionError(
                "No files to process",
                suggestions=["Select at least one file or directory with source code"],
            )
        if missing := [file.path for file in files if file.content is None]:
            raise PreconditionError(
                f"{len(missing)} file(s) have no content",
                details={"file_path": missing[0], "files": missing},
                suggestions=["Read file contents before running the pipeline"],
            )

    async def _process_group(
        self,
        chunker: BaseChunker,
        group: Sequence[SourceFile],
        max_chunk_size: int,
        state: ProgressState,
        log: PipelineLog,
        emit: Callable[[], None],
    ) -> list[_FileOutcome]:
        """Chunk `group` concurrently, counting each file as it finishes.

        Outcomes come back in the order of `group`.
        """

        async def process(index: int, file: SourceFile) -> tuple[int, _FileOutcome]:
            return index, await asyncio.to_thread(
                self._process_file, chunker, file, max_chunk_size
            )

        tasks = [asyncio.create_task(process(index, file)) for index, file in enumerate(group)]
        outcomes: dict[int, _FileOutcome] = {}
        try:
            for finished in asyncio.as_completed(tasks):
                index, outcome = await finished
                outcomes[index] = outcome
                log.merge(outcome.log)
                state.processed_count += 1
                emit()
        finally:
            for task in tasks:
                task.cancel()
        return [outcomes[index] for index in range(len(group))]

    @staticmethod
    def _process_file(
        chunker: BaseChunker, file: SourceFile, max_chunk_size: int
    ) -> _FileOutcome:
        """Chunk one file. Runs in a worker thread with its own log."""
        file_log = PipelineLog(logger)
        try:
            chunks = chunker.extract(file, file_log)
            pieces = tuple(
                piece for chunk in chunks for piece in split_oversized(chunk, max_chunk_size)
            )
        except Exception as e:
            logger.warning("Failed to process %s: %s", file.path, e, exc_info=True)
            file_log.error(f"Failed to process {file.path}: {e}", LogCategory.PROCESSING)
            return _FileOutcome(
                (Chunk.for_file(file, ChunkKind.ERROR, error=str(e)),), file_log, str(e)
            )
        return _FileOutcome(pieces, file_log, None)

    @staticmethod
    def _fail(
        state: ProgressState,
        log: PipelineLog,
        error: ContextWeaverError,
        context: str,
        emit: Callable[[], None],
    ) -> PipelineReport:
        report = ErrorReport.from_exception(error, context)
        state.status = PipelineStatus.FAILED
        state.error = report.message
        log.error(report.message)
        emit()
        return PipelineReport(
            state=state.model_copy(deep=True), error=report, exception=error
        )


__all__ = (
    "BatchPipeline",
    "PipelineOptions",
    "PipelineReport",
    "PipelineStatus",
    "ProgressCallback",
    "ProgressState",
)
