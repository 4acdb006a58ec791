# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Set up a logger with optional rich formatting, and collect pipeline log entries.

Two kinds of logging live here. `setup_logger` configures the standard library
logger that every module writes to. `PipelineLog` is a small, bounded,
user-facing record of what a pipeline run did; hosts show it next to the
progress bar. Components accept a `PipelineLog` as an optional argument and
every entry is also forwarded to the standard logger.
"""

from __future__ import annotations

import logging

from collections import deque
from collections.abc import Iterator
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Final

from pydantic import Field
from rich.console import Console
from rich.logging import RichHandler

from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel


MAX_LOG_ENTRIES: Final[int] = 100


def get_rich_handler(**kwargs: Any) -> RichHandler:
    return RichHandler(
        console=Console(markup=True, soft_wrap=True, stderr=True), markup=True, **kwargs
    )


def setup_logger(
    name: str | None = "contextweaver",
    *,
    level: int = logging.WARNING,
    rich: bool = True,
    rich_options: dict[str, Any] | None = None,
) -> logging.Logger:
    """Set up a logger with optional rich formatting."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Clear existing handlers to prevent duplication
    logger.handlers.clear()
    if rich:
        logger.addHandler(get_rich_handler(**(rich_options or {})))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger


class LogLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return {
            LogLevel.INFO: logging.INFO,
            LogLevel.SUCCESS: logging.INFO,
            LogLevel.WARNING: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
        }[self]


class LogCategory(str, Enum):
    """The pipeline stage an entry belongs to."""

    FILE_TREE = "file-tree"
    PROCESSING = "processing"
    SYNTAX = "syntax"
    HEURISTIC = "heuristic"
    SCORING = "scoring"
    PACKING = "packing"
    CONTEXT = "context"
    DIAGRAM = "diagram"
    LLM = "llm"


class LogEntry(BasedModel):
    """One user-facing log line."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    timestamp: Annotated[datetime, Field(default_factory=lambda: datetime.now(UTC))]
    message: str
    level: LogLevel = LogLevel.INFO
    category: LogCategory = LogCategory.PROCESSING


class PipelineLog:
    """A bounded log of user-facing entries.

    Keeps the most recent `max_entries` entries. Not thread-safe: give each
    concurrent task its own log and `merge` them afterwards.
    """

    def __init__(
        self, logger: logging.Logger | None = None, *, max_entries: int = MAX_LOG_ENTRIES
    ) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)
        self._logger = logger or logging.getLogger("contextweaver.pipeline")

    def add(
        self,
        message: str,
        level: LogLevel | str = LogLevel.INFO,
        category: LogCategory | str = LogCategory.PROCESSING,
    ) -> LogEntry:
        entry = LogEntry(message=message, level=LogLevel(level), category=LogCategory(category))
        self._entries.append(entry)
        self._logger.log(
            entry.level.logging_level,
            "[%s] %s",
            entry.category.value,
            message,
            extra={"category": entry.category.value, "pipeline_level": entry.level.value},
        )
        return entry

    def info(self, message: str, category: LogCategory | str = LogCategory.PROCESSING) -> LogEntry:
        return self.add(message, LogLevel.INFO, category)

    def success(
        self, message: str, category: LogCategory | str = LogCategory.PROCESSING
    ) -> LogEntry:
        return self.add(message, LogLevel.SUCCESS, category)

    def warning(
        self, message: str, category: LogCategory | str = LogCategory.PROCESSING
    ) -> LogEntry:
        return self.add(message, LogLevel.WARNING, category)

    def error(self, message: str, category: LogCategory | str = LogCategory.PROCESSING) -> LogEntry:
        return self.add(message, LogLevel.ERROR, category)

    def merge(self, other: PipelineLog) -> None:
        """Append `other`'s entries without forwarding them to the logger again."""
        self._entries.extend(other.entries)

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


__all__ = (
    "MAX_LOG_ENTRIES",
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "PipelineLog",
    "get_rich_handler",
    "setup_logger",
)
