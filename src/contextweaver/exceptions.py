# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for ContextWeaver.

Every error raised by ContextWeaver inherits from `ContextWeaverError`, which
carries a human-readable message, structured details, and suggestions for
resolving the problem. `ErrorReport` is the plain-data form of an error that
hosts display to users.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Self

from pydantic import Field

from contextweaver.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel


class ContextWeaverError(Exception):
    """Base exception for all ContextWeaver errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    _detail_keys: ClassVar[tuple[str, ...]] = (
        "file_path",
        "language",
        "max_tokens",
        "max_chunks",
        "attempts",
        "status_code",
    )

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize ContextWeaver error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]
        if detail_parts := [
            f"{key.replace('_', ' ')}: {self.details[key]}"
            for key in type(self)._detail_keys
            if key in self.details
        ]:
            parts.append(f"({', '.join(detail_parts)})")
        return " ".join(parts)

    @property
    def report(self) -> str:
        """Generate a full error report, including suggestions."""
        lines = [f"Error: {self.message}"]
        if self.details:
            lines.append("Details: " + ", ".join(f"{k}: {v}" for k, v in self.details.items()))
        if self.suggestions:
            lines.append("Suggestions:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)
        return "\n".join(lines)


class ParseError(ContextWeaverError):
    """A source file could not be parsed into a syntax tree."""


class FileIOError(ContextWeaverError):
    """A file or directory could not be read from a file store."""


class PreconditionError(ContextWeaverError):
    """A caller supplied input that an operation cannot work with.

    Raised for empty file sets, missing content, or non-positive limits.
    """


class DiagramValidationError(ContextWeaverError):
    """No valid diagram could be produced from the available chunks."""


class ExternalServiceError(ContextWeaverError):
    """A call to an external model provider failed after all retries."""


class ConfigurationError(ContextWeaverError):
    """Configuration and settings errors, such as unknown strategies or missing API keys."""


class PipelineCancelledError(ContextWeaverError):
    """The batch pipeline was cancelled before it finished."""


class ErrorReport(BasedModel):
    """A display-ready description of a failure."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    message: Annotated[str, Field(description="Message prefixed with the operation context.")]
    context: Annotated[str, Field(description="The operation that failed.")]
    error_type: Annotated[str, Field(description="Class name of the underlying exception.")]
    details: Annotated[dict[str, Any], Field(default_factory=dict)]
    suggestions: Annotated[tuple[str, ...], Field(default_factory=tuple)]

    @classmethod
    def from_exception(cls, exc: BaseException, context: str) -> Self:
        """Build a report for `exc` raised while doing `context`."""
        if isinstance(exc, ContextWeaverError):
            return cls(
                message=f"{context}: {exc.message}",
                context=context,
                error_type=type(exc).__name__,
                details=dict(exc.details),
                suggestions=tuple(exc.suggestions),
            )
        return cls(
            message=f"{context}: {exc}",
            context=context,
            error_type=type(exc).__name__,
        )


__all__ = (
    "ConfigurationError",
    "ContextWeaverError",
    "DiagramValidationError",
    "ErrorReport",
    "ExternalServiceError",
    "FileIOError",
    "ParseError",
    "PipelineCancelledError",
    "PreconditionError",
)
