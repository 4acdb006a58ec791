# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""ContextWeaver: chunk, rank, and pack source code for language models."""

from contextweaver._version import __version__
from contextweaver.exceptions import (
    ConfigurationError,
    ContextWeaverError,
    DiagramValidationError,
    ErrorReport,
    ExternalServiceError,
    FileIOError,
    ParseError,
    PipelineCancelledError,
    PreconditionError,
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
    "__version__",
)
