# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""PlantUML rendering and validation."""

from __future__ import annotations

import re

from typing import Final

from contextweaver.diagram.extractor import ExtractionResult
from contextweaver.exceptions import DiagramValidationError


START_MARKER: Final[str] = "@startuml"
END_MARKER: Final[str] = "@enduml"

STYLE_HEADER: Final[tuple[str, ...]] = (
    "' Style and theme configuration",
    "skinparam style strictuml",
    "skinparam sequenceMessageAlign center",
    "skinparam sequenceGroupBorderThickness 2",
    "skinparam roundcorner 10",
    "skinparam maxmessagesize 160",
)

_PARTICIPANT = re.compile(r'participant\s+"[^"]+"')
_ARROW = re.compile(r"-{1,2}>")
_FENCE = re.compile(r"^```[\w-]*\s*\n?|\n?```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    return _FENCE.sub("", text.strip()).strip()


class PlantUMLRenderer:
    """Renders extraction results as PlantUML sequence diagrams."""

    def render(self, result: ExtractionResult) -> str:
        """Render `result` as PlantUML text.

        The output always passes `validate`.

        Raises:
            DiagramValidationError: If `result` has no components or no interactions.
        """
        result.require_usable()
        lines = [START_MARKER, *STYLE_HEADER, "", "' Participants"]
        lines.extend(f'participant "{name}" as {name}' for name in result.component_names)
        lines.extend(("", "' Interactions"))
        for interaction in result.interactions:
            lines.extend((
                f"{interaction.caller} -> {interaction.callee}: {interaction.method}()",
                f"activate {interaction.callee}",
                f"{interaction.callee} --> {interaction.caller}: response",
                f"deactivate {interaction.callee}",
                "",
            ))
        lines.append(END_MARKER)
        return "\n".join(lines)

    @staticmethod
    def validate(text: str) -> bool:
        """Whether `text` looks like a usable PlantUML sequence diagram.

        It must start with `@startuml`, end with `@enduml`, declare at least one
        quoted participant, and contain at least one message arrow.
        """
        stripped = text.strip()
        return (
            stripped.startswith(START_MARKER)
            and stripped.endswith(END_MARKER)
            and bool(_PARTICIPANT.search(stripped))
            and bool(_ARROW.search(stripped))
        )

    def require_valid(self, text: str, *, source: str) -> str:
        """Return `text` stripped, or raise if it is not a valid diagram.

        Raises:
            DiagramValidationError: If `text` fails `validate`.
        """
        if not self.validate(text):
            raise DiagramValidationError(
                f"The {source} diagram is not valid PlantUML",
                details={"source": source, "preview": text.strip()[:200]},
                suggestions=[
                    "Check that the diagram starts with @startuml and ends with @enduml",
                    "Make sure it declares participants and at least one message",
                ],
            )
        return text.strip()


__all__ = ("END_MARKER", "START_MARKER", "PlantUMLRenderer", "strip_code_fences")
