# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Prompts for drafting sequence diagrams with a language model."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Final


if TYPE_CHECKING:
    from contextweaver.core.chunks import Chunk


SYSTEM_PROMPT: Final[str] = """You are an expert software architect specializing in sequence diagram generation. Your task is to analyze code and create a precise PlantUML sequence diagram.

CRITICAL REQUIREMENTS:
1. ALWAYS output valid PlantUML code ONLY
2. Start with @startuml and end with @enduml
3. Include ALL key interactions between components
4. Show proper activation/deactivation of participants
5. Include error handling flows where relevant
6. Use proper PlantUML syntax for async operations
7. Keep the diagram focused and readable
8. Use proper naming conventions
9. Include clear participant labels

REQUIRED OUTPUT FORMAT:
@startuml
' Configuration
skinparam style strictuml
skinparam sequenceMessageAlign center
skinparam maxmessagesize 160

' Participants
participant "ComponentA" as A
participant "ComponentB" as B

' Interactions
A -> B: methodCall()
activate B
B --> A: response
deactivate B
@enduml"""

_USER_PROMPT_REQUIREMENTS: Final[str] = """Requirements:
1. Focus on the main workflow and key interactions
2. Show component relationships clearly
3. Include error handling where present
4. Use proper PlantUML syntax
5. Output ONLY the PlantUML code
6. Keep the diagram focused and readable
7. Show async operations correctly
8. Include proper activation/deactivation"""


def format_chunk_blocks(chunks: Iterable[Chunk]) -> str:
    """Render chunks as `=== path ===` headed blocks."""
    return "\n".join(f"\n=== {chunk.path} ===\n{chunk.content}\n" for chunk in chunks)


def build_user_prompt(chunks: Iterable[Chunk]) -> str:
    """The user message asking for a diagram of `chunks`."""
    return (
        "Analyze the following code and generate a sequence diagram "
        "showing the main interactions:\n\n"
        f"{format_chunk_blocks(chunks)}\n\n{_USER_PROMPT_REQUIREMENTS}"
    )


__all__ = ("SYSTEM_PROMPT", "build_user_prompt", "format_chunk_blocks")
