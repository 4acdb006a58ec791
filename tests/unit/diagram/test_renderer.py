# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for PlantUML rendering and validation."""

from __future__ import annotations

import pytest

from contextweaver.diagram.extractor import Component, ExtractionResult, Interaction
from contextweaver.diagram.renderer import PlantUMLRenderer, strip_code_fences
from contextweaver.exceptions import DiagramValidationError


pytestmark = [pytest.mark.unit]

VALID = '@startuml\nparticipant "A" as A\nA -> A: go()\n@enduml'


@pytest.fixture
def renderer() -> PlantUMLRenderer:
    return PlantUMLRenderer()


@pytest.fixture
def result() -> ExtractionResult:
    return ExtractionResult(
        components=(
            Component(name="Checkout", declaration="class"),
            Component(name="PaymentApi", declaration="class"),
        ),
        interactions=(Interaction(caller="Checkout", callee="PaymentApi", method="charge"),),
    )


class TestRender:
    def test_output_is_valid(self, renderer: PlantUMLRenderer, result: ExtractionResult) -> None:
        assert renderer.validate(renderer.render(result))

    def test_layout(self, renderer: PlantUMLRenderer, result: ExtractionResult) -> None:
        lines = renderer.render(result).splitlines()
        assert lines[0] == "@startuml"
        assert lines[-1] == "@enduml"
        assert "skinparam style strictuml" in lines
        assert 'participant "Checkout" as Checkout' in lines
        assert 'participant "PaymentApi" as PaymentApi' in lines
        index = lines.index("Checkout -> PaymentApi: charge()")
        assert lines[index + 1 : index + 4] == [
            "activate PaymentApi",
            "PaymentApi --> Checkout: response",
            "deactivate PaymentApi",
        ]

    def test_participants_before_interactions(
        self, renderer: PlantUMLRenderer, result: ExtractionResult
    ) -> None:
        text = renderer.render(result)
        assert text.index("' Participants") < text.index("' Interactions")

    def test_empty_result_raises(self, renderer: PlantUMLRenderer) -> None:
        with pytest.raises(DiagramValidationError):
            renderer.render(ExtractionResult())


class TestValidate:
    def test_valid(self) -> None:
        assert PlantUMLRenderer.validate(VALID)
        assert PlantUMLRenderer.validate(f"\n  {VALID}\n\n")

    def test_dashed_arrow_counts(self) -> None:
        assert PlantUMLRenderer.validate('@startuml\nparticipant "A" as A\nA --> A: ok\n@enduml')

    @pytest.mark.parametrize(
        "text",
        [
            "",
            'participant "A" as A\nA -> A: go()\n@enduml',
            '@startuml\nparticipant "A" as A\nA -> A: go()',
            "@startuml\nparticipant A\nA -> A: go()\n@enduml",
            '@startuml\nparticipant "A" as A\n@enduml',
        ],
    )
    def test_invalid(self, text: str) -> None:
        assert not PlantUMLRenderer.validate(text)

    def test_require_valid(self, renderer: PlantUMLRenderer) -> None:
        assert renderer.require_valid(f"  {VALID}\n", source="model") == VALID
        with pytest.raises(DiagramValidationError, match="model diagram"):
            renderer.require_valid("nope", source="model")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (f"```plantuml\n{VALID}\n```", VALID),
        (f"```\n{VALID}\n```\n", VALID),
        (VALID, VALID),
    ],
)
def test_strip_code_fences(text: str, expected: str) -> None:
    assert strip_code_fences(text) == expected
