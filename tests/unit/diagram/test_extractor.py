# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for static component and interaction extraction."""

from __future__ import annotations

import pytest

from contextweaver.core.chunks import ChunkKind
from contextweaver.diagram.extractor import (
    Component,
    ExtractionResult,
    Interaction,
    InteractionExtractor,
)
from contextweaver.exceptions import DiagramValidationError


pytestmark = [pytest.mark.unit]


@pytest.fixture
def extractor() -> InteractionExtractor:
    return InteractionExtractor()


class TestComponents:
    def test_classes_and_typed_function_components(
        self, extractor: InteractionExtractor, make_chunk
    ) -> None:
        chunks = [
            make_chunk("class CartStore {}", kind=ChunkKind.CLASS),
            make_chunk("function Header(props): JSX.Element { return null; }"),
            make_chunk("function Footer(): React.FC { return null; }"),
            make_chunk("function helper(x) { return x; }"),
        ]
        assert extractor.components(chunks) == [
            Component(name="CartStore", declaration="class"),
            Component(name="Header", declaration="function"),
            Component(name="Footer", declaration="function"),
        ]

    def test_first_occurrence_wins(self, extractor: InteractionExtractor, make_chunk) -> None:
        chunks = [make_chunk("class A {}"), make_chunk("class A extends B {}")]
        assert [component.name for component in extractor.components(chunks)] == ["A"]


class TestInteractions:
    def test_single_call_between_classes(self, extractor: InteractionExtractor, make_chunk) -> None:
        chunks = [
            make_chunk("class A {\n  run() {\n    B.process();\n  }\n}", kind=ChunkKind.CLASS),
            make_chunk("class B {\n  static process() {}\n}", kind=ChunkKind.CLASS),
        ]
        result = extractor.extract(chunks)
        assert result.component_names == ("A", "B")
        assert result.interactions == (Interaction(caller="A", callee="B", method="process"),)
        assert result.is_usable

    def test_every_call_is_recorded(self, extractor: InteractionExtractor, make_chunk) -> None:
        chunks = [
            make_chunk("class Api {}"),
            make_chunk("class Page {\n  load() { Api.get(); Api.post(); }\n}"),
        ]
        result = extractor.extract(chunks)
        assert [interaction.method for interaction in result.interactions] == ["get", "post"]
        assert {interaction.caller for interaction in result.interactions} == {"Page"}

    def test_call_without_declared_caller_is_ignored(
        self, extractor: InteractionExtractor, make_chunk
    ) -> None:
        chunks = [make_chunk("class B {}"), make_chunk("const x = B.process();")]
        result = extractor.extract(chunks)
        assert result.interactions == ()
        assert not result.is_usable

    def test_suffix_of_identifier_is_not_a_call(
        self, extractor: InteractionExtractor, make_chunk
    ) -> None:
        chunks = [
            make_chunk("class B {}"),
            make_chunk("class A {\n  run() { myB.process(); $B.go(); }\n}"),
        ]
        assert extractor.extract(chunks).interactions == ()

    def test_property_access_is_not_a_call(
        self, extractor: InteractionExtractor, make_chunk
    ) -> None:
        chunks = [make_chunk("class B {}"), make_chunk("class A { run() { return B.name; } }")]
        assert extractor.extract(chunks).interactions == ()

    def test_self_calls_use_another_caller(
        self, extractor: InteractionExtractor, make_chunk
    ) -> None:
        chunks = [make_chunk("class A {\n  static make() { return A.create(); }\n}")]
        assert extractor.extract(chunks).interactions == ()

    def test_logs(self, extractor: InteractionExtractor, make_chunk, pipeline_log) -> None:
        extractor.extract([make_chunk("class A {}")], pipeline_log)
        assert "1 components and 0 interactions" in pipeline_log.entries[-1].message


class TestRequireUsable:
    def test_no_components(self) -> None:
        with pytest.raises(DiagramValidationError, match="No components"):
            ExtractionResult().require_usable()

    def test_no_interactions(self) -> None:
        result = ExtractionResult(components=(Component(name="A", declaration="class"),))
        with pytest.raises(DiagramValidationError, match="No interactions"):
            result.require_usable()

    def test_usable_returns_self(self) -> None:
        result = ExtractionResult(
            components=(
                Component(name="A", declaration="class"),
                Component(name="B", declaration="class"),
            ),
            interactions=(Interaction(caller="A", callee="B", method="go"),),
        )
        assert result.require_usable() is result
