# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for the sequence diagram agent."""

from __future__ import annotations

import pytest

from contextweaver.common.logging import PipelineLog
from contextweaver.core.chunks import ChunkKind
from contextweaver.diagram.agent import SequenceDiagramAgent
from contextweaver.diagram.prompts import SYSTEM_PROMPT
from contextweaver.diagram.renderer import PlantUMLRenderer
from contextweaver.exceptions import (
    DiagramValidationError,
    ExternalServiceError,
    PreconditionError,
)
from contextweaver.providers.llm import CompletionProvider


pytestmark = [pytest.mark.unit]

MODEL_DIAGRAM = (
    '@startuml\nparticipant "Cart" as Cart\nparticipant "Api" as Api\n'
    "Cart -> Api: save()\n@enduml"
)


class FakeProvider:
    """Completion provider that returns canned replies."""

    def __init__(self, reply: str = MODEL_DIAGRAM, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(
        self, system_prompt: str, user_prompt: str, *, log: PipelineLog | None = None
    ) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def interacting_chunks(make_chunk) -> list:
    return [
        make_chunk(
            "class Checkout {\n  submit() {\n    PaymentApi.charge();\n  }\n}",
            path="src/checkout.ts",
            kind=ChunkKind.CLASS,
        ),
        make_chunk(
            "class PaymentApi {\n  static charge() {}\n}",
            path="src/api.ts",
            kind=ChunkKind.CLASS,
        ),
    ]


@pytest.fixture
def plain_chunks(make_chunk) -> list:
    return [make_chunk("const cart = [];", path="src/cart.ts", kind=ChunkKind.SEMANTIC)]


def test_fake_provider_matches_protocol() -> None:
    assert isinstance(FakeProvider(), CompletionProvider)


@pytest.mark.asyncio
async def test_static_path(interacting_chunks: list) -> None:
    provider = FakeProvider()
    result = await SequenceDiagramAgent(provider).generate(interacting_chunks)
    assert result.source == "static"
    assert PlantUMLRenderer.validate(result.text)
    assert "Checkout -> PaymentApi: charge()" in result.text
    assert result.extraction is not None
    assert provider.calls == []


@pytest.mark.asyncio
async def test_static_path_without_provider(interacting_chunks: list) -> None:
    result = await SequenceDiagramAgent().generate(interacting_chunks)
    assert result.source == "static"


@pytest.mark.asyncio
async def test_falls_back_to_model(plain_chunks: list) -> None:
    provider = FakeProvider()
    log = PipelineLog()
    result = await SequenceDiagramAgent(provider).generate(plain_chunks, log)
    assert result.source == "llm"
    assert result.text == MODEL_DIAGRAM
    assert len(provider.calls) == 1
    system_prompt, user_prompt = provider.calls[0]
    assert system_prompt == SYSTEM_PROMPT
    assert "=== src/cart.ts ===" in user_prompt
    assert "const cart = [];" in user_prompt
    assert any(entry.category.value == "llm" for entry in log)


@pytest.mark.asyncio
async def test_model_reply_fences_are_stripped(plain_chunks: list) -> None:
    provider = FakeProvider(reply=f"```plantuml\n{MODEL_DIAGRAM}\n```")
    result = await SequenceDiagramAgent(provider).generate(plain_chunks)
    assert result.text == MODEL_DIAGRAM


@pytest.mark.asyncio
async def test_invalid_model_reply(plain_chunks: list) -> None:
    provider = FakeProvider(reply="Sorry, I cannot draw that.")
    with pytest.raises(DiagramValidationError):
        await SequenceDiagramAgent(provider).generate(plain_chunks)


@pytest.mark.asyncio
async def test_provider_errors_propagate(plain_chunks: list) -> None:
    provider = FakeProvider(error=ExternalServiceError("down"))
    with pytest.raises(ExternalServiceError):
        await SequenceDiagramAgent(provider).generate(plain_chunks)


@pytest.mark.asyncio
async def test_no_provider_and_nothing_static(plain_chunks: list) -> None:
    with pytest.raises(DiagramValidationError, match="No components"):
        await SequenceDiagramAgent().generate(plain_chunks)


@pytest.mark.asyncio
async def test_empty_chunks() -> None:
    with pytest.raises(PreconditionError):
        await SequenceDiagramAgent(FakeProvider()).generate([])


@pytest.mark.asyncio
async def test_only_top_chunks_reach_the_model(make_chunk) -> None:
    chunks = [
        make_chunk(f"const v{index} = {index};", path=f"src/v{index}.ts", kind=ChunkKind.SEMANTIC)
        for index in range(5)
    ]
    provider = FakeProvider()
    await SequenceDiagramAgent(provider, top_chunks=2).generate(chunks)
    assert provider.calls[0][1].count("=== ") == 2
