# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Chat completion providers.

The diagram agent talks to a language model through the small
`CompletionProvider` protocol. `OpenAICompletionProvider` implements it for
OpenAI and OpenAI-compatible endpoints, retrying transport failures with
exponential backoff before giving up with an `ExternalServiceError`.
"""

from __future__ import annotations

import logging

from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from contextweaver.common.logging import LogCategory
from contextweaver.exceptions import ConfigurationError, ExternalServiceError


if TYPE_CHECKING:
    from contextweaver.common.logging import PipelineLog
    from contextweaver.config.settings import LLMSettings


logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    APIConnectionError,
    APITimeoutError,
    RateLimitError,
    InternalServerError,
)
"""Errors worth another attempt. `APITimeoutError` subclasses `APIConnectionError`."""


@runtime_checkable
class CompletionProvider(Protocol):
    """Anything that can turn a system and user prompt into a reply."""

    async def complete(
        self, system_prompt: str, user_prompt: str, *, log: PipelineLog | None = None
    ) -> str:
        """Return the model's reply text.

        Raises:
            ExternalServiceError: If no reply could be obtained.
        """
        ...


class OpenAICompletionProvider:
    """Chat completions over the OpenAI API.

    Args:
        client: The OpenAI client to use.
        model: Model name.
        max_tokens: Most tokens in the reply.
        temperature: Sampling temperature.
        max_attempts: Total attempts, including the first.
        backoff_multiplier: Seconds multiplier for exponential backoff between attempts.
            Zero disables waiting.
        backoff_max: Longest wait between attempts, in seconds.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        temperature: float = 0.3,
        max_attempts: int = 3,
        backoff_multiplier: float = 1.0,
        backoff_max: float = 16.0,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_attempts = max_attempts
        self.backoff_multiplier = backoff_multiplier
        self.backoff_max = backoff_max
        self.attempts = 0
        """Attempts made by the most recent `complete` call."""

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> Self:
        """Build a provider with a fresh client from `settings`.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if settings.api_key is None:
            raise ConfigurationError(
                "No API key configured for the language model",
                suggestions=[
                    "Set CONTEXTWEAVER_LLM__API_KEY",
                    "Or run without the model (for example `contextweaver diagram --no-llm`)",
                ],
            )
        client = AsyncOpenAI(
            api_key=settings.api_key.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=0,
        )
        return cls(
            client,
            model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            max_attempts=settings.max_attempts,
        )

    async def complete(
        self, system_prompt: str, user_prompt: str, *, log: PipelineLog | None = None
    ) -> str:
        """Send one chat completion request, retrying transport failures.

        Raises:
            ExternalServiceError: If every attempt failed, the API rejected the
                request, or the reply was empty.
        """
        self.attempts = 0
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_multiplier, min=0, max=self.backoff_max),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    self.attempts = attempt.retry_state.attempt_number
                    if self.attempts > 1:
                        logger.warning(
                            "Retrying completion request (attempt %d/%d)",
                            self.attempts,
                            self.max_attempts,
                        )
                        if log is not None:
                            log.warning(
                                f"Retrying model request, attempt "
                                f"{self.attempts}/{self.max_attempts}",
                                LogCategory.LLM,
                            )
                    response = await self.client.chat.completions.create(
                        model=self.model,
                        messages=[
                            {"role": "system", "content": system_prompt},
                            {"role": "user", "content": user_prompt},
                        ],
                        max_tokens=self.max_tokens,
                        temperature=self.temperature,
                    )
        except RETRYABLE_ERRORS as e:
            raise ExternalServiceError(
                f"Model request failed after {self.attempts} attempts",
                details={"attempts": self.attempts, "model": self.model, "error": str(e)},
                suggestions=["Check your network connection and the API endpoint"],
            ) from e
        except APIError as e:
            raise ExternalServiceError(
                "Model request was rejected",
                details={
                    "attempts": self.attempts,
                    "model": self.model,
                    "status_code": e.status_code if isinstance(e, APIStatusError) else None,
                    "error": str(e),
                },
                suggestions=["Check the API key, model name, and request limits"],
            ) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise ExternalServiceError(
                "Model returned an empty reply", details={"model": self.model}
            )
        if log is not None:
            log.success("Received diagram draft from the model", LogCategory.LLM)
        return content


__all__ = ("RETRYABLE_ERRORS", "CompletionProvider", "OpenAICompletionProvider")
