"""Completion capability used for both categorization and answering."""

from __future__ import annotations

import logging
from typing import Protocol

from openai import AsyncOpenAI, OpenAIError

log = logging.getLogger(__name__)


class CompletionError(RuntimeError):
    """The completion service failed (network, auth, rate limit, ...)."""


class CompletionClient(Protocol):
    async def complete(self, model: str, max_tokens: int, prompt: str) -> str:
        """Send a single-message prompt and return the response text."""
        ...


class OpenAICompletionClient:
    """CompletionClient backed by the OpenAI chat completions API."""

    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self.client = client or AsyncOpenAI()

    async def complete(self, model: str, max_tokens: int, prompt: str) -> str:
        log.debug("Calling %s (max_tokens=%d, %d prompt chars)", model, max_tokens, len(prompt))
        try:
            response = await self.client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as e:
            raise CompletionError(str(e)) from e

        if not response.choices:
            raise CompletionError("completion returned no choices")
        return response.choices[0].message.content or ""


__all__ = ["CompletionClient", "CompletionError", "OpenAICompletionClient"]
