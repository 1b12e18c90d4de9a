"""Groq chat completion client (OpenAI-compatible API)."""

from __future__ import annotations

import logging

import openai

from .errors import LLMError

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
TEMPERATURE = 0.3
MAX_TOKENS = 2000


class GroqClient:
    def __init__(self, api_key: str, *, model: str = MODEL, base_url: str = GROQ_BASE_URL) -> None:
        self.model = model
        self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def __aenter__(self) -> GroqClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._client.close()

    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the reply text."""
        logger.debug("Requesting completion from %s (%d prompt chars)", self.model, len(prompt))
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except openai.OpenAIError as exc:
            raise LLMError(f"Groq API request failed: {exc}") from exc

        if not completion.choices:
            return "{}"
        return completion.choices[0].message.content or "{}"
