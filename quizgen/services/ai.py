from __future__ import annotations
import logging
from typing import Optional, Protocol

from aiolimiter import AsyncLimiter
from openai import AsyncOpenAI, OpenAIError

from quizgen.config import Settings
from quizgen.errors import ModelError
from quizgen.services.deadline import Deadline

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    async def complete(self, prompt: str, deadline: Optional[Deadline] = None) -> str: ...


class GeminiClient:
    """Single-shot text completion against Gemini's OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/",
        rate_limit: int = 60,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise ValueError("GEMINI_API_KEY is required for Gemini.")
            # no retries: a failed call fails the request
            client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self._client = client
        self.model = model
        self._limiter = AsyncLimiter(rate_limit, 60)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            rate_limit=settings.gemini_rate_limit,
        )

    async def _create(self, prompt: str):
        async with self._limiter:
            return await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )

    async def complete(self, prompt: str, deadline: Optional[Deadline] = None) -> str:
        try:
            if deadline is not None:
                response = await deadline.run(self._create(prompt))
            else:
                response = await self._create(prompt)
        except OpenAIError as e:
            raise ModelError(f"{self.model} request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ModelError(f"{self.model} returned an empty completion")
        return response.choices[0].message.content
