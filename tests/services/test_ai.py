import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from quizgen.config import Settings
from quizgen.errors import DeadlineExceeded, ModelError
from quizgen.services.ai import GeminiClient
from quizgen.services.deadline import Deadline


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def client_returning(create):
    sdk = MagicMock()
    sdk.chat.completions.create = create
    return GeminiClient(api_key=None, model="gemini-test", client=sdk)


async def test_complete_returns_text():
    create = AsyncMock(return_value=completion("[1, 2]"))
    client = client_returning(create)
    assert await client.complete("hello") == "[1, 2]"
    create.assert_awaited_once_with(
        model="gemini-test",
        messages=[{"role": "user", "content": "hello"}],
    )

async def test_sdk_error_becomes_model_error():
    request = httpx.Request("POST", "https://example.com")
    create = AsyncMock(side_effect=openai.APIConnectionError(request=request))
    with pytest.raises(ModelError):
        await client_returning(create).complete("hello")

async def test_empty_completion_is_model_error():
    create = AsyncMock(return_value=completion(None))
    with pytest.raises(ModelError):
        await client_returning(create).complete("hello")

async def test_slow_call_is_cut_by_deadline():
    async def slow(**kwargs):
        await asyncio.sleep(5)
        return completion("late")

    with pytest.raises(DeadlineExceeded):
        await client_returning(slow).complete("hello", Deadline(0.05))

def test_missing_api_key_is_rejected():
    with pytest.raises(ValueError):
        GeminiClient.from_settings(Settings(gemini_api_key=None))

def test_from_settings_uses_configured_model():
    client = GeminiClient.from_settings(Settings(gemini_api_key="k", gemini_model="gemini-2.0-flash"))
    assert client.model == "gemini-2.0-flash"
