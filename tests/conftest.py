import pytest

from quizgen.config import Settings
from quizgen.errors import ModelError
from tests.stubs import StubModelClient


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def failing_model():
    return StubModelClient(error=ModelError("upstream unavailable"))
