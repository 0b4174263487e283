from __future__ import annotations
import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class GenerationMode(str, Enum):
    BATCHED = "batched"
    PER_ITEM = "per_item"


class ParsePolicy(str, Enum):
    EMPTY = "empty"   # swallow parse failures, return an empty result
    RAISE = "raise"   # surface parse failures as ParseError


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    gemini_rate_limit: int = Field(default=60, gt=0)  # requests per minute

    generation_mode: GenerationMode = GenerationMode.BATCHED
    max_concurrency: int = Field(default=5, gt=0)
    max_questions: int = Field(default=50, gt=0)
    max_source_chars: int = Field(default=30000, ge=0)  # 0 disables truncation

    request_timeout_seconds: float = Field(default=120.0, gt=0)
    fetch_timeout_seconds: float = Field(default=30.0, gt=0)

    mcq_parse_policy: ParsePolicy = ParsePolicy.EMPTY
    mcq_strict_items: bool = False

    port: int = 4500

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
            gemini_base_url=os.getenv(
                "GEMINI_BASE_URL",
                "https://generativelanguage.googleapis.com/v1beta/openai/",
            ),
            gemini_rate_limit=int(os.getenv("GEMINI_RATE_LIMIT", "60")),
            generation_mode=os.getenv("GENERATION_MODE", GenerationMode.BATCHED.value),
            max_concurrency=int(os.getenv("MAX_CONCURRENCY", "5")),
            max_questions=int(os.getenv("MAX_QUESTIONS", "50")),
            max_source_chars=int(os.getenv("MAX_SOURCE_CHARS", "30000")),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "120")),
            fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT_SECONDS", "30")),
            mcq_parse_policy=os.getenv("MCQ_PARSE_POLICY", ParsePolicy.EMPTY.value),
            mcq_strict_items=_env_bool("MCQ_STRICT_ITEMS"),
            port=int(os.getenv("PORT", "4500")),
        )
