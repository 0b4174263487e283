# quizgen/services/orchestrator.py
from __future__ import annotations
import asyncio
import logging
from typing import Any, List, Optional

from quizgen.config import GenerationMode, ParsePolicy, Settings
from quizgen.services.ai import ModelClient
from quizgen.services.contracts import (
    AnalysisRecord,
    GeneratedQuestions,
    QuestionKind,
    QuestionRequest,
)
from quizgen.services.deadline import Deadline
from quizgen.services.fetcher import PdfFetcher
from quizgen.services.normalizer import normalize_analysis, normalize_descriptive, normalize_mcq
from quizgen.services.prompts import build_analysis_prompt, build_generation_prompt, truncate_source
from quizgen.services.report import build_spreadsheet

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs one request through fetch -> prompt -> model -> normalize -> assemble.

    Holds no per-request state; collaborators are injected so tests can swap
    in stubs.
    """

    def __init__(
        self,
        settings: Settings,
        model_client: ModelClient,
        fetcher: Optional[PdfFetcher] = None,
    ) -> None:
        self.settings = settings
        self.model_client = model_client
        self.fetcher = fetcher

    def new_deadline(self) -> Deadline:
        return Deadline(self.settings.request_timeout_seconds)

    async def load_source(self, url: str, deadline: Optional[Deadline] = None) -> str:
        if self.fetcher is None:
            raise RuntimeError("Orchestrator has no fetcher configured")
        text = await self.fetcher.fetch_text(url, deadline)
        return truncate_source(text, self.settings.max_source_chars)

    # ---- generation ----

    def _normalize(self, kind: QuestionKind, raw: str, out: GeneratedQuestions) -> None:
        if kind == QuestionKind.MCQ:
            out.mcq.extend(normalize_mcq(
                raw,
                policy=self.settings.mcq_parse_policy,
                strict_items=self.settings.mcq_strict_items,
            ))
        else:
            out.descriptive.extend(normalize_descriptive(raw))

    async def _complete_many(self, prompt: str, count: int, deadline: Optional[Deadline]) -> List[str]:
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def run_one(index: int) -> str:
            async with semaphore:
                logger.debug(f"Per-item generation call {index + 1}/{count}")
                return await self.model_client.complete(prompt, deadline)

        tasks = [asyncio.create_task(run_one(i)) for i in range(count)]
        try:
            # gather keeps results in request order
            return await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def generate(self, request: QuestionRequest, deadline: Optional[Deadline] = None) -> GeneratedQuestions:
        out = GeneratedQuestions()
        if self.settings.generation_mode == GenerationMode.PER_ITEM:
            prompt = build_generation_prompt(request, batched=False)
            replies = await self._complete_many(prompt, request.count, deadline)
        else:
            prompt = build_generation_prompt(request, batched=True)
            replies = [await self.model_client.complete(prompt, deadline)]

        for raw in replies:
            self._normalize(request.kind, raw, out)
        logger.info(
            f"Generated {len(out.mcq)} MCQ and {len(out.descriptive)} descriptive questions "
            f"on '{request.topic}' from {len(replies)} model call(s)"
        )
        return out

    def assemble(self, generated: GeneratedQuestions) -> bytes:
        return build_spreadsheet(generated.mcq, generated.descriptive)

    # ---- analysis ----

    async def analyze(self, records: List[AnalysisRecord], deadline: Optional[Deadline] = None) -> Any:
        prompt = build_analysis_prompt(records)
        raw = await self.model_client.complete(prompt, deadline)
        return normalize_analysis(raw, policy=ParsePolicy.RAISE)
