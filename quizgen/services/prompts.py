from __future__ import annotations
import json
import logging
from typing import List, Optional

from quizgen.services.contracts import AnalysisRecord, AnalysisReport, QuestionKind, QuestionRequest

logger = logging.getLogger(__name__)

MCQ_FORMAT = (
    "Please provide it as an array of objects with keys: question, opt1, opt2, opt3, opt4, "
    "and correctAnswer as Option number only."
)
DESCRIPTIVE_FORMAT = (
    "Please provide each question as an array item without any options, "
    "and separate them by a newline."
)


def truncate_source(text: Optional[str], max_chars: int) -> Optional[str]:
    """Cap embedded source text at ``max_chars`` characters (0 means no cap)."""
    if not text or not max_chars or len(text) <= max_chars:
        return text
    logger.warning(f"Source text truncated from {len(text)} to {max_chars} characters")
    return text[:max_chars]


def build_generation_prompt(request: QuestionRequest, batched: bool = True) -> str:
    is_mcq = request.kind == QuestionKind.MCQ
    if batched:
        noun = "multiple choice questions" if is_mcq else "descriptive questions"
        head = f"Generate {request.count} {noun} on the topic: {request.topic}."
    else:
        noun = "multiple choice question" if is_mcq else "descriptive question"
        head = f"Generate exactly one {noun} on the topic: {request.topic}."

    parts = [head]
    if request.source_text:
        parts.append(f"Use the following content: {request.source_text}")
    parts.append(MCQ_FORMAT if is_mcq else DESCRIPTIVE_FORMAT)
    return " ".join(parts)


ANALYSIS_TEMPLATE = """
Analyze the following user responses to quiz questions and generate a performance report in JSON format.
Use the structure:
{schema}

Data:
{data}
""".strip()


def build_analysis_prompt(records: List[AnalysisRecord]) -> str:
    data = [r.model_dump(exclude_unset=True) for r in records]
    return ANALYSIS_TEMPLATE.format(
        schema=json.dumps(AnalysisReport.shape(), indent=4),
        data=json.dumps(data, ensure_ascii=False),
    )
