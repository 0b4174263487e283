"""
Turns raw model replies into records.

The model is asked for JSON (MCQ, analysis) or one question per line
(descriptive), but frequently wraps JSON in markdown fences or breaks it
across lines. Everything here tolerates that noise.

Failure policy differs per path: a bad MCQ batch yields an empty list by
default, while a bad analysis reply raises ``ParseError``. Both are
overridable through ``ParsePolicy``.
"""

from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from quizgen.config import ParsePolicy
from quizgen.errors import ParseError
from quizgen.services.contracts import DescriptiveItem, MCQItem

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```json|```")
_LINE_BREAKS_RE = re.compile(r"[\n\r]+")
_DESCRIPTIVE_SPLIT_RE = re.compile(r"\r?\n|\.\s*")

MIN_QUESTION_LENGTH = 3


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def _loads(text: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back out
    return json.loads(text, parse_constant=_reject_constant)


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "")


def normalize_mcq(
    raw: str,
    policy: ParsePolicy = ParsePolicy.EMPTY,
    strict_items: bool = False,
) -> List[Dict[str, Any]]:
    cleaned = _LINE_BREAKS_RE.sub("", strip_fences(raw)).strip()
    try:
        parsed = _loads(cleaned)
    except ValueError as e:
        if policy == ParsePolicy.RAISE:
            raise ParseError(f"MCQ reply is not valid JSON: {e}") from e
        logger.warning(f"Error parsing MCQ data, dropping batch: {e}")
        return []

    if isinstance(parsed, dict):
        parsed = [parsed]
    if not isinstance(parsed, list):
        if policy == ParsePolicy.RAISE:
            raise ParseError(f"MCQ reply is a {type(parsed).__name__}, expected an array")
        logger.warning(f"MCQ reply is a {type(parsed).__name__}, dropping batch")
        return []

    items = [obj for obj in parsed if isinstance(obj, dict)]
    if not strict_items:
        return items

    valid: List[Dict[str, Any]] = []
    for obj in items:
        try:
            valid.append(MCQItem.model_validate(obj).model_dump())
        except ValidationError as e:
            logger.debug(f"Dropping malformed MCQ item: {e.error_count()} errors")
    return valid


def normalize_descriptive(raw: str) -> List[DescriptiveItem]:
    candidates = _DESCRIPTIVE_SPLIT_RE.split((raw or "").strip())
    return [
        DescriptiveItem(question=c.strip())
        for c in candidates
        if len(c.strip()) >= MIN_QUESTION_LENGTH
    ]


def normalize_analysis(raw: str, policy: ParsePolicy = ParsePolicy.RAISE) -> Any:
    cleaned = strip_fences(raw).strip()
    try:
        return _loads(cleaned)
    except ValueError as e:
        if policy == ParsePolicy.EMPTY:
            logger.warning(f"Error parsing the analysis JSON: {e}")
            return None
        raise ParseError(f"analysis reply is not valid JSON: {e}") from e
