import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError

from quizgen.dependencies import get_orchestrator
from quizgen.errors import (
    AssemblyError,
    DeadlineExceeded,
    ExtractError,
    FetchError,
    ModelError,
    ParseError,
)
from quizgen.services.contracts import (
    AnalysisRecord,
    GenerateQuestionsBody,
    QuestionKind,
    QuestionRequest,
)
from quizgen.services.orchestrator import Orchestrator
from quizgen.services.report import XLSX_MIME

router = APIRouter(tags=["questions"])

logger = logging.getLogger("questions")
logger.setLevel(logging.INFO)


def _timed_out() -> HTTPException:
    return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="Request timed out")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid input. Body must be JSON.")


# ----------------------------
# Question generation
# ----------------------------
@router.post("/generate-questions")
async def generate_questions(request: Request, orc: Orchestrator = Depends(get_orchestrator)):
    body = await _read_json(request)
    try:
        payload = GenerateQuestionsBody.model_validate(body)
    except ValidationError as e:
        logger.info(f"Rejected generate-questions body: {e.errors(include_url=False)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid input. 'numberOfQuestions' must be a positive integer and 'topic' is required.",
        )
    if payload.numberOfQuestions > orc.settings.max_questions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid input. 'numberOfQuestions' must not exceed {orc.settings.max_questions}.",
        )

    deadline = orc.new_deadline()

    source_text = None
    if payload.fileUrl:
        try:
            source_text = await orc.load_source(payload.fileUrl, deadline)
        except DeadlineExceeded:
            raise _timed_out()
        except (FetchError, ExtractError) as e:
            logger.error(f"Error fetching or parsing PDF: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error reading PDF content")

    question_request = QuestionRequest(
        kind=QuestionKind.from_question_type(payload.questionType),
        count=payload.numberOfQuestions,
        topic=payload.topic,
        source_text=source_text,
    )
    try:
        generated = await orc.generate(question_request, deadline)
    except DeadlineExceeded:
        raise _timed_out()
    except (ModelError, ParseError) as e:
        logger.error(f"Error generating questions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating questions")

    try:
        file_buffer = await asyncio.to_thread(orc.assemble, generated)
    except AssemblyError as e:
        logger.error(f"Error generating the Excel file: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating the Excel file")

    return Response(
        content=file_buffer,
        media_type=XLSX_MIME,
        headers={"Content-Disposition": "attachment; filename=questions.xlsx"},
    )


# ----------------------------
# Attempt analysis
# ----------------------------
@router.post("/analyze-questions")
async def analyze_questions(request: Request, orc: Orchestrator = Depends(get_orchestrator)):
    body = await _read_json(request)
    questions = body.get("questions") if isinstance(body, dict) else None
    if not isinstance(questions, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid input. 'questions' must be an array.",
        )

    records = [
        AnalysisRecord.model_validate(q) if isinstance(q, dict) else AnalysisRecord()
        for q in questions
    ]
    try:
        analysis = await orc.analyze(records, orc.new_deadline())
    except DeadlineExceeded:
        raise _timed_out()
    except ParseError as e:
        logger.error(f"Error parsing the analysis JSON: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error parsing analysis response")
    except ModelError as e:
        logger.error(f"Error generating insights: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating insights")

    return {"analysis": analysis}
