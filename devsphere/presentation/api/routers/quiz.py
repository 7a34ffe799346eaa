import logging

from fastapi import APIRouter, Depends

from ....application.services.quiz_service import QuizService
from ....core.dependencies import get_quiz_service
from ....domain.errors import DevSphereError
from ...api.dependencies import http_error
from ...api.schemas.quiz import (
    GenerateQuestionRequest,
    GenerateQuizRequest,
    QuestionResponse,
    QuizQuestionSchema,
    QuizResponse,
    ScoreRequest,
    ScoreResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["Quiz"])


@router.post("/generate", response_model=QuizResponse)
async def generate_quiz(
    payload: GenerateQuizRequest,
    quiz_service: QuizService = Depends(get_quiz_service),
) -> QuizResponse:
    logger.debug("/ai/generate called for language=%s count=%s", payload.language, payload.count)
    try:
        quiz = quiz_service.generate_quiz(payload.language, payload.count)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return QuizResponse(
        language=quiz["language"],
        count=quiz["count"],
        questions=[QuizQuestionSchema.from_domain(item) for item in quiz["questions"]],
    )


@router.post("/generate-one", response_model=QuestionResponse)
async def generate_question(
    payload: GenerateQuestionRequest,
    quiz_service: QuizService = Depends(get_quiz_service),
) -> QuestionResponse:
    try:
        result = await quiz_service.generate_question(payload.language, payload.difficulty)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return QuestionResponse(
        language=result["language"],
        question=QuizQuestionSchema.from_domain(result["question"]),
    )


@router.post("/score", response_model=ScoreResponse)
async def score_quiz(
    payload: ScoreRequest,
    quiz_service: QuizService = Depends(get_quiz_service),
) -> ScoreResponse:
    result = quiz_service.score([item.to_domain() for item in payload.questions], payload.answers)
    return ScoreResponse(total=result.total, correct=result.correct, percentage=result.percentage)
