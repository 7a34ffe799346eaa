from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ...domain.errors import ValidationFailed
from ...domain.models import QuizQuestion, QuizScore
from ...services import quiz_bank
from ...services.quiz_generator import QuizGenerator

logger = logging.getLogger(__name__)


class QuizService:
    """Builds quizzes from the seed bank or the language model and scores submissions."""

    def __init__(self, generator: QuizGenerator) -> None:
        self._generator = generator

    @property
    def generator_configured(self) -> bool:
        return self._generator.configured

    def generate_quiz(
        self, language: Optional[str] = None, count: int = quiz_bank.DEFAULT_QUIZ_LENGTH
    ) -> Dict[str, object]:
        key = self._normalize_language(language)
        questions = quiz_bank.synthesize(quiz_bank.SEED_QUESTIONS[key], count)
        logger.debug("Assembled %s seed questions for %s", len(questions), key)
        return {"language": key, "count": len(questions), "questions": questions}

    async def generate_question(
        self, language: Optional[str], difficulty: str = "medium"
    ) -> Dict[str, object]:
        key = self._normalize_language(language)
        question = await self._generator.generate(key, difficulty)
        return {"language": key, "question": question}

    @staticmethod
    def score(questions: Sequence[QuizQuestion], answers: Sequence[Any]) -> QuizScore:
        # Only a plain int index can match; bools, strings and nulls count as wrong.
        correct = sum(
            1
            for question, answer in zip(questions, answers)
            if type(answer) is int and answer == question.correct_answer
        )
        total = len(questions)
        # Round half up: 12.5 -> 13.
        percentage = (correct * 200 + total) // (2 * total) if total else 0
        return QuizScore(total=total, correct=correct, percentage=percentage)

    @staticmethod
    def _normalize_language(language: Optional[str]) -> str:
        key = (language or quiz_bank.DEFAULT_LANGUAGE).strip().lower()
        if not quiz_bank.is_supported(key):
            raise ValidationFailed("Unsupported language", code="UNSUPPORTED_LANGUAGE")
        return key
