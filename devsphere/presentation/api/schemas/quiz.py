from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ....domain.models import QuizQuestion


class QuizQuestionSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question: str
    options: List[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)
    explanation: str = ""

    @classmethod
    def from_domain(cls, item: QuizQuestion) -> "QuizQuestionSchema":
        return cls(
            question=item.question,
            options=list(item.options),
            correct_answer=item.correct_answer,
            explanation=item.explanation,
        )

    def to_domain(self) -> QuizQuestion:
        return QuizQuestion(
            question=self.question,
            options=list(self.options),
            correct_answer=self.correct_answer,
            explanation=self.explanation,
        )


class GenerateQuizRequest(BaseModel):
    language: Optional[str] = None
    count: int = Field(default=40, ge=1, le=100)


class GenerateQuestionRequest(BaseModel):
    language: str = Field(..., min_length=1)
    difficulty: str = Field(default="medium", min_length=1, max_length=20)


class ScoreRequest(BaseModel):
    questions: List[QuizQuestionSchema]
    answers: List[Any]


class QuizResponse(BaseModel):
    language: str
    count: int
    questions: List[QuizQuestionSchema]


class QuestionResponse(BaseModel):
    language: str
    question: QuizQuestionSchema


class ScoreResponse(BaseModel):
    total: int
    correct: int
    percentage: int
