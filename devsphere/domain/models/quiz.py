from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    question: str
    options: List[str]
    correct_answer: int
    explanation: str

    def copy(self) -> "QuizQuestion":
        return replace(self, options=list(self.options))


@dataclass(frozen=True, slots=True)
class QuizScore:
    total: int
    correct: int
    percentage: int
