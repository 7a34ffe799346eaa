from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from openai import AsyncOpenAI

from ..domain.errors import GenerationError
from ..domain.models import QuizQuestion

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """You write multiple-choice programming quiz questions.
Respond strictly with one JSON object and nothing else, using the keys:
- "question": the question text
- "options": an array of exactly four distinct answer strings
- "correctAnswer": the 0-based index of the correct option
- "explanation": one or two sentences explaining the answer

Guidelines:
- Keep code snippets short and inline.
- Never include more than one correct option.
"""

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*|\s*```$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_LETTERS = "ABCDEFGH"


def _strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def _outermost_object(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return text
    return text[start : end + 1]


def _drop_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


_REPAIRS: List[Callable[[str], str]] = [
    lambda text: text,
    _strip_fences,
    lambda text: _outermost_object(_strip_fences(text)),
    lambda text: _drop_trailing_commas(_outermost_object(_strip_fences(text))),
]


def repair_json(raw: str) -> Dict[str, Any]:
    """
    Decode a model reply, applying progressively more aggressive repairs.

    Order: direct parse, strip Markdown code fences, cut the outermost
    ``{...}`` block, drop trailing commas.

    Raises:
        ValueError: If no repair yields a JSON object
    """
    last_error: Optional[Exception] = None
    for repair in _REPAIRS:
        try:
            payload = json.loads(repair(raw))
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        if isinstance(payload, dict):
            return payload
        last_error = ValueError("JSON payload is not an object.")
    raise ValueError(f"Unrecoverable JSON payload: {last_error}")


def _resolve_answer_index(value: Any, options: List[str]) -> int:
    if isinstance(value, bool):
        raise ValueError("correctAnswer must be an index.")
    if isinstance(value, int):
        index = value
    elif isinstance(value, str):
        candidate = value.strip()
        if candidate.isdigit():
            index = int(candidate)
        elif len(candidate) == 1 and candidate.upper() in _LETTERS:
            index = _LETTERS.index(candidate.upper())
        elif candidate in options:
            index = options.index(candidate)
        else:
            raise ValueError(f"correctAnswer {value!r} does not match any option.")
    else:
        raise ValueError("correctAnswer is missing.")
    if not 0 <= index < len(options):
        raise ValueError(f"correctAnswer {index} is out of range.")
    return index


def question_from_payload(payload: Dict[str, Any]) -> QuizQuestion:
    question = payload.get("question")
    options = payload.get("options")
    if not isinstance(question, str) or not question.strip():
        raise ValueError("question is missing.")
    if not isinstance(options, list) or len(options) < 2:
        raise ValueError("options must list at least two answers.")
    options = [str(item).strip() for item in options]
    answer = payload.get("correctAnswer", payload.get("correct_answer"))
    return QuizQuestion(
        question=question.strip(),
        options=options,
        correct_answer=_resolve_answer_index(answer, options),
        explanation=str(payload.get("explanation") or "").strip(),
    )


class QuizGenerator:
    """Wrapper around the OpenAI chat completions API producing single quiz questions."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        *,
        client: Optional[AsyncOpenAI] = None,
        temperature: float = 0.7,
    ) -> None:
        self._model = model
        self._temperature = temperature
        if client is not None:
            self._client: Optional[AsyncOpenAI] = client
        elif api_key:
            self._client = AsyncOpenAI(api_key=api_key)
        else:
            self._client = None

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def generate(self, language: str, difficulty: str = "medium") -> QuizQuestion:
        if not self._client:
            raise GenerationError("OpenAI API key is not configured.")

        prompt = f"Write one {difficulty} multiple-choice question about {language} programming."
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self._temperature,
            )
        except Exception as exc:
            logger.exception("OpenAI API error while generating a %s question.", language)
            raise GenerationError(f"OpenAI request failed: {exc}") from exc

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        if not content.strip():
            raise GenerationError("Empty reply returned by OpenAI.")

        try:
            return question_from_payload(repair_json(content))
        except ValueError as exc:
            logger.warning("Discarding malformed %s question from OpenAI: %s", language, exc)
            raise GenerationError(f"Invalid question returned by OpenAI: {exc}") from exc
