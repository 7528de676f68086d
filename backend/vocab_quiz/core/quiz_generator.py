# backend/vocab_quiz/core/quiz_generator.py

import logging
from typing import Any, List

from ..config import Settings
from .errors import InvalidInput
from .extractor import extract_quiz_object
from .model_client import ModelClient
from .schemas import QuizQuestion
from .validator import validate_quiz

logger = logging.getLogger("vocab_quiz.generator")

MIN_TEXT_CHARS = 20


def check_source_text(text: Any) -> str:
    if not isinstance(text, str) or len(text.strip()) < MIN_TEXT_CHARS:
        logger.warning("Input validation failed")
        raise InvalidInput(
            f"Input text must be a meaningful string (at least {MIN_TEXT_CHARS} characters)"
        )
    return text


class QuizGenerator:
    """Model client -> extractor -> validator. Any failure aborts the whole run."""

    def __init__(self, client: ModelClient):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuizGenerator":
        return cls(ModelClient(settings))

    async def generate(self, text: Any) -> List[QuizQuestion]:
        text = check_source_text(text)
        logger.info(f"Quiz generation started, input length {len(text)} characters")

        raw = await self.client.complete(text)
        candidate = extract_quiz_object(raw)
        quiz = validate_quiz(candidate)

        logger.info(f"Successfully generated and validated {len(quiz)} questions")
        return quiz
