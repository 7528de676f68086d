# backend/vocab_quiz/core/validator.py

import logging
from typing import Any, Dict, List

from .errors import ValidationFailed
from .schemas import QuizQuestion

logger = logging.getLogger("vocab_quiz.validator")

QUIZ_KEY = "quiz"
REQUIRED_FIELDS = ("word", "question", "options", "correct")
OPTIONS_PER_QUESTION = 4


def _fail(message: str, question_number: int | None = None) -> None:
    logger.error(f"Quiz rejected: {message}")
    raise ValidationFailed(message, question_number=question_number)


def _validate_question(number: int, q: Any) -> QuizQuestion:
    if not isinstance(q, dict) or any(not q.get(f) for f in REQUIRED_FIELDS):
        _fail(f"Question {number} is missing required fields", number)

    for field in ("word", "question", "correct"):
        if not isinstance(q[field], str):
            _fail(f"Question {number} field '{field}' must be text", number)

    options = q["options"]
    if not isinstance(options, list) or len(options) != OPTIONS_PER_QUESTION:
        _fail(f"Question {number} must have exactly {OPTIONS_PER_QUESTION} options", number)
    if not all(isinstance(o, str) for o in options):
        _fail(f"Question {number} options must all be text", number)
    if len(set(options)) != OPTIONS_PER_QUESTION:
        _fail(f"Question {number} options must be distinct", number)

    if q["correct"] not in options:
        _fail(f'Question {number} correct answer "{q["correct"]}" not found in options', number)

    return QuizQuestion(
        word=q["word"],
        question=q["question"],
        options=list(options),
        correct=q["correct"],
    )


def validate_quiz(candidate: Dict[str, Any]) -> List[QuizQuestion]:
    """
    Accept a parsed model response only if it holds a non-empty "quiz" list
    of well-formed questions. Fails fast on the first offending question.
    """
    questions = candidate.get(QUIZ_KEY) if isinstance(candidate, dict) else None
    if not isinstance(questions, list):
        keys = list(candidate.keys()) if isinstance(candidate, dict) else []
        logger.debug(f"Quiz object keys: {keys}")
        _fail("Invalid quiz format returned by model - missing quiz array")
    if not questions:
        _fail("Quiz array is empty")

    quiz = [_validate_question(i + 1, q) for i, q in enumerate(questions)]
    logger.info(f"Validated {len(quiz)} questions")
    return quiz
