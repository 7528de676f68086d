# backend/vocab_quiz/core/errors.py

from typing import Optional


class QuizGenerationError(Exception):
    """Any failure of the generation pipeline. The message is shown to the admin as-is."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(QuizGenerationError):
    pass


class MissingCredential(QuizGenerationError):
    pass


class AuthRejected(QuizGenerationError):
    pass


class RateLimited(QuizGenerationError):
    pass


class BadRequest(QuizGenerationError):
    pass


class NoResponse(QuizGenerationError):
    pass


class Timeout(QuizGenerationError):
    pass


class EmptyModelOutput(QuizGenerationError):
    pass


class ExtractionFailed(QuizGenerationError):
    def __init__(self, message: str, raw_prefix: str = ""):
        super().__init__(message)
        self.raw_prefix = raw_prefix


class ValidationFailed(QuizGenerationError):
    def __init__(self, message: str, question_number: Optional[int] = None):
        super().__init__(message)
        # 1-based, None when the whole document is rejected
        self.question_number = question_number
