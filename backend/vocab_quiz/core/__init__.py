# backend/vocab_quiz/core/__init__.py
"""
Core package for the vocabulary quiz backend.
Exposes the request/response models, the generation pipeline and the session store.
"""

from .errors import QuizGenerationError
from .quiz_generator import QuizGenerator
from .schemas import (
    GenerateRequest,
    GenerateResponse,
    LoginRequest,
    QuizQuestion,
    QuizResponse,
    ResultRecord,
    ResultsResponse,
    SubmitRequest,
    SubmitResponse,
)
from .session_store import AnswerCountMismatch, NoQuizLoaded, QuizSessionStore

__all__ = [
    "AnswerCountMismatch",
    "GenerateRequest",
    "GenerateResponse",
    "LoginRequest",
    "NoQuizLoaded",
    "QuizGenerationError",
    "QuizGenerator",
    "QuizQuestion",
    "QuizResponse",
    "QuizSessionStore",
    "ResultRecord",
    "ResultsResponse",
    "SubmitRequest",
    "SubmitResponse",
]
