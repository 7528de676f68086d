from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

# ------------------------------------------------------------
# Request models
# ------------------------------------------------------------
# Fields are optional so that missing values reach the route handlers and
# are rejected there with 400 and a fixed message.
class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class GenerateRequest(BaseModel):
    text: Optional[str] = None


class SubmitRequest(BaseModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    answers: Optional[List[Optional[str]]] = None


# ------------------------------------------------------------
# Quiz & result models
# ------------------------------------------------------------
class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: str
    question: str
    options: List[str]
    correct: str


class QuestionOutcome(BaseModel):
    questionNumber: int
    question: str
    word: str
    correctAnswer: str
    userAnswer: str
    isCorrect: bool
    options: List[str]


class WrongAnswer(BaseModel):
    questionNumber: int
    question: str
    word: str
    correctAnswer: str
    userAnswer: str
    options: List[str]


class ResultRecord(BaseModel):
    name: str
    surname: str
    score: int
    total: int
    percentage: int
    date: datetime
    detailedResults: List[QuestionOutcome]


class SubmissionResult(BaseModel):
    """What the scorer hands back to the submitting user."""

    score: int
    total: int
    percentage: int
    wrongAnswers: List[WrongAnswer]


# ------------------------------------------------------------
# Response models
# ------------------------------------------------------------
class GenerateResponse(BaseModel):
    quizUrl: str = "/quiz"
    message: str
    questionsCount: int


class QuizResponse(BaseModel):
    quiz: List[QuizQuestion]
    available: bool
    count: int


class SubmitResponse(SubmissionResult):
    message: str


class ResultsResponse(BaseModel):
    results: List[ResultRecord]
    count: int
    quiz_available: bool
