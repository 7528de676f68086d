# backend/vocab_quiz/core/session_store.py

import logging, math, threading
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .schemas import (
    QuestionOutcome,
    QuizQuestion,
    ResultRecord,
    SubmissionResult,
    WrongAnswer,
)

logger = logging.getLogger("vocab_quiz.store")

NO_ANSWER = "No answer"


class NoQuizLoaded(Exception):
    pass


class AnswerCountMismatch(Exception):
    pass


def percentage_of(score: int, total: int) -> int:
    """round(score / total * 100), halves rounded up."""
    if total <= 0:
        return 0
    return int(math.floor(score / total * 100 + 0.5))


def score_answers(quiz: Sequence[QuizQuestion], answers: Sequence[Optional[str]]):
    """Exact, case-sensitive comparison per position. Returns (score, outcomes)."""
    score = 0
    outcomes: List[QuestionOutcome] = []
    for i, q in enumerate(quiz):
        given = answers[i]
        is_correct = given == q.correct
        if is_correct:
            score += 1
        outcomes.append(
            QuestionOutcome(
                questionNumber=i + 1,
                question=q.question,
                word=q.word,
                correctAnswer=q.correct,
                userAnswer=given or NO_ANSWER,
                isCorrect=is_correct,
                options=list(q.options),
            )
        )
    return score, outcomes


class QuizSessionStore:
    """
    Holds the current quiz and the results submitted against it.

    One lock covers quiz replacement and the quiz snapshot taken for
    scoring, so a submission never mixes two quizzes.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._quiz: Optional[List[QuizQuestion]] = None
        self._results: List[ResultRecord] = []

    @property
    def quiz(self) -> Optional[List[QuizQuestion]]:
        return self._quiz

    @property
    def has_quiz(self) -> bool:
        return self._quiz is not None

    @property
    def results_count(self) -> int:
        return len(self._results)

    def results(self) -> List[ResultRecord]:
        with self._lock:
            return list(self._results)

    def replace_quiz(self, quiz: List[QuizQuestion]) -> None:
        with self._lock:
            cleared = len(self._results)
            self._quiz = list(quiz)
            self._results = []
        logger.info(f"Current quiz replaced ({len(quiz)} questions), {cleared} results cleared")

    def submit(
        self, name: str, surname: str, answers: Sequence[Optional[str]]
    ) -> SubmissionResult:
        with self._lock:
            quiz = self._quiz
            if quiz is None:
                raise NoQuizLoaded("No quiz available")
            if len(answers) != len(quiz):
                raise AnswerCountMismatch("Answer count does not match question count")

            score, outcomes = score_answers(quiz, answers)
            total = len(quiz)
            percentage = percentage_of(score, total)
            self._results.append(
                ResultRecord(
                    name=name,
                    surname=surname,
                    score=score,
                    total=total,
                    percentage=percentage,
                    date=datetime.now(timezone.utc),
                    detailedResults=outcomes,
                )
            )
            stored = len(self._results)

        logger.info(f"Submission scored {score}/{total} ({percentage}%), {stored} results stored")
        wrong = [
            WrongAnswer(**o.model_dump(exclude={"isCorrect"}))
            for o in outcomes
            if not o.isCorrect
        ]
        return SubmissionResult(score=score, total=total, percentage=percentage, wrongAnswers=wrong)
