import threading

import pytest

from vocab_quiz.core.schemas import QuizQuestion
from vocab_quiz.core.session_store import (
    NO_ANSWER,
    AnswerCountMismatch,
    NoQuizLoaded,
    QuizSessionStore,
    percentage_of,
)


def _quiz(n=3):
    words = ["example", "arduous", "benevolent", "candid", "diligent", "eloquent", "frugal"]
    return [
        QuizQuestion(
            word=words[i],
            question=f"Synonym for '{words[i]}'?",
            options=[f"right{i}", "w1", "w2", "w3"],
            correct=f"right{i}",
        )
        for i in range(n)
    ]


def test_starts_without_quiz():
    store = QuizSessionStore()
    assert store.quiz is None
    assert not store.has_quiz
    assert store.results() == []


def test_submit_without_quiz_is_rejected():
    with pytest.raises(NoQuizLoaded, match="No quiz available"):
        QuizSessionStore().submit("Ada", "Lovelace", ["a"])


@pytest.mark.parametrize("answers", [[], ["right0"], ["right0", "right1", "right2", "extra"]])
def test_answer_count_must_match(answers):
    store = QuizSessionStore()
    store.replace_quiz(_quiz(3))
    with pytest.raises(AnswerCountMismatch):
        store.submit("Ada", "Lovelace", answers)
    assert store.results() == []


def test_scoring_and_wrong_answers():
    store = QuizSessionStore()
    store.replace_quiz(_quiz(3))

    result = store.submit("Ada", "Lovelace", ["right0", "w1", None])

    assert (result.score, result.total, result.percentage) == (1, 3, 33)
    assert [w.questionNumber for w in result.wrongAnswers] == [2, 3]
    assert result.wrongAnswers[0].userAnswer == "w1"
    assert result.wrongAnswers[1].userAnswer == NO_ANSWER
    assert result.wrongAnswers[1].options == ["right2", "w1", "w2", "w3"]

    (record,) = store.results()
    assert (record.name, record.surname, record.score, record.total) == ("Ada", "Lovelace", 1, 3)
    assert [d.isCorrect for d in record.detailedResults] == [True, False, False]
    assert record.detailedResults[0].correctAnswer == "right0"


def test_empty_string_answer_reported_as_no_answer():
    store = QuizSessionStore()
    store.replace_quiz(_quiz(1))
    result = store.submit("Ada", "Lovelace", [""])
    assert result.wrongAnswers[0].userAnswer == NO_ANSWER


def test_comparison_is_case_sensitive_and_untrimmed():
    store = QuizSessionStore()
    store.replace_quiz(
        [QuizQuestion(word="example", question="Q", options=["instance", "a", "b", "c"], correct="instance")]
    )
    assert store.submit("A", "B", ["Instance"]).score == 0
    assert store.submit("A", "B", [" instance"]).score == 0
    assert store.submit("A", "B", ["instance"]).score == 1


def test_scoring_is_deterministic():
    store = QuizSessionStore()
    store.replace_quiz(_quiz(7))
    answers = ["right0", "x", "right2", "right3", "x", "right5", "x"]
    first = store.submit("A", "B", answers)
    second = store.submit("A", "B", answers)
    assert (first.score, first.percentage) == (second.score, second.percentage) == (4, 57)


def test_replacing_quiz_clears_results():
    store = QuizSessionStore()
    store.replace_quiz(_quiz(2))
    store.submit("A", "B", ["right0", "right1"])
    store.submit("C", "D", ["x", "x"])
    assert store.results_count == 2

    store.replace_quiz(_quiz(3))

    assert store.results() == []
    assert len(store.quiz) == 3


def test_results_returns_a_copy():
    store = QuizSessionStore()
    store.replace_quiz(_quiz(1))
    store.submit("A", "B", ["right0"])
    store.results().clear()
    assert store.results_count == 1


@pytest.mark.parametrize(
    "score, total, expected",
    [(0, 10, 0), (10, 10, 100), (1, 8, 13), (5, 8, 63), (1, 3, 33), (2, 3, 67)],
)
def test_percentage_rounds_half_up(score, total, expected):
    assert percentage_of(score, total) == expected
    assert 0 <= percentage_of(score, total) <= 100


def test_concurrent_replacement_never_mixes_quizzes():
    store = QuizSessionStore()
    short, long = _quiz(2), _quiz(7)
    store.replace_quiz(short)
    stop = threading.Event()
    mismatches = []

    def replacer():
        while not stop.is_set():
            store.replace_quiz(long)
            store.replace_quiz(short)

    def submitter():
        for _ in range(500):
            quiz = store.quiz
            answers = [q.correct for q in quiz]
            try:
                result = store.submit("A", "B", answers)
            except AnswerCountMismatch:
                continue
            if result.total != len(answers) or result.score != result.total:
                mismatches.append(result)
            for record in store.results():
                if record.total != len(record.detailedResults):
                    mismatches.append(record)

    t = threading.Thread(target=replacer)
    t.start()
    try:
        submitter()
    finally:
        stop.set()
        t.join()

    assert mismatches == []
