from __future__ import annotations

import json
import os
import socket
from types import SimpleNamespace
from typing import Any

import pytest

from vocab_quiz.config import Settings
from vocab_quiz.core.model_client import ModelClient
from vocab_quiz.core.quiz_generator import QuizGenerator


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.integration/@pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound network calls in unit tests."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


class FakeCompletions:
    """Stands in for `client.chat.completions` of the openai SDK."""

    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeOpenAI:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


def make_question(word: str, correct: str, distractors: list[str]) -> dict[str, Any]:
    return {
        "word": word,
        "question": f"Which of the following is the closest easier synonym for '{word}'?",
        "options": [correct, *distractors],
        "correct": correct,
    }


SAMPLE_QUIZ = {
    "quiz": [
        make_question("example", "instance", ["difficult", "complex", "impossible"]),
        make_question("arduous", "hard", ["easy", "quick", "bright"]),
        make_question("benevolent", "kind", ["cruel", "silent", "tall"]),
    ]
}

SOURCE_TEXT = (
    "The arduous journey tested the benevolent traveller, whose example inspired everyone."
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        admin_username="admin",
        admin_password="s3cret",
        openrouter_api_key="sk-or-test",
    )


@pytest.fixture
def sample_quiz() -> dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_QUIZ))


@pytest.fixture
def fake_openai(sample_quiz: dict[str, Any]) -> FakeOpenAI:
    return FakeOpenAI(content=json.dumps(sample_quiz))


@pytest.fixture
def generator(settings: Settings, fake_openai: FakeOpenAI) -> QuizGenerator:
    return QuizGenerator(ModelClient(settings, client=fake_openai))
