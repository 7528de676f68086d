# backend/vocab_quiz/core/model_client.py

import asyncio, logging
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings
from .errors import (
    AuthRejected,
    BadRequest,
    EmptyModelOutput,
    MissingCredential,
    NoResponse,
    QuizGenerationError,
    RateLimited,
    Timeout,
)

logger = logging.getLogger("vocab_quiz.client")

REQUEST_TIMEOUT_SECONDS = 30.0
CONNECT_TIMEOUT_SECONDS = 10.0
TIMEOUT_MESSAGE = "API request timed out. Please try again later."
MAX_INPUT_CHARS = 1000
TEMPERATURE = 0.3
MAX_OUTPUT_TOKENS = 2000
APP_TITLE = "English Quiz Generator"
MISSING_KEY_MESSAGE = "API key is not configured. Please set OPENROUTER_API_KEY in your .env file."

# ------------------------------------------------------------
# Prompt templates
# ------------------------------------------------------------
QG_SYSTEM_PROMPT = (
    "You are a precise quiz generator that outputs perfect JSON. "
    "Always respond with valid JSON only."
)

QG_USER_TEMPLATE = """
Generate 10 quiz questions based on the following text. For each question, pick a difficult English word from the text or related vocabulary, and provide:
- "word": the difficult word,
- "question": "Which of the following is the closest easier synonym for 'word'?",
- "options": 4 English options (one correct, three distractors),
- "correct": the correct easier synonym (must be one of the options).

Text: "{text}"

Return only valid JSON in this format:
{{
  "quiz": [
    {{
      "word": "example",
      "question": "Which of the following is the closest easier synonym for 'example'?",
      "options": ["instance", "difficult", "complex", "impossible"],
      "correct": "instance"
    }}
  ]
}}
"""


def build_prompt(text: str) -> str:
    """Only the first MAX_INPUT_CHARS characters of the source text are sent."""
    return QG_USER_TEMPLATE.format(text=text[:MAX_INPUT_CHARS])


def configure_openrouter(settings: Settings) -> AsyncOpenAI:
    """Create an OpenAI-compatible async client pointed at OpenRouter."""
    client = AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS, connect=CONNECT_TIMEOUT_SECONDS),
        max_retries=0,
        default_headers={
            "HTTP-Referer": settings.app_referer,
            "X-Title": APP_TITLE,
        },
    )
    logger.info(f"OpenRouter client configured for {settings.openrouter_base_url}")
    return client


def _provider_message(err: openai.APIStatusError, default: str) -> str:
    body = err.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return default


def classify_provider_error(err: Exception) -> QuizGenerationError:
    """Map an SDK exception onto the pipeline's error taxonomy."""
    # APITimeoutError subclasses APIConnectionError, so it goes first
    if isinstance(err, openai.APITimeoutError):
        return Timeout(TIMEOUT_MESSAGE)
    if isinstance(err, openai.APIConnectionError):
        return NoResponse(
            "No response received from AI service. Please check your internet connection."
        )
    if isinstance(err, openai.AuthenticationError):
        return AuthRejected("API authentication failed. Please check your OPENROUTER_API_KEY.")
    if isinstance(err, openai.RateLimitError):
        return RateLimited("API rate limit exceeded. Please try again later.")
    if isinstance(err, openai.BadRequestError):
        return BadRequest(f"API request invalid: {_provider_message(err, 'Bad request')}")
    if isinstance(err, openai.APIStatusError):
        detail = _provider_message(err, f"HTTP {err.status_code}")
        return QuizGenerationError(f"Failed to generate quiz: {detail}")
    return QuizGenerationError(f"Failed to generate quiz: {err}")


class ModelClient:
    """One chat-completion call per generation, no retries."""

    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> Any:
        if not self.settings.openrouter_api_key:
            logger.error("API key missing from environment")
            raise MissingCredential(MISSING_KEY_MESSAGE)
        if self._client is None:
            self._client = configure_openrouter(self.settings)
        return self._client

    async def complete(self, text: str) -> str:
        client = self._get_client()
        prompt = build_prompt(text)
        logger.info(
            f"Prompt prepared ({len(prompt)} chars), sending request to "
            f"model {self.settings.openrouter_model}"
        )

        try:
            # httpx bounds each phase; this bounds the whole call
            resp = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.settings.openrouter_model,
                    messages=[
                        {"role": "system", "content": QG_SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=TEMPERATURE,
                    max_tokens=MAX_OUTPUT_TOKENS,
                ),
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Provider call exceeded {REQUEST_TIMEOUT_SECONDS}s")
            raise Timeout(TIMEOUT_MESSAGE) from e
        except openai.OpenAIError as e:
            mapped = classify_provider_error(e)
            logger.error(f"Provider call failed ({type(e).__name__}): {mapped.message}")
            raise mapped from e

        choices = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices and choices[0].message else None
        if not content:
            logger.error("No content in model response")
            raise EmptyModelOutput("No content received from AI model")

        logger.info("Received response from OpenRouter")
        logger.debug(f"Raw model response:\n{content}")
        return content
