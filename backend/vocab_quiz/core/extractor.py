# backend/vocab_quiz/core/extractor.py

import json, logging, re
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from .errors import ExtractionFailed

logger = logging.getLogger("vocab_quiz.extractor")

RAW_PREFIX_CHARS = 200

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")


# ------------------------------------------------------------
# Strategy results
# ------------------------------------------------------------
class ParseAttempt(NamedTuple):
    strategy: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def _strict_object(strategy: str, candidate: str) -> ParseAttempt:
    """Strict json.loads; only a JSON object counts as success."""
    try:
        data = json.loads(candidate)
    except ValueError as e:
        return ParseAttempt(strategy, error=str(e))
    if not isinstance(data, dict):
        return ParseAttempt(strategy, error=f"expected a JSON object, got {type(data).__name__}")
    return ParseAttempt(strategy, data=data)


# ------------------------------------------------------------
# Strategies, tried in order
# ------------------------------------------------------------
def parse_direct(text: str) -> ParseAttempt:
    return _strict_object("direct", text)


def parse_fenced_block(text: str) -> ParseAttempt:
    match = _FENCED_JSON.search(text)
    if not match:
        return ParseAttempt("fenced", error="no ```json block")
    return _strict_object("fenced", match.group(1))


def parse_brace_span(text: str) -> ParseAttempt:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return ParseAttempt("brace_span", error="no {...} span")
    return _strict_object("brace_span", text[start:end + 1])


STRATEGIES: List[Callable[[str], ParseAttempt]] = [
    parse_direct,
    parse_fenced_block,
    parse_brace_span,
]


def extract_quiz_object(
    raw: str,
    strategies: Optional[List[Callable[[str], ParseAttempt]]] = None,
) -> Dict[str, Any]:
    """
    Recover the JSON object a model returned, tolerating prose and markdown
    fences around it. The first strategy that yields an object wins.
    """
    attempts: List[ParseAttempt] = []
    for strategy in strategies or STRATEGIES:
        attempt = strategy(raw)
        if attempt.ok:
            logger.info(f"Extracted JSON object using '{attempt.strategy}' strategy")
            return attempt.data
        logger.debug(f"Strategy '{attempt.strategy}' failed: {attempt.error}")
        attempts.append(attempt)

    logger.error(
        "No JSON object recoverable from model output; tried "
        + ", ".join(a.strategy for a in attempts)
    )
    prefix = raw[:RAW_PREFIX_CHARS]
    raise ExtractionFailed(
        f"No JSON object found in model response. Raw content: {prefix}",
        raw_prefix=prefix,
    )
