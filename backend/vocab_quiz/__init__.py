"""Vocabulary quiz backend: LLM-generated synonym quizzes served over HTTP."""

__version__ = "0.1.0"
