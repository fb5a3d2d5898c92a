"""Question model and question-source normalization."""
from __future__ import annotations

from askflow.questions.question import DEFAULT_TYPE, Question
from askflow.questions.source import QuestionStream, StreamReader, normalize_source

__all__ = [
    "DEFAULT_TYPE",
    "Question",
    "QuestionStream",
    "StreamReader",
    "normalize_source",
]
