"""Question sources and the offline fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from chembalance.models import ChemicalEquation, Language, Topic
from chembalance.sources.base import (
    QuestionSource,
    QuestionSourceError,
    equation_from_dict,
    equation_to_dict,
)
from chembalance.sources.fallback import FallbackQuestionSource, fallback_equations
from chembalance.sources.gemini import GeminiQuestionSource, GeminiSettings
from chembalance.sources.json_file import JsonFileQuestionSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionBatch:
    equations: tuple[ChemicalEquation, ...]
    offline: bool


def fetch_equations(
    source: QuestionSource,
    count: int,
    topic: Topic,
    language: Language,
    recent: Sequence[str] = (),
) -> QuestionBatch:
    """Ask ``source`` for equations, substituting the built-in bank on failure."""
    try:
        equations = source.request_equations(count, topic, language, recent)
    except QuestionSourceError as exc:
        logger.warning("Question source failed, using built-in equations: %s", exc)
    else:
        if equations:
            offline = isinstance(source, FallbackQuestionSource)
            return QuestionBatch(tuple(equations), offline=offline)
        logger.warning("Question source returned nothing, using built-in equations")

    fallback = FallbackQuestionSource().request_equations(count, topic, language, recent)
    return QuestionBatch(tuple(fallback), offline=True)


__all__ = [
    "FallbackQuestionSource",
    "GeminiQuestionSource",
    "GeminiSettings",
    "JsonFileQuestionSource",
    "QuestionBatch",
    "QuestionSource",
    "QuestionSourceError",
    "equation_from_dict",
    "equation_to_dict",
    "fallback_equations",
    "fetch_equations",
]
