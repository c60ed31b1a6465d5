"""Equations loaded from a JSON question file."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Sequence

from chembalance.balance import validate_equation
from chembalance.models import ChemicalEquation, Language, Topic
from chembalance.sources.base import QuestionSource, QuestionSourceError, equation_from_dict

logger = logging.getLogger(__name__)


class JsonFileQuestionSource(QuestionSource):
    """Serves equations from a file holding a JSON list.

    Each entry has the shape produced by ``equation_to_dict`` plus an
    optional ``"topic"`` key; entries without a topic are served for every
    topic. Names are used as written, whatever the requested language.
    """

    def __init__(self, path: str | Path, shuffle: bool = True):
        self.path = Path(path)
        self.shuffle = shuffle

    def _load(self) -> list[tuple[Topic | None, ChemicalEquation]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise QuestionSourceError(f"Cannot read question file {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise QuestionSourceError(f"Question file {self.path} must hold a JSON list")

        entries = []
        for position, item in enumerate(data):
            try:
                equation = equation_from_dict(item)
            except QuestionSourceError as exc:
                logger.warning("Skipping entry %d in %s: %s", position, self.path, exc)
                continue
            problems = validate_equation(equation)
            if problems:
                logger.warning(
                    "Skipping %s in %s: %s", equation.signature, self.path, "; ".join(problems)
                )
                continue
            topic = item.get("topic")
            try:
                entries.append((Topic(topic) if topic else None, equation))
            except ValueError as exc:
                raise QuestionSourceError(f"Unknown topic {topic!r} in {self.path}") from exc
        return entries

    def request_equations(
        self,
        count: int,
        topic: Topic,
        language: Language,
        recent: Sequence[str] = (),
    ) -> list[ChemicalEquation]:
        candidates = [eq for t, eq in self._load() if t is None or t is topic]
        if not candidates:
            raise QuestionSourceError(f"No equations for {topic.value} in {self.path}")
        if self.shuffle:
            random.shuffle(candidates)
        seen = set(recent)
        fresh = [eq for eq in candidates if eq.signature not in seen]
        return (fresh or candidates)[:count]
