"""Drill session: question batches, answer state and scoring.

One session drills one topic at a time. It owns the user's coefficient
entries for the current question and the history of recently served
equations; the balance engine only ever reads them.

Per question the state moves

    UNANSWERED --check--> CORRECT | INCORRECT
    INCORRECT  --edit---> UNANSWERED (hint cleared)
    UNANSWERED | INCORRECT --reveal--> REVEALED

CORRECT and REVEALED are terminal until the next question.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from enum import Enum
from typing import Iterable, Iterator

from chembalance.balance import check_answer, is_valid_coefficient_input, resolve_coefficients
from chembalance.constants import DEFAULT_BATCH_SIZE, HISTORY_CAPACITY, SCORE_PER_CORRECT
from chembalance.hints import generate_hint
from chembalance.models import ChemicalEquation, CheckResult, Language, Topic
from chembalance.sources import QuestionSource, fetch_equations

logger = logging.getLogger(__name__)


class QuestionState(str, Enum):
    UNANSWERED = "UNANSWERED"
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"
    REVEALED = "REVEALED"

    @property
    def is_terminal(self) -> bool:
        return self in (QuestionState.CORRECT, QuestionState.REVEALED)


class SessionStateError(RuntimeError):
    """Operation not allowed in the current question state."""


class RecentHistory:
    """Signatures of recently served equations, oldest first, capped."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._items: deque[str] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def extend(self, signatures: Iterable[str]) -> None:
        self._items.extend(signatures)

    def clear(self) -> None:
        self._items.clear()

    def signatures(self) -> list[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)


class DrillSession:
    def __init__(
        self,
        source: QuestionSource,
        topic: Topic,
        language: Language = Language.EN,
        batch_size: int = DEFAULT_BATCH_SIZE,
        history_capacity: int = HISTORY_CAPACITY,
    ):
        if batch_size < 1:
            raise ValueError(f"Batch size must be positive, got {batch_size}")
        self.source = source
        self.topic = topic
        self.language = language
        self.batch_size = batch_size
        self.history = RecentHistory(history_capacity)

        self.equations: tuple[ChemicalEquation, ...] = ()
        self.index = 0
        self.score = 0
        self.offline = False
        self.coefficients: dict[str, str] = {}
        self.state = QuestionState.UNANSWERED
        self.hint: str | None = None
        self.last_result: CheckResult | None = None

    @property
    def current(self) -> ChemicalEquation:
        if not self.equations:
            raise SessionStateError("No questions loaded")
        return self.equations[self.index]

    @property
    def position(self) -> tuple[int, int]:
        """1-based index of the current question and the batch size."""
        return self.index + 1, len(self.equations)

    def load(self) -> None:
        """Fetch a fresh batch, excluding recently served equations."""
        batch = fetch_equations(
            self.source,
            self.batch_size,
            self.topic,
            self.language,
            self.history.signatures(),
        )
        self.equations = batch.equations
        self.offline = batch.offline
        self.history.extend(eq.signature for eq in batch.equations)
        self.index = 0
        self.score = 0
        self._reset_question()
        logger.debug(
            "Loaded %d equations for %s (offline=%s)",
            len(self.equations),
            self.topic.value,
            self.offline,
        )

    def change_topic(self, topic: Topic) -> None:
        self.topic = topic
        self.history.clear()
        self.load()

    def change_language(self, language: Language) -> None:
        """Switch hint language, keeping the batch, answers and score.

        Species names come with the batch and change on the next load.
        """
        self.language = language
        if self.last_result is not None and self.hint is not None:
            result = self.last_result
            self.hint = generate_hint(result.report, self.topic, language, result.match)
            self.last_result = replace(result, hint=self.hint)

    def _reset_question(self) -> None:
        self.coefficients = {}
        self.state = QuestionState.UNANSWERED
        self.hint = None
        self.last_result = None

    def edit_coefficient(self, term: str, raw: str) -> bool:
        """Store a coefficient entry; returns False if it was rejected.

        Accepted entries are the empty string or digits without a leading
        zero. Editing after a wrong answer clears the hint.
        """
        if self.state.is_terminal or not is_valid_coefficient_input(raw):
            return False
        self.coefficients[term] = raw
        if self.state is QuestionState.INCORRECT:
            self.state = QuestionState.UNANSWERED
            self.hint = None
        return True

    def check(self) -> CheckResult:
        if self.state.is_terminal:
            raise SessionStateError(f"Cannot check a question in state {self.state.value}")
        result = check_answer(self.current, self.coefficients, self.topic, self.language)
        self.last_result = result
        self.hint = result.hint
        if result.correct:
            self.state = QuestionState.CORRECT
            self.score += SCORE_PER_CORRECT
        else:
            self.state = QuestionState.INCORRECT
        return result

    def reveal(self) -> dict[str, int]:
        """Give up on the current question and return the reference answer."""
        if self.state.is_terminal:
            raise SessionStateError(f"Cannot reveal a question in state {self.state.value}")
        self.state = QuestionState.REVEALED
        self.hint = None
        return self.current.reference_coefficients()

    def resolved_coefficients(self) -> dict[str, int]:
        return resolve_coefficients(self.current, self.coefficients)

    def next(self) -> None:
        """Move to the next question, loading a new batch after the last one."""
        if self.index < len(self.equations) - 1:
            self.index += 1
            self._reset_question()
        else:
            self.load()
