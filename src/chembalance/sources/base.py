"""Base interface for question sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from chembalance.constants import DEFAULT_DIFFICULTY
from chembalance.models import ChemicalEquation, EquationComponent, Language, Topic


class QuestionSourceError(Exception):
    """A question source could not deliver usable equations."""


class QuestionSource(ABC):
    """Abstract base class for anything that serves practice equations."""

    @abstractmethod
    def request_equations(
        self,
        count: int,
        topic: Topic,
        language: Language,
        recent: Sequence[str] = (),
    ) -> list[ChemicalEquation]:
        """Return up to ``count`` equations for ``topic``.

        ``recent`` holds signatures of equations served lately; sources
        should avoid repeating them but are not required to.

        Raises:
            QuestionSourceError: On any failure to produce equations.
        """
        pass


def _component_from_dict(data: Mapping[str, Any]) -> EquationComponent:
    formula = data["formula"]
    coefficient = data.get("coefficient", 1)
    if not isinstance(formula, str) or not formula.strip():
        raise QuestionSourceError(f"Invalid formula: {formula!r}")
    if isinstance(coefficient, bool) or not isinstance(coefficient, int):
        raise QuestionSourceError(f"Invalid coefficient for {formula}: {coefficient!r}")
    name = data.get("name")
    return EquationComponent(formula=formula.strip(), coefficient=coefficient, name=name or None)


def equation_from_dict(data: Mapping[str, Any]) -> ChemicalEquation:
    """Build an equation from its JSON form.

    Raises:
        QuestionSourceError: If required fields are missing or mistyped.
    """
    try:
        reactants = [_component_from_dict(c) for c in data["reactants"]]
        products = [_component_from_dict(c) for c in data["products"]]
    except (KeyError, TypeError) as exc:
        raise QuestionSourceError(f"Malformed equation: {data!r}") from exc
    difficulty = data.get("difficulty") or DEFAULT_DIFFICULTY
    return ChemicalEquation.build(reactants, products, str(difficulty))


def equation_to_dict(equation: ChemicalEquation) -> dict[str, Any]:
    def component(c: EquationComponent) -> dict[str, Any]:
        payload: dict[str, Any] = {"formula": c.formula, "coefficient": c.coefficient}
        if c.name:
            payload["name"] = c.name
        return payload

    return {
        "reactants": [component(c) for c in equation.reactants],
        "products": [component(c) for c in equation.products],
        "difficulty": equation.difficulty,
    }
