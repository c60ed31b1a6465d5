"""Data structures for equations, topics and balance reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

from chembalance.constants import DEFAULT_DIFFICULTY

REACTANT = "r"
PRODUCT = "p"


class Topic(str, Enum):
    METALS = "METALS"
    ACIDS_BASES = "ACIDS_BASES"
    FOSSIL_FUELS = "FOSSIL_FUELS"
    EQUILIBRIUM = "EQUILIBRIUM"
    REDOX_HALF = "REDOX_HALF"
    REDOX_FULL = "REDOX_FULL"

    @property
    def arrow(self) -> str:
        return "⇌" if self is Topic.EQUILIBRIUM else "→"


class Language(str, Enum):
    ZH = "ZH"
    EN = "EN"


class MatchKind(str, Enum):
    EXACT = "EXACT"
    SCALED = "SCALED"


def term_id(side: str, index: int) -> str:
    """Identifier of a term, e.g. ``r-0`` for the first reactant."""
    return f"{side}-{index}"


@dataclass(frozen=True)
class EquationComponent:
    formula: str
    coefficient: int
    name: str | None = None


@dataclass(frozen=True)
class ChemicalEquation:
    """A reference equation.

    The coefficients stored on the components are the minimal integer
    solution; user answers are compared against them.
    """

    reactants: tuple[EquationComponent, ...]
    products: tuple[EquationComponent, ...]
    difficulty: str = DEFAULT_DIFFICULTY

    @classmethod
    def build(
        cls,
        reactants: Sequence[EquationComponent],
        products: Sequence[EquationComponent],
        difficulty: str = DEFAULT_DIFFICULTY,
    ) -> ChemicalEquation:
        return cls(tuple(reactants), tuple(products), difficulty)

    def terms(self) -> Iterator[tuple[str, EquationComponent]]:
        """Yield ``(term_id, component)`` for reactants, then products."""
        for index, component in enumerate(self.reactants):
            yield term_id(REACTANT, index), component
        for index, component in enumerate(self.products):
            yield term_id(PRODUCT, index), component

    def reference_coefficients(self) -> dict[str, int]:
        return {tid: component.coefficient for tid, component in self.terms()}

    @property
    def signature(self) -> str:
        return "+".join(sorted(r.formula for r in self.reactants))


@dataclass(frozen=True)
class ElementImbalance:
    element: str
    left: int
    right: int


@dataclass(frozen=True)
class BalanceReport:
    unbalanced: tuple[ElementImbalance, ...]
    charge_left: int
    charge_right: int

    @property
    def atoms_balanced(self) -> bool:
        return not self.unbalanced

    @property
    def charge_balanced(self) -> bool:
        return self.charge_left == self.charge_right

    @property
    def is_balanced(self) -> bool:
        return self.atoms_balanced and self.charge_balanced

    def unbalanced_elements(self) -> list[str]:
        return [entry.element for entry in self.unbalanced]


@dataclass(frozen=True)
class CheckResult:
    correct: bool
    report: BalanceReport
    match: MatchKind | None = None
    hint: str | None = None
