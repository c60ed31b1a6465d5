"""Balance evaluation and answer checking.

A user answer is a mapping from term id (``r-0``, ``p-1``, ...) to the raw
text typed in the coefficient box. Missing or empty entries count as 1.

The evaluator totals atoms and net charge on each side:

    left[X]  = sum(c_i * n_i(X))  over reactants
    right[X] = sum(c_j * n_j(X))  over products
    q_left   = sum(c_i * z_i),  q_right = sum(c_j * z_j)

Electrons contribute to the charge but never to the atom totals.
"""

from __future__ import annotations

import re
from typing import Mapping

import numpy as np

from chembalance.constants import ELECTRON
from chembalance.formula import formula_charge, parse_formula
from chembalance.hints import generate_hint
from chembalance.models import (
    PRODUCT,
    REACTANT,
    BalanceReport,
    ChemicalEquation,
    CheckResult,
    ElementImbalance,
    EquationComponent,
    Language,
    MatchKind,
    Topic,
    term_id,
)

_COEFFICIENT = re.compile(r"[1-9]\d*")


def is_valid_coefficient_input(raw: str) -> bool:
    """Edit-boundary rule: empty, or digits without a leading zero."""
    return raw == "" or _COEFFICIENT.fullmatch(raw) is not None


def resolve_coefficient(raw: str | None) -> int:
    """Turn a raw coefficient entry into the integer used for counting."""
    if raw and _COEFFICIENT.fullmatch(raw):
        return int(raw)
    return 1


def resolve_coefficients(
    equation: ChemicalEquation, coefficients: Mapping[str, str]
) -> dict[str, int]:
    return {tid: resolve_coefficient(coefficients.get(tid)) for tid, _ in equation.terms()}


def _side_totals(
    side: str,
    components: tuple[EquationComponent, ...],
    coefficients: Mapping[str, str],
) -> tuple[dict[str, int], int]:
    atoms: dict[str, int] = {}
    charge = 0
    for index, component in enumerate(components):
        coefficient = resolve_coefficient(coefficients.get(term_id(side, index)))
        for element, count in parse_formula(component.formula).items():
            if element == ELECTRON:
                continue
            atoms[element] = atoms.get(element, 0) + count * coefficient
        charge += coefficient * formula_charge(component.formula)
    return atoms, charge


def evaluate_balance(
    equation: ChemicalEquation, coefficients: Mapping[str, str]
) -> BalanceReport:
    """Compare atom and charge totals of both sides under the user's answer.

    Args:
        equation: Reference equation whose formulas are evaluated.
        coefficients: Raw user entries keyed by term id.

    Returns:
        Report listing every element whose totals differ (left-side symbols
        first, in first-seen order, then right-only symbols) and both charge
        totals.
    """
    left, charge_left = _side_totals(REACTANT, equation.reactants, coefficients)
    right, charge_right = _side_totals(PRODUCT, equation.products, coefficients)

    elements = list(left) + [element for element in right if element not in left]
    unbalanced = tuple(
        ElementImbalance(element, left.get(element, 0), right.get(element, 0))
        for element in elements
        if left.get(element, 0) != right.get(element, 0)
    )
    return BalanceReport(unbalanced, charge_left, charge_right)


def classify_match(
    equation: ChemicalEquation, coefficients: Mapping[str, str]
) -> MatchKind:
    """EXACT when every coefficient equals the reference one, else SCALED.

    Only meaningful for an answer that already balances.
    """
    for tid, component in equation.terms():
        if resolve_coefficient(coefficients.get(tid)) != component.coefficient:
            return MatchKind.SCALED
    return MatchKind.EXACT


def check_answer(
    equation: ChemicalEquation,
    coefficients: Mapping[str, str],
    topic: Topic,
    language: Language = Language.EN,
) -> CheckResult:
    """Evaluate an answer and attach a hint when it is not correct."""
    report = evaluate_balance(equation, coefficients)
    match = classify_match(equation, coefficients) if report.is_balanced else None
    return CheckResult(
        correct=match is MatchKind.EXACT,
        report=report,
        match=match,
        hint=generate_hint(report, topic, language, match),
    )


def composition_matrix(equation: ChemicalEquation) -> tuple[list[str], np.ndarray]:
    """Signed composition matrix, one row per element plus a charge row.

    Reactant columns are positive and product columns negative, so a
    coefficient vector ``c`` balances the equation iff ``A @ c == 0``.
    """
    components = list(equation.reactants) + list(equation.products)
    signs = [1] * len(equation.reactants) + [-1] * len(equation.products)

    parsed = [parse_formula(c.formula) for c in components]
    elements: list[str] = []
    for atoms in parsed:
        elements.extend(e for e in atoms if e != ELECTRON and e not in elements)

    matrix = np.zeros((len(elements) + 1, len(components)), dtype=np.int64)
    for column, (atoms, component, sign) in enumerate(zip(parsed, components, signs)):
        for row, element in enumerate(elements):
            matrix[row, column] = sign * atoms.get(element, 0)
        matrix[-1, column] = sign * formula_charge(component.formula)
    return elements, matrix


def validate_equation(equation: ChemicalEquation) -> list[str]:
    """List the problems with a reference equation; empty when it is sound.

    A sound equation has at least one term per side, positive reference
    coefficients that balance every element and the charge, and no common
    divisor greater than 1.
    """
    if not equation.reactants or not equation.products:
        return ["equation needs at least one reactant and one product"]

    coefficients = np.array(
        [c.coefficient for c in equation.reactants + equation.products], dtype=np.int64
    )
    if np.any(coefficients < 1):
        return ["reference coefficients must be positive integers"]

    problems = []
    elements, matrix = composition_matrix(equation)
    residual = matrix @ coefficients
    for element, value in zip(elements, residual[:-1]):
        if value != 0:
            problems.append(f"{element} is not balanced")
    if residual[-1] != 0:
        problems.append("charge is not balanced")

    divisor = int(np.gcd.reduce(coefficients))
    if divisor > 1:
        problems.append(f"coefficients share a common divisor of {divisor}")
    return problems
