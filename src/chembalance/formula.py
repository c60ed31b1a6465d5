"""Chemical formula parsing, charge extraction and display helpers.

Formulas are plain strings such as ``H2O``, ``Ca(OH)2``, ``CuSO4.5H2O`` or
``SO4^2-``. Anything after the first ``^`` is the ionic charge. The lowercase
symbol ``e`` stands for a free electron.
"""

from __future__ import annotations

import re
from collections import defaultdict

from chembalance.constants import DEFAULT_DIFFICULTY, ELECTRON
from chembalance.models import ChemicalEquation, EquationComponent

_TOKEN = re.compile(
    r"(?P<symbol>[A-Z][a-z]*|e)(?P<count>\d*)"
    r"|(?P<open>\()"
    r"|(?P<close>\))(?P<multiplier>\d*)"
)
_CHARGE = re.compile(r"(\d*)([+-])")

_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")
_SUPERSCRIPTS = str.maketrans("0123456789+-", "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻")

_ARROW = re.compile(r"\s*(?:<=>|->|→|⇌|=)\s*")
_PLUS = re.compile(r"\s+\+\s+")
_TERM = re.compile(r"(\d*)\s*(\S.*)")


def split_charge(formula: str) -> tuple[str, str | None]:
    """Split ``"SO4^2-"`` into ``("SO4", "2-")``."""
    base, caret, charge = formula.partition("^")
    return base, (charge if caret else None)


def parse_formula(formula: str) -> dict[str, int]:
    """Count atoms in a formula.

    Nested groups are expanded through a stack of frames. Characters outside
    the token grammar are skipped, a ``)`` without an open group is ignored
    and groups still open at the end of the string are dropped. Free
    electrons are reported under ``"e"``.

    Args:
        formula: Formula string, optionally with a ``^`` charge suffix.

    Returns:
        Mapping of element symbol to atom count, in first-seen order.
    """
    base, _ = split_charge(formula)
    base = base.replace(".", "")

    stack: list[defaultdict[str, int]] = [defaultdict(int)]
    for match in _TOKEN.finditer(base):
        if match.group("symbol"):
            stack[-1][match.group("symbol")] += int(match.group("count") or 1)
        elif match.group("open"):
            stack.append(defaultdict(int))
        elif len(stack) > 1:
            multiplier = int(match.group("multiplier") or 1)
            group = stack.pop()
            for symbol, count in group.items():
                stack[-1][symbol] += count * multiplier

    return dict(stack[0])


def formula_charge(formula: str) -> int:
    """Net charge of a formula, e.g. ``-2`` for ``SO4^2-``.

    A bare ``e`` or ``e-`` without a caret is an electron (-1).
    """
    _, charge = split_charge(formula)
    if charge is None:
        return -1 if formula in (ELECTRON, ELECTRON + "-") else 0

    match = _CHARGE.search(charge)
    if not match:
        return 0
    magnitude = int(match.group(1) or 1)
    return magnitude if match.group(2) == "+" else -magnitude


def format_formula(formula: str) -> str:
    """Render a formula with Unicode subscripts and a superscript charge."""
    base, charge = split_charge(formula)
    parts = []
    for part in base.split("."):
        # a leading number on a hydrate part is a multiplier, not a subscript
        leading = re.match(r"\d*", part).group(0)
        parts.append(leading + part[len(leading):].translate(_SUBSCRIPTS))
    text = "·".join(parts)
    if charge:
        text += charge.translate(_SUPERSCRIPTS)
    return text


def format_equation(
    equation: ChemicalEquation,
    coefficients: dict[str, int] | None = None,
    arrow: str = "→",
) -> str:
    """Render an equation, e.g. ``2H₂ + O₂ → 2H₂O``.

    Without ``coefficients`` the reference ones are used; terms missing from
    ``coefficients`` count as 1, which is not printed.
    """
    if coefficients is None:
        coefficients = equation.reference_coefficients()
    rendered: dict[str, str] = {}
    for tid, component in equation.terms():
        coefficient = coefficients.get(tid, 1)
        prefix = "" if coefficient == 1 else str(coefficient)
        rendered[tid] = prefix + format_formula(component.formula)

    left = " + ".join(v for k, v in rendered.items() if k.startswith("r-"))
    right = " + ".join(v for k, v in rendered.items() if k.startswith("p-"))
    return f"{left} {arrow} {right}"


def parse_equation(text: str, difficulty: str = DEFAULT_DIFFICULTY) -> ChemicalEquation:
    """Build a reference equation from text such as ``"2H2 + O2 -> 2H2O"``.

    Terms are separated by a ``+`` surrounded by whitespace so that charges
    like ``H^+`` survive. A leading integer is the coefficient (default 1).

    Raises:
        ValueError: If the text does not have exactly two sides, a side is
            empty, or a coefficient is zero.
    """
    sides = _ARROW.split(text.strip())
    if len(sides) != 2:
        raise ValueError(f"Expected one arrow in equation: {text!r}")

    parsed = []
    for side in sides:
        components = []
        for term in _PLUS.split(side.strip()):
            match = _TERM.fullmatch(term.strip())
            if not match:
                raise ValueError(f"Empty term in equation: {text!r}")
            coefficient = int(match.group(1) or 1)
            if coefficient < 1:
                raise ValueError(f"Coefficient must be positive: {term!r}")
            components.append(EquationComponent(match.group(2).strip(), coefficient))
        parsed.append(components)

    return ChemicalEquation.build(parsed[0], parsed[1], difficulty)
