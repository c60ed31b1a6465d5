"""chembalance core package."""

from chembalance.balance import check_answer, classify_match, evaluate_balance, resolve_coefficient
from chembalance.formula import formula_charge, parse_formula
from chembalance.hints import generate_hint
from chembalance.models import (
    BalanceReport,
    ChemicalEquation,
    EquationComponent,
    Language,
    MatchKind,
    Topic,
)
from chembalance.session import DrillSession

__all__ = [
    "BalanceReport",
    "ChemicalEquation",
    "DrillSession",
    "EquationComponent",
    "Language",
    "MatchKind",
    "Topic",
    "check_answer",
    "classify_match",
    "evaluate_balance",
    "formula_charge",
    "generate_hint",
    "parse_formula",
    "resolve_coefficient",
]
