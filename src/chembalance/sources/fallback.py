"""Built-in equations used when no remote source is available."""

from __future__ import annotations

from typing import Sequence

from chembalance.models import ChemicalEquation, EquationComponent, Language, Topic
from chembalance.sources.base import QuestionSource

# (formula, coefficient, English name, Chinese name)
_Term = tuple[str, int, str, str]

_BANK: dict[Topic, list[tuple[list[_Term], list[_Term], str]]] = {
    Topic.METALS: [
        (
            [("Mg", 2, "Magnesium", "鎂"), ("O2", 1, "Oxygen", "氧")],
            [("MgO", 2, "Magnesium oxide", "氧化鎂")],
            "easy",
        ),
        (
            [("Zn", 1, "Zinc", "鋅"), ("CuSO4", 1, "Copper(II) sulphate", "硫酸銅(II)")],
            [("ZnSO4", 1, "Zinc sulphate", "硫酸鋅"), ("Cu", 1, "Copper", "銅")],
            "medium",
        ),
        (
            [("Na", 2, "Sodium", "鈉"), ("H2O", 2, "Water", "水")],
            [("NaOH", 2, "Sodium hydroxide", "氫氧化鈉"), ("H2", 1, "Hydrogen", "氫")],
            "medium",
        ),
        (
            [("Fe", 4, "Iron", "鐵"), ("O2", 3, "Oxygen", "氧")],
            [("Fe2O3", 2, "Iron(III) oxide", "氧化鐵(III)")],
            "hard",
        ),
    ],
    Topic.ACIDS_BASES: [
        (
            [("Mg", 1, "Magnesium", "鎂"), ("HCl", 2, "Hydrochloric acid", "氫氯酸")],
            [("MgCl2", 1, "Magnesium chloride", "氯化鎂"), ("H2", 1, "Hydrogen", "氫")],
            "easy",
        ),
        (
            [("NaOH", 2, "Sodium hydroxide", "氫氧化鈉"), ("H2SO4", 1, "Sulphuric acid", "硫酸")],
            [("Na2SO4", 1, "Sodium sulphate", "硫酸鈉"), ("H2O", 2, "Water", "水")],
            "medium",
        ),
        (
            [("CaCO3", 1, "Calcium carbonate", "碳酸鈣"), ("HCl", 2, "Hydrochloric acid", "氫氯酸")],
            [
                ("CaCl2", 1, "Calcium chloride", "氯化鈣"),
                ("H2O", 1, "Water", "水"),
                ("CO2", 1, "Carbon dioxide", "二氧化碳"),
            ],
            "medium",
        ),
    ],
    Topic.FOSSIL_FUELS: [
        (
            [("CH4", 1, "Methane", "甲烷"), ("O2", 2, "Oxygen", "氧")],
            [("CO2", 1, "Carbon dioxide", "二氧化碳"), ("H2O", 2, "Water", "水")],
            "easy",
        ),
        (
            [("C3H8", 1, "Propane", "丙烷"), ("O2", 5, "Oxygen", "氧")],
            [("CO2", 3, "Carbon dioxide", "二氧化碳"), ("H2O", 4, "Water", "水")],
            "medium",
        ),
        (
            [("C2H6", 2, "Ethane", "乙烷"), ("O2", 7, "Oxygen", "氧")],
            [("CO2", 4, "Carbon dioxide", "二氧化碳"), ("H2O", 6, "Water", "水")],
            "hard",
        ),
    ],
    Topic.EQUILIBRIUM: [
        (
            [("H2", 1, "Hydrogen", "氫"), ("I2", 1, "Iodine", "碘")],
            [("HI", 2, "Hydrogen iodide", "碘化氫")],
            "easy",
        ),
        (
            [("N2", 1, "Nitrogen", "氮"), ("H2", 3, "Hydrogen", "氫")],
            [("NH3", 2, "Ammonia", "氨")],
            "medium",
        ),
        (
            [("SO2", 2, "Sulphur dioxide", "二氧化硫"), ("O2", 1, "Oxygen", "氧")],
            [("SO3", 2, "Sulphur trioxide", "三氧化硫")],
            "medium",
        ),
    ],
    Topic.REDOX_HALF: [
        (
            [("Fe^2+", 1, "Iron(II) ion", "鐵(II) 離子")],
            [("Fe^3+", 1, "Iron(III) ion", "鐵(III) 離子"), ("e^-", 1, "Electron", "電子")],
            "easy",
        ),
        (
            [("I^-", 2, "Iodide ion", "碘離子")],
            [("I2", 1, "Iodine", "碘"), ("e^-", 2, "Electron", "電子")],
            "easy",
        ),
        (
            [
                ("MnO4^-", 1, "Permanganate ion", "高錳酸根離子"),
                ("H^+", 8, "Hydrogen ion", "氫離子"),
                ("e^-", 5, "Electron", "電子"),
            ],
            [("Mn^2+", 1, "Manganese(II) ion", "錳(II) 離子"), ("H2O", 4, "Water", "水")],
            "hard",
        ),
        (
            [
                ("Cr2O7^2-", 1, "Dichromate ion", "重鉻酸根離子"),
                ("H^+", 14, "Hydrogen ion", "氫離子"),
                ("e^-", 6, "Electron", "電子"),
            ],
            [("Cr^3+", 2, "Chromium(III) ion", "鉻(III) 離子"), ("H2O", 7, "Water", "水")],
            "hard",
        ),
    ],
    Topic.REDOX_FULL: [
        (
            [("Cu", 1, "Copper", "銅"), ("Ag^+", 2, "Silver ion", "銀離子")],
            [("Cu^2+", 1, "Copper(II) ion", "銅(II) 離子"), ("Ag", 2, "Silver", "銀")],
            "easy",
        ),
        (
            [
                ("MnO4^-", 1, "Permanganate ion", "高錳酸根離子"),
                ("Fe^2+", 5, "Iron(II) ion", "鐵(II) 離子"),
                ("H^+", 8, "Hydrogen ion", "氫離子"),
            ],
            [
                ("Mn^2+", 1, "Manganese(II) ion", "錳(II) 離子"),
                ("Fe^3+", 5, "Iron(III) ion", "鐵(III) 離子"),
                ("H2O", 4, "Water", "水"),
            ],
            "hard",
        ),
        (
            [
                ("Cr2O7^2-", 1, "Dichromate ion", "重鉻酸根離子"),
                ("Fe^2+", 6, "Iron(II) ion", "鐵(II) 離子"),
                ("H^+", 14, "Hydrogen ion", "氫離子"),
            ],
            [
                ("Cr^3+", 2, "Chromium(III) ion", "鉻(III) 離子"),
                ("Fe^3+", 6, "Iron(III) ion", "鐵(III) 離子"),
                ("H2O", 7, "Water", "水"),
            ],
            "hard",
        ),
    ],
}


def _component(term: _Term, language: Language) -> EquationComponent:
    formula, coefficient, english, chinese = term
    return EquationComponent(
        formula=formula,
        coefficient=coefficient,
        name=chinese if language is Language.ZH else english,
    )


def fallback_equations(topic: Topic, language: Language = Language.EN) -> list[ChemicalEquation]:
    """All built-in equations for a topic, names in the requested language."""
    return [
        ChemicalEquation.build(
            [_component(t, language) for t in reactants],
            [_component(t, language) for t in products],
            difficulty,
        )
        for reactants, products, difficulty in _BANK[topic]
    ]


class FallbackQuestionSource(QuestionSource):
    """Serves the built-in bank, preferring equations not seen recently."""

    def request_equations(
        self,
        count: int,
        topic: Topic,
        language: Language,
        recent: Sequence[str] = (),
    ) -> list[ChemicalEquation]:
        equations = fallback_equations(topic, language)
        seen = set(recent)
        fresh = [eq for eq in equations if eq.signature not in seen]
        repeats = [eq for eq in equations if eq.signature in seen]
        return (fresh + repeats)[:count]
