"""Question generation through the Gemini ``generateContent`` REST API."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Sequence

import requests
from dotenv import load_dotenv

from chembalance.balance import validate_equation
from chembalance.models import ChemicalEquation, Language, Topic
from chembalance.sources.base import QuestionSource, QuestionSourceError, equation_from_dict

logger = logging.getLogger(__name__)

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT_S = 20.0

TOPIC_CONTEXT = {
    Topic.METALS: "reactions of metals with oxygen, water, acids and salt solutions",
    Topic.ACIDS_BASES: "neutralisation and reactions of acids with metals, carbonates and bases",
    Topic.FOSSIL_FUELS: "combustion of hydrocarbons and reactions of carbon compounds",
    Topic.EQUILIBRIUM: "reversible reactions reaching chemical equilibrium",
    Topic.REDOX_HALF: (
        "ionic half equations in acidic medium; write electrons as 'e^-', "
        "ions with a caret charge such as 'Fe^3+' or 'SO4^2-'"
    ),
    Topic.REDOX_FULL: (
        "full ionic redox equations in acidic medium without electrons; "
        "ions with a caret charge such as 'MnO4^-' or 'H^+'"
    ),
}

_COMPONENT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "formula": {"type": "STRING"},
        "name": {"type": "STRING"},
        "coefficient": {"type": "INTEGER"},
    },
    "required": ["formula", "name", "coefficient"],
}

RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "reactants": {"type": "ARRAY", "items": _COMPONENT_SCHEMA},
            "products": {"type": "ARRAY", "items": _COMPONENT_SCHEMA},
            "difficulty": {"type": "STRING", "enum": ["easy", "medium", "hard"]},
        },
        "required": ["reactants", "products", "difficulty"],
    },
}


@dataclass(frozen=True)
class GeminiSettings:
    api_key: str
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT_S
    temperature: float = 0.7

    @classmethod
    def from_env(cls) -> GeminiSettings:
        """Read settings from the environment, loading ``.env`` first."""
        load_dotenv()
        timeout = os.getenv("CHEMBALANCE_TIMEOUT", "").strip()
        return cls(
            api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            model=os.getenv("CHEMBALANCE_MODEL", "").strip() or DEFAULT_MODEL,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT_S,
        )


def build_prompt(count: int, topic: Topic, language: Language, recent: Sequence[str]) -> str:
    names = "Traditional Chinese" if language is Language.ZH else "English"
    excluded = ", ".join(recent) if recent else "none"
    return (
        f"Generate {count} balanced chemical equations for topic: {topic.value}.\n"
        f"Topic context: HKDSE Chemistry level, {TOPIC_CONTEXT[topic]}.\n"
        "Coefficients must be the smallest whole numbers that balance every "
        "element and the total charge.\n"
        f"Write the 'name' of each species in {names}.\n"
        f"Excluded equations (already used, reactants joined by '+'): {excluded}"
    )


class GeminiQuestionSource(QuestionSource):
    """Asks a Gemini model for equations and keeps only sound ones."""

    def __init__(self, settings: GeminiSettings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def request_equations(
        self,
        count: int,
        topic: Topic,
        language: Language,
        recent: Sequence[str] = (),
    ) -> list[ChemicalEquation]:
        if not self.settings.api_key:
            raise QuestionSourceError("GEMINI_API_KEY is not set")

        payload = {
            "contents": [{"parts": [{"text": build_prompt(count, topic, language, recent)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "temperature": self.settings.temperature,
            },
        }
        url = f"{API_BASE_URL}/models/{self.settings.model}:generateContent"
        try:
            response = self.session.post(
                url,
                params={"key": self.settings.api_key},
                json=payload,
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise QuestionSourceError(f"Gemini request failed: {exc}") from exc

        equations = []
        for item in _parse_equations(body):
            try:
                equation = equation_from_dict(item)
            except QuestionSourceError as exc:
                logger.warning("Dropping generated equation: %s", exc)
                continue
            problems = validate_equation(equation)
            if problems:
                logger.warning(
                    "Dropping generated equation %s: %s", equation.signature, "; ".join(problems)
                )
                continue
            equations.append(equation)

        if not equations:
            raise QuestionSourceError("Gemini returned no usable equations")
        logger.debug("Received %d equations for %s", len(equations), topic.value)
        return equations[:count]


def _parse_equations(body: Any) -> list[Any]:
    """Pull the JSON equation list out of a ``generateContent`` response."""
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
        data = json.loads(text)
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise QuestionSourceError("Malformed Gemini response") from exc
    if not isinstance(data, list):
        raise QuestionSourceError("Gemini response is not a list of equations")
    return data
