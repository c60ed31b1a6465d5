"""Presentation helpers for the GUI layer."""

from __future__ import annotations

from dataclasses import dataclass

from chembalance.balance import resolve_coefficient
from chembalance.formula import format_equation, format_formula
from chembalance.models import PRODUCT, REACTANT, Language
from chembalance.session import DrillSession, QuestionState

LABELS = {
    Language.EN: {
        "title": "Balance the following equation",
        "check": "Check Answer",
        "reveal": "Give Up",
        "next": "Next Question",
        "score": "Score",
        "offline": "Offline Mode",
        "correct": "Great job! Balanced correctly!",
        "incorrect": "Incorrect Answer",
        "answer": "Correct Coefficients:",
        "default_hint": "If left empty, a coefficient defaults to 1.",
    },
    Language.ZH: {
        "title": "平衡下列化學反應式",
        "check": "檢查答案",
        "reveal": "放棄",
        "next": "下一題",
        "score": "得分",
        "offline": "離線模式",
        "correct": "太棒了！平衡正確！",
        "incorrect": "答案不正確",
        "answer": "正確係數：",
        "default_hint": "提示：如果不填寫，預設係數為 1。",
    },
}


@dataclass(frozen=True)
class TermView:
    term_id: str
    side: str
    label: str
    text: str
    editable: bool
    wrong: bool  # differs from the revealed answer


def term_views(session: DrillSession) -> list[TermView]:
    """One entry per coefficient box, reactants first."""
    equation = session.current
    revealed = session.state is QuestionState.REVEALED
    views = []
    for tid, component in equation.terms():
        raw = session.coefficients.get(tid, "")
        label = format_formula(component.formula)
        if component.name:
            label = f"{label}\n{component.name}"
        views.append(
            TermView(
                term_id=tid,
                side=REACTANT if tid.startswith(REACTANT) else PRODUCT,
                label=label,
                text=raw,
                editable=not session.state.is_terminal,
                wrong=revealed and resolve_coefficient(raw) != component.coefficient,
            )
        )
    return views


def feedback_text(session: DrillSession) -> str:
    """Status line and hint for the current question state."""
    labels = LABELS[session.language]
    if session.state is QuestionState.CORRECT:
        return labels["correct"]
    if session.state is QuestionState.INCORRECT:
        return "\n\n".join(filter(None, [labels["incorrect"], session.hint]))
    if session.state is QuestionState.REVEALED:
        answer = format_equation(session.current, None, session.topic.arrow)
        return f"{labels['answer']} {answer}"
    return labels["default_hint"]


def header_text(session: DrillSession) -> str:
    labels = LABELS[session.language]
    number, total = session.position
    parts = [f"{number} / {total}", f"{labels['score']}: {session.score}"]
    if session.offline:
        parts.append(labels["offline"])
    return "    ".join(parts)
