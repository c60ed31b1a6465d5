"""Topic-aware hints for unbalanced answers.

Hints follow a fixed priority: a charge mismatch is reported only once the
atoms balance; otherwise the unbalanced elements are listed together with
advice chosen by the topic's policy; a balanced answer that is a multiple of
the reference gets a reminder to reduce it.

Each topic maps to a policy function in ``TOPIC_POLICIES``. A policy sees the
report and returns advice text, or an empty string when it has nothing to
say, in which case the odd/even fallback is tried.
"""

from __future__ import annotations

from typing import Callable

from chembalance.constants import HYDROGEN, OXYGEN
from chembalance.models import BalanceReport, Language, MatchKind, Topic

HintPolicy = Callable[[BalanceReport, Language], str]

_MESSAGES: dict[str, dict[Language, str]] = {
    "charge": {
        Language.EN: "Charge unbalanced (Left: {left}, Right: {right})",
        Language.ZH: "電荷未平衡 (左: {left}, 右: {right})",
    },
    "charge_half": {
        Language.EN: "💡 Hint: Step (b): once the atoms balance, adjust the number of electrons (e⁻) to balance the charge.",
        Language.ZH: "💡 提示：根據步驟 (b)，原子平衡後，請調整電子 (e⁻) 的數量來平衡電荷。",
    },
    "charge_full": {
        Language.EN: "💡 Hint: Method 1 Step 6: add H⁺ (acidic medium) to balance the charges.",
        Language.ZH: "💡 提示：根據方法一的步驟 6，請添加 H⁺ (酸性介質) 來平衡電荷。",
    },
    "unbalanced": {
        Language.EN: "Unbalanced: {items}",
        Language.ZH: "未平衡：{items}",
    },
    "half_other": {
        Language.EN: "💡 Hint: Step (a)(i): balance the {element} atoms first.",
        Language.ZH: "💡 提示：根據步驟 (a)(i)，請先平衡 {element} 原子。",
    },
    "half_oxygen": {
        Language.EN: "💡 Hint: Step (a)(ii): the other atoms balance. Adjust H₂O to balance oxygen.",
        Language.ZH: "💡 提示：根據步驟 (a)(ii)，其他原子已平衡。現在請調整 H₂O 的係數來平衡氧(O)原子。",
    },
    "half_hydrogen": {
        Language.EN: "💡 Hint: Step (a)(iii): oxygen balances. Adjust H⁺ to balance hydrogen.",
        Language.ZH: "💡 提示：根據步驟 (a)(iii)，氧原子已平衡。現在請調整 H⁺ 的係數來平衡氫(H)原子。",
    },
    "full_other": {
        Language.EN: "💡 Hint: Method 1 Steps 4-5: balance the atoms other than O and H first ({element}).",
        Language.ZH: "💡 提示：根據方法一的步驟 4-5，請先平衡 O 和 H 以外的原子 ({element})。",
    },
    "full_oxygen": {
        Language.EN: "💡 Hint: Method 1 Step 7(a): add H₂O to balance the O atoms.",
        Language.ZH: "💡 提示：根據方法一的步驟 7(a)，請添加 H₂O 以平衡 O 原子。",
    },
    "full_hydrogen": {
        Language.EN: "💡 Hint: Method 1 Step 7(b): check that the H atoms are balanced.",
        Language.ZH: "💡 提示：根據方法一的步驟 7(b)，請檢查並確保 H 原子的數目是平衡的。",
    },
    "general_other": {
        Language.EN: "💡 Hint: Step 3: balance the metal/non-metal atoms ({element}) first and leave H and O for last.",
        Language.ZH: "💡 提示：根據步驟 3，建議先平衡金屬或非金屬原子 ({element})，最後才處理 H 和 O。",
    },
    "general_oxygen_hydrogen": {
        Language.EN: "💡 Hint: Step 3: the other atoms balance. Finally balance hydrogen and oxygen.",
        Language.ZH: "💡 提示：根據步驟 3，其他原子已平衡。最後請檢查並平衡氫(H)和氧(O)原子。",
    },
    "parity": {
        Language.EN: "💡 Tip: there is an odd number ({count}) of {element} atoms on the {side}. Doubling that coefficient to make it even often helps.",
        Language.ZH: "💡 技巧：{element} 原子的數量在{side}是奇數 ({count})。通常將含有該原子的化合物係數乘以 2 (變成偶數) 會有幫助。",
    },
    "left": {Language.EN: "left side", Language.ZH: "左側"},
    "right": {Language.EN: "right side", Language.ZH: "右側"},
    "scaled": {
        Language.EN: "Atoms and charge balance, but use the simplest whole-number ratio.",
        Language.ZH: "原子與電荷已平衡，但請使用最簡整數比。",
    },
}


def _text(key: str, language: Language, **values: object) -> str:
    return _MESSAGES[key][language].format(**values)


def signed(value: int) -> str:
    """``+2`` for positive values, ``-1`` and ``0`` unchanged."""
    return f"+{value}" if value > 0 else str(value)


def _first_non_oxygen_hydrogen(report: BalanceReport) -> str | None:
    return next(
        (e for e in report.unbalanced_elements() if e not in (OXYGEN, HYDROGEN)),
        None,
    )


def _stepwise_policy(prefix: str) -> HintPolicy:
    """Non-O/H atoms first, then oxygen, then hydrogen."""

    def policy(report: BalanceReport, language: Language) -> str:
        elements = report.unbalanced_elements()
        other = _first_non_oxygen_hydrogen(report)
        if other:
            return _text(f"{prefix}_other", language, element=other)
        if OXYGEN in elements:
            return _text(f"{prefix}_oxygen", language)
        if HYDROGEN in elements:
            return _text(f"{prefix}_hydrogen", language)
        return ""

    return policy


def general_policy(report: BalanceReport, language: Language) -> str:
    other = _first_non_oxygen_hydrogen(report)
    if other:
        return _text("general_other", language, element=other)
    if any(e in (OXYGEN, HYDROGEN) for e in report.unbalanced_elements()):
        return _text("general_oxygen_hydrogen", language)
    return ""


half_equation_policy = _stepwise_policy("half")
full_redox_policy = _stepwise_policy("full")

TOPIC_POLICIES: dict[Topic, HintPolicy] = {
    Topic.METALS: general_policy,
    Topic.ACIDS_BASES: general_policy,
    Topic.FOSSIL_FUELS: general_policy,
    Topic.EQUILIBRIUM: general_policy,
    Topic.REDOX_HALF: half_equation_policy,
    Topic.REDOX_FULL: full_redox_policy,
}

CHARGE_NOTES: dict[Topic, str] = {
    Topic.REDOX_HALF: "charge_half",
    Topic.REDOX_FULL: "charge_full",
}


def parity_advice(report: BalanceReport, language: Language) -> str:
    """Suggest doubling when an element is odd on one side and even on the other."""
    for entry in report.unbalanced:
        if entry.left % 2 != entry.right % 2:
            left_is_odd = entry.left % 2 != 0
            return _text(
                "parity",
                language,
                element=entry.element,
                count=entry.left if left_is_odd else entry.right,
                side=_text("left" if left_is_odd else "right", language),
            )
    return ""


def charge_hint(report: BalanceReport, topic: Topic, language: Language) -> str:
    message = _text(
        "charge",
        language,
        left=signed(report.charge_left),
        right=signed(report.charge_right),
    )
    note = CHARGE_NOTES.get(topic)
    if note:
        message += "\n\n" + _text(note, language)
    return message


def atom_hint(report: BalanceReport, topic: Topic, language: Language) -> str:
    items = ", ".join(f"{e.element} (L:{e.left}, R:{e.right})" for e in report.unbalanced)
    message = _text("unbalanced", language, items=items)
    policy = TOPIC_POLICIES.get(topic, general_policy)
    advice = policy(report, language) or parity_advice(report, language)
    if advice:
        message += "\n\n" + advice
    return message


def generate_hint(
    report: BalanceReport,
    topic: Topic,
    language: Language = Language.EN,
    match: MatchKind | None = None,
) -> str | None:
    """Pick the hint for a checked answer.

    Args:
        report: Balance report of the answer.
        topic: Topic being drilled; selects the advice policy.
        language: Language of the returned text.
        match: Classification of a balanced answer, if any.

    Returns:
        Hint text, or ``None`` when the answer balances and is not known to
        be a scaled multiple of the reference.
    """
    if not report.atoms_balanced:
        return atom_hint(report, topic, language)
    if not report.charge_balanced:
        return charge_hint(report, topic, language)
    if match is MatchKind.SCALED:
        return _text("scaled", language)
    return None
