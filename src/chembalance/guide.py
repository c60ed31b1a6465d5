"""Step-by-step balancing guides shown next to each question."""

from __future__ import annotations

from dataclasses import dataclass

from chembalance.models import Language, Topic


@dataclass(frozen=True)
class GuideStep:
    title: str
    description: str


_HALF_EQUATION = {
    Language.EN: (
        GuideStep(
            "(a) Balance atoms in the half equation",
            "(i) Balance atoms other than oxygen and hydrogen first by adding coefficients.\n"
            "(ii) Add H₂O to either side to balance the oxygen atoms.*\n"
            "(iii) Add H⁺ to either side to balance the hydrogen atoms.*",
        ),
        GuideStep(
            "(b) Balance charges",
            "Add electrons to one side of the half equation to balance the charges.",
        ),
        GuideStep("*Note", "The reaction takes place under acidified conditions."),
    ),
    Language.ZH: (
        GuideStep(
            "(a) 平衡原子的數目",
            "(i) 先平衡非氧和氫的原子，在化學式前加上適當的系數。\n"
            "(ii) 在半方程式的左右兩方加上適當數目的H₂O以平衡氧原子數目。*\n"
            "(iii) 在半方程式的左右兩方加上適當數目的H⁺以平衡氫原子數目。*",
        ),
        GuideStep("(b) 平衡電荷", "在半方程式的其中一方加上適當數目的電子，以平衡電荷。"),
        GuideStep("*備註", "該反應是在酸化的條件下"),
    ),
}

_FULL_REDOX = {
    Language.EN: (
        GuideStep(
            "Method 1: Oxidation numbers",
            "1. Identify the oxidising agent, the reducing agent and their products.\n"
            "2. (a) Assign oxidation numbers. (b) Work out electrons gained or lost per formula unit.\n"
            "3. Add coefficients to the reactants so electrons gained equal electrons lost.",
        ),
        GuideStep(
            "Balance atoms and charge",
            "4. Add coefficients to the products.\n"
            "5. Balance all atoms except O and H.\n"
            "6. Add H⁺ or OH⁻ to balance the charges (H⁺ in acidic medium).\n"
            "7. (a) Add H₂O to balance O atoms. (b) Check that H atoms balance.",
        ),
        GuideStep(
            "Method 2: Half equations",
            "1. Multiply the balanced half equations so the electron counts match.\n"
            "2. Add them and cancel electrons and species common to both sides.",
        ),
    ),
    Language.ZH: (
        GuideStep(
            "方法一：氧化數法",
            "1. 寫出氧化劑、還原劑及其主生成物。\n"
            "2. (a) 訂出元素的氧化數。(b) 求出每個式單位獲得或失去的電子數目。\n"
            "3. 在左方加入係數，確保氧化劑獲得的電子等於還原劑失去的電子。",
        ),
        GuideStep(
            "平衡原子與電荷",
            "4. 平衡右方生成物的係數。\n"
            "5. 平衡 O 和 H 以外的所有原子。\n"
            "6. 加入 H⁺ 或 OH⁻ 平衡電荷 (酸性介質加 H⁺)。\n"
            "7. (a) 加入 H₂O 平衡 O 原子。(b) 最後檢查 H 原子是否平衡。",
        ),
        GuideStep(
            "方法二：半反應法",
            "1. 將每條平衡的半方程式乘以適當數目，使兩邊電子數相等。\n"
            "2. 合併半方程式，約去電子及相同物種。",
        ),
    ),
}

_GENERAL = {
    Language.EN: (
        GuideStep(
            "Step 1: List atoms",
            "Count every element on the reactant (left) and product (right) sides.",
        ),
        GuideStep(
            "Step 2: Change coefficients",
            "Put coefficients in front of formulas. Never change the subscripts.",
        ),
        GuideStep(
            "Step 3: Strategy",
            "Balance metals first, then non-metals, then hydrogen, and oxygen last.",
        ),
        GuideStep(
            "Step 4: Double check",
            "Recount all atoms on both sides after every change.",
        ),
    ),
    Language.ZH: (
        GuideStep("步驟 1：列出原子清單", "分別計算箭頭左側（反應物）和右側（生成物）每一種元素的原子總數。"),
        GuideStep("步驟 2：調整係數", "在化學式前面填入係數來增加原子數量。絕對不能更改化學式的下標！"),
        GuideStep("步驟 3：平衡策略", "先平衡金屬原子，接著是非金屬原子，最後才處理氫(H)和氧(O)。"),
        GuideStep("步驟 4：重新檢查", "每更改一個係數，都要重新計算兩邊的所有原子數量。"),
    ),
}


def balancing_guide(topic: Topic, language: Language = Language.EN) -> tuple[GuideStep, ...]:
    if topic is Topic.REDOX_HALF:
        return _HALF_EQUATION[language]
    if topic is Topic.REDOX_FULL:
        return _FULL_REDOX[language]
    return _GENERAL[language]
