import unittest

from chembalance.balance import (
    check_answer,
    classify_match,
    evaluate_balance,
    is_valid_coefficient_input,
    resolve_coefficient,
    validate_equation,
)
from chembalance.formula import parse_equation
from chembalance.models import (
    ChemicalEquation,
    ElementImbalance,
    EquationComponent,
    Language,
    MatchKind,
    Topic,
)
from chembalance.sources import fallback_equations


def scaled(equation, factor):
    return {tid: str(c * factor) for tid, c in equation.reference_coefficients().items()}


class TestCoefficients(unittest.TestCase):
    def test_resolve(self):
        self.assertEqual(resolve_coefficient("3"), 3)
        self.assertEqual(resolve_coefficient("12"), 12)
        self.assertEqual(resolve_coefficient(""), 1)
        self.assertEqual(resolve_coefficient(None), 1)
        self.assertEqual(resolve_coefficient("02"), 1)
        self.assertEqual(resolve_coefficient("x"), 1)

    def test_edit_boundary(self):
        self.assertTrue(is_valid_coefficient_input(""))
        self.assertTrue(is_valid_coefficient_input("10"))
        self.assertFalse(is_valid_coefficient_input("02"))
        self.assertFalse(is_valid_coefficient_input("0"))
        self.assertFalse(is_valid_coefficient_input("-1"))
        self.assertFalse(is_valid_coefficient_input("1.5"))


class TestEvaluateBalance(unittest.TestCase):
    def setUp(self):
        self.water = ChemicalEquation.build(
            [EquationComponent("H2", 2), EquationComponent("O2", 1)],
            [EquationComponent("H2O", 2)],
        )

    def test_reference_answer(self):
        answer = {"r-0": "2", "r-1": "1", "p-0": "2"}
        report = evaluate_balance(self.water, answer)
        self.assertTrue(report.is_balanced)
        self.assertEqual(classify_match(self.water, answer), MatchKind.EXACT)
        self.assertTrue(check_answer(self.water, answer, Topic.METALS).correct)

    def test_all_ones(self):
        report = evaluate_balance(self.water, {"r-0": "1", "r-1": "1", "p-0": "1"})
        self.assertEqual(report.unbalanced, (ElementImbalance("O", 2, 1),))
        result = check_answer(self.water, {}, Topic.METALS)
        self.assertFalse(result.correct)
        self.assertIn("O (L:2, R:1)", result.hint)

    def test_idempotent(self):
        answer = {"r-0": "3", "p-0": "1"}
        self.assertEqual(evaluate_balance(self.water, answer), evaluate_balance(self.water, answer))

    def test_unbalanced_order(self):
        equation = parse_equation("Na + H2O -> NaOH + H2")
        report = evaluate_balance(equation, {})
        self.assertEqual(report.unbalanced_elements(), ["H"])
        equation = parse_equation("Zn + HCl -> ZnCl2 + H2")
        report = evaluate_balance(equation, {})
        self.assertEqual(
            report.unbalanced,
            (ElementImbalance("H", 1, 2), ElementImbalance("Cl", 1, 2)),
        )

    def test_right_only_elements_last(self):
        equation = parse_equation("Mg -> MgO")
        report = evaluate_balance(equation, {})
        self.assertEqual(report.unbalanced, (ElementImbalance("O", 0, 1),))

    def test_half_equation_with_electron(self):
        equation = parse_equation("Fe^2+ -> Fe^3+ + e^-")
        report = evaluate_balance(equation, {})
        self.assertTrue(report.atoms_balanced)
        self.assertEqual((report.charge_left, report.charge_right), (2, 2))
        self.assertEqual(classify_match(equation, {}), MatchKind.EXACT)

    def test_electrons_only_count_towards_charge(self):
        equation = parse_equation("Fe^2+ -> Fe^3+ + e^-")
        report = evaluate_balance(equation, {"p-1": "2"})
        self.assertTrue(report.atoms_balanced)
        self.assertEqual((report.charge_left, report.charge_right), (2, 1))


class TestScaledAnswers(unittest.TestCase):
    def test_every_fallback_equation(self):
        for topic in Topic:
            for equation in fallback_equations(topic):
                with self.subTest(topic=topic, equation=equation.signature):
                    reference = {tid: str(c) for tid, c in equation.reference_coefficients().items()}
                    self.assertTrue(evaluate_balance(equation, reference).is_balanced)
                    self.assertEqual(classify_match(equation, reference), MatchKind.EXACT)

                    doubled = scaled(equation, 2)
                    self.assertTrue(evaluate_balance(equation, doubled).is_balanced)
                    self.assertEqual(classify_match(equation, doubled), MatchKind.SCALED)

    def test_scaled_hint(self):
        equation = parse_equation("2H2 + O2 -> 2H2O")
        result = check_answer(equation, scaled(equation, 3), Topic.FOSSIL_FUELS, Language.EN)
        self.assertFalse(result.correct)
        self.assertEqual(result.match, MatchKind.SCALED)
        self.assertIn("simplest whole-number ratio", result.hint)


class TestValidateEquation(unittest.TestCase):
    def test_fallback_bank_is_sound(self):
        for topic in Topic:
            for equation in fallback_equations(topic):
                self.assertEqual(validate_equation(equation), [], equation.signature)

    def test_unbalanced_reference(self):
        problems = validate_equation(parse_equation("H2 + O2 -> H2O"))
        self.assertEqual(problems, ["O is not balanced"])

    def test_charge_reference(self):
        problems = validate_equation(parse_equation("Fe^2+ -> Fe^3+"))
        self.assertEqual(problems, ["charge is not balanced"])

    def test_not_minimal(self):
        problems = validate_equation(parse_equation("4H2 + 2O2 -> 4H2O"))
        self.assertEqual(problems, ["coefficients share a common divisor of 2"])

    def test_non_positive_coefficient(self):
        equation = ChemicalEquation.build(
            [EquationComponent("H2", 0)], [EquationComponent("H2", 1)]
        )
        self.assertEqual(validate_equation(equation), ["reference coefficients must be positive integers"])

    def test_empty_side(self):
        equation = ChemicalEquation.build([EquationComponent("H2", 1)], [])
        self.assertTrue(validate_equation(equation))


if __name__ == '__main__':
    unittest.main()
