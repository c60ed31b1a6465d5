import unittest

from chembalance.constants import HISTORY_CAPACITY, SCORE_PER_CORRECT
from chembalance.formula import parse_equation
from chembalance.models import Language, MatchKind, Topic
from chembalance.session import DrillSession, QuestionState, RecentHistory, SessionStateError
from chembalance.sources import QuestionSource, QuestionSourceError


class StaticSource(QuestionSource):
    def __init__(self, *equations):
        self.equations = [parse_equation(text) for text in equations]
        self.calls = []

    def request_equations(self, count, topic, language, recent=()):
        self.calls.append(list(recent))
        return self.equations[:count]


class BrokenSource(QuestionSource):
    def request_equations(self, count, topic, language, recent=()):
        raise QuestionSourceError("quota exceeded")


class TestRecentHistory(unittest.TestCase):
    def test_capacity(self):
        history = RecentHistory(3)
        history.extend(["a", "b", "c", "d"])
        self.assertEqual(history.signatures(), ["b", "c", "d"])
        self.assertEqual(len(history), 3)
        self.assertEqual(RecentHistory().capacity, HISTORY_CAPACITY)

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            RecentHistory(0)


class TestDrillSession(unittest.TestCase):
    def setUp(self):
        self.source = StaticSource("2H2 + O2 -> 2H2O", "Fe^2+ -> Fe^3+ + e^-")
        self.session = DrillSession(self.source, Topic.METALS, Language.EN, batch_size=2)
        self.session.load()

    def test_correct_answer_scores(self):
        for tid, raw in {"r-0": "2", "r-1": "", "p-0": "2"}.items():
            self.assertTrue(self.session.edit_coefficient(tid, raw))
        result = self.session.check()
        self.assertTrue(result.correct)
        self.assertIsNone(result.hint)
        self.assertIs(self.session.state, QuestionState.CORRECT)
        self.assertEqual(self.session.score, SCORE_PER_CORRECT)

    def test_incorrect_then_edit_clears_hint(self):
        result = self.session.check()
        self.assertFalse(result.correct)
        self.assertIs(self.session.state, QuestionState.INCORRECT)
        self.assertIn("O (L:2, R:1)", self.session.hint)

        self.assertTrue(self.session.edit_coefficient("p-0", "2"))
        self.assertIs(self.session.state, QuestionState.UNANSWERED)
        self.assertIsNone(self.session.hint)

    def test_rejected_edits(self):
        self.assertFalse(self.session.edit_coefficient("r-0", "02"))
        self.assertFalse(self.session.edit_coefficient("r-0", "abc"))
        self.assertNotIn("r-0", self.session.coefficients)

    def test_scaled_answer_is_incorrect(self):
        for tid, raw in {"r-0": "4", "r-1": "2", "p-0": "4"}.items():
            self.session.edit_coefficient(tid, raw)
        result = self.session.check()
        self.assertEqual(result.match, MatchKind.SCALED)
        self.assertIs(self.session.state, QuestionState.INCORRECT)
        self.assertEqual(self.session.score, 0)

    def test_reveal_is_terminal(self):
        answer = self.session.reveal()
        self.assertEqual(answer, {"r-0": 2, "r-1": 1, "p-0": 2})
        self.assertIs(self.session.state, QuestionState.REVEALED)
        self.assertFalse(self.session.edit_coefficient("r-0", "2"))
        with self.assertRaises(SessionStateError):
            self.session.check()
        with self.assertRaises(SessionStateError):
            self.session.reveal()

    def test_next_resets_question(self):
        self.session.edit_coefficient("r-0", "3")
        self.session.check()
        self.session.next()
        self.assertEqual(self.session.position, (2, 2))
        self.assertEqual(self.session.coefficients, {})
        self.assertIs(self.session.state, QuestionState.UNANSWERED)
        # half equation is correct with every coefficient left at 1
        self.assertTrue(self.session.check().correct)

    def test_next_after_last_loads_with_history(self):
        self.session.next()
        self.session.next()
        self.assertEqual(self.session.position, (1, 2))
        self.assertEqual(self.source.calls, [[], ["H2+O2", "Fe^2+"]])

    def test_change_topic_clears_history(self):
        self.session.change_topic(Topic.REDOX_HALF)
        self.assertEqual(self.source.calls[-1], [])
        self.assertIs(self.session.topic, Topic.REDOX_HALF)

    def test_change_language_keeps_batch(self):
        self.session.edit_coefficient("r-0", "2")
        self.session.edit_coefficient("p-0", "2")
        self.assertTrue(self.session.check().correct)
        self.session.next()
        self.session.edit_coefficient("r-0", "2")
        self.session.check()
        self.assertTrue(self.session.hint.startswith("Unbalanced:"))

        self.session.change_language(Language.ZH)
        self.assertIs(self.session.language, Language.ZH)
        self.assertEqual(len(self.source.calls), 1)
        self.assertEqual(self.session.position, (2, 2))
        self.assertEqual(self.session.score, SCORE_PER_CORRECT)
        self.assertEqual(self.session.coefficients, {"r-0": "2"})
        self.assertIs(self.session.state, QuestionState.INCORRECT)
        self.assertTrue(self.session.hint.startswith("未平衡："))
        self.assertEqual(self.session.last_result.hint, self.session.hint)

    def test_resolved_coefficients(self):
        self.session.edit_coefficient("p-0", "2")
        self.assertEqual(self.session.resolved_coefficients(), {"r-0": 1, "r-1": 1, "p-0": 2})


class TestOfflineFallback(unittest.TestCase):
    def test_broken_source_uses_builtin_bank(self):
        session = DrillSession(BrokenSource(), Topic.REDOX_FULL, Language.ZH)
        session.load()
        self.assertTrue(session.offline)
        self.assertTrue(session.equations)
        self.assertEqual(len(session.history), len(session.equations))

    def test_current_without_questions(self):
        session = DrillSession(BrokenSource(), Topic.METALS)
        with self.assertRaises(SessionStateError):
            session.current


if __name__ == '__main__':
    unittest.main()
