import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

from chembalance.models import Language, Topic
from chembalance.sources import (
    FallbackQuestionSource,
    GeminiQuestionSource,
    GeminiSettings,
    JsonFileQuestionSource,
    QuestionSourceError,
    equation_from_dict,
    equation_to_dict,
    fallback_equations,
    fetch_equations,
)
from chembalance.sources.gemini import build_prompt

WATER = {
    "reactants": [
        {"formula": "H2", "name": "Hydrogen", "coefficient": 2},
        {"formula": "O2", "name": "Oxygen", "coefficient": 1},
    ],
    "products": [{"formula": "H2O", "name": "Water", "coefficient": 2}],
    "difficulty": "easy",
}
UNBALANCED = {
    "reactants": [{"formula": "H2", "name": "Hydrogen", "coefficient": 1}],
    "products": [{"formula": "H2O", "name": "Water", "coefficient": 1}],
    "difficulty": "easy",
}


def gemini_response(payload):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": json.dumps(payload)}]}}]
    }
    return response


class TestEquationJson(unittest.TestCase):
    def test_round_trip(self):
        equation = equation_from_dict(WATER)
        self.assertEqual(equation.signature, "H2+O2")
        self.assertEqual(equation_from_dict(equation_to_dict(equation)), equation)

    def test_malformed(self):
        with self.assertRaises(QuestionSourceError):
            equation_from_dict({"reactants": []})
        with self.assertRaises(QuestionSourceError):
            equation_from_dict({"reactants": [{"formula": "H2", "coefficient": "2"}], "products": []})
        with self.assertRaises(QuestionSourceError):
            equation_from_dict({"reactants": [{"formula": ""}], "products": []})


class TestFallback(unittest.TestCase):
    def test_every_topic_covered(self):
        for topic in Topic:
            self.assertTrue(fallback_equations(topic), topic)

    def test_names_follow_language(self):
        zh = fallback_equations(Topic.METALS, Language.ZH)[0]
        self.assertEqual(zh.reactants[0].name, "鎂")
        en = fallback_equations(Topic.METALS, Language.EN)[0]
        self.assertEqual(en.reactants[0].name, "Magnesium")

    def test_recent_served_last(self):
        first = fallback_equations(Topic.METALS)[0]
        served = FallbackQuestionSource().request_equations(2, Topic.METALS, Language.EN, [first.signature])
        self.assertEqual(len(served), 2)
        self.assertNotIn(first.signature, [eq.signature for eq in served])

    def test_fetch_flags_offline(self):
        batch = fetch_equations(FallbackQuestionSource(), 2, Topic.EQUILIBRIUM, Language.EN)
        self.assertTrue(batch.offline)
        self.assertEqual(len(batch.equations), 2)


class TestGeminiSource(unittest.TestCase):
    def setUp(self):
        self.http = mock.Mock()
        self.source = GeminiQuestionSource(GeminiSettings(api_key="k", timeout=5.0), session=self.http)

    def test_request_payload(self):
        self.http.post.return_value = gemini_response([WATER])
        equations = self.source.request_equations(3, Topic.FOSSIL_FUELS, Language.EN, ["CH4+O2"])

        self.assertEqual(len(equations), 1)
        _, kwargs = self.http.post.call_args
        self.assertEqual(kwargs["params"], {"key": "k"})
        self.assertEqual(kwargs["timeout"], 5.0)
        config = kwargs["json"]["generationConfig"]
        self.assertEqual(config["responseMimeType"], "application/json")
        prompt = kwargs["json"]["contents"][0]["parts"][0]["text"]
        self.assertIn("FOSSIL_FUELS", prompt)
        self.assertIn("CH4+O2", prompt)

    def test_drops_unsound_equations(self):
        self.http.post.return_value = gemini_response([UNBALANCED, WATER, {"bad": 1}])
        with self.assertLogs("chembalance.sources.gemini", level="WARNING"):
            equations = self.source.request_equations(3, Topic.METALS, Language.EN)
        self.assertEqual([eq.signature for eq in equations], ["H2+O2"])

    def test_nothing_usable(self):
        self.http.post.return_value = gemini_response([UNBALANCED])
        with self.assertRaises(QuestionSourceError):
            self.source.request_equations(3, Topic.METALS, Language.EN)

    def test_transport_error(self):
        self.http.post.side_effect = requests.Timeout("slow")
        with self.assertRaises(QuestionSourceError):
            self.source.request_equations(3, Topic.METALS, Language.EN)

    def test_malformed_body(self):
        response = mock.Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = {"candidates": []}
        self.http.post.return_value = response
        with self.assertRaises(QuestionSourceError):
            self.source.request_equations(3, Topic.METALS, Language.EN)

    def test_missing_key_falls_back(self):
        source = GeminiQuestionSource(GeminiSettings(api_key=""), session=self.http)
        with self.assertLogs("chembalance.sources", level="WARNING"):
            batch = fetch_equations(source, 5, Topic.REDOX_HALF, Language.EN)
        self.assertTrue(batch.offline)
        self.http.post.assert_not_called()

    def test_fetch_online(self):
        self.http.post.return_value = gemini_response([WATER])
        batch = fetch_equations(self.source, 5, Topic.METALS, Language.EN)
        self.assertFalse(batch.offline)

    def test_prompt_language(self):
        self.assertIn("Traditional Chinese", build_prompt(2, Topic.METALS, Language.ZH, []))

    def test_settings_from_env(self):
        env = {"GEMINI_API_KEY": " abc ", "CHEMBALANCE_MODEL": "m", "CHEMBALANCE_TIMEOUT": "7"}
        with mock.patch.dict(os.environ, env), mock.patch("chembalance.sources.gemini.load_dotenv"):
            settings = GeminiSettings.from_env()
        self.assertEqual(settings, GeminiSettings(api_key="abc", model="m", timeout=7.0))


class TestJsonFileSource(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "questions.json"

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, payload):
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def test_topic_filter(self):
        half = {
            "reactants": [{"formula": "Fe^2+", "coefficient": 1}],
            "products": [{"formula": "Fe^3+", "coefficient": 1}, {"formula": "e^-", "coefficient": 1}],
            "topic": "REDOX_HALF",
        }
        self.write([dict(WATER, topic="FOSSIL_FUELS"), half, UNBALANCED])
        source = JsonFileQuestionSource(self.path, shuffle=False)
        with self.assertLogs("chembalance.sources.json_file", level="WARNING"):
            equations = source.request_equations(5, Topic.REDOX_HALF, Language.EN)
        self.assertEqual([eq.signature for eq in equations], ["Fe^2+"])

    def test_malformed_entries_skipped(self):
        broken = {"reactants": [{"name": "Hydrogen"}], "products": []}
        self.write([broken, "H2O", dict(WATER, topic="METALS")])
        source = JsonFileQuestionSource(self.path, shuffle=False)
        with self.assertLogs("chembalance.sources.json_file", level="WARNING") as logs:
            equations = source.request_equations(5, Topic.METALS, Language.EN)
        self.assertEqual([eq.signature for eq in equations], ["H2+O2"])
        self.assertEqual(len(logs.records), 2)

    def test_unknown_topic(self):
        self.write([dict(WATER, topic="ORGANIC")])
        with self.assertRaises(QuestionSourceError):
            JsonFileQuestionSource(self.path).request_equations(5, Topic.METALS, Language.EN)

    def test_missing_file(self):
        source = JsonFileQuestionSource(self.path)
        batch = fetch_equations(source, 5, Topic.METALS, Language.EN)
        self.assertTrue(batch.offline)


if __name__ == '__main__':
    unittest.main()
