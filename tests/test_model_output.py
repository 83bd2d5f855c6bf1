import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.model_output import (  # noqa: E402
    code_defaults,
    coerce_count,
    coerce_text,
    correction_defaults,
    html_or_empty,
    parse_json_object,
    summary_defaults,
)
from app.normalize.utils import first_number, strip_code_fence  # noqa: E402


class ParseJsonObjectTests(unittest.TestCase):
    def test_plain_and_fenced_objects(self):
        self.assertEqual(parse_json_object('{"a": 1}'), {"a": 1})
        self.assertEqual(parse_json_object('```json\n{"a": 1}\n```'), {"a": 1})

    def test_malformed_or_non_object_replies_are_empty(self):
        for reply in (None, "", "not json", "[1, 2]", '"text"', "42", "{broken"):
            with self.subTest(reply=reply):
                self.assertEqual(parse_json_object(reply), {})


class CoercionTests(unittest.TestCase):
    def test_coerce_count(self):
        cases = [
            (7, 7),
            (2.6, 3),
            (-4, 0),
            ("12 hours", 12),
            ("٤٥٪", 45),
            ("1,200 words", 1200),
            (True, 0),
            (None, 0),
            ("many", 0),
            (float("nan"), 0),
            ([3], 0),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(coerce_count(value), expected)

    def test_coerce_text(self):
        self.assertEqual(coerce_text("abc"), "abc")
        self.assertEqual(coerce_text("   ", default="fallback"), "fallback")
        self.assertEqual(coerce_text(None, default="fallback"), "fallback")
        self.assertEqual(coerce_text(12), "12")
        self.assertEqual(coerce_text({"src": ["main.py"]}), '{\n  "src": [\n    "main.py"\n  ]\n}')
        self.assertEqual(coerce_text([]), "")

    def test_html_or_empty(self):
        self.assertEqual(html_or_empty(None), "")
        self.assertEqual(html_or_empty("<p>x</p>"), "<p>x</p>")

    def test_helpers(self):
        self.assertEqual(strip_code_fence("```\nbody\n```"), "body")
        self.assertIsNone(first_number("no digits"))
        self.assertEqual(first_number("score: 88.5"), 88.5)


class DefaultsTests(unittest.TestCase):
    def test_correction_defaults_fill_missing_fields(self):
        result = correction_defaults({}, original_text="النص الأصلي")
        self.assertEqual(result.corrected_text, "النص الأصلي")
        self.assertEqual((result.errors_found, result.words_improved, result.readability_score), (0, 0, 0))

    def test_correction_defaults_keep_model_values(self):
        result = correction_defaults(
            {"correctedText": "مصحح", "errorsFound": "3", "wordsImproved": 2, "readabilityScore": 91.2},
            original_text="أصلي",
        )
        self.assertEqual(result.corrected_text, "مصحح")
        self.assertEqual(result.errors_found, 3)
        self.assertEqual(result.words_improved, 2)
        self.assertEqual(result.readability_score, 91)

    def test_summary_defaults(self):
        result = summary_defaults({"summary": "ملخص", "compressionRatio": "75%"})
        self.assertEqual(result.summary, "ملخص")
        self.assertEqual(result.original_pages, 0)
        self.assertEqual(result.summary_words, 0)
        self.assertEqual(result.compression_ratio, 75)

    def test_code_defaults(self):
        result = code_defaults({"code": "print('x')", "fileStructure": ["main.py"], "estimatedTime": "8 hours"})
        self.assertEqual(result.code, "print('x')")
        self.assertIn("main.py", result.file_structure)
        self.assertEqual(result.lines_of_code, 0)
        self.assertEqual(result.estimated_time, 8)
        self.assertEqual(code_defaults({}).code, "")


if __name__ == "__main__":
    unittest.main()
