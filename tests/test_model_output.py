import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import (  # noqa: E402
    InvalidJSONError,
    MalformedContentError,
    MissingFieldsError,
    ModelRefusalError,
    NoJSONFoundError,
)
from app.parsing.model_output import (  # noqa: E402
    extract_json_object,
    repair_json_text,
    sanitize_model_output,
    strip_artifacts,
)
from tests.fakes import SAMPLE_CONTENT  # noqa: E402


class ModelOutputSanitizerTests(unittest.TestCase):
    def test_fenced_json_with_preface_round_trips(self):
        raw = "Here is the JSON:\n```json\n" + json.dumps(SAMPLE_CONTENT, indent=2) + "\n```"
        extracted = extract_json_object(strip_artifacts(raw))
        self.assertEqual(json.loads(extracted), SAMPLE_CONTENT)

        content = sanitize_model_output(raw)
        self.assertEqual(content.model_dump(), SAMPLE_CONTENT)

    def test_bare_fence_and_trailing_chatter(self):
        raw = "```\n" + json.dumps(SAMPLE_CONTENT) + "\n```\nLet me know if you need changes!"
        self.assertEqual(sanitize_model_output(raw).title, SAMPLE_CONTENT["title"])

    def test_trailing_comma_is_repaired(self):
        raw = (
            '{"title": "Engineer", "summary": "Builds things.", '
            '"skills": {"Backend": ["Python", "Go",]}, '
            '"experience": [{"title": "Engineer", "details": ["Shipped APIs."]}],}'
        )
        with self.assertLogs("app.parsing.model_output", level="INFO") as captured:
            content = sanitize_model_output(raw)
        self.assertEqual(content.skills["Backend"], ["Python", "Go"])
        self.assertTrue(any("model_output_repaired" in line for line in captured.output))

    def test_unescaped_quotes_inside_values_are_repaired(self):
        raw = (
            '{"title": "Engineer", "summary": "Built the "Atlas" platform", '
            '"skills": {"Backend": ["Python"]}, '
            '"experience": [{"title": "Engineer", "details": ["Led "Project X" rollout"]}]}'
        )
        content = sanitize_model_output(raw)
        self.assertEqual(content.summary, 'Built the "Atlas" platform')
        self.assertEqual(content.experience[0].details, ['Led "Project X" rollout'])

    def test_repair_leaves_valid_json_untouched(self):
        valid = json.dumps({"a": "say \"hi\"", "b": [1, 2], "c": {"d": "x: y, z"}})
        self.assertEqual(repair_json_text(valid), valid)

    def test_refusal_fails_before_parsing(self):
        with patch("app.parsing.model_output.json.loads") as loads:
            with self.assertRaises(ModelRefusalError):
                sanitize_model_output("I'm sorry, but I can't help with that request.")
            loads.assert_not_called()

    def test_other_refusal_phrases(self):
        for text in ("I cannot produce that.", "  I APOLOGIZE for the confusion"):
            with self.assertRaises(ModelRefusalError):
                sanitize_model_output(text)

    def test_missing_braces_raise_no_json(self):
        with self.assertRaises(NoJSONFoundError):
            sanitize_model_output("The resume could not be generated this time.")
        with self.assertRaises(NoJSONFoundError):
            sanitize_model_output("} nothing here {")

    def test_unrepairable_json_keeps_original_error(self):
        with self.assertRaises(InvalidJSONError) as ctx:
            sanitize_model_output('{"title": "T", "summary": }')
        message = str(ctx.exception)
        self.assertIn("AI returned invalid JSON", message)
        self.assertIn("Repair attempt also failed", message)
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_missing_fields_name_present_keys(self):
        with self.assertRaises(MissingFieldsError) as ctx:
            sanitize_model_output('{"title": "T", "summary": "", "notes": "x"}')
        self.assertEqual(ctx.exception.present_keys, ["title", "summary", "notes"])
        self.assertIn("Present keys: title, summary, notes", str(ctx.exception))

    def test_wrong_shape_is_malformed(self):
        raw = '{"title": "T", "summary": "S", "skills": "Python", "experience": [{"title": "E"}]}'
        with self.assertRaises(MalformedContentError):
            sanitize_model_output(raw)

    def test_entries_without_details_default_to_empty(self):
        raw = '{"title": "T", "summary": "S", "skills": {"A": ["b"]}, "experience": [{"title": "E"}]}'
        with self.assertLogs("app.parsing.model_output", level="WARNING"):
            content = sanitize_model_output(raw)
        self.assertEqual(content.experience[0].details, [])


if __name__ == "__main__":
    unittest.main()
