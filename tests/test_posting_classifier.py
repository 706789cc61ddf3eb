import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.posting_classifier import classify_posting  # noqa: E402


class PostingClassifierTests(unittest.TestCase):
    def test_remote_senior_posting_proceeds(self):
        result = classify_posting("Senior Backend Engineer, 100% remote, distributed team across the US.")
        self.assertEqual(result.decision, "proceed")
        self.assertIsNone(result.reason_code)
        self.assertTrue(result.has_remote_signal)

    def test_hybrid_preempts_everything(self):
        text = "Fully remote for most of the year, hybrid schedule in Q4. Entry level applicants welcome. On-site events."
        result = classify_posting(text)
        self.assertEqual(result.decision, "reject")
        self.assertEqual(result.reason_code, "hybrid")
        self.assertIn("HYBRID", result.message)

    def test_onsite_without_remote_rejects(self):
        result = classify_posting("Senior engineer, this role is onsite in Berlin. Local candidates only.")
        self.assertEqual(result.reason_code, "onsite")
        self.assertTrue(result.is_onsite)

    def test_remote_vetoes_onsite(self):
        result = classify_posting("Senior engineer, remote position with a yearly on-site offsite.")
        self.assertEqual(result.decision, "proceed")
        self.assertFalse(result.is_onsite)

    def test_entry_level_rejects(self):
        result = classify_posting("Entry-level software engineer, fully remote.")
        self.assertEqual(result.reason_code, "entry-level")
        self.assertTrue(result.is_entry_level)

    def test_internship_rejects_as_entry_level(self):
        result = classify_posting("Summer internship for data engineers, remote.")
        self.assertEqual(result.reason_code, "entry-level")
        self.assertTrue(result.is_intern)

    def test_entry_level_and_internship_together_proceed(self):
        # Mixed junior and intern phrasing fires neither branch.
        result = classify_posting("Remote entry level program, also offered as an internship.")
        self.assertEqual(result.decision, "proceed")
        self.assertFalse(result.is_entry_level)
        self.assertFalse(result.is_intern)

    def test_matching_is_case_insensitive(self):
        self.assertEqual(classify_posting("HYBRID ROLE").reason_code, "hybrid")

    def test_empty_text_proceeds(self):
        self.assertEqual(classify_posting("").decision, "proceed")
        self.assertEqual(classify_posting(None).decision, "proceed")


if __name__ == "__main__":
    unittest.main()
