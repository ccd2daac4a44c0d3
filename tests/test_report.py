"""Tests for text and JSON report output."""

import json
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from theory_engine.chord_types import ChordType
from theory_engine.chords import ChordSpec, GeneratedTask
from theory_engine.matcher import MatchResult
from theory_engine.report import (
    format_json,
    format_match_text,
    format_task_text,
    format_text,
    to_json,
)
from theory_engine.validator import validate_counterpoint


class TestValidationReportText(unittest.TestCase):
    """Test validation report output."""

    def test_clean(self):
        """Clean report shows PASS and full score."""
        text = format_text(validate_counterpoint([60, 62, 64, 62, 60], [67, 65, 67, 69, 72], 1))
        self.assertIn("=== Validation: species 1, 5 pairs ===", text)
        self.assertIn("[PASS]     no rule violations", text)
        self.assertIn("SCORE: 100/100", text)
        self.assertIn("OVERALL: PASS", text)
        self.assertIn("Feedback:", text)

    def test_failing(self):
        """Failing report lists violations by category."""
        text = format_text(validate_counterpoint([60, 62, 64], [67, 69, 72], 1))
        self.assertIn("[CRITICAL] parallels/parallel_perfect: bar 2", text)
        self.assertIn("OVERALL: FAIL", text)
        self.assertRegex(text, r"parallels\s+FAIL \(1 critical")

    def test_json(self):
        """JSON report parses back."""
        data = json.loads(format_json(validate_counterpoint([60, 62, 64], [67, 69, 72], 1)))
        self.assertFalse(data["passed"])
        self.assertIn("parallel_perfect", [v["rule"] for v in data["violations"]])


class TestTaskAndMatchText(unittest.TestCase):
    """Test task and match output."""

    def setUp(self):
        self.task = GeneratedTask(ChordSpec(2, ChordType.MINOR, 1), (53, 57, 62))

    def test_task_text(self):
        """Task text shows name, answer and bass."""
        text = format_task_text(self.task)
        self.assertIn("Build: D Minor (1st inversion)", text)
        self.assertIn("answer: Dm/1", text)
        self.assertIn("bass F3", text)

    def test_task_json(self):
        """Task JSON carries answer and pitches."""
        data = json.loads(to_json(self.task))
        self.assertEqual(data["primary_answer"], "Dm/1")
        self.assertEqual(data["pitches"], [53, 57, 62])

    def test_match_text(self):
        """Match and no-match lines."""
        hit = MatchResult(True, "Dm/1", "dm/1", "Dm/1")
        self.assertEqual(format_match_text(hit), "[MATCH]    Dm/1 (expected Dm/1)")
        miss = MatchResult(False, "Dm/1", "", reason="empty")
        self.assertEqual(format_match_text(miss), "[NO MATCH] <empty> (empty); expected Dm/1")


if __name__ == "__main__":
    unittest.main()
