"""Tests for whole-line feedback."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from theory_engine.feedback import (
    collect_feedback,
    contrary_motion_pct,
    line_statistics,
    longest_imperfect_run,
    stepwise_pct,
)
from theory_engine.model import VoicePair
from theory_engine.species import get_species_profile
from theory_engine.validator import align_voices


def _pairs(cantus, counterpoint, tied=()):
    return [VoicePair(cf, cp, i in tied) for i, (cf, cp) in enumerate(zip(cantus, counterpoint))]


def _messages(items):
    return [(item.kind, item.message) for item in items]


class TestStatistics(unittest.TestCase):
    """Test line statistics."""

    def test_contrary_pct(self):
        """Two of three transitions are contrary."""
        pairs = _pairs([60, 62, 64, 62], [67, 65, 67, 69])
        self.assertAlmostEqual(contrary_motion_pct(pairs), 200 / 3)

    def test_stepwise_ignores_ties_and_rests(self):
        """Held notes and rests are not melodic moves."""
        pairs = [VoicePair(60, None), VoicePair(60, 64), VoicePair(62, 64, True), VoicePair(62, 62)]
        self.assertEqual(stepwise_pct(pairs), 100.0)

    def test_imperfect_run(self):
        """Longest run of consecutive thirds or sixths."""
        pairs = _pairs([60, 62, 64, 65, 60], [64, 65, 67, 69, 72])
        self.assertEqual(longest_imperfect_run(pairs), 4)
        pairs = _pairs([60, 62, 64], [64, 71, 67])
        self.assertEqual(longest_imperfect_run(pairs), 1)

    def test_line_statistics(self):
        """Stats are rounded to one decimal."""
        stats = line_statistics(_pairs([60, 62, 64, 62], [67, 65, 67, 69]))
        self.assertEqual(stats, {"pairs": 4, "contrary_motion_pct": 66.7, "stepwise_pct": 100.0})


class TestCollectFeedback(unittest.TestCase):
    """Test whole-line feedback."""

    def test_third_species_contrary_at_every_cantus_change(self):
        """Held cantus notes inside a measure do not dilute contrary motion."""
        profile = get_species_profile(3)
        pairs = align_voices(
            [62, 65, 64, 62],
            [69, 71, 72, 74, 72, 71, 69, 67, 69, 71, 72, 74, 76],
            profile,
        )
        self.assertEqual(contrary_motion_pct(pairs), 100.0)
        self.assertEqual(line_statistics(pairs)["contrary_motion_pct"], 100.0)
        items = collect_feedback(pairs, profile)
        self.assertFalse(any("contrary motion" in m for _, m in _messages(items)))

    def test_parallel_thirds_line(self):
        """Parallel thirds draw motion and run feedback."""
        pairs = _pairs([60, 62, 64, 65, 64, 62, 60], [64, 65, 67, 69, 67, 65, 64])
        items = collect_feedback(pairs, get_species_profile(1))
        kinds = _messages(items)
        self.assertTrue(any("contrary motion" in m for _, m in kinds))
        self.assertTrue(any(k == "warning" and "thirds or sixths (7)" in m for k, m in kinds))
        self.assertFalse(any("climax" in m for _, m in kinds))

    def test_multiple_climaxes(self):
        """Repeated high point is a warning."""
        pairs = _pairs([60, 62, 64, 62, 60], [67, 72, 69, 72, 67])
        items = collect_feedback(pairs, get_species_profile(1))
        self.assertIn(("warning", "multiple melodic high points; aim for a single climax"), _messages(items))

    def test_climax_at_end(self):
        """High point on the last note is a suggestion."""
        pairs = _pairs([60, 62, 64, 62, 60], [67, 65, 67, 69, 72])
        items = collect_feedback(pairs, get_species_profile(1))
        self.assertEqual(
            _messages(items),
            [("suggestion", "place the melodic climax inside the phrase, not at its ends")],
        )

    def test_third_species_leaps(self):
        """Leaping third species line should move by step."""
        pairs = _pairs([60] * 5, [64, 69, 65, 72, 67])
        items = collect_feedback(pairs, get_species_profile(3))
        self.assertTrue(any("third species should move mostly by step" in m for _, m in _messages(items)))

    def test_fourth_species_untied(self):
        """Untied fourth species line should syncopate."""
        pairs = _pairs([60, 60, 62, 62, 60], [64, 67, 65, 64, 72])
        items = collect_feedback(pairs, get_species_profile(4))
        self.assertTrue(any("(0 of 1 tied)" in m for _, m in _messages(items)))
        pairs = _pairs([60, 60, 62, 62, 60], [64, 67, 67, 65, 72], tied={2})
        items = collect_feedback(pairs, get_species_profile(4))
        self.assertFalse(any("syncopate" in m for _, m in _messages(items)))


if __name__ == "__main__":
    unittest.main()
