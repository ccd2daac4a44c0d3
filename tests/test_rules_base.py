"""Tests for the step window and violation types."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from theory_engine.errors import EngineFault
from theory_engine.model import VoicePair
from theory_engine.rules import ALL_RULE_CLASSES
from theory_engine.rules.base import Category, Rule, RuleViolation, Severity, StepWindow
from theory_engine.species import get_species_profile


def _pairs(n=5):
    return tuple(VoicePair(60, 64 + i) for i in range(n))


class TestStepWindow(unittest.TestCase):
    """Test the bounded step window."""

    def setUp(self):
        self.profile = get_species_profile(2)

    def test_reads_inside_window(self):
        """Offsets -2..+1 return pairs."""
        pairs = _pairs()
        w = StepWindow(pairs, 2, self.profile)
        self.assertIs(w.at(-2), pairs[0])
        self.assertIs(w.previous, pairs[1])
        self.assertIs(w.current, pairs[2])
        self.assertIs(w.next, pairs[3])

    def test_reads_outside_window_fault(self):
        """Offsets beyond the window are a fault."""
        w = StepWindow(_pairs(), 3, self.profile)
        with self.assertRaises(EngineFault):
            w.at(-3)
        with self.assertRaises(EngineFault):
            w.at(2)

    def test_sequence_edges_are_none(self):
        """Offsets past the sequence give None."""
        w = StepWindow(_pairs(), 0, self.profile)
        self.assertIsNone(w.previous)
        self.assertIsNone(w.at(-2))
        w = StepWindow(_pairs(), 4, self.profile)
        self.assertIsNone(w.next)
        self.assertTrue(w.is_last)

    def test_bad_position(self):
        """Position past the end is a fault."""
        with self.assertRaises(EngineFault):
            StepWindow(_pairs(), 5, self.profile)

    def test_beats(self):
        """Strong beats follow the species grid."""
        pairs = _pairs()
        self.assertTrue(StepWindow(pairs, 2, self.profile).is_strong_beat)
        self.assertFalse(StepWindow(pairs, 3, self.profile).is_strong_beat)

    def test_sounding_and_melodic(self):
        """Rests give no sounding pairs or motion."""
        pairs = (VoicePair(60, None),) + _pairs(3)
        w = StepWindow(pairs, 1, self.profile, first_sounding=1)
        self.assertTrue(w.is_first)
        self.assertIsNone(w.sounding(-1, 0))
        self.assertIsNone(w.melodic(-1, 0))
        self.assertEqual(w.melodic(0, 1), 1)

    def test_violation_location(self):
        """Violation records measure, beat and location."""
        w = StepWindow(_pairs(), 3, self.profile)

        class _Dummy:
            name = "dummy"
            category = Category.MELODIC

        v = w.violation(_Dummy(), Severity.WARNING, "msg")
        self.assertEqual((v.species, v.position, v.measure, v.beat), (2, 3, 2, 2))
        self.assertEqual(v.location, "bar 2 beat 2")
        self.assertEqual(v.to_dict()["severity"], "WARNING")
        self.assertEqual(v.to_dict()["category"], "melodic")


class TestRuleRegistry(unittest.TestCase):
    """Test the rule registry."""

    def test_all_rules_satisfy_protocol(self):
        """Every registered rule is a Rule."""
        for cls in ALL_RULE_CLASSES:
            self.assertIsInstance(cls(), Rule, cls.__name__)

    def test_rule_names_unique(self):
        """Rule names are unique."""
        names = [cls().name for cls in ALL_RULE_CLASSES]
        self.assertEqual(len(names), len(set(names)))

    def test_violation_is_frozen(self):
        """Violations are immutable."""
        v = RuleViolation(1, "x", Category.CADENCE, Severity.INFO, 0, 1, 1, "")
        with self.assertRaises(Exception):
            v.position = 3


if __name__ == "__main__":
    unittest.main()
