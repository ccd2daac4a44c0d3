"""Tests for chord specs, voicings, generation and analysis."""

import random
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from theory_engine.chord_types import SEVENTH_TYPES, TRIAD_TYPES, ChordType
from theory_engine.chords import (
    ChordSpec,
    GeneratedTask,
    GeneratorConfig,
    analyze_chord,
    generate_chord,
    octave_placements,
    stack_pitches,
    validate_construction,
)
from theory_engine.errors import ConfigurationError


def _d_minor_first_inversion_config(**overrides):
    kwargs = dict(
        chord_types=(ChordType.MINOR,),
        inversions=(1,),
        roots=(2,),
        octave_window=(48, 72),
    )
    kwargs.update(overrides)
    return GeneratorConfig(**kwargs)


class TestChordSpec(unittest.TestCase):
    """Test ChordSpec validation."""

    def test_bass_pitch_class(self):
        """Bass follows the inversion."""
        self.assertEqual(ChordSpec(2, ChordType.MINOR, 0).bass_pitch_class, 2)
        self.assertEqual(ChordSpec(2, ChordType.MINOR, 1).bass_pitch_class, 5)
        self.assertEqual(ChordSpec(2, ChordType.MINOR, 2).bass_pitch_class, 9)

    def test_inversion_out_of_range(self):
        """Triads take inversions 0-2 only."""
        with self.assertRaises(ConfigurationError):
            ChordSpec(0, ChordType.MAJOR, 3)
        with self.assertRaises(ConfigurationError):
            ChordSpec(0, ChordType.MAJOR, -1)
        ChordSpec(0, ChordType.DOMINANT7, 3)

    def test_root_out_of_range(self):
        """Root must be a pitch class."""
        with self.assertRaises(ConfigurationError):
            ChordSpec(12, ChordType.MAJOR)


class TestVoicing(unittest.TestCase):
    """Test close-position voicing and placement."""

    def test_inversion_moves_lowest_note_up(self):
        """Each inversion lifts the lowest note an octave."""
        spec = ChordSpec(0, ChordType.MAJOR, 1)
        self.assertEqual(stack_pitches(spec, 60), (64, 67, 72))
        spec = ChordSpec(0, ChordType.MAJOR, 2)
        self.assertEqual(stack_pitches(spec, 60), (67, 72, 76))

    def test_ninth_chord_inversion_stays_ascending(self):
        """Wide chords stay strictly ascending when inverted."""
        spec = ChordSpec(0, ChordType.MAJOR9, 1)
        pitches = stack_pitches(spec, 48)
        self.assertEqual(pitches[0], 52)
        self.assertEqual(list(pitches), sorted(set(pitches)))

    def test_placements_fit_window(self):
        """Every placement lies inside the window."""
        spec = ChordSpec(2, ChordType.MINOR, 1)
        self.assertEqual(octave_placements(spec, (48, 72)), [(53, 57, 62)])

    def test_no_placement_in_narrow_window(self):
        """Too narrow a window yields no placement."""
        spec = ChordSpec(0, ChordType.MAJOR7, 0)
        self.assertEqual(octave_placements(spec, (60, 66)), [])


class TestGenerateChord(unittest.TestCase):
    """Test task generation."""

    def test_d_minor_first_inversion(self):
        """D minor first inversion puts F in the bass."""
        task = generate_chord(_d_minor_first_inversion_config(), random.Random(1))
        self.assertEqual(task.pitches, (53, 57, 62))
        self.assertEqual(task.bass_pitch, 53)
        self.assertEqual(task.primary_answer, "Dm/1")
        self.assertEqual(task.display_name, "D Minor (1st inversion)")

    def test_root_position_answer_has_no_label(self):
        """Root-position answers carry no inversion label."""
        config = GeneratorConfig(chord_types=(ChordType.MAJOR7,), roots=(10,), prefer_flats=True)
        task = generate_chord(config, random.Random(3))
        self.assertEqual(task.primary_answer, "Bbmaj7")

    def test_deterministic_with_seed(self):
        """Same seed gives the same task."""
        config = GeneratorConfig(
            chord_types=TRIAD_TYPES + SEVENTH_TYPES, inversions=(0, 1, 2, 3),
        )
        a = generate_chord(config, random.Random(42))
        b = generate_chord(config, random.Random(42))
        self.assertEqual(a, b)

    def test_generated_tasks_respect_config(self):
        """Drawn tasks stay within the configured sets."""
        config = GeneratorConfig(
            chord_types=tuple(ChordType), inversions=(0, 1, 2, 3, 4), octave_window=(36, 84),
        )
        rng = random.Random(7)
        for _ in range(200):
            task = generate_chord(config, rng)
            self.assertGreaterEqual(task.pitches[0], 36)
            self.assertLessEqual(task.pitches[-1], 84)
            self.assertEqual(list(task.pitches), sorted(set(task.pitches)))

    def test_analysis_recovers_generated_spec(self):
        """Analysing a task finds its own spec."""
        config = GeneratorConfig(
            chord_types=tuple(ChordType), inversions=(0, 1, 2, 3, 4), octave_window=(36, 84),
        )
        rng = random.Random(11)
        for _ in range(200):
            task = generate_chord(config, rng)
            self.assertIn(task.spec, analyze_chord(task.pitches))

    def test_avoid_repeat(self):
        """Previous task is not repeated when avoidable."""
        config = GeneratorConfig(chord_types=(ChordType.MAJOR, ChordType.MINOR), roots=(0,))
        rng = random.Random(5)
        previous = generate_chord(config, rng)
        for _ in range(20):
            task = generate_chord(config, rng, previous=previous)
            self.assertNotEqual(task.spec, previous.spec)
            previous = task

    def test_single_combination_accepts_duplicate(self):
        """Only one option: the duplicate is accepted."""
        config = _d_minor_first_inversion_config()
        first = generate_chord(config, random.Random(0))
        again = generate_chord(config, random.Random(0), previous=first)
        self.assertEqual(again.spec, first.spec)

    def test_repeat_allowed_when_disabled(self):
        """Repeats are not resampled when avoidance is off."""
        config = _d_minor_first_inversion_config(avoid_repeat=False, max_retries=0)
        first = generate_chord(config, random.Random(0))
        self.assertEqual(generate_chord(config, random.Random(0), previous=first), first)


class TestGeneratorConfig(unittest.TestCase):
    """Test GeneratorConfig validation."""

    def test_empty_chord_types(self):
        """Empty chord type set is rejected."""
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(chord_types=())

    def test_empty_inversions(self):
        """Empty inversion set is rejected."""
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(inversions=())

    def test_inverted_window(self):
        """Window with low above high is rejected."""
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(octave_window=(72, 48))

    def test_window_out_of_range(self):
        """Window outside 0-127 is rejected."""
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(octave_window=(0, 128))

    def test_bad_root(self):
        """Root 12 is rejected."""
        with self.assertRaises(ConfigurationError):
            GeneratorConfig(roots=(12,))

    def test_inversions_invalid_for_types(self):
        """No type can take inversion 3 of a triad."""
        config = GeneratorConfig(chord_types=TRIAD_TYPES, inversions=(3,))
        with self.assertRaises(ConfigurationError):
            generate_chord(config, random.Random(0))

    def test_window_too_narrow(self):
        """Nothing fits a five-semitone window."""
        config = GeneratorConfig(chord_types=(ChordType.MAJOR,), octave_window=(60, 65))
        with self.assertRaises(ConfigurationError):
            generate_chord(config, random.Random(0))

    def test_bad_max_retries(self):
        """max_retries must be a non-negative integer."""
        for retries in (None, "3", -1, True):
            with self.assertRaises(ConfigurationError, msg=repr(retries)):
                GeneratorConfig(max_retries=retries)

    def test_default_window(self):
        """Default window is the two octaves from C3 to C5."""
        config = GeneratorConfig()
        self.assertEqual(config.octave_window, (48, 72))
        for seed in range(20):
            task = generate_chord(config, random.Random(seed))
            self.assertGreaterEqual(task.pitches[0], 48)
            self.assertLessEqual(task.pitches[-1], 72)

    def test_lists_become_tuples(self):
        """Lists are stored as tuples and the config hashes."""
        config = GeneratorConfig(chord_types=[ChordType.MAJOR], inversions=[0, 1])
        self.assertEqual(config.inversions, (0, 1))
        hash(config)


class TestAnalyzeChord(unittest.TestCase):
    """Test chord analysis of pitch sets."""

    def test_root_position_triad(self):
        """Root-position triad is read as inversion 0."""
        self.assertEqual(analyze_chord([60, 64, 67]), [ChordSpec(0, ChordType.MAJOR, 0)])

    def test_inversion_from_bass(self):
        """Inversion comes from the lowest note."""
        self.assertEqual(analyze_chord([64, 67, 72]), [ChordSpec(0, ChordType.MAJOR, 1)])

    def test_augmented_has_three_roots(self):
        """Augmented triad reads from each of its notes."""
        self.assertEqual(
            analyze_chord([60, 64, 68]),
            [
                ChordSpec(0, ChordType.AUGMENTED, 0),
                ChordSpec(8, ChordType.AUGMENTED, 1),
                ChordSpec(4, ChordType.AUGMENTED, 2),
            ],
        )

    def test_sus2_is_also_sus4(self):
        """Sus2 also reads as sus4 on the fifth."""
        self.assertEqual(
            analyze_chord([60, 62, 67]),
            [ChordSpec(0, ChordType.SUS2, 0), ChordSpec(7, ChordType.SUS4, 1)],
        )

    def test_unknown_sets(self):
        """Non-chords give no readings."""
        self.assertEqual(analyze_chord([]), [])
        self.assertEqual(analyze_chord([60, 64]), [])


class TestValidateConstruction(unittest.TestCase):
    """Test checking a student's built chord."""

    def setUp(self):
        self.task = GeneratedTask(ChordSpec(2, ChordType.MINOR, 1), (53, 57, 62))

    def test_exact_match(self):
        """Same pitches pass."""
        self.assertTrue(validate_construction([53, 57, 62], self.task))

    def test_other_octave_and_order(self):
        """Octave and order do not matter."""
        self.assertTrue(validate_construction([74, 65, 69], self.task))

    def test_wrong_bass(self):
        """Right notes over the wrong bass fail."""
        self.assertFalse(validate_construction([50, 53, 57], self.task))

    def test_wrong_notes(self):
        """A wrong pitch class fails."""
        self.assertFalse(validate_construction([53, 57, 61], self.task))

    def test_doubled_note(self):
        """A doubled note fails."""
        self.assertFalse(validate_construction([53, 57, 62, 65], self.task))

    def test_empty(self):
        """No pitches fail."""
        self.assertFalse(validate_construction([], self.task))


class TestGeneratedTask(unittest.TestCase):
    """Test GeneratedTask invariants."""

    def test_rejects_wrong_pitches(self):
        """Pitches must spell the spec."""
        with self.assertRaises(ConfigurationError):
            GeneratedTask(ChordSpec(2, ChordType.MINOR, 1), (50, 53, 57))
        with self.assertRaises(ConfigurationError):
            GeneratedTask(ChordSpec(2, ChordType.MINOR, 0), (62, 57, 50))

    def test_to_dict(self):
        """Dict view carries answer and pitch names."""
        task = GeneratedTask(ChordSpec(2, ChordType.MINOR, 1), (53, 57, 62))
        d = task.to_dict()
        self.assertEqual(d["primary_answer"], "Dm/1")
        self.assertEqual(d["pitch_names"], ["F3", "A3", "D4"])
        self.assertEqual(d["chord_type"], "minor")


if __name__ == "__main__":
    unittest.main()
