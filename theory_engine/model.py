"""Unified data model for the theory engine.

Pitch and interval constants, the closed interval/consonance enums, and the
``Interval`` and ``VoicePair`` values consumed by the chord and counterpoint
code.  Everything here is a pure function of its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import ConfigurationError, EngineFault

# ---------------------------------------------------------------------------
# Pitch domain
# ---------------------------------------------------------------------------

MIN_PITCH = 0
MAX_PITCH = 127

# Piano keyboard A0..C8; default window for generated exercises.
PLAYABLE_RANGE: Tuple[int, int] = (21, 108)

# ---------------------------------------------------------------------------
# Interval constants (semitones)
# ---------------------------------------------------------------------------

UNISON = 0
MINOR_2ND = 1
MAJOR_2ND = 2
MINOR_3RD = 3
MAJOR_3RD = 4
PERFECT_4TH = 5
TRITONE = 6
PERFECT_5TH = 7
MINOR_6TH = 8
MAJOR_6TH = 9
MINOR_7TH = 10
MAJOR_7TH = 11
OCTAVE = 12

PERFECT_CONSONANCES = frozenset({UNISON, PERFECT_5TH})
IMPERFECT_CONSONANCES = frozenset({MINOR_3RD, MAJOR_3RD, MINOR_6TH, MAJOR_6TH})
CONSONANCES = PERFECT_CONSONANCES | IMPERFECT_CONSONANCES
DISSONANCES = frozenset({MINOR_2ND, MAJOR_2ND, PERFECT_4TH, TRITONE, MINOR_7TH, MAJOR_7TH})

INTERVAL_NAMES: Dict[int, str] = {
    0: "unison", 1: "minor 2nd", 2: "major 2nd", 3: "minor 3rd",
    4: "major 3rd", 5: "perfect 4th", 6: "tritone", 7: "perfect 5th",
    8: "minor 6th", 9: "major 6th", 10: "minor 7th", 11: "major 7th",
}

INTERVAL_SHORT_NAMES: Dict[int, str] = {
    0: "P1", 1: "m2", 2: "M2", 3: "m3", 4: "M3", 5: "P4",
    6: "TT", 7: "P5", 8: "m6", 9: "M6", 10: "m7", 11: "M7",
}

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_NOTE_NAMES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Pitch classes of the black keys.
ACCIDENTAL_PITCH_CLASSES = frozenset({1, 3, 6, 8, 10})


# ---------------------------------------------------------------------------
# Closed classifications
# ---------------------------------------------------------------------------


class IntervalClass(Enum):
    """Generic interval size, independent of spelling."""
    UNISON = "unison"
    SECOND = "2nd"
    THIRD = "3rd"
    FOURTH = "4th"
    TRITONE = "tritone"
    FIFTH = "5th"
    SIXTH = "6th"
    SEVENTH = "7th"
    OCTAVE = "octave"
    COMPOUND = "compound"


class Consonance(Enum):
    """Two-voice consonance classification."""
    PERFECT = "perfect"
    IMPERFECT = "imperfect"
    DISSONANT = "dissonant"


_CLASS_BY_SEMITONES: Dict[int, IntervalClass] = {
    0: IntervalClass.UNISON,
    1: IntervalClass.SECOND,
    2: IntervalClass.SECOND,
    3: IntervalClass.THIRD,
    4: IntervalClass.THIRD,
    5: IntervalClass.FOURTH,
    6: IntervalClass.TRITONE,
    7: IntervalClass.FIFTH,
    8: IntervalClass.SIXTH,
    9: IntervalClass.SIXTH,
    10: IntervalClass.SEVENTH,
    11: IntervalClass.SEVENTH,
    12: IntervalClass.OCTAVE,
}


def _consonance_of(simple: int) -> Consonance:
    if simple in PERFECT_CONSONANCES:
        return Consonance.PERFECT
    if simple in IMPERFECT_CONSONANCES:
        return Consonance.IMPERFECT
    if simple in DISSONANCES:
        return Consonance.DISSONANT
    raise EngineFault(f"no consonance entry for simple interval {simple}")


# ---------------------------------------------------------------------------
# Interval
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Interval:
    """A signed distance between two pitches.

    ``semitones`` is ``b - a`` (positive when ascending).  The interval class
    and consonance describe the unsigned size; compound intervals keep the
    consonance of their reduction within the octave.
    """
    semitones: int
    interval_class: IntervalClass
    consonance: Consonance

    @property
    def size(self) -> int:
        return abs(self.semitones)

    @property
    def simple(self) -> int:
        """Unsigned size reduced to 0-11 (octave reduces to 0)."""
        return abs(self.semitones) % 12

    @property
    def direction(self) -> int:
        if self.semitones > 0:
            return 1
        if self.semitones < 0:
            return -1
        return 0

    @property
    def is_perfect(self) -> bool:
        return self.consonance is Consonance.PERFECT

    @property
    def is_consonant(self) -> bool:
        return self.consonance is not Consonance.DISSONANT

    @property
    def is_dissonant(self) -> bool:
        return self.consonance is Consonance.DISSONANT

    @property
    def is_step(self) -> bool:
        return 1 <= self.size <= 2

    @property
    def is_leap(self) -> bool:
        return self.size > 2

    @property
    def name(self) -> str:
        """Human-readable name, e.g. 'perfect 5th' or 'compound major 3rd'."""
        if self.size == OCTAVE:
            return "octave"
        base = INTERVAL_NAMES[self.simple]
        if self.size > OCTAVE:
            if self.simple == 0:
                return "compound octave"
            return f"compound {base}"
        return base


def interval_between(a: int, b: int) -> Interval:
    """Return the interval from pitch *a* to pitch *b*."""
    semitones = b - a
    size = abs(semitones)
    if size > OCTAVE:
        cls = IntervalClass.COMPOUND
    else:
        try:
            cls = _CLASS_BY_SEMITONES[size]
        except KeyError:
            raise EngineFault(f"interval class lookup failed for {size} semitones") from None
    return Interval(
        semitones=semitones,
        interval_class=cls,
        consonance=_consonance_of(size % 12),
    )


# ---------------------------------------------------------------------------
# VoicePair
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VoicePair:
    """Cantus firmus and counterpoint pitches sounding at one rhythmic unit.

    ``counterpoint`` is None for an opening rest.  ``tied`` marks a
    counterpoint note held over from the previous unit rather than re-struck.
    """
    cantus: int
    counterpoint: Optional[int]
    tied: bool = False

    def __post_init__(self) -> None:
        check_pitch(self.cantus)
        if self.counterpoint is not None:
            check_pitch(self.counterpoint)

    @property
    def is_rest(self) -> bool:
        return self.counterpoint is None

    @property
    def interval(self) -> Interval:
        """Vertical interval from cantus to counterpoint."""
        if self.counterpoint is None:
            raise EngineFault("vertical interval requested for a rest")
        return interval_between(self.cantus, self.counterpoint)

    @property
    def harmonic_interval(self) -> int:
        """Unsigned vertical distance in semitones."""
        return self.interval.size


# ---------------------------------------------------------------------------
# Utility functions
# ---------------------------------------------------------------------------


def check_pitch(pitch: int) -> int:
    """Return *pitch* unchanged, or raise ConfigurationError if out of domain."""
    if isinstance(pitch, bool) or not isinstance(pitch, int):
        raise ConfigurationError(f"pitch must be an integer, got {pitch!r}")
    if not MIN_PITCH <= pitch <= MAX_PITCH:
        raise ConfigurationError(f"pitch {pitch} outside [{MIN_PITCH}, {MAX_PITCH}]")
    return pitch


def pitch_class_of(pitch: int) -> int:
    """Reduce a pitch to its pitch class 0-11."""
    return pitch % 12


def is_accidental(pitch: int) -> bool:
    """True for pitches that fall on a black key."""
    return pitch % 12 in ACCIDENTAL_PITCH_CLASSES


def interval_class(semitones: int) -> int:
    """Reduce an interval to 0-11 range (mod 12)."""
    return abs(semitones) % 12


def is_consonant(semitones: int) -> bool:
    """True if the interval (mod 12) is consonant."""
    return interval_class(semitones) in CONSONANCES


def is_perfect_consonance(semitones: int) -> bool:
    """True if the interval (mod 12) is a perfect consonance."""
    return interval_class(semitones) in PERFECT_CONSONANCES


def transpose(pitch: int, semitones: int) -> int:
    """Shift a pitch, refusing to leave the 0-127 domain."""
    return check_pitch(pitch + semitones)


def pitch_to_name(pitch: int) -> str:
    """Convert MIDI pitch to note name with octave (e.g., 'C4')."""
    return f"{NOTE_NAMES[pitch % 12]}{pitch // 12 - 1}"
