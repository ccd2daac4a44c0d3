"""Melodic rules for the counterpoint line: leaps, forbidden intervals,
leap recovery, tritone outlines, repeated notes.

Tied pairs are held notes, not new melodic events, so rules skip them.
"""

from __future__ import annotations

from typing import List, Optional

from ..model import (
    MAJOR_3RD,
    MINOR_3RD,
    MINOR_6TH,
    OCTAVE,
    TRITONE,
    interval_between,
    is_consonant,
    pitch_to_name,
)
from ..species import SpeciesProfile
from .base import Category, RuleViolation, Severity, StepWindow

# Simple melodic intervals never allowed in the line.
FORBIDDEN_SIMPLE = frozenset({TRITONE, 10, 11})


def _struck_motion(window: StepWindow, start: int, end: int) -> Optional[int]:
    """Melodic motion into offset *end*, or None when *end* is tied or a rest."""
    pair = window.at(end)
    if pair is None or pair.tied:
        return None
    return window.melodic(start, end)


# ---------------------------------------------------------------------------
# ExcessiveLeap
# ---------------------------------------------------------------------------


class ExcessiveLeap:
    """Melodic leap larger than an octave."""

    def __init__(self, max_leap: int = OCTAVE):
        self.max_leap = max_leap

    @property
    def name(self) -> str:
        return "excessive_leap"

    @property
    def category(self) -> Category:
        return Category.MELODIC

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        move = _struck_motion(window, -1, 0)
        if move is None or abs(move) <= self.max_leap:
            return []
        return [window.violation(
            self, Severity.CRITICAL,
            f"excessive leap of {abs(move)} semitones to {pitch_to_name(window.current.counterpoint)}",
        )]


# ---------------------------------------------------------------------------
# ForbiddenMelodicInterval
# ---------------------------------------------------------------------------


class ForbiddenMelodicInterval:
    """Tritones, sevenths and compound dissonances in the line.

    A descending minor 6th is tolerated but noted.
    """

    @property
    def name(self) -> str:
        return "forbidden_melodic_interval"

    @property
    def category(self) -> Category:
        return Category.MELODIC

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        move = _struck_motion(window, -1, 0)
        if move is None or move == 0:
            return []
        iv = interval_between(0, move)
        if iv.size <= OCTAVE and iv.simple in FORBIDDEN_SIMPLE:
            return [window.violation(
                self, Severity.CRITICAL, f"forbidden melodic {iv.name}",
            )]
        if iv.size > OCTAVE and not is_consonant(iv.simple):
            return [window.violation(
                self, Severity.CRITICAL, f"forbidden melodic {iv.name}",
            )]
        if move == -MINOR_6TH:
            return [window.violation(
                self, Severity.INFO, "descending minor 6th",
            )]
        return []


# ---------------------------------------------------------------------------
# LeapRecovery
# ---------------------------------------------------------------------------


class LeapRecovery:
    """A leap larger than a major 3rd must be followed by a step back.

    A third followed by further motion the same way is only noted.
    """

    @property
    def name(self) -> str:
        return "leap_recovery"

    @property
    def category(self) -> Category:
        return Category.MELODIC

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        leap = _struck_motion(window, -2, -1)
        follow = _struck_motion(window, -1, 0)
        if leap is None or follow is None:
            return []
        size = abs(leap)
        if size > MAJOR_3RD:
            opposite_step = 1 <= abs(follow) <= 2 and (follow > 0) != (leap > 0)
            if opposite_step:
                return []
            return [window.violation(
                self, Severity.WARNING,
                f"leap of {interval_between(0, leap).name} not recovered by a step "
                f"in the opposite direction",
            )]
        if size in (MINOR_3RD, MAJOR_3RD) and follow != 0 and (follow > 0) == (leap > 0):
            return [window.violation(
                self, Severity.INFO,
                f"{interval_between(0, leap).name} followed by motion in the same direction",
            )]
        return []


# ---------------------------------------------------------------------------
# TritoneOutline
# ---------------------------------------------------------------------------


class TritoneOutline:
    """Three-note segment moving one way and spanning a tritone."""

    @property
    def name(self) -> str:
        return "tritone_outline"

    @property
    def category(self) -> Category:
        return Category.MELODIC

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        first = _struck_motion(window, -2, -1)
        second = _struck_motion(window, -1, 0)
        if not first or not second or (first > 0) != (second > 0):
            return []
        if abs(first + second) != TRITONE:
            return []
        start = window.at(-2).counterpoint
        return [window.violation(
            self, Severity.WARNING,
            f"line outlines a tritone {pitch_to_name(start)} -> "
            f"{pitch_to_name(window.current.counterpoint)}",
        )]


# ---------------------------------------------------------------------------
# RepeatedNote
# ---------------------------------------------------------------------------


class RepeatedNote:
    """Untied repeated pitches.

    Species 2 and 3 must move on every unit.  In first species one repeat is
    tolerated; a third consecutive statement is noted.
    """

    @property
    def name(self) -> str:
        return "repeated_note"

    @property
    def category(self) -> Category:
        return Category.MELODIC

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return profile.species in (1, 2, 3)

    def check(self, window: StepWindow) -> List[RuleViolation]:
        move = _struck_motion(window, -1, 0)
        if move != 0:
            return []
        pitch = pitch_to_name(window.current.counterpoint)
        if window.profile.species in (2, 3):
            return [window.violation(self, Severity.WARNING, f"repeated note {pitch}")]
        if _struck_motion(window, -2, -1) == 0:
            return [window.violation(
                self, Severity.INFO, f"{pitch} stated three times in a row",
            )]
        return []


ALL_MELODIC_RULES = [
    ExcessiveLeap,
    ForbiddenMelodicInterval,
    LeapRecovery,
    TritoneOutline,
    RepeatedNote,
]
