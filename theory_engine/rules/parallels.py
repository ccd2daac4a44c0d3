"""Parallel rules: parallel perfects, perfects across the beat, hidden perfects."""

from __future__ import annotations

from typing import List

from ..model import PERFECT_CONSONANCES, PERFECT_5TH, VoicePair, pitch_to_name
from ..motion import classify_motion, is_similar_direction
from ..species import SpeciesProfile
from .base import Category, RuleViolation, Severity, StepWindow


def _perfect_name(simple: int, plural: bool = True) -> str:
    if simple == PERFECT_5TH:
        return "5ths" if plural else "5th"
    return "octaves/unisons" if plural else "octave"


def _same_direction(a: VoicePair, b: VoicePair) -> bool:
    """Both voices move, and in the same direction."""
    cf = b.cantus - a.cantus
    cp = b.counterpoint - a.counterpoint
    return cf != 0 and cp != 0 and (cf > 0) == (cp > 0)


def _describe(a: VoicePair, b: VoicePair) -> str:
    return (
        f"{pitch_to_name(a.cantus)}/{pitch_to_name(a.counterpoint)} -> "
        f"{pitch_to_name(b.cantus)}/{pitch_to_name(b.counterpoint)}"
    )


# ---------------------------------------------------------------------------
# ParallelPerfect
# ---------------------------------------------------------------------------


class ParallelPerfect:
    """Same perfect interval on successive pairs with both voices moving together."""

    @property
    def name(self) -> str:
        return "parallel_perfect"

    @property
    def category(self) -> Category:
        return Category.PARALLELS

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pairs = window.sounding(-1, 0)
        if pairs is None:
            return []
        prev, cur = pairs
        iv1, iv2 = prev.interval.simple, cur.interval.simple
        if iv1 not in PERFECT_CONSONANCES or iv1 != iv2:
            return []
        if not _same_direction(prev, cur):
            return []
        return [window.violation(
            self, Severity.CRITICAL,
            f"parallel {_perfect_name(iv1)} {_describe(prev, cur)}",
        )]


# ---------------------------------------------------------------------------
# ParallelPerfectAcrossBeat
# ---------------------------------------------------------------------------


class ParallelPerfectAcrossBeat:
    """Perfect intervals on successive strong beats reached in similar motion.

    Only meaningful with two units per measure, where the previous strong
    beat is two positions back.
    """

    @property
    def name(self) -> str:
        return "parallel_perfect_across_beat"

    @property
    def category(self) -> Category:
        return Category.PARALLELS

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return profile.species in (2, 4)

    def check(self, window: StepWindow) -> List[RuleViolation]:
        if not window.is_strong_beat:
            return []
        pairs = window.sounding(-2, 0)
        if pairs is None:
            return []
        earlier, cur = pairs
        iv1, iv2 = earlier.interval.simple, cur.interval.simple
        if iv1 not in PERFECT_CONSONANCES or iv1 != iv2:
            return []
        if not _same_direction(earlier, cur):
            return []
        return [window.violation(
            self, Severity.WARNING,
            f"{_perfect_name(iv1)} on successive strong beats {_describe(earlier, cur)}",
        )]


# ---------------------------------------------------------------------------
# HiddenPerfect
# ---------------------------------------------------------------------------


class HiddenPerfect:
    """Hidden (direct) 5ths/octaves: similar motion into a perfect interval
    from a different interval, with the counterpoint arriving by leap."""

    @property
    def name(self) -> str:
        return "hidden_perfect"

    @property
    def category(self) -> Category:
        return Category.PARALLELS

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pairs = window.sounding(-1, 0)
        if pairs is None:
            return []
        prev, cur = pairs
        target = cur.interval.simple
        if target not in PERFECT_CONSONANCES or prev.interval.simple == target:
            return []
        if not is_similar_direction(classify_motion(prev, cur)):
            return []
        if abs(cur.counterpoint - prev.counterpoint) <= 2:
            return []
        return [window.violation(
            self, Severity.WARNING,
            f"hidden {_perfect_name(target, plural=False)}: similar motion with a leap "
            f"{_describe(prev, cur)}",
        )]


ALL_PARALLEL_RULES = [ParallelPerfect, ParallelPerfectAcrossBeat, HiddenPerfect]
