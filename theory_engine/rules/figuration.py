"""Species exceptions: passing tones, neighbour tones, cambiata, suspensions.

These rules judge exactly the dissonances that ``Dissonance`` leaves alone:
weak-beat dissonances where the species allows figuration and tied
strong-beat dissonances where it allows suspensions.
"""

from __future__ import annotations

from typing import List, Optional

from ..model import VoicePair, pitch_to_name
from ..species import SpeciesProfile
from .base import Category, RuleViolation, Severity, StepWindow


def _is_step(move: int) -> bool:
    return 1 <= abs(move) <= 2


def _is_third(move: int) -> bool:
    return 3 <= abs(move) <= 4


def _weak_dissonance(window: StepWindow) -> Optional[VoicePair]:
    """Current pair if it is an untied weak-beat dissonance."""
    pair = window.current
    if window.is_strong_beat or pair.is_rest or pair.tied:
        return None
    if pair.interval.is_consonant:
        return None
    return pair


def is_passing(before: int, after: int) -> bool:
    """Approached and left by step in the same direction."""
    return _is_step(before) and _is_step(after) and (before > 0) == (after > 0)


def is_neighbor(before: int, after: int) -> bool:
    """Stepped to and straight back to the same pitch."""
    return _is_step(before) and before + after == 0


def is_cambiata(before: int, after: int) -> bool:
    """Dissonance of a nota cambiata: step down into it, third down out of it."""
    return before < 0 and _is_step(before) and after < 0 and _is_third(after)


# ---------------------------------------------------------------------------
# PassingTone
# ---------------------------------------------------------------------------


class PassingTone:
    """Second species: a weak-beat dissonance must be a passing tone."""

    @property
    def name(self) -> str:
        return "passing_tone"

    @property
    def category(self) -> Category:
        return Category.SPECIES

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return profile.species == 2

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = _weak_dissonance(window)
        if pair is None:
            return []
        before = window.melodic(-1, 0)
        after = window.melodic(0, 1)
        if before is not None and after is not None and is_passing(before, after):
            return []
        return [window.violation(
            self, Severity.CRITICAL,
            f"weak-beat {pair.interval.name} on {pitch_to_name(pair.counterpoint)} "
            f"is not a passing tone",
        )]


# ---------------------------------------------------------------------------
# NeighborOrPassing
# ---------------------------------------------------------------------------


class NeighborOrPassing:
    """Third and fifth species: weak-beat dissonance must be a passing tone,
    a neighbour tone, or the dissonance of a nota cambiata."""

    @property
    def name(self) -> str:
        return "neighbor_or_passing"

    @property
    def category(self) -> Category:
        return Category.SPECIES

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return profile.neighbor_tones

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = _weak_dissonance(window)
        if pair is None:
            return []
        before = window.melodic(-1, 0)
        after = window.melodic(0, 1)
        if before is not None and after is not None:
            if is_passing(before, after) or is_neighbor(before, after):
                return []
            if window.profile.cambiata and is_cambiata(before, after):
                return []
        return [window.violation(
            self, Severity.CRITICAL,
            f"weak-beat {pair.interval.name} on {pitch_to_name(pair.counterpoint)} "
            f"is neither passing nor neighbouring",
        )]


# ---------------------------------------------------------------------------
# Suspension
# ---------------------------------------------------------------------------


class Suspension:
    """Tied strong-beat dissonance: prepared by a consonance, resolved down
    by step to a consonance."""

    @property
    def name(self) -> str:
        return "suspension"

    @property
    def category(self) -> Category:
        return Category.SPECIES

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return profile.suspensions

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if not (window.is_strong_beat and pair.tied) or pair.interval.is_consonant:
            return []
        where = pitch_to_name(pair.counterpoint)
        prep = window.previous
        if prep is None or prep.is_rest or prep.interval.is_dissonant:
            return [window.violation(
                self, Severity.CRITICAL, f"suspension on {where} is not prepared by a consonance",
            )]
        resolution = window.next
        move = window.melodic(0, 1)
        if resolution is None or move is None or not (move < 0 and _is_step(move)):
            return [window.violation(
                self, Severity.CRITICAL, f"suspension on {where} does not resolve down by step",
            )]
        if resolution.interval.is_dissonant:
            return [window.violation(
                self, Severity.CRITICAL,
                f"suspension on {where} resolves to a dissonant {resolution.interval.name}",
            )]
        return []


ALL_FIGURATION_RULES = [PassingTone, NeighborOrPassing, Suspension]
