"""Vertical rules: opening consonance, dissonance, unisons inside the line."""

from __future__ import annotations

from typing import List

from ..model import PERFECT_5TH, UNISON, pitch_to_name
from ..species import SpeciesProfile
from .base import Category, RuleViolation, Severity, StepWindow


# ---------------------------------------------------------------------------
# OpeningConsonance
# ---------------------------------------------------------------------------


class OpeningConsonance:
    """First sounding interval must be a perfect consonance.

    With the counterpoint below the cantus only unison or octave will do,
    since a fifth below would put the exercise in the wrong mode.
    """

    @property
    def name(self) -> str:
        return "opening_consonance"

    @property
    def category(self) -> Category:
        return Category.VERTICAL

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if not window.is_first or pair.is_rest:
            return []
        allowed = (UNISON, PERFECT_5TH) if window.counterpoint_above else (UNISON,)
        if pair.interval.simple in allowed:
            return []
        wanted = "unison, 5th or octave" if window.counterpoint_above else "unison or octave"
        return [window.violation(
            self, Severity.CRITICAL,
            f"must begin on a perfect consonance ({wanted}), found {pair.interval.name}",
        )]


# ---------------------------------------------------------------------------
# Dissonance
# ---------------------------------------------------------------------------


class Dissonance:
    """Vertical dissonance outside the species' exceptions.

    Weak-beat dissonances in species 2/3/5 and tied strong-beat dissonances
    in species 4/5 are left to the figuration rules.
    """

    @property
    def name(self) -> str:
        return "dissonance"

    @property
    def category(self) -> Category:
        return Category.VERTICAL

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if pair.is_rest or pair.interval.is_consonant:
            return []
        profile = window.profile
        if window.is_strong_beat:
            if pair.tied and profile.suspensions:
                return []
            beat = "strong beat" if profile.units_per_measure > 1 else "note against note"
        else:
            if profile.weak_beat_dissonance:
                return []
            beat = "weak beat"
        return [window.violation(
            self, Severity.CRITICAL,
            f"dissonant {pair.interval.name} ({beat}) "
            f"{pitch_to_name(pair.cantus)}/{pitch_to_name(pair.counterpoint)}",
        )]


# ---------------------------------------------------------------------------
# UnisonInLine
# ---------------------------------------------------------------------------


class UnisonInLine:
    """Unisons belong at the first and last pair only (first species)."""

    @property
    def name(self) -> str:
        return "unison_in_line"

    @property
    def category(self) -> Category:
        return Category.VERTICAL

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return profile.species == 1

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if pair.is_rest or window.is_first or window.is_last:
            return []
        if pair.harmonic_interval != UNISON:
            return []
        return [window.violation(
            self, Severity.WARNING,
            f"unison on {pitch_to_name(pair.cantus)} inside the line",
        )]


ALL_VERTICAL_RULES = [OpeningConsonance, Dissonance, UnisonInLine]
