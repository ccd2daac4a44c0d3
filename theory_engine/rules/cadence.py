"""Cadence rules: final consonance and stepwise approach to the final pair."""

from __future__ import annotations

from typing import List

from ..model import UNISON, pitch_to_name
from ..species import SpeciesProfile
from .base import Category, RuleViolation, Severity, StepWindow


# ---------------------------------------------------------------------------
# FinalConsonance
# ---------------------------------------------------------------------------


class FinalConsonance:
    """Last interval must be a unison or octave."""

    @property
    def name(self) -> str:
        return "final_consonance"

    @property
    def category(self) -> Category:
        return Category.CADENCE

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if not window.is_last or pair.is_rest:
            return []
        if pair.interval.simple == UNISON:
            return []
        return [window.violation(
            self, Severity.CRITICAL,
            f"must end on a unison or octave, found {pair.interval.name} "
            f"{pitch_to_name(pair.cantus)}/{pitch_to_name(pair.counterpoint)}",
        )]


# ---------------------------------------------------------------------------
# CadentialApproach
# ---------------------------------------------------------------------------


class CadentialApproach:
    """At least one voice must move by step into the final pair."""

    @property
    def name(self) -> str:
        return "cadential_approach"

    @property
    def category(self) -> Category:
        return Category.CADENCE

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        if not window.is_last:
            return []
        pairs = window.sounding(-1, 0)
        if pairs is None:
            return []
        prev, last = pairs
        cf_step = 1 <= abs(last.cantus - prev.cantus) <= 2
        cp_step = 1 <= abs(last.counterpoint - prev.counterpoint) <= 2
        if cf_step or cp_step:
            return []
        return [window.violation(
            self, Severity.CRITICAL, "neither voice approaches the final by step",
        )]


ALL_CADENCE_RULES = [FinalConsonance, CadentialApproach]
