"""Voice relationship rules: crossing, overlap, spacing."""

from __future__ import annotations

from typing import List

from ..model import pitch_to_name
from ..motion import detects_voice_crossing, detects_voice_overlap
from ..species import SpeciesProfile
from .base import Category, RuleViolation, Severity, StepWindow

# A compound 5th (perfect 12th).
MAX_SPACING = 19


# ---------------------------------------------------------------------------
# VoiceCrossing
# ---------------------------------------------------------------------------


class VoiceCrossing:
    """Counterpoint on the wrong side of the cantus."""

    @property
    def name(self) -> str:
        return "voice_crossing"

    @property
    def category(self) -> Category:
        return Category.MOTION

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if not detects_voice_crossing(pair, window.counterpoint_above):
            return []
        side = "below" if window.counterpoint_above else "above"
        return [window.violation(
            self, Severity.WARNING,
            f"counterpoint {pitch_to_name(pair.counterpoint)} crosses {side} "
            f"the cantus {pitch_to_name(pair.cantus)}",
        )]


# ---------------------------------------------------------------------------
# VoiceOverlap
# ---------------------------------------------------------------------------


class VoiceOverlap:
    """A voice moves past the other voice's previous pitch."""

    @property
    def name(self) -> str:
        return "voice_overlap"

    @property
    def category(self) -> Category:
        return Category.MOTION

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pairs = window.sounding(-1, 0)
        if pairs is None:
            return []
        prev, cur = pairs
        if not detects_voice_overlap(prev, cur, window.counterpoint_above):
            return []
        return [window.violation(
            self, Severity.WARNING,
            f"voices overlap moving to {pitch_to_name(cur.cantus)}/{pitch_to_name(cur.counterpoint)}",
        )]


# ---------------------------------------------------------------------------
# VoiceSpacing
# ---------------------------------------------------------------------------


class VoiceSpacing:
    """Voices more than a twelfth apart."""

    def __init__(self, max_spacing: int = MAX_SPACING):
        self.max_spacing = max_spacing

    @property
    def name(self) -> str:
        return "voice_spacing"

    @property
    def category(self) -> Category:
        return Category.MOTION

    def applies_to(self, profile: SpeciesProfile) -> bool:
        return True

    def check(self, window: StepWindow) -> List[RuleViolation]:
        pair = window.current
        if pair.is_rest or pair.harmonic_interval <= self.max_spacing:
            return []
        return [window.violation(
            self, Severity.INFO,
            f"voices {pair.harmonic_interval} semitones apart (more than a twelfth)",
        )]


ALL_OVERLAP_RULES = [VoiceCrossing, VoiceOverlap, VoiceSpacing]
