"""Whole-line observations that never affect the score.

Rules look at a few pairs at a time; the checks here need the entire line
(motion balance, melodic climax, long runs of imperfect consonances).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .model import VoicePair
from .motion import MotionType, classify_motion
from .species import SpeciesProfile

MIN_CONTRARY_PCT = 40.0
MIN_STEPWISE_PCT_THIRD_SPECIES = 70.0
MAX_PARALLEL_IMPERFECT_RUN = 3
MIN_TIED_RATIO_FOURTH_SPECIES = 0.5

_THIRDS = frozenset({3, 4})
_SIXTHS = frozenset({8, 9})


@dataclass(frozen=True)
class FeedbackItem:
    kind: str  # "warning" | "suggestion"
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


def _struck_pitches(pairs: Sequence[VoicePair]) -> List[int]:
    """Counterpoint pitches that are actually struck (no rests, no ties)."""
    return [p.counterpoint for p in pairs if not p.is_rest and not p.tied]


def _pct(part: int, total: int) -> float:
    return 100.0 * part / total if total else 0.0


def contrary_motion_pct(pairs: Sequence[VoicePair]) -> float:
    """Share of contrary motion among transitions where the cantus changes note.

    Inside a measure the cantus is held, so those transitions never count.
    """
    motions = [
        classify_motion(a, b) for a, b in zip(pairs, pairs[1:]) if a.cantus != b.cantus
    ]
    motions = [m for m in motions if m is not None]
    return _pct(sum(1 for m in motions if m is MotionType.CONTRARY), len(motions))


def stepwise_pct(pairs: Sequence[VoicePair]) -> float:
    pitches = _struck_pitches(pairs)
    moves = [b - a for a, b in zip(pitches, pitches[1:])]
    return _pct(sum(1 for m in moves if 1 <= abs(m) <= 2), len(moves))


def longest_imperfect_run(pairs: Sequence[VoicePair]) -> int:
    """Longest run of consecutive thirds, or of consecutive sixths."""
    longest = run = 0
    current_kind = None
    for pair in pairs:
        kind = None
        if not pair.is_rest:
            simple = pair.interval.simple
            if simple in _THIRDS:
                kind = "3rd"
            elif simple in _SIXTHS:
                kind = "6th"
        if kind is not None and kind == current_kind:
            run += 1
        elif kind is not None:
            run = 1
        else:
            run = 0
        current_kind = kind
        longest = max(longest, run)
    return longest


def line_statistics(pairs: Sequence[VoicePair]) -> Dict[str, Any]:
    """Summary numbers attached to every validation report."""
    return {
        "pairs": len(pairs),
        "contrary_motion_pct": round(contrary_motion_pct(pairs), 1),
        "stepwise_pct": round(stepwise_pct(pairs), 1),
    }


def collect_feedback(pairs: Sequence[VoicePair], profile: SpeciesProfile) -> List[FeedbackItem]:
    items: List[FeedbackItem] = []

    pct = contrary_motion_pct(pairs)
    if len(pairs) > 1 and pct < MIN_CONTRARY_PCT:
        items.append(FeedbackItem(
            "suggestion",
            f"use more contrary motion for voice independence (currently {round(pct)}%)",
        ))

    pitches = _struck_pitches(pairs)
    if pitches:
        top = max(pitches)
        if pitches.count(top) > 1:
            items.append(FeedbackItem(
                "warning", "multiple melodic high points; aim for a single climax",
            ))
        elif pitches.index(top) in (0, len(pitches) - 1):
            items.append(FeedbackItem(
                "suggestion", "place the melodic climax inside the phrase, not at its ends",
            ))

    run = longest_imperfect_run(pairs)
    if run > MAX_PARALLEL_IMPERFECT_RUN:
        items.append(FeedbackItem(
            "warning", f"too many consecutive thirds or sixths ({run})",
        ))

    if profile.species == 3:
        steps = stepwise_pct(pairs)
        if steps < MIN_STEPWISE_PCT_THIRD_SPECIES:
            items.append(FeedbackItem(
                "suggestion",
                f"third species should move mostly by step (currently {round(steps)}%)",
            ))

    if profile.species == 4:
        # Strong beats that could carry a tie: not the first or the final one.
        strong = [i for i in range(1, len(pairs) - 1) if profile.is_strong_beat(i)]
        tied = sum(1 for i in strong if pairs[i].tied)
        if strong and tied / len(strong) < MIN_TIED_RATIO_FOURTH_SPECIES:
            items.append(FeedbackItem(
                "suggestion",
                f"fourth species should syncopate most strong beats ({tied} of {len(strong)} tied)",
            ))

    return items
