"""Two-voice motion classification: parallel, similar, oblique, contrary."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Sequence

from .model import VoicePair


class MotionType(Enum):
    PARALLEL = "parallel"
    SIMILAR = "similar"
    OBLIQUE = "oblique"
    CONTRARY = "contrary"


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


def classify_motion(pair_a: VoicePair, pair_b: VoicePair) -> Optional[MotionType]:
    """Motion between two successive vertical pairs.

    Returns None when neither voice moves, or when either pair is a rest.
    """
    if pair_a.is_rest or pair_b.is_rest:
        return None
    cf_move = pair_b.cantus - pair_a.cantus
    cp_move = pair_b.counterpoint - pair_a.counterpoint
    if cf_move == 0 and cp_move == 0:
        return None
    if cf_move == 0 or cp_move == 0:
        return MotionType.OBLIQUE
    if _sign(cf_move) != _sign(cp_move):
        return MotionType.CONTRARY
    if cf_move == cp_move:
        return MotionType.PARALLEL
    return MotionType.SIMILAR


def is_similar_direction(motion: Optional[MotionType]) -> bool:
    """True for parallel or similar motion (both voices move the same way)."""
    return motion in (MotionType.PARALLEL, MotionType.SIMILAR)


def detects_voice_crossing(pair: VoicePair, counterpoint_above: bool = True) -> bool:
    """True when the counterpoint sits on the wrong side of the cantus."""
    if pair.is_rest:
        return False
    if counterpoint_above:
        return pair.counterpoint < pair.cantus
    return pair.counterpoint > pair.cantus


def detects_voice_overlap(
    pair_a: VoicePair, pair_b: VoicePair, counterpoint_above: bool = True
) -> bool:
    """True when either voice moves past the other voice's previous pitch."""
    if pair_a.is_rest or pair_b.is_rest:
        return False
    if counterpoint_above:
        return pair_b.counterpoint < pair_a.cantus or pair_b.cantus > pair_a.counterpoint
    return pair_b.counterpoint > pair_a.cantus or pair_b.cantus < pair_a.counterpoint


def motion_counts(pairs: Sequence[VoicePair]) -> Dict[MotionType, int]:
    """Count each motion type over consecutive sounding pairs."""
    counts = {m: 0 for m in MotionType}
    for a, b in zip(pairs, pairs[1:]):
        motion = classify_motion(a, b)
        if motion is not None:
            counts[motion] += 1
    return counts
