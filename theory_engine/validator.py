"""Counterpoint validation orchestrator.

Aligns a counterpoint line onto a cantus firmus, runs every rule registered
for the species over a bounded step window at each position, and folds the
violations into a scored ``ValidationReport``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import ConfigurationError
from .feedback import FeedbackItem, collect_feedback, line_statistics
from .model import VoicePair, check_pitch
from .rules import ALL_RULE_CLASSES
from .rules.base import Rule, RuleViolation, StepWindow
from .score import ScoringConfig, compute_score, severity_counts
from .species import SpeciesProfile, get_species_profile

logger = logging.getLogger(__name__)

MIN_CANTUS_LENGTH = 3


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one counterpoint line."""
    species: int
    violations: Tuple[RuleViolation, ...]
    score: int
    passed: bool
    feedback: Tuple[FeedbackItem, ...] = ()
    stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        counts = severity_counts(self.violations)
        return {
            "species": self.species,
            "score": self.score,
            "passed": self.passed,
            "violations": [v.to_dict() for v in self.violations],
            "severity_counts": {sev.value: n for sev, n in counts.items()},
            "feedback": [f.to_dict() for f in self.feedback],
            "stats": dict(self.stats),
        }


# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------


def align_voices(
    cantus_firmus: Sequence[int],
    counterpoint: Sequence[Optional[int]],
    profile: SpeciesProfile,
) -> Tuple[VoicePair, ...]:
    """Pair each counterpoint unit with the cantus note sounding under it.

    The counterpoint holds ``units_per_measure`` notes per cantus note; the
    final measure may hold a single note.  An opening rest (None) is allowed
    at position 0 when the species permits it.  In species with ties, a
    strong-beat note repeating the previous weak-beat note is marked tied.
    """
    units = profile.units_per_measure
    n = len(cantus_firmus)
    expected = sorted({(n - 1) * units + 1, n * units})
    if len(counterpoint) not in expected:
        raise ConfigurationError(
            f"{profile.name}: counterpoint has {len(counterpoint)} notes, expected "
            + " or ".join(str(e) for e in expected)
            + f" for a {n}-note cantus firmus"
        )
    pairs: List[VoicePair] = []
    for i, cp in enumerate(counterpoint):
        if cp is None and not (i == 0 and profile.opening_rest_allowed):
            where = "after the first position" if i else f"in species {profile.species}"
            raise ConfigurationError(f"rest at position {i} not allowed {where}")
        if cp is not None:
            check_pitch(cp)
        cf = cantus_firmus[min(i // units, n - 1)]
        tied = (
            profile.ties
            and i > 0
            and cp is not None
            and profile.is_strong_beat(i)
            and counterpoint[i - 1] == cp
        )
        pairs.append(VoicePair(cantus=cf, counterpoint=cp, tied=tied))
    return tuple(pairs)


# ---------------------------------------------------------------------------
# CounterpointValidator
# ---------------------------------------------------------------------------


class CounterpointValidator:
    """Validates counterpoint lines against one cantus firmus and species.

    Configuration is checked on construction; ``validate`` only raises for a
    counterpoint that cannot be aligned.
    """

    def __init__(
        self,
        species: int,
        cantus_firmus: Sequence[int],
        counterpoint_above: bool = True,
        scoring: Optional[ScoringConfig] = None,
    ):
        self.profile = get_species_profile(species)
        if isinstance(cantus_firmus, (str, bytes)) or not isinstance(cantus_firmus, Sequence):
            raise ConfigurationError("cantus_firmus must be a sequence of pitches")
        if len(cantus_firmus) < MIN_CANTUS_LENGTH:
            raise ConfigurationError(
                f"cantus_firmus needs at least {MIN_CANTUS_LENGTH} notes, got {len(cantus_firmus)}"
            )
        self.cantus_firmus: Tuple[int, ...] = tuple(check_pitch(p) for p in cantus_firmus)
        self.counterpoint_above = bool(counterpoint_above)
        self.scoring = scoring if scoring is not None else ScoringConfig()
        self.rules: List[Rule] = [
            rule for rule in (cls() for cls in ALL_RULE_CLASSES)
            if rule.applies_to(self.profile)
        ]

    @property
    def species(self) -> int:
        return self.profile.species

    def validate(self, counterpoint: Sequence[Optional[int]]) -> ValidationReport:
        """Align *counterpoint* onto the cantus firmus and validate it."""
        pairs = align_voices(self.cantus_firmus, counterpoint, self.profile)
        return self.validate_pairs(pairs)

    def validate_pairs(self, pairs: Sequence[VoicePair]) -> ValidationReport:
        """Validate already-aligned pairs."""
        pairs = tuple(pairs)
        if not pairs:
            raise ConfigurationError("nothing to validate: no voice pairs")
        for i, pair in enumerate(pairs):
            if pair.is_rest and i != 0:
                raise ConfigurationError(f"rest at position {i} not allowed after the first position")
        first_sounding = next((i for i, p in enumerate(pairs) if not p.is_rest), None)
        if first_sounding is None:
            raise ConfigurationError("counterpoint has no sounding notes")

        logger.debug(
            "validating %d pairs, species %d, %d rules",
            len(pairs), self.species, len(self.rules),
        )
        violations: List[RuleViolation] = []
        for position in range(len(pairs)):
            window = StepWindow(
                pairs, position, self.profile,
                counterpoint_above=self.counterpoint_above,
                first_sounding=first_sounding,
            )
            for rule in self.rules:
                violations.extend(rule.check(window))

        score, passed = compute_score(violations, self.scoring)
        report = ValidationReport(
            species=self.species,
            violations=tuple(violations),
            score=score,
            passed=passed,
            feedback=tuple(collect_feedback(pairs, self.profile)),
            stats=line_statistics(pairs),
        )
        logger.info(
            "species %d: %d violations, score %d, %s",
            self.species, len(violations), score, "passed" if passed else "failed",
        )
        return report


def validate_counterpoint(
    cantus_firmus: Sequence[int],
    counterpoint: Sequence[Optional[int]],
    species: int,
    counterpoint_above: bool = True,
    scoring: Optional[ScoringConfig] = None,
) -> ValidationReport:
    """One-shot convenience wrapper around CounterpointValidator."""
    validator = CounterpointValidator(species, cantus_firmus, counterpoint_above, scoring)
    return validator.validate(counterpoint)
