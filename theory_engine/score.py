"""Severity-weighted scoring of counterpoint violations.

Baseline 100, minus a fixed deduction per violation by severity, floored at
0.  A line fails if any critical violation exists or the score falls below
the pass threshold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple

from .errors import ConfigurationError
from .rules.base import RuleViolation, Severity

BASELINE = 100


def _default_deductions() -> Dict[Severity, int]:
    return {Severity.CRITICAL: 20, Severity.WARNING: 10, Severity.INFO: 5}


@dataclass(frozen=True)
class ScoringConfig:
    """Deduction per severity and the pass threshold."""
    deductions: Dict[Severity, int] = field(default_factory=_default_deductions)
    pass_threshold: int = 60

    def __post_init__(self) -> None:
        if not isinstance(self.deductions, dict):
            raise ConfigurationError("deductions must map each severity to an integer")
        for sev in Severity:
            if sev not in self.deductions:
                raise ConfigurationError(f"no deduction configured for {sev.value}")
            amount = self.deductions[sev]
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise ConfigurationError(f"deduction for {sev.value} must be an integer, got {amount!r}")
            if amount < 0:
                raise ConfigurationError(f"deduction for {sev.value} must be >= 0")
        threshold = self.pass_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise ConfigurationError(f"pass_threshold must be an integer, got {threshold!r}")
        if not 0 <= threshold <= BASELINE:
            raise ConfigurationError(f"pass_threshold must be within 0-{BASELINE}")


def severity_counts(violations: Iterable[RuleViolation]) -> Dict[Severity, int]:
    counts = {sev: 0 for sev in Severity}
    for v in violations:
        counts[v.severity] += 1
    return counts


def compute_score(
    violations: Iterable[RuleViolation], config: ScoringConfig = ScoringConfig()
) -> Tuple[int, bool]:
    """Return (score, passed) for a list of violations."""
    counts = severity_counts(violations)
    total = BASELINE - sum(config.deductions[sev] * n for sev, n in counts.items())
    score = max(0, total)
    passed = counts[Severity.CRITICAL] == 0 and score >= config.pass_threshold
    return score, passed
