"""Rule protocol, step window, violation types, and severity/category enums."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..errors import EngineFault
from ..model import VoicePair
from ..species import SpeciesProfile


class Severity(Enum):
    """Violation severity level."""
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class Category(Enum):
    """Rule category."""
    VERTICAL = "vertical"
    PARALLELS = "parallels"
    MELODIC = "melodic"
    CADENCE = "cadence"
    SPECIES = "species_exception"
    MOTION = "motion"


@dataclass(frozen=True)
class RuleViolation:
    """A single rule violation at one aligned position."""
    species: int
    rule_name: str
    category: Category
    severity: Severity
    position: int
    measure: int
    beat: int
    message: str

    @property
    def location(self) -> str:
        """Human-readable location string."""
        loc = f"bar {self.measure}"
        if self.beat > 1:
            loc += f" beat {self.beat}"
        return loc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "species": self.species,
            "rule": self.rule_name,
            "category": self.category.value,
            "severity": self.severity.value,
            "position": self.position,
            "measure": self.measure,
            "beat": self.beat,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# StepWindow
# ---------------------------------------------------------------------------

MAX_LOOKBEHIND = 2
MAX_LOOKAHEAD = 1


class StepWindow:
    """Bounded view of the aligned pairs around one position.

    Rules see at most two prior pairs and one following pair.  Reading
    further is a rule defect and raises EngineFault.
    """

    def __init__(
        self,
        pairs: Sequence[VoicePair],
        position: int,
        profile: SpeciesProfile,
        counterpoint_above: bool = True,
        first_sounding: int = 0,
    ):
        if not 0 <= position < len(pairs):
            raise EngineFault(f"window position {position} outside 0..{len(pairs) - 1}")
        self._pairs = pairs
        self.position = position
        self.profile = profile
        self.counterpoint_above = counterpoint_above
        self.first_sounding = first_sounding
        self.length = len(pairs)

    def at(self, offset: int) -> Optional[VoicePair]:
        """Pair at *offset* from the current position, or None past either end."""
        if not -MAX_LOOKBEHIND <= offset <= MAX_LOOKAHEAD:
            raise EngineFault(
                f"rule read offset {offset}; window allows "
                f"-{MAX_LOOKBEHIND}..+{MAX_LOOKAHEAD}"
            )
        idx = self.position + offset
        if idx < 0 or idx >= self.length:
            return None
        return self._pairs[idx]

    @property
    def current(self) -> VoicePair:
        return self._pairs[self.position]

    @property
    def previous(self) -> Optional[VoicePair]:
        return self.at(-1)

    @property
    def next(self) -> Optional[VoicePair]:
        return self.at(1)

    @property
    def is_first(self) -> bool:
        """True at the first sounding pair (after any opening rest)."""
        return self.position == self.first_sounding

    @property
    def is_last(self) -> bool:
        return self.position == self.length - 1

    @property
    def is_strong_beat(self) -> bool:
        return self.profile.is_strong_beat(self.position)

    def sounding(self, *offsets: int) -> Optional[Tuple[VoicePair, ...]]:
        """Pairs at *offsets* if every one exists and is not a rest."""
        pairs = []
        for offset in offsets:
            pair = self.at(offset)
            if pair is None or pair.is_rest:
                return None
            pairs.append(pair)
        return tuple(pairs)

    def melodic(self, start: int, end: int) -> Optional[int]:
        """Counterpoint motion in semitones from offset *start* to *end*."""
        pairs = self.sounding(start, end)
        if pairs is None:
            return None
        return pairs[1].counterpoint - pairs[0].counterpoint

    def violation(self, rule: "Rule", severity: Severity, message: str) -> RuleViolation:
        """Build a violation for *rule* at the current position."""
        return RuleViolation(
            species=self.profile.species,
            rule_name=rule.name,
            category=rule.category,
            severity=severity,
            position=self.position,
            measure=self.profile.measure_of(self.position),
            beat=self.profile.beat_of(self.position),
            message=message,
        )


@runtime_checkable
class Rule(Protocol):
    """Protocol for a counterpoint rule."""

    @property
    def name(self) -> str: ...

    @property
    def category(self) -> Category: ...

    def applies_to(self, profile: SpeciesProfile) -> bool: ...

    def check(self, window: StepWindow) -> List[RuleViolation]: ...
