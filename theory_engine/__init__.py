"""Music theory exercise engine: chord generation, answer matching and
species counterpoint validation.

Usage:
    python -m theory_engine generate --config level.json --seed 7
    python -m theory_engine check-answer --config level.json --seed 7 "Dm/1"
    python -m theory_engine validate exercise.json
"""

from .chord_types import ChordType
from .chords import (
    ChordSpec,
    GeneratedTask,
    GeneratorConfig,
    analyze_chord,
    generate_chord,
    validate_construction,
)
from .errors import ConfigurationError, EngineFault
from .matcher import MatchResult, validate_answer
from .model import Interval, VoicePair, interval_between
from .motion import MotionType, classify_motion
from .rules.base import RuleViolation, Severity
from .score import ScoringConfig, compute_score
from .validator import (
    CounterpointValidator,
    ValidationReport,
    align_voices,
    validate_counterpoint,
)

__all__ = [
    "ChordSpec",
    "ChordType",
    "ConfigurationError",
    "CounterpointValidator",
    "EngineFault",
    "GeneratedTask",
    "GeneratorConfig",
    "Interval",
    "MatchResult",
    "MotionType",
    "RuleViolation",
    "ScoringConfig",
    "Severity",
    "ValidationReport",
    "VoicePair",
    "align_voices",
    "analyze_chord",
    "classify_motion",
    "compute_score",
    "generate_chord",
    "interval_between",
    "validate_answer",
    "validate_construction",
    "validate_counterpoint",
]
