"""Load exercise and generator configurations from JSON files or dicts.

Exercise file::

    {
      "species": 2,
      "cantus_firmus": [62, 65, 64, 62],
      "counterpoint": [null, 69, 67, 72, 71, 69, 74],
      "counterpoint_position": "above",
      "scoring": {"pass_threshold": 60}
    }

Generator file::

    {
      "chord_types": ["major", "minor", "m7"],
      "inversions": [0, 1, 2],
      "octave_window": [48, 72],
      "roots": ["C", "F#", 10],
      "require_inversion_labeling": true
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..chord_types import ChordType, chord_type_from_name
from ..chords import GeneratorConfig
from ..errors import ConfigurationError
from ..music_theory import parse_note_name
from ..rules.base import Severity
from ..score import ScoringConfig
from ..validator import CounterpointValidator, ValidationReport

logger = logging.getLogger(__name__)

Source = Union[str, Path, Dict[str, Any]]

_GENERATOR_KEYS = {
    "chord_types", "inversions", "octave_window", "roots", "avoid_repeat",
    "max_retries", "require_inversion_labeling", "prefer_flats",
}
_EXERCISE_KEYS = {
    "species", "cantus_firmus", "counterpoint", "counterpoint_position", "scoring",
}


@dataclass(frozen=True)
class Exercise:
    """A counterpoint exercise as read from JSON."""
    species: int
    cantus_firmus: Tuple[int, ...]
    counterpoint: Optional[Tuple[Optional[int], ...]] = None
    counterpoint_above: bool = True
    scoring: Optional[ScoringConfig] = None
    source_file: Optional[str] = None

    def validator(self) -> CounterpointValidator:
        return CounterpointValidator(
            self.species, self.cantus_firmus, self.counterpoint_above, self.scoring,
        )

    def validate(self) -> ValidationReport:
        if self.counterpoint is None:
            raise ConfigurationError("exercise has no counterpoint to validate")
        return self.validator().validate(self.counterpoint)


def _read(source: Source) -> Tuple[Dict[str, Any], Optional[str]]:
    """Return the parsed object and its file name (None for dicts)."""
    if isinstance(source, dict):
        return source, None
    path = Path(source)
    try:
        with open(path) as fh:
            data = json.load(fh)
    except OSError as e:
        raise ConfigurationError(f"cannot read {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top-level JSON value must be an object")
    logger.debug("loaded %s", path)
    return data, str(path)


def _check_keys(data: Dict[str, Any], allowed: set, what: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(f"unknown {what} field(s): {', '.join(unknown)}")


def _list_of(data: Dict[str, Any], key: str) -> List[Any]:
    value = data[key]
    if not isinstance(value, list):
        raise ConfigurationError(f"{key} must be a list, got {type(value).__name__}")
    return value


def _parse_chord_type(value: Any) -> ChordType:
    if not isinstance(value, str):
        raise ConfigurationError(f"chord type must be a string, got {value!r}")
    try:
        return chord_type_from_name(value)
    except KeyError:
        raise ConfigurationError(f"unknown chord type {value!r}") from None


def _parse_root(value: Any) -> int:
    if isinstance(value, str):
        pc = parse_note_name(value)
        if pc is None:
            raise ConfigurationError(f"unknown root {value!r}")
        return pc
    return value


# ---------------------------------------------------------------------------
# Public loaders
# ---------------------------------------------------------------------------


def load_generator_config(source: Source) -> GeneratorConfig:
    """Load a GeneratorConfig from a JSON file or pre-parsed dict.

    Chord types may be given by value ('minor7') or symbol ('m7'); roots by
    pitch class or note name.  Omitted fields keep their defaults.
    """
    data, _ = _read(source)
    _check_keys(data, _GENERATOR_KEYS, "generator")
    kwargs: Dict[str, Any] = {}
    if "chord_types" in data:
        kwargs["chord_types"] = tuple(_parse_chord_type(v) for v in _list_of(data, "chord_types"))
    if "inversions" in data:
        kwargs["inversions"] = tuple(_list_of(data, "inversions"))
    if "octave_window" in data:
        kwargs["octave_window"] = tuple(_list_of(data, "octave_window"))
    if "roots" in data:
        kwargs["roots"] = tuple(_parse_root(v) for v in _list_of(data, "roots"))
    for key in ("avoid_repeat", "require_inversion_labeling", "prefer_flats"):
        if key in data:
            if not isinstance(data[key], bool):
                raise ConfigurationError(f"{key} must be true or false")
            kwargs[key] = data[key]
    if "max_retries" in data:
        if isinstance(data["max_retries"], bool) or not isinstance(data["max_retries"], int):
            raise ConfigurationError("max_retries must be an integer")
        kwargs["max_retries"] = data["max_retries"]
    return GeneratorConfig(**kwargs)


def _parse_scoring(value: Any) -> ScoringConfig:
    if not isinstance(value, dict):
        raise ConfigurationError("scoring must be an object")
    _check_keys(value, {"pass_threshold", "deductions"}, "scoring")
    kwargs: Dict[str, Any] = {}
    if "pass_threshold" in value:
        kwargs["pass_threshold"] = value["pass_threshold"]
    if "deductions" in value:
        raw = value["deductions"]
        if not isinstance(raw, dict):
            raise ConfigurationError("scoring.deductions must be an object")
        deductions = dict(ScoringConfig().deductions)
        for name, amount in raw.items():
            try:
                sev = Severity(name.upper())
            except ValueError:
                raise ConfigurationError(f"unknown severity {name!r}") from None
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise ConfigurationError(f"deduction for {name} must be an integer")
            deductions[sev] = amount
        kwargs["deductions"] = deductions
    return ScoringConfig(**kwargs)


def load_exercise(source: Source) -> Exercise:
    """Load a counterpoint Exercise from a JSON file or pre-parsed dict.

    The validator configuration (species, cantus firmus) is checked here so
    that a bad file fails on load, not on first use.
    """
    data, source_file = _read(source)
    _check_keys(data, _EXERCISE_KEYS, "exercise")
    for key in ("species", "cantus_firmus"):
        if key not in data:
            raise ConfigurationError(f"exercise is missing {key!r}")

    position = data.get("counterpoint_position", "above")
    if position not in ("above", "below"):
        raise ConfigurationError(f"counterpoint_position must be 'above' or 'below', got {position!r}")

    counterpoint = None
    if data.get("counterpoint") is not None:
        counterpoint = tuple(_list_of(data, "counterpoint"))

    exercise = Exercise(
        species=data["species"],
        cantus_firmus=tuple(_list_of(data, "cantus_firmus")),
        counterpoint=counterpoint,
        counterpoint_above=position == "above",
        scoring=_parse_scoring(data["scoring"]) if "scoring" in data else None,
        source_file=source_file,
    )
    exercise.validator()
    return exercise
