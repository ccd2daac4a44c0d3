"""Chord-construction exercises: specs, voicings, generation and analysis.

``generate_chord`` turns a ``GeneratorConfig`` into an immutable
``GeneratedTask``.  ``analyze_chord`` is the inverse: it names every chord
whose pitch-class set equals a set of sounding pitches, and is what the
matcher uses to find alternate readings of symmetric chords.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .chord_types import TRIAD_TYPES, ChordQuality, ChordType, quality_of
from .errors import ConfigurationError
from .model import MAX_PITCH, MIN_PITCH, check_pitch, pitch_to_name
from .music_theory import note_name

logger = logging.getLogger(__name__)

INVERSION_NAMES: Dict[int, str] = {
    0: "root position",
    1: "1st inversion",
    2: "2nd inversion",
    3: "3rd inversion",
    4: "4th inversion",
}


# ---------------------------------------------------------------------------
# ChordSpec
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChordSpec:
    """Root pitch class, chord type and inversion index."""
    root: int
    chord_type: ChordType
    inversion: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.root, bool) or not isinstance(self.root, int) or not 0 <= self.root <= 11:
            raise ConfigurationError(f"root pitch class must be 0-11, got {self.root!r}")
        if not isinstance(self.chord_type, ChordType):
            raise ConfigurationError(f"unknown chord type {self.chord_type!r}")
        count = quality_of(self.chord_type).note_count
        if not 0 <= self.inversion < count:
            raise ConfigurationError(
                f"inversion {self.inversion} invalid for {self.chord_type.value} "
                f"({count} notes supports 0-{count - 1})"
            )

    @property
    def quality(self) -> ChordQuality:
        return quality_of(self.chord_type)

    @property
    def pitch_classes(self) -> frozenset:
        return frozenset((self.root + i) % 12 for i in self.quality.intervals)

    @property
    def bass_pitch_class(self) -> int:
        """Pitch class that sounds lowest once the inversion is applied."""
        return (self.root + self.quality.intervals[self.inversion]) % 12


def stack_pitches(spec: ChordSpec, root_pitch: int) -> Tuple[int, ...]:
    """Close-position voicing of *spec* starting from *root_pitch*.

    Each inversion step lifts the lowest note by octaves until it sits above
    the current top note, so the result is always strictly ascending.
    """
    notes = [root_pitch + i for i in spec.quality.intervals]
    for _ in range(spec.inversion):
        lowest = notes.pop(0)
        while lowest <= notes[-1]:
            lowest += 12
        notes.append(lowest)
    return tuple(notes)


def octave_placements(spec: ChordSpec, window: Tuple[int, int]) -> List[Tuple[int, ...]]:
    """Every whole-octave transposition of the voicing that fits in *window*."""
    low, high = window
    base = stack_pitches(spec, spec.root)
    placements = []
    # Lowest shift that could reach the window; base starts in MIDI octave -1.
    shift = ((low - base[0]) // 12) * 12
    while base[0] + shift <= high:
        lo, hi = base[0] + shift, base[-1] + shift
        if lo >= low and hi <= high:
            placements.append(tuple(p + shift for p in base))
        shift += 12
    return placements


# ---------------------------------------------------------------------------
# GeneratedTask
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratedTask:
    """One chord-construction exercise.  Never mutated after creation."""
    spec: ChordSpec
    pitches: Tuple[int, ...]
    prefer_flats: bool = False

    def __post_init__(self) -> None:
        if not self.pitches:
            raise ConfigurationError("a task needs at least one pitch")
        for p in self.pitches:
            check_pitch(p)
        if any(b <= a for a, b in zip(self.pitches, self.pitches[1:])):
            raise ConfigurationError(f"task pitches must be strictly ascending: {self.pitches}")
        if frozenset(p % 12 for p in self.pitches) != self.spec.pitch_classes:
            raise ConfigurationError("task pitches do not spell the chord spec")
        if self.pitches[0] % 12 != self.spec.bass_pitch_class:
            raise ConfigurationError("lowest task pitch does not match the inversion")

    @property
    def root_name(self) -> str:
        return note_name(self.spec.root, self.prefer_flats)

    @property
    def bass_pitch(self) -> int:
        return self.pitches[0]

    @property
    def base_symbol(self) -> str:
        """Root plus quality symbol, e.g. 'Dm' or 'Bbmaj7'."""
        return f"{self.root_name}{self.spec.quality.symbol}"

    @property
    def primary_answer(self) -> str:
        """Canonical textual answer, e.g. 'Dm/1' for D minor first inversion."""
        if self.spec.inversion:
            return f"{self.base_symbol}/{self.spec.inversion}"
        return self.base_symbol

    @property
    def display_name(self) -> str:
        name = f"{self.root_name} {self.spec.quality.name}"
        if self.spec.inversion:
            name += f" ({INVERSION_NAMES.get(self.spec.inversion, f'inversion {self.spec.inversion}')})"
        return name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root_name,
            "root_pitch_class": self.spec.root,
            "chord_type": self.spec.chord_type.value,
            "inversion": self.spec.inversion,
            "pitches": list(self.pitches),
            "pitch_names": [pitch_to_name(p) for p in self.pitches],
            "primary_answer": self.primary_answer,
            "display_name": self.display_name,
        }


# ---------------------------------------------------------------------------
# GeneratorConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratorConfig:
    """What a chord-construction level may ask for.

    Attributes:
        chord_types:  Allowed chord types (sampled uniformly).
        inversions:   Allowed inversion indices; indices a type cannot take
                      are ignored for that type.
        octave_window: Inclusive (low, high) MIDI range every pitch must fit.
        roots:        Allowed root pitch classes.
        avoid_repeat: Resample when the draw equals the previous task.
        max_retries:  Resample bound before a duplicate is accepted.
        require_inversion_labeling: Inverted answers must name the inversion.
        prefer_flats: Spell black-key roots with flats in task text.
    """
    chord_types: Tuple[ChordType, ...] = TRIAD_TYPES
    inversions: Tuple[int, ...] = (0,)
    octave_window: Tuple[int, int] = (48, 72)
    roots: Tuple[int, ...] = tuple(range(12))
    avoid_repeat: bool = True
    max_retries: int = 20
    require_inversion_labeling: bool = False
    prefer_flats: bool = False

    def __post_init__(self) -> None:
        # Accept lists from JSON loaders; store tuples so the config stays hashable.
        for name in ("chord_types", "inversions", "octave_window", "roots"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if not self.chord_types:
            raise ConfigurationError("chord_types must not be empty")
        for ct in self.chord_types:
            if not isinstance(ct, ChordType):
                raise ConfigurationError(f"unknown chord type {ct!r}")
        if not self.inversions:
            raise ConfigurationError("inversions must not be empty")
        for inv in self.inversions:
            if isinstance(inv, bool) or not isinstance(inv, int) or inv < 0:
                raise ConfigurationError(f"inversion must be a non-negative integer, got {inv!r}")
        if not self.roots:
            raise ConfigurationError("roots must not be empty")
        for r in self.roots:
            if isinstance(r, bool) or not isinstance(r, int) or not 0 <= r <= 11:
                raise ConfigurationError(f"root pitch class must be 0-11, got {r!r}")
        if len(self.octave_window) != 2:
            raise ConfigurationError("octave_window must be a (low, high) pair")
        low, high = self.octave_window
        if isinstance(low, bool) or isinstance(high, bool) \
                or not isinstance(low, int) or not isinstance(high, int):
            raise ConfigurationError(f"octave_window bounds must be integers: {self.octave_window}")
        if not MIN_PITCH <= low < high <= MAX_PITCH:
            raise ConfigurationError(
                f"octave_window {self.octave_window} must satisfy "
                f"{MIN_PITCH} <= low < high <= {MAX_PITCH}"
            )
        retries = self.max_retries
        if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
            raise ConfigurationError(f"max_retries must be a non-negative integer, got {retries!r}")

    def combinations(self) -> Dict[int, Dict[ChordType, List[int]]]:
        """Placeable (root -> type -> inversions) combinations.

        Raises:
            ConfigurationError: nothing in the configuration fits the window.
        """
        combos: Dict[int, Dict[ChordType, List[int]]] = {}
        for root in sorted(set(self.roots)):
            by_type: Dict[ChordType, List[int]] = {}
            for ct in _unique(self.chord_types):
                invs = [
                    inv for inv in sorted(set(self.inversions))
                    if inv < quality_of(ct).note_count
                    and octave_placements(ChordSpec(root, ct, inv), self.octave_window)
                ]
                if invs:
                    by_type[ct] = invs
            if by_type:
                combos[root] = by_type
        if not combos:
            raise ConfigurationError(
                f"no chord fits: types={[ct.value for ct in self.chord_types]} "
                f"inversions={list(self.inversions)} window={self.octave_window}"
            )
        return combos


def _unique(items: Sequence[Any]) -> List[Any]:
    seen: List[Any] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def generate_chord(
    config: GeneratorConfig,
    rng: Optional[random.Random] = None,
    previous: Optional[GeneratedTask] = None,
) -> GeneratedTask:
    """Draw a chord-construction task.

    Args:
        config: Level configuration.
        rng: Random source; pass a seeded ``random.Random`` for reproducible
            output.  A fresh unseeded source is used when omitted.
        previous: The task shown last, used for repeat avoidance.

    Raises:
        ConfigurationError: the configuration admits no chord.
    """
    combos = config.combinations()
    rng = rng if rng is not None else random.Random()

    task = _draw(config, combos, rng)
    if not config.avoid_repeat or previous is None:
        return task
    for attempt in range(config.max_retries):
        if task.spec != previous.spec:
            return task
        logger.debug("duplicate of previous task %s, resampling (%d)", task.primary_answer, attempt + 1)
        task = _draw(config, combos, rng)
    if task.spec == previous.spec:
        logger.info("accepting repeated task %s after %d retries", task.primary_answer, config.max_retries)
    return task


def _draw(
    config: GeneratorConfig,
    combos: Dict[int, Dict[ChordType, List[int]]],
    rng: random.Random,
) -> GeneratedTask:
    root = rng.choice(sorted(combos))
    by_type = combos[root]
    chord_type = rng.choice([ct for ct in _unique(config.chord_types) if ct in by_type])
    inversion = rng.choice(by_type[chord_type])
    spec = ChordSpec(root, chord_type, inversion)
    pitches = rng.choice(octave_placements(spec, config.octave_window))
    return GeneratedTask(spec=spec, pitches=pitches, prefer_flats=config.prefer_flats)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def analyze_chord(pitches: Sequence[int]) -> List[ChordSpec]:
    """Name every chord whose pitch-class set equals that of *pitches*.

    The inversion of each reading is taken from the lowest pitch.  Root
    position readings come first, then by root pitch class.  Symmetric
    chords (augmented, diminished 7th) yield one reading per possible root.
    """
    if not pitches:
        return []
    pcs = frozenset(p % 12 for p in pitches)
    bass = min(pitches) % 12
    readings: List[ChordSpec] = []
    for root in sorted(pcs):
        for ct in ChordType:
            quality = quality_of(ct)
            stack = [(root + i) % 12 for i in quality.intervals]
            if frozenset(stack) != pcs or len(set(stack)) != len(stack):
                continue
            readings.append(ChordSpec(root, ct, stack.index(bass)))
    readings.sort(key=lambda s: (s.inversion, s.root, list(ChordType).index(s.chord_type)))
    return readings


def validate_construction(pitches: Sequence[int], task: GeneratedTask) -> bool:
    """Check a chord the student built on the keyboard.

    The placed notes must hold exactly the task's pitch classes (one note per
    chord tone, any octave) with the task's bass pitch class lowest.
    """
    if not pitches:
        return False
    placed = sorted(p % 12 for p in pitches)
    expected = sorted(task.spec.pitch_classes)
    if placed != expected:
        return False
    return min(pitches) % 12 == task.spec.bass_pitch_class
