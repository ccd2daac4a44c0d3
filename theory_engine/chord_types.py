"""Chord quality definitions: interval stacks, symbols and spoken names.

Single source of truth for every chord type the generator can produce and
the matcher can recognise.  Symbol synonyms are written the way students type
them; the matcher folds case and whitespace before comparing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from .errors import EngineFault
from .music_theory import fold_text, normalize_accidentals


class ChordType(Enum):
    """Closed set of chord qualities."""
    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"
    SUS2 = "sus2"
    SUS4 = "sus4"
    MAJOR7 = "major7"
    MINOR7 = "minor7"
    DOMINANT7 = "dominant7"
    DIMINISHED7 = "diminished7"
    HALF_DIMINISHED7 = "half_diminished7"
    MINOR_MAJOR7 = "minor_major7"
    MAJOR9 = "major9"
    MINOR9 = "minor9"
    DOMINANT9 = "dominant9"


@dataclass(frozen=True)
class ChordQuality:
    """Interval stack and notation for one chord type.

    Attributes:
        name:      Display name, e.g. "Minor 7th".
        intervals: Semitones above the root in stacking order (root first).
        symbol:    Primary chord symbol, e.g. "m7".
        synonyms:  Every accepted way of writing the quality, symbol included.
    """
    name: str
    intervals: Tuple[int, ...]
    symbol: str
    synonyms: Tuple[str, ...]

    @property
    def note_count(self) -> int:
        return len(self.intervals)

    @property
    def pitch_classes(self) -> FrozenSet[int]:
        """Pitch-class set of the chord built on C."""
        return frozenset(i % 12 for i in self.intervals)

    @property
    def symmetry_period(self) -> int:
        """Smallest transposition (1-12) that maps the pitch-class set onto itself."""
        pcs = self.pitch_classes
        for shift in range(1, 12):
            if frozenset((p + shift) % 12 for p in pcs) == pcs:
                return shift
        return 12

    @property
    def is_symmetric(self) -> bool:
        """True for augmented triads and diminished sevenths (equal divisions of the octave)."""
        return self.symmetry_period < 12


CHORD_QUALITIES: Dict[ChordType, ChordQuality] = {
    # Triads
    ChordType.MAJOR: ChordQuality(
        name="Major", intervals=(0, 4, 7), symbol="",
        synonyms=("", "maj", "major", "M"),
    ),
    ChordType.MINOR: ChordQuality(
        name="Minor", intervals=(0, 3, 7), symbol="m",
        synonyms=("m", "min", "minor", "-"),
    ),
    ChordType.DIMINISHED: ChordQuality(
        name="Diminished", intervals=(0, 3, 6), symbol="dim",
        synonyms=("dim", "diminished", "°", "o"),
    ),
    ChordType.AUGMENTED: ChordQuality(
        name="Augmented", intervals=(0, 4, 8), symbol="aug",
        synonyms=("aug", "augmented", "+", "#5"),
    ),
    ChordType.SUS2: ChordQuality(
        name="Suspended 2nd", intervals=(0, 2, 7), symbol="sus2",
        synonyms=("sus2", "suspended 2nd", "suspended second"),
    ),
    ChordType.SUS4: ChordQuality(
        name="Suspended 4th", intervals=(0, 5, 7), symbol="sus4",
        synonyms=("sus4", "sus", "suspended 4th", "suspended fourth"),
    ),
    # Seventh chords
    ChordType.MAJOR7: ChordQuality(
        name="Major 7th", intervals=(0, 4, 7, 11), symbol="maj7",
        synonyms=("maj7", "ma7", "M7", "Δ7", "Δ", "major 7", "major 7th", "major seventh"),
    ),
    ChordType.MINOR7: ChordQuality(
        name="Minor 7th", intervals=(0, 3, 7, 10), symbol="m7",
        synonyms=("m7", "min7", "-7", "minor 7", "minor 7th", "minor seventh"),
    ),
    ChordType.DOMINANT7: ChordQuality(
        name="Dominant 7th", intervals=(0, 4, 7, 10), symbol="7",
        synonyms=("7", "dom7", "dominant 7", "dominant 7th", "dominant seventh"),
    ),
    ChordType.DIMINISHED7: ChordQuality(
        name="Diminished 7th", intervals=(0, 3, 6, 9), symbol="dim7",
        synonyms=("dim7", "°7", "o7", "diminished 7", "diminished 7th", "diminished seventh"),
    ),
    ChordType.HALF_DIMINISHED7: ChordQuality(
        name="Half-Diminished 7th", intervals=(0, 3, 6, 10), symbol="m7b5",
        synonyms=("m7b5", "min7b5", "-7b5", "ø7", "ø", "half diminished",
                  "half diminished 7th", "half-diminished 7th", "half-diminished"),
    ),
    ChordType.MINOR_MAJOR7: ChordQuality(
        name="Minor-Major 7th", intervals=(0, 3, 7, 11), symbol="m(maj7)",
        synonyms=("m(maj7)", "mmaj7", "minmaj7", "-maj7", "-Δ7",
                  "minor major 7th", "minor-major 7th"),
    ),
    # Ninth chords
    ChordType.MAJOR9: ChordQuality(
        name="Major 9th", intervals=(0, 4, 7, 11, 14), symbol="maj9",
        synonyms=("maj9", "Δ9", "major 9", "major 9th", "major ninth"),
    ),
    ChordType.MINOR9: ChordQuality(
        name="Minor 9th", intervals=(0, 3, 7, 10, 14), symbol="m9",
        synonyms=("m9", "min9", "-9", "minor 9", "minor 9th", "minor ninth"),
    ),
    ChordType.DOMINANT9: ChordQuality(
        name="Dominant 9th", intervals=(0, 4, 7, 10, 14), symbol="9",
        synonyms=("9", "dom9", "dominant 9", "dominant 9th", "dominant ninth"),
    ),
}

TRIAD_TYPES: Tuple[ChordType, ...] = (
    ChordType.MAJOR, ChordType.MINOR, ChordType.DIMINISHED, ChordType.AUGMENTED,
)

SEVENTH_TYPES: Tuple[ChordType, ...] = (
    ChordType.MAJOR7, ChordType.MINOR7, ChordType.DOMINANT7,
    ChordType.DIMINISHED7, ChordType.HALF_DIMINISHED7,
)


def quality_of(chord_type: ChordType) -> ChordQuality:
    try:
        return CHORD_QUALITIES[chord_type]
    except KeyError:
        raise EngineFault(f"no quality table entry for {chord_type!r}") from None


def matchable_synonyms(chord_type: ChordType) -> Tuple[str, ...]:
    """Synonyms usable for case-insensitive matching, as written.

    A synonym that only differs from another quality's primary symbol by case
    ('M' vs 'm', 'M7' vs 'm7') is dropped, as are synonyms that fold to the
    same text as an earlier one.
    """
    others = {
        fold_text(q.symbol) for ct, q in CHORD_QUALITIES.items() if ct is not chord_type
    }
    result: List[str] = []
    seen = set()
    for syn in quality_of(chord_type).synonyms:
        folded = fold_text(syn)
        if folded not in others and folded not in seen:
            seen.add(folded)
            result.append(syn)
    return tuple(result)


def chord_type_from_name(name: str) -> ChordType:
    """Look up a ChordType by enum value ('minor7'), member name or symbol.

    Symbols and synonyms are case-sensitive: 'M7' is neither 'm7' nor a
    matchable spelling of 'maj7'.  Raises KeyError for unknown names; loaders
    turn that into a ConfigurationError.
    """
    key = name.strip()
    for ct in ChordType:
        if key == ct.value or key.upper() == ct.name:
            return ct
    spelled = normalize_accidentals(key)
    if spelled:
        for ct, quality in CHORD_QUALITIES.items():
            if spelled == quality.symbol or spelled in matchable_synonyms(ct):
                return ct
    raise KeyError(name)


def _check_synonym_collisions() -> None:
    """Every matchable synonym must identify exactly one chord type."""
    owner: Dict[str, ChordType] = {}
    for ct, quality in CHORD_QUALITIES.items():
        matchable = [fold_text(s) for s in matchable_synonyms(ct)]
        if fold_text(quality.symbol) not in matchable:
            raise EngineFault(f"{ct.name}: primary symbol missing from synonyms")
        for folded in matchable:
            if folded in owner and owner[folded] is not ct:
                raise EngineFault(
                    f"synonym {folded!r} shared by {owner[folded].name} and {ct.name}"
                )
            owner[folded] = ct


_check_synonym_collisions()


def all_chord_types() -> List[ChordType]:
    return list(CHORD_QUALITIES)
