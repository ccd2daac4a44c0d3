"""Pure note-naming functions: spellings, enharmonics, note-name parsing.

No I/O.  Used by chords.py, matcher.py and report.py.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from .model import FLAT_NOTE_NAMES, NOTE_NAMES

# ---------------------------------------------------------------------------
# Enharmonic spelling tables
# ---------------------------------------------------------------------------

# Every single-accidental spelling of each pitch class, preferred form first.
SPELLINGS: Dict[int, Tuple[str, ...]] = {
    0: ("C", "B#"),
    1: ("C#", "Db"),
    2: ("D",),
    3: ("D#", "Eb"),
    4: ("E", "Fb"),
    5: ("F", "E#"),
    6: ("F#", "Gb"),
    7: ("G",),
    8: ("G#", "Ab"),
    9: ("A",),
    10: ("A#", "Bb"),
    11: ("B", "Cb"),
}

# Bidirectional sharp <-> flat table (plus the white-key respellings).
ENHARMONIC_EQUIVALENTS: Dict[str, str] = {}
for _names in SPELLINGS.values():
    if len(_names) == 2:
        ENHARMONIC_EQUIVALENTS[_names[0]] = _names[1]
        ENHARMONIC_EQUIVALENTS[_names[1]] = _names[0]

_LETTER_PC: Dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]?)$")

# Unicode forms students paste in from notation software.
_UNICODE_ACCIDENTALS = {
    "♯": "#",  # sharp sign
    "♭": "b",  # flat sign
    "♮": "",   # natural sign
}


def normalize_accidentals(text: str) -> str:
    """Replace unicode sharp/flat/natural signs with ASCII forms."""
    for symbol, ascii_form in _UNICODE_ACCIDENTALS.items():
        text = text.replace(symbol, ascii_form)
    return text


def fold_text(text: str) -> str:
    """Canonical comparison form: ASCII accidentals, casefolded, no whitespace."""
    text = normalize_accidentals(text).replace("º", "°")
    return "".join(text.casefold().split())


def note_name(pitch: int, prefer_flats: bool = False) -> str:
    """Pitch-class name of *pitch* without octave, sharp or flat spelling."""
    names = FLAT_NOTE_NAMES if prefer_flats else NOTE_NAMES
    return names[pitch % 12]


def spellings_for(pitch_class: int) -> Tuple[str, ...]:
    """All accepted spellings of a pitch class, preferred form first."""
    return SPELLINGS[pitch_class % 12]


def enharmonic_equivalents(name: str) -> Tuple[str, ...]:
    """Return *name* plus every other spelling of the same pitch class.

    Unknown names yield an empty tuple.
    """
    pc = parse_note_name(name)
    if pc is None:
        return ()
    others = tuple(s for s in SPELLINGS[pc] if s != _canonical_case(name))
    return (_canonical_case(name),) + others


def parse_note_name(text: str) -> Optional[int]:
    """Parse a note name ('C#', 'bb', 'E♭') to a pitch class, or None."""
    text = normalize_accidentals(text.strip())
    m = _NOTE_RE.match(text)
    if not m:
        return None
    letter, accidental = m.group(1).upper(), m.group(2)
    pc = _LETTER_PC[letter]
    if accidental == "#":
        pc += 1
    elif accidental == "b":
        pc -= 1
    return pc % 12


def _canonical_case(name: str) -> str:
    name = normalize_accidentals(name.strip())
    return name[:1].upper() + name[1:].lower()
