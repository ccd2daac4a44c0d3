"""Free-text answer matching for chord-construction tasks.

An answer matches when its normalized form is a member of the task's
acceptable-answer set.  The set is built compositionally:

    root spellings x quality synonyms x inversion suffixes

Inversion suffixes for root position are '', 'root', 'root position' and
'/0'.  For inversion n they are '/n', '/first', 'first inversion',
'1st inversion', 'inv1', 'inversion 1' and '/<bass>' for every spelling of
the sounding bass note.  Symmetric chords (augmented, diminished 7th) also
accept every alternate root of the same sounding pitches, with inversion
labels counted from that root.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .chord_types import matchable_synonyms
from .chords import ChordSpec, GeneratedTask, GeneratorConfig, analyze_chord
from .music_theory import fold_text, parse_note_name, spellings_for

MAX_ANSWER_LENGTH = 64

_ORDINAL_WORDS = {1: "first", 2: "second", 3: "third", 4: "fourth"}
_ORDINAL_NUMBERS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th"}

_ROOT_POSITION_SUFFIXES = ("", "root", "root position", "/0")

# Folded input: root letter, optional accidental, remainder, optional slash part.
_CANDIDATE_RE = re.compile(r"^([a-g])([#b]?)([^/]*)(?:/(.*))?$")

# Non-match reasons.
REASON_EMPTY = "empty"
REASON_UNRECOGNIZED = "unrecognized"
REASON_ROOT = "root"
REASON_QUALITY = "quality_or_inversion"


@dataclass(frozen=True)
class AnswerCandidate:
    """A raw answer split into the parts the matcher reasons about."""
    raw: str
    normalized: str
    root_text: str
    remainder: str
    slash: Optional[str] = None

    @property
    def root_pitch_class(self) -> Optional[int]:
        return parse_note_name(self.root_text)


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    canonical_form: str
    normalized_input: str
    matched_form: str = ""
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matched": self.matched,
            "canonical_form": self.canonical_form,
            "normalized_input": self.normalized_input,
            "matched_form": self.matched_form,
            "reason": self.reason,
        }


def normalize_answer(raw: str) -> str:
    """Truncate to MAX_ANSWER_LENGTH, then fold case, accidentals and whitespace."""
    return fold_text(raw[:MAX_ANSWER_LENGTH])


def parse_candidate(raw: str) -> Optional[AnswerCandidate]:
    """Split an answer into root, remainder and slash part; None if no root letter."""
    normalized = normalize_answer(raw)
    m = _CANDIDATE_RE.match(normalized)
    if not m:
        return None
    letter, accidental, remainder, slash = m.groups()
    return AnswerCandidate(
        raw=raw,
        normalized=normalized,
        root_text=letter + accidental,
        remainder=remainder,
        slash=slash,
    )


# ---------------------------------------------------------------------------
# Acceptable-answer set
# ---------------------------------------------------------------------------


def inversion_suffixes(inversion: int, bass_pitch_class: int) -> List[str]:
    """Every accepted way of labeling an inversion index."""
    if inversion == 0:
        suffixes = list(_ROOT_POSITION_SUFFIXES)
    else:
        suffixes = [f"/{inversion}", f"inv{inversion}", f"inversion {inversion}"]
    if inversion in _ORDINAL_WORDS:
        word = _ORDINAL_WORDS[inversion]
        number = _ORDINAL_NUMBERS[inversion]
        suffixes += [f"/{word}", f"{word} inversion", f"{number} inversion", f"/{number}"]
    suffixes += [f"/{spelling}" for spelling in spellings_for(bass_pitch_class)]
    return suffixes


def _answers_for_spec(
    spec: ChordSpec, bass_pitch_class: int, allow_unlabeled: bool
) -> Dict[str, str]:
    suffixes = inversion_suffixes(spec.inversion, bass_pitch_class)
    if spec.inversion and allow_unlabeled:
        suffixes.append("")
    answers: Dict[str, str] = {}
    synonyms = matchable_synonyms(spec.chord_type)
    for root in spellings_for(spec.root):
        for synonym in synonyms:
            for suffix in suffixes:
                sep = " " if suffix[:1].isalpha() else ""
                form = f"{root}{synonym}{sep}{suffix}"
                answers.setdefault(fold_text(form), form)
    return answers


def _readings(task: GeneratedTask) -> List[ChordSpec]:
    """The task's own spec plus alternate roots for symmetric chord types."""
    readings = [task.spec]
    if task.spec.quality.is_symmetric:
        for spec in analyze_chord(task.pitches):
            if spec.chord_type is task.spec.chord_type and spec != task.spec:
                readings.append(spec)
    return readings


def acceptable_answers(
    task: GeneratedTask, config: Optional[GeneratorConfig] = None
) -> Dict[str, str]:
    """Map of folded accepted answer -> a readable form of that answer."""
    allow_unlabeled = not (config is not None and config.require_inversion_labeling)
    answers: Dict[str, str] = {}
    for spec in _readings(task):
        for folded, form in _answers_for_spec(
            spec, task.spec.bass_pitch_class, allow_unlabeled
        ).items():
            answers.setdefault(folded, form)
    return answers


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def validate_answer(
    raw_input: Any, task: GeneratedTask, config: Optional[GeneratorConfig] = None
) -> MatchResult:
    """Match a free-text answer against *task*.

    Never raises for bad input: empty, non-string or unparseable answers
    simply do not match.
    """
    canonical = task.primary_answer
    if not isinstance(raw_input, str):
        return MatchResult(False, canonical, "", reason=REASON_EMPTY if raw_input is None else REASON_UNRECOGNIZED)
    normalized = normalize_answer(raw_input)
    if not normalized:
        return MatchResult(False, canonical, normalized, reason=REASON_EMPTY)

    answers = acceptable_answers(task, config)
    if normalized in answers:
        return MatchResult(True, canonical, normalized, matched_form=answers[normalized])

    candidate = parse_candidate(raw_input)
    if candidate is None or candidate.root_pitch_class is None:
        reason = REASON_UNRECOGNIZED
    elif candidate.root_pitch_class not in {s.root for s in _readings(task)}:
        reason = REASON_ROOT
    else:
        reason = REASON_QUALITY
    return MatchResult(False, canonical, normalized, reason=reason)
