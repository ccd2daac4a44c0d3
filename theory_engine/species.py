"""Species profiles.

Each species fixes how many counterpoint notes sound against one cantus note
and which dissonance exceptions are legal.  Rules read these flags instead of
branching on the species number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .errors import ConfigurationError


@dataclass(frozen=True)
class SpeciesProfile:
    """Validation profile for one species."""

    species: int
    name: str
    units_per_measure: int

    # Dissonance exceptions
    passing_tones: bool = False
    neighbor_tones: bool = False
    cambiata: bool = False
    suspensions: bool = False

    # Rhythm
    opening_rest_allowed: bool = False
    ties: bool = False  # strong beat repeating the previous weak beat is held over

    def is_strong_beat(self, position: int) -> bool:
        """True for the first unit of each measure."""
        return position % self.units_per_measure == 0

    def measure_of(self, position: int) -> int:
        """1-based measure number of a position."""
        return position // self.units_per_measure + 1

    def beat_of(self, position: int) -> int:
        """1-based beat within the measure."""
        return position % self.units_per_measure + 1

    @property
    def weak_beat_dissonance(self) -> bool:
        """Whether any weak-beat dissonance can be legitimate."""
        return self.passing_tones or self.neighbor_tones


# ---------------------------------------------------------------------------
# Profile registry
# ---------------------------------------------------------------------------

_PROFILES: Dict[int, SpeciesProfile] = {
    1: SpeciesProfile(species=1, name="first species (note against note)", units_per_measure=1),
    2: SpeciesProfile(
        species=2,
        name="second species (two against one)",
        units_per_measure=2,
        passing_tones=True,
        opening_rest_allowed=True,
    ),
    3: SpeciesProfile(
        species=3,
        name="third species (four against one)",
        units_per_measure=4,
        passing_tones=True,
        neighbor_tones=True,
        cambiata=True,
        opening_rest_allowed=True,
    ),
    4: SpeciesProfile(
        species=4,
        name="fourth species (syncopation)",
        units_per_measure=2,
        suspensions=True,
        opening_rest_allowed=True,
        ties=True,
    ),
    5: SpeciesProfile(
        species=5,
        name="fifth species (florid)",
        units_per_measure=4,
        passing_tones=True,
        neighbor_tones=True,
        cambiata=True,
        suspensions=True,
        opening_rest_allowed=True,
        ties=True,
    ),
}


def get_species_profile(species: int) -> SpeciesProfile:
    """Look up a SpeciesProfile by number (1-5)."""
    if isinstance(species, bool) or not isinstance(species, int) or species not in _PROFILES:
        raise ConfigurationError(f"species must be one of 1-5, got {species!r}")
    return _PROFILES[species]


def all_species() -> List[int]:
    return list(_PROFILES.keys())
