"""Exception types raised by the engine.

Two families are kept apart: ``ConfigurationError`` for bad caller-supplied
configuration (recoverable, detected up front) and ``EngineFault`` for broken
internal invariants (a defect in the engine itself).  Malformed answers are
not errors at all; they are ordinary non-matches.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Generator or validator configuration cannot produce a valid exercise."""


class EngineFault(RuntimeError):
    """An internal invariant failed.  Indicates a bug, not bad input."""
