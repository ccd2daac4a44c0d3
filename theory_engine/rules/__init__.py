"""Counterpoint rules, registered by module in evaluation order."""

from typing import List, Type

from .base import Category, Rule, RuleViolation, Severity, StepWindow
from .cadence import ALL_CADENCE_RULES
from .figuration import ALL_FIGURATION_RULES
from .melodic import ALL_MELODIC_RULES
from .overlap import ALL_OVERLAP_RULES
from .parallels import ALL_PARALLEL_RULES
from .vertical import ALL_VERTICAL_RULES

# Registration order decides the order of violations at one position.
ALL_RULE_CLASSES: List[Type] = (
    ALL_VERTICAL_RULES
    + ALL_PARALLEL_RULES
    + ALL_MELODIC_RULES
    + ALL_FIGURATION_RULES
    + ALL_CADENCE_RULES
    + ALL_OVERLAP_RULES
)

__all__ = [
    "ALL_RULE_CLASSES",
    "Category",
    "Rule",
    "RuleViolation",
    "Severity",
    "StepWindow",
]
