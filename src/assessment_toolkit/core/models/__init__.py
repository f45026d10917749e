"""
Core Models Package

Immutable data models shared by every part of the assembly engine.

All models in this package are frozen dataclasses. This ensures:
1. The engine never mutates an item it was given
2. Safe to pass between threads/processes
3. Items can be used as dict keys or in sets
"""

from .items import (
    Item,
    Difficulty,
    CognitiveLevel,
    KnowledgeDimension,
    DIFFICULTY_LEVELS,
    COGNITIVE_LEVELS,
)
from .constraints import Constraint, ConstraintKind
from .results import (
    AssemblyMetrics,
    AssemblyResult,
    BalanceReport,
    LengthAlternative,
    LengthRecommendation,
    calculate_metrics,
)

__all__ = [
    "Item",
    "Difficulty",
    "CognitiveLevel",
    "KnowledgeDimension",
    "DIFFICULTY_LEVELS",
    "COGNITIVE_LEVELS",
    "Constraint",
    "ConstraintKind",
    "AssemblyMetrics",
    "AssemblyResult",
    "BalanceReport",
    "LengthAlternative",
    "LengthRecommendation",
    "calculate_metrics",
]
