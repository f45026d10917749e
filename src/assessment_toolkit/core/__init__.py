"""
Assessment Toolkit Core Package

Shared data models, input validation and serialization used by the
assembly engine.

1. **Immutable Data Models**
   - Items, constraints and results are frozen dataclasses
   - The engine selects references to items, it never edits them

2. **Calculated Aggregates (Never Stored)**
   - Counts, totals and flags are derived from the selection

3. **Validation In Front Of The Core**
   - Malformed payloads are rejected by `core.schemas` before assembly
"""

from .models import (
    Item,
    Difficulty,
    CognitiveLevel,
    KnowledgeDimension,
    Constraint,
    ConstraintKind,
    AssemblyMetrics,
    AssemblyResult,
    BalanceReport,
    LengthRecommendation,
)
from .schemas import InvalidInputError

__all__ = [
    "Item",
    "Difficulty",
    "CognitiveLevel",
    "KnowledgeDimension",
    "Constraint",
    "ConstraintKind",
    "AssemblyMetrics",
    "AssemblyResult",
    "BalanceReport",
    "LengthRecommendation",
    "InvalidInputError",
]
