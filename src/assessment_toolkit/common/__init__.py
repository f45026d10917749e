"""
Shared helpers for the assessment toolkit.

- thresholds: centralized constants (satisfaction threshold, defaults)
- taxonomy: label normalisation for difficulty / cognitive levels
"""

from .thresholds import AssemblyThresholds, DEFAULT_THRESHOLDS
from .taxonomy import (
    normalise_label,
    resolve_difficulty,
    resolve_cognitive_level,
    resolve_knowledge_dimension,
)

__all__ = [
    "AssemblyThresholds",
    "DEFAULT_THRESHOLDS",
    "normalise_label",
    "resolve_difficulty",
    "resolve_cognitive_level",
    "resolve_knowledge_dimension",
]
