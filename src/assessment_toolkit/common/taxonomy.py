"""
Module: common.taxonomy

Purpose:
    Helpers for normalising the categorical labels items are tagged with
    (difficulty, cognitive level, knowledge dimension). Upstream
    classification steps use several spellings for the same category,
    so labels are resolved case-insensitively against an alias table.

Key Functions:
    - normalise_label(): Lower-case, trim and collapse separators
    - resolve_difficulty(): Resolve a difficulty label to its canonical name
    - resolve_cognitive_level(): Resolve a cognitive level label
    - resolve_knowledge_dimension(): Resolve a knowledge dimension label

Used By:
    - assessment_toolkit.core.models.items: Enum parsing
"""

from __future__ import annotations

import re
from typing import Dict, Optional

__all__ = [
    "normalise_label",
    "resolve_difficulty",
    "resolve_cognitive_level",
    "resolve_knowledge_dimension",
    "DIFFICULTY_ALIASES",
    "COGNITIVE_LEVEL_ALIASES",
]


_SEPARATOR_RE = re.compile(r"[\s_\-]+")


DIFFICULTY_ALIASES: Dict[str, str] = {
    "easy": "easy",
    "low": "easy",
    "average": "average",
    "medium": "average",
    "moderate": "average",
    "difficult": "difficult",
    "hard": "difficult",
    "high": "difficult",
}

COGNITIVE_LEVEL_ALIASES: Dict[str, str] = {
    "remembering": "remembering",
    "remember": "remembering",
    "knowledge": "remembering",
    "understanding": "understanding",
    "understand": "understanding",
    "comprehension": "understanding",
    "applying": "applying",
    "apply": "applying",
    "application": "applying",
    "analyzing": "analyzing",
    "analysing": "analyzing",
    "analyze": "analyzing",
    "analyse": "analyzing",
    "analysis": "analyzing",
    "evaluating": "evaluating",
    "evaluate": "evaluating",
    "evaluation": "evaluating",
    "creating": "creating",
    "create": "creating",
    "synthesis": "creating",
}

KNOWLEDGE_DIMENSION_ALIASES: Dict[str, str] = {
    "factual": "factual",
    "conceptual": "conceptual",
    "procedural": "procedural",
    "metacognitive": "metacognitive",
    "meta cognitive": "metacognitive",
}


def normalise_label(value: Optional[str]) -> str:
    """
    Normalise a category label for lookup.

    Args:
        value: Raw label (e.g., "  Analyzing ", "meta-cognitive").

    Returns:
        Lower-cased label with separators collapsed to single spaces.
        Returns an empty string if value is empty.

    Example:
        >>> normalise_label("Meta_Cognitive")
        'meta cognitive'
    """
    if not value:
        return ""
    return _SEPARATOR_RE.sub(" ", str(value).strip().lower())


def _resolve(value: Optional[str], aliases: Dict[str, str], kind: str) -> str:
    key = normalise_label(value)
    try:
        return aliases[key]
    except KeyError:
        valid = ", ".join(sorted(set(aliases.values())))
        raise ValueError(f"Unknown {kind} label: {value!r} (expected one of: {valid})") from None


def resolve_difficulty(value: Optional[str]) -> str:
    """
    Resolve a difficulty label to its canonical name.

    Example:
        >>> resolve_difficulty("Hard")
        'difficult'
    """
    return _resolve(value, DIFFICULTY_ALIASES, "difficulty")


def resolve_cognitive_level(value: Optional[str]) -> str:
    """
    Resolve a cognitive level label to its canonical name.

    Example:
        >>> resolve_cognitive_level("analyse")
        'analyzing'
    """
    return _resolve(value, COGNITIVE_LEVEL_ALIASES, "cognitive level")


def resolve_knowledge_dimension(value: Optional[str]) -> str:
    """Resolve a knowledge dimension label to its canonical name."""
    return _resolve(value, KNOWLEDGE_DIMENSION_ALIASES, "knowledge dimension")
