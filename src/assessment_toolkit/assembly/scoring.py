"""
Module: assembly.scoring

Purpose:
    Combine per-constraint satisfactions into the single objective the
    selection strategies maximise, and threshold satisfactions into the
    per-kind report.

Scoring policy:
    The default policy is a priority-weighted linear sum of [0, 1]
    satisfactions. This is a modelling simplification: it treats
    constraints as independent and linearly substitutable. Strategies
    only see a ScoringPolicy, so the combination can be replaced (e.g. by
    a lexicographic ordering) without touching the evaluators.

Key Classes:
    - ScoringPolicy: Abstract combination of satisfactions
    - WeightedSumPolicy: Σ priority_i × satisfaction_i

Key Functions:
    - sort_by_priority(): Stable descending-priority order
    - check_constraints(): Kind -> satisfaction >= threshold
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS
from assessment_toolkit.core.models import Constraint, Item

from .evaluators import evaluate_constraint


def sort_by_priority(constraints: Sequence[Constraint]) -> List[Constraint]:
    """Constraints by descending priority; ties keep input order."""
    return sorted(constraints, key=lambda c: -c.priority)


class ScoringPolicy(ABC):
    """Combines constraint satisfactions for a selection into one score."""

    name: str = "policy"

    @abstractmethod
    def score(self, selection: Sequence[Item], constraints: Sequence[Constraint]) -> float:
        """Objective value of a selection (higher is better)."""


class WeightedSumPolicy(ScoringPolicy):
    """
    Priority-weighted sum of satisfactions.

    Example:
        >>> WeightedSumPolicy().score(items, [Constraint.time_limit(60, priority=2)])
        2.0
    """

    name = "weighted_sum"

    def score(self, selection: Sequence[Item], constraints: Sequence[Constraint]) -> float:
        total = 0.0
        for constraint in constraints:
            total += constraint.priority * evaluate_constraint(selection, constraint)
        return total


def constraint_satisfactions(
    selection: Sequence[Item], constraints: Sequence[Constraint]
) -> Dict[str, float]:
    """
    Satisfaction per constraint kind.

    When several constraints share a kind, the lowest satisfaction is kept.
    """
    scores: Dict[str, float] = {}
    for constraint in constraints:
        value = evaluate_constraint(selection, constraint)
        key = constraint.kind.value
        scores[key] = min(value, scores.get(key, value))
    return scores


def check_constraints(
    selection: Sequence[Item],
    constraints: Sequence[Constraint],
    threshold: float = DEFAULT_THRESHOLDS.satisfaction_threshold,
) -> Dict[str, bool]:
    """
    Re-evaluate each constraint once and threshold it.

    Returns:
        Constraint kind -> True iff every constraint of that kind reaches
        the threshold (default 0.8)
    """
    return {
        kind: value >= threshold
        for kind, value in constraint_satisfactions(selection, constraints).items()
    }
