"""
Module: results

Purpose:
    Result dataclasses returned by the assembly engine: metrics for one
    assembled form, the AssemblyResult itself, and the length and balance
    diagnostics. All are created fresh per call; the caller owns
    durability.

Key Classes:
    - AssemblyMetrics: Aggregates of a selection (counts, time, points)
    - AssemblyResult: One assembled form
    - LengthAlternative / LengthRecommendation: Length optimizer output
    - BalanceReport: Content balance diagnostics

Key Functions:
    - calculate_metrics(): Aggregate a selection into AssemblyMetrics

Dependencies:
    - dataclasses (std)
    - .items.Item

Used By:
    - assembly.assembler, assembly.parallel, assembly.length, assembly.balance
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Sequence, Tuple

from .items import Difficulty, Item


@dataclass(frozen=True)
class AssemblyMetrics:
    """
    Aggregates derived from a selection.

    Attributes:
        topic_counts: Items per topic
        difficulty_counts: Items per difficulty band
        cognitive_level_counts: Items per cognitive level
        total_time: Sum of estimated minutes
        total_points: Sum of points
    """

    topic_counts: Dict[str, int]
    difficulty_counts: Dict[str, int]
    cognitive_level_counts: Dict[str, int]
    total_time: float
    total_points: float

    @property
    def item_count(self) -> int:
        return sum(self.topic_counts.values())

    @property
    def mean_difficulty(self) -> float:
        """Mean difficulty rank (easy=1, average=2, difficult=3); 0.0 when empty."""
        count = sum(self.difficulty_counts.values())
        if count == 0:
            return 0.0
        return sum(Difficulty(k).rank * v for k, v in self.difficulty_counts.items()) / count

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic_counts": dict(self.topic_counts),
            "difficulty_counts": dict(self.difficulty_counts),
            "cognitive_level_counts": dict(self.cognitive_level_counts),
            "total_time": self.total_time,
            "total_points": self.total_points,
        }


def calculate_metrics(selection: Sequence[Item]) -> AssemblyMetrics:
    """
    Aggregate a selection into metrics.

    Count dictionaries only contain categories that occur in the selection,
    in first-seen order.

    Example:
        >>> calculate_metrics([]).total_time
        0.0
    """
    return AssemblyMetrics(
        topic_counts=dict(Counter(item.topic for item in selection)),
        difficulty_counts=dict(Counter(item.difficulty.value for item in selection)),
        cognitive_level_counts=dict(Counter(item.cognitive_level.value for item in selection)),
        total_time=float(sum(item.estimated_time_minutes for item in selection)),
        total_points=float(sum(item.points for item in selection)),
    )


@dataclass(frozen=True)
class AssemblyResult:
    """
    One assembled form.

    Attributes:
        selected_items: Items in the order they were selected
        score: Weighted total achieved by the last accepted item
        constraints_satisfied: Constraint kind -> satisfaction >= threshold
        metrics: Aggregates of the final selection
        target_size: Requested number of items
        strategy: Name of the selection strategy that produced the form
        score_history: Score recorded at each accepted step

    Invariants:
        - len(selected_items) <= target_size
        - No duplicate item ids

    Example:
        >>> result = assemble_test(pool, constraints, 20)
        >>> result.is_undersized
        False
    """

    selected_items: Tuple[Item, ...]
    score: float
    constraints_satisfied: Dict[str, bool]
    metrics: AssemblyMetrics
    target_size: int = 0
    strategy: str = "greedy"
    score_history: Tuple[float, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate result on construction."""
        ids = [item.id for item in self.selected_items]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate items in assembly result")

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def item_ids(self) -> Tuple[str, ...]:
        return tuple(item.id for item in self.selected_items)

    @property
    def item_count(self) -> int:
        return len(self.selected_items)

    @property
    def is_undersized(self) -> bool:
        """True if fewer items were selected than requested."""
        return self.item_count < self.target_size

    @property
    def shortfall(self) -> int:
        """How many items short of the target the selection is."""
        return max(0, self.target_size - self.item_count)

    @property
    def unmet_constraints(self) -> Tuple[str, ...]:
        """Constraint kinds below the satisfaction threshold."""
        return tuple(kind for kind, ok in self.constraints_satisfied.items() if not ok)

    @property
    def all_constraints_satisfied(self) -> bool:
        return all(self.constraints_satisfied.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_ids": list(self.item_ids),
            "score": self.score,
            "constraints_satisfied": dict(self.constraints_satisfied),
            "metrics": self.metrics.to_dict(),
            "target_size": self.target_size,
            "strategy": self.strategy,
            "score_history": list(self.score_history),
        }

    def __repr__(self) -> str:
        return (
            f"AssemblyResult(items={self.item_count}/{self.target_size}, "
            f"score={self.score:.3f}, unmet={list(self.unmet_constraints)})"
        )


@dataclass(frozen=True)
class LengthAlternative:
    """An alternative assessment length with its trade-offs."""

    length: int
    predicted_reliability: float
    estimated_minutes: float
    pros: Tuple[str, ...] = ()
    cons: Tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "predicted_reliability": self.predicted_reliability,
            "estimated_minutes": self.estimated_minutes,
            "pros": list(self.pros),
            "cons": list(self.cons),
        }


@dataclass(frozen=True)
class LengthRecommendation:
    """
    Output of the length optimizer.

    Attributes:
        recommended_length: Length within [min_length, max_length]
        reasoning: Ordered human-readable adjustment trail
        predicted_reliability: Spearman-Brown estimate at the recommendation
        estimated_minutes: Time at the average minutes per item
        alternatives: Shorter / longer options
    """

    recommended_length: int
    reasoning: Tuple[str, ...]
    predicted_reliability: float = 0.0
    estimated_minutes: float = 0.0
    alternatives: Tuple[LengthAlternative, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommended_length": self.recommended_length,
            "reasoning": list(self.reasoning),
            "predicted_reliability": self.predicted_reliability,
            "estimated_minutes": self.estimated_minutes,
            "alternatives": [alt.to_dict() for alt in self.alternatives],
        }


@dataclass(frozen=True)
class BalanceReport:
    """Content balance diagnostics for a finished selection."""

    is_balanced: bool
    recommendations: Tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"is_balanced": self.is_balanced, "recommendations": list(self.recommendations)}
