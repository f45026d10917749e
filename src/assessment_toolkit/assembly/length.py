"""
Module: assembly.length

Purpose:
    Recommend an assessment length from the time limit, topic coverage and
    a reliability target, and explain each adjustment.

Key Functions:
    - optimize_test_length(): Main entry point
    - estimate_reliability(): Spearman-Brown prediction from a baseline

Algorithm:
    1. Start at the midpoint of [min_length, max_length]
    2. Time limit present: cap at floor(max_minutes / minutes_per_item)
    3. Topic coverage present: raise to topics × min_items_per_topic
    4. If predicted reliability is below target, scale the length by
       target / predicted (ceil); never above the time cap when one
       applies, never above max_length
    5. Clamp into [min_length, max_length]

    The reliability model assumes 0.7 at 20 items. It is a heuristic, not
    a psychometric estimate for a specific pool.

Used By:
    - assembly.controller: Target size when none is configured
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS, AssemblyThresholds
from assessment_toolkit.core.models import (
    Constraint,
    ConstraintKind,
    Item,
    LengthAlternative,
    LengthRecommendation,
)
from assessment_toolkit.core.schemas import InvalidInputError, validate_length_bounds

logger = logging.getLogger(__name__)


def estimate_reliability(length: int, thresholds: AssemblyThresholds = DEFAULT_THRESHOLDS) -> float:
    """
    Spearman-Brown predicted reliability for a length.

    ``ratio = L / L0``; ``r = ratio × r0 / (1 + (ratio - 1) × r0)``.

    Example:
        >>> round(estimate_reliability(20), 2)
        0.7
    """
    if length <= 0:
        return 0.0
    base = thresholds.baseline_reliability
    ratio = length / thresholds.baseline_length
    return ratio * base / (1 + (ratio - 1) * base)


def _first(constraints: Sequence[Constraint], kind: ConstraintKind) -> Optional[Constraint]:
    for constraint in constraints:
        if constraint.kind is kind:
            return constraint
    return None


def optimize_test_length(
    pool: Sequence[Item],
    constraints: Sequence[Constraint],
    min_length: int = 10,
    max_length: int = 100,
    target_reliability: float = 0.8,
    *,
    average_minutes_per_item: float = DEFAULT_THRESHOLDS.default_item_minutes,
    min_items_per_topic: int = DEFAULT_THRESHOLDS.min_items_per_topic,
    thresholds: AssemblyThresholds = DEFAULT_THRESHOLDS,
) -> LengthRecommendation:
    """
    Recommend an assessment length.

    Args:
        pool: Item pool; only its size is consulted, for a note
        constraints: The first time_limit and topic_coverage constraints
            are used
        min_length: Lower bound (inclusive)
        max_length: Upper bound (inclusive)
        target_reliability: Desired predicted reliability, in (0, 1)
        average_minutes_per_item: Minutes assumed per item
        min_items_per_topic: Items needed per configured topic

    Returns:
        LengthRecommendation with length in [min_length, max_length] and
        the ordered reasoning trail

    Raises:
        InvalidInputError: If bounds are negative or inverted, the
            reliability target is outside (0, 1), or minutes per item is
            not positive

    Example:
        >>> rec = optimize_test_length(pool, [Constraint.time_limit(20)])
        >>> rec.recommended_length
        10
    """
    validate_length_bounds(min_length, max_length, target_reliability)
    if not average_minutes_per_item > 0:
        raise InvalidInputError(
            f"average_minutes_per_item must be positive: {average_minutes_per_item!r}",
            path="average_minutes_per_item",
        )

    reasoning: List[str] = []
    length = (min_length + max_length) // 2
    time_cap: Optional[int] = None

    # Time limit
    time_constraint = _first(constraints, ConstraintKind.TIME_LIMIT)
    if time_constraint is not None:
        max_minutes = time_constraint.get("max_minutes", thresholds.default_max_minutes)
        time_cap = math.floor(max_minutes / average_minutes_per_item)
        if time_cap < length:
            length = time_cap
            reasoning.append(f"Adjusted to {time_cap} items based on {max_minutes:g} minute time limit")

    # Topic coverage
    topic_constraint = _first(constraints, ConstraintKind.TOPIC_COVERAGE)
    if topic_constraint is not None:
        topics = len(topic_constraint.get("distribution", {}))
        min_for_topics = topics * min_items_per_topic
        if length < min_for_topics:
            length = min_for_topics
            reasoning.append(f"Increased to {min_for_topics} items to cover {topics} topics adequately")

    # Reliability
    predicted = estimate_reliability(length, thresholds)
    if predicted < target_reliability:
        if predicted <= 0:
            adjusted = max_length
        else:
            adjusted = math.ceil(length * (target_reliability / predicted))
        ceiling = max_length if time_cap is None else min(time_cap, max_length)
        if adjusted > ceiling and time_cap is not None and time_cap < max_length:
            length = max(length, ceiling)
            reasoning.append(
                f"Target reliability of {target_reliability:g} needs {adjusted} items, "
                f"more than the time limit allows; keeping {length} items"
            )
        else:
            reasoning.append(f"Adjusted to {adjusted} items for target reliability of {target_reliability:g}")
            length = min(adjusted, max_length)

    length = max(min_length, min(max_length, length))
    reasoning.append(f"Final recommended length: {length} items")

    if len(pool) < length:
        reasoning.append(f"Pool holds only {len(pool)} items; a form of {length} will be undersized")
        logger.warning(f"Recommended length {length} exceeds pool size {len(pool)}")

    logger.debug(f"Length recommendation: {length} ({len(reasoning)} reasons)")
    return LengthRecommendation(
        recommended_length=length,
        reasoning=tuple(reasoning),
        predicted_reliability=estimate_reliability(length, thresholds),
        estimated_minutes=length * average_minutes_per_item,
        alternatives=_alternatives(length, min_length, max_length, average_minutes_per_item, thresholds),
    )


def _alternatives(
    length: int,
    min_length: int,
    max_length: int,
    minutes_per_item: float,
    thresholds: AssemblyThresholds,
) -> tuple[LengthAlternative, ...]:
    shorter = max(min_length, math.floor(length * thresholds.shorter_alternative_ratio))
    longer = min(max_length, math.ceil(length * thresholds.longer_alternative_ratio))
    options = []
    if shorter < length:
        options.append(
            LengthAlternative(
                length=shorter,
                predicted_reliability=estimate_reliability(shorter, thresholds),
                estimated_minutes=shorter * minutes_per_item,
                pros=("Faster completion", "Lower student fatigue", "Easier to grade"),
                cons=("Lower topic coverage", "Lower predicted reliability"),
            )
        )
    if longer > length:
        options.append(
            LengthAlternative(
                length=longer,
                predicted_reliability=estimate_reliability(longer, thresholds),
                estimated_minutes=longer * minutes_per_item,
                pros=("Broader coverage", "Higher predicted reliability"),
                cons=("Longer test time", "Higher student fatigue", "More grading work"),
            )
        )
    return tuple(options)
