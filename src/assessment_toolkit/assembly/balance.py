"""
Module: assembly.balance

Purpose:
    Diagnose the content balance of a finished selection. Purely
    diagnostic: it never changes the selection.

Key Functions:
    - check_content_balance(): Compare counts with targets and collect
      recommendations

Checks:
    - Cognitive level counts vs. a cognitive_distribution constraint
    - Difficulty counts vs. floor(n × share) using the constraint's shares
      (or the default 30/50/20 mix)
    - Topic counts vs. a topic_coverage constraint
    - Total time vs. a time_limit constraint

    A count deviating from its target by more than the tolerance yields
    one recommendation. The selection is balanced iff there are none.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import List, Optional, Sequence

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS
from assessment_toolkit.core.models import BalanceReport, Constraint, ConstraintKind, Item
from assessment_toolkit.core.models.items import COGNITIVE_LEVELS, DIFFICULTY_LEVELS

from .evaluators import cognitive_targets, difficulty_targets

logger = logging.getLogger(__name__)


def _first(constraints: Sequence[Constraint], kind: ConstraintKind) -> Optional[Constraint]:
    return next((c for c in constraints if c.kind is kind), None)


def check_content_balance(
    selection: Sequence[Item],
    constraints: Sequence[Constraint],
    *,
    tolerance: int = DEFAULT_THRESHOLDS.balance_tolerance,
) -> BalanceReport:
    """
    Check a selection's balance against the constraints.

    Args:
        selection: Finished selection
        constraints: Constraints the selection was assembled for
        tolerance: Allowed absolute count deviation

    Returns:
        BalanceReport(is_balanced, recommendations)

    Example:
        >>> check_content_balance(items, []).is_balanced
        True
    """
    recommendations: List[str] = []
    n = len(selection)

    # Cognitive levels
    cognitive = _first(constraints, ConstraintKind.COGNITIVE_DISTRIBUTION)
    if cognitive is not None:
        targets = cognitive_targets(cognitive.config)
        counts = Counter(item.cognitive_level.value for item in selection)
        for level in COGNITIVE_LEVELS:
            if level not in targets and level not in counts:
                continue
            actual, target = counts.get(level, 0), targets.get(level, 0.0)
            if abs(actual - target) > tolerance:
                recommendations.append(f"Cognitive level '{level}': Current {actual}, Target {target:g}")

    # Difficulty
    difficulty = _first(constraints, ConstraintKind.DIFFICULTY_BALANCE)
    shares = difficulty_targets(difficulty.config if difficulty is not None else {})
    counts = Counter(item.difficulty.value for item in selection)
    for band in DIFFICULTY_LEVELS:
        actual, target = counts.get(band, 0), math.floor(n * shares[band])
        if abs(actual - target) > tolerance:
            recommendations.append(f"{band.capitalize()} items: Current {actual}, Target ~{target}")

    # Topics
    topic = _first(constraints, ConstraintKind.TOPIC_COVERAGE)
    if topic is not None:
        counts = Counter(item.topic for item in selection)
        for name, target in topic.get("distribution", {}).items():
            actual = counts.get(name, 0)
            if abs(actual - float(target)) > tolerance:
                recommendations.append(f"Topic '{name}': Current {actual}, Target {float(target):g}")

    # Time
    time_limit = _first(constraints, ConstraintKind.TIME_LIMIT)
    if time_limit is not None:
        max_minutes = time_limit.get("max_minutes", DEFAULT_THRESHOLDS.default_max_minutes)
        total = sum(item.estimated_time_minutes for item in selection)
        if total > max_minutes:
            recommendations.append(
                f"Total time {total:g} minutes exceeds the {max_minutes:g} minute limit"
            )

    if recommendations:
        logger.debug(f"Balance check found {len(recommendations)} issue(s)")
    return BalanceReport(is_balanced=not recommendations, recommendations=tuple(recommendations))
