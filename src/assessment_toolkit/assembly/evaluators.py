"""
Module: assembly.evaluators

Purpose:
    Constraint evaluators. One pure scoring function per constraint kind,
    each returning how well a candidate selection satisfies that single
    constraint as a finite number in [0, 1].

Key Functions:
    - evaluate_topic_coverage()
    - evaluate_difficulty_balance()
    - evaluate_cognitive_distribution()
    - evaluate_time_limit()
    - evaluate_point_distribution()
    - evaluate_standards_alignment()
    - evaluate_constraint(): Dispatch on Constraint.kind
    - get_evaluator(): Look up the evaluator registered for a kind

Totality:
    Every evaluator is total for a well-formed selection. Guards return
    1.0 when there is nothing to satisfy and 0.0 when the denominator is
    the selection size and the selection is empty.

Used By:
    - assembly.scoring: Weighted combination
    - assembly.balance: Diagnostics
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Callable, Dict, Mapping, Sequence

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS
from assessment_toolkit.core.models import Constraint, ConstraintKind, Item
from assessment_toolkit.core.models.items import CognitiveLevel

Evaluator = Callable[[Sequence[Item], Mapping[str, Any]], float]


def _clamp(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def _share(value: Any, default: float) -> float:
    """Read a target proportion; values above 1 are percentages."""
    if value is None:
        return default
    value = float(value)
    return value / 100.0 if value > 1.0 else value


def difficulty_targets(config: Mapping[str, Any]) -> Dict[str, float]:
    """Target proportions for easy / average / difficult, with defaults."""
    return {
        "easy": _share(config.get("easy_percent"), DEFAULT_THRESHOLDS.default_easy_share),
        "average": _share(config.get("average_percent"), DEFAULT_THRESHOLDS.default_average_share),
        "difficult": _share(config.get("difficult_percent"), DEFAULT_THRESHOLDS.default_difficult_share),
    }


def cognitive_targets(config: Mapping[str, Any]) -> Dict[str, float]:
    """Target counts per canonical cognitive level."""
    targets: Dict[str, float] = {}
    for level, count in (config.get("distribution") or {}).items():
        key = CognitiveLevel.parse(level).value
        targets[key] = targets.get(key, 0.0) + float(count)
    return targets


# ─────────────────────────────────────────────────────────────────────────────
# Evaluators
# ─────────────────────────────────────────────────────────────────────────────

def evaluate_topic_coverage(selection: Sequence[Item], config: Mapping[str, Any]) -> float:
    """
    Mean per-topic closeness to the configured target counts.

    Each configured topic scores ``max(0, 1 - |actual - target| / target)``.
    Topics absent from the configuration are ignored.
    """
    targets = config.get("distribution") or {}
    if not targets:
        return 1.0
    counts = Counter(item.topic for item in selection)
    total = 0.0
    for topic, target in targets.items():
        target = float(target)
        actual = counts.get(topic, 0)
        if target <= 0:
            total += 1.0 if actual == 0 else 0.0
        else:
            total += max(0.0, 1.0 - abs(actual - target) / target)
    return _clamp(total / len(targets))


def evaluate_difficulty_balance(selection: Sequence[Item], config: Mapping[str, Any]) -> float:
    """
    Compare easy / average / difficult proportions with the targets.

    Score is ``1 - (sum of absolute proportion differences) / 3``.
    """
    if not selection:
        return 0.0
    counts = Counter(item.difficulty.value for item in selection)
    n = len(selection)
    diff = sum(abs(counts.get(band, 0) / n - target) for band, target in difficulty_targets(config).items())
    return _clamp(1.0 - diff / 3.0)


def evaluate_cognitive_distribution(selection: Sequence[Item], config: Mapping[str, Any]) -> float:
    """
    Compare cognitive level counts with the configured target counts.

    The summed absolute difference is normalised by selection size times
    the number of configured levels.
    """
    targets = cognitive_targets(config)
    if not targets:
        return 1.0
    if not selection:
        return 0.0
    counts = Counter(item.cognitive_level.value for item in selection)
    total_diff = sum(abs(counts.get(level, 0) - target) for level, target in targets.items())
    return _clamp(1.0 - total_diff / (len(selection) * len(targets)))


def evaluate_time_limit(selection: Sequence[Item], config: Mapping[str, Any]) -> float:
    """1.0 within the time limit, otherwise ``max_minutes / total``."""
    max_minutes = config.get("max_minutes")
    if max_minutes is None:
        max_minutes = DEFAULT_THRESHOLDS.default_max_minutes
    if max_minutes <= 0:
        return 0.0
    total = sum(item.estimated_time_minutes for item in selection)
    if total <= max_minutes:
        return 1.0
    return _clamp(float(max_minutes) / total)


def evaluate_point_distribution(selection: Sequence[Item], config: Mapping[str, Any]) -> float:
    """
    Closeness of total points to ``target_points``.

    The target defaults to the selection size (one point per item), so an
    empty selection without an explicit target scores 0.0.
    """
    target = config.get("target_points")
    if target is None:
        if not selection:
            return 0.0
        target = len(selection)
    target = float(target)
    total = sum(item.points for item in selection)
    if target <= 0:
        return 1.0 if total == 0 else 0.0
    return _clamp(1.0 - abs(total - target) / target)


def evaluate_standards_alignment(selection: Sequence[Item], config: Mapping[str, Any]) -> float:
    """
    Fraction of required standards carried by at least one selected item.

    Without a ``standards`` list the constraint is neutral (1.0).
    """
    standards = set(config.get("standards") or ())
    if not standards:
        return 1.0
    covered = set()
    for item in selection:
        covered.update(item.standards_tags & standards)
    return _clamp(len(covered) / len(standards))


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────

EVALUATORS: Dict[ConstraintKind, Evaluator] = {
    ConstraintKind.TOPIC_COVERAGE: evaluate_topic_coverage,
    ConstraintKind.DIFFICULTY_BALANCE: evaluate_difficulty_balance,
    ConstraintKind.COGNITIVE_DISTRIBUTION: evaluate_cognitive_distribution,
    ConstraintKind.TIME_LIMIT: evaluate_time_limit,
    ConstraintKind.POINT_DISTRIBUTION: evaluate_point_distribution,
    ConstraintKind.STANDARDS_ALIGNMENT: evaluate_standards_alignment,
}


def get_evaluator(kind: ConstraintKind) -> Evaluator:
    """Return the evaluator registered for a constraint kind."""
    return EVALUATORS[ConstraintKind.parse(kind)]


def evaluate_constraint(selection: Sequence[Item], constraint: Constraint) -> float:
    """
    Satisfaction of a single constraint for a selection.

    Example:
        >>> evaluate_constraint(items, Constraint.time_limit(30))
        1.0
    """
    return EVALUATORS[constraint.kind](selection, constraint.config)
