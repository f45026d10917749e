"""
Module: assembly.assembler

Purpose:
    Assemble one form from a pool, a constraint list and a target size.

Key Functions:
    - assemble_test(): Main entry point for assembly

Key Classes:
    - Assembler: Binds a strategy, scoring policy and thresholds

Algorithm:
    1. Stable sort constraints by descending priority
    2. Run the selection strategy (greedy by default)
    3. Aggregate metrics over the final selection
    4. Re-evaluate each constraint once, thresholding at 0.8

    A pool smaller than the target size yields the whole pool; an
    undersized selection is a reportable outcome, never an error.

Used By:
    - assembly.parallel: Parallel form generation
    - assembly.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS, AssemblyThresholds
from assessment_toolkit.core.models import AssemblyResult, Constraint, Item, calculate_metrics

from .scoring import ScoringPolicy, WeightedSumPolicy, check_constraints, sort_by_priority
from .strategies import GreedyStrategy, SelectionStrategy

logger = logging.getLogger(__name__)


def assemble_test(
    pool: Sequence[Item],
    constraints: Sequence[Constraint],
    target_size: int,
    *,
    strategy: Optional[SelectionStrategy] = None,
    policy: Optional[ScoringPolicy] = None,
) -> AssemblyResult:
    """
    Assemble a form that best satisfies the weighted constraints.

    Args:
        pool: Candidate items; their order is the tie-break order
        constraints: Weighted constraints
        target_size: Number of items wanted
        strategy: Selection strategy (default: GreedyStrategy)
        policy: Scoring policy (default: WeightedSumPolicy)

    Returns:
        AssemblyResult with at most target_size items

    Invariants:
        - len(result.selected_items) == min(target_size, len(pool))
          for the greedy strategy
        - No duplicate items in the selection

    Example:
        >>> result = assemble_test(pool, [Constraint.topic_coverage({"X": 5})], 5)
        >>> result.constraints_satisfied
        {'topic_coverage': True}
    """
    assembler = Assembler(
        strategy=strategy or GreedyStrategy(),
        policy=policy or WeightedSumPolicy(),
    )
    return assembler.run(pool, constraints, target_size)


@dataclass
class Assembler:
    """
    Assembly orchestrator.

    Attributes:
        strategy: Selection strategy
        policy: Scoring policy combining constraint satisfactions
        thresholds: Satisfaction threshold and defaults
    """

    strategy: SelectionStrategy = field(default_factory=GreedyStrategy)
    policy: ScoringPolicy = field(default_factory=WeightedSumPolicy)
    thresholds: AssemblyThresholds = DEFAULT_THRESHOLDS

    def run(
        self,
        pool: Sequence[Item],
        constraints: Sequence[Constraint],
        target_size: int,
    ) -> AssemblyResult:
        """Execute the assembly and build the result."""
        ordered = sort_by_priority(constraints)

        if target_size > len(pool):
            logger.debug(f"Pool holds {len(pool)} items, fewer than target {target_size}")

        trace = self.strategy.select(pool, ordered, target_size, self.policy)
        selection = list(trace.items)

        result = AssemblyResult(
            selected_items=trace.items,
            score=trace.score,
            constraints_satisfied=check_constraints(
                selection, ordered, self.thresholds.satisfaction_threshold
            ),
            metrics=calculate_metrics(selection),
            target_size=target_size,
            strategy=self.strategy.name,
            score_history=trace.score_history,
        )

        logger.debug(
            f"Assembled {result.item_count}/{target_size} items with {self.strategy.name} "
            f"(score {result.score:.3f})"
        )
        if result.unmet_constraints:
            logger.debug(f"Constraints below threshold: {', '.join(result.unmet_constraints)}")
        return result
