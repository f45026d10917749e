"""
Module: assembly.strategies

Purpose:
    Interchangeable selection strategies behind `assemble_test`. Each
    strategy picks up to `target_size` items from a pool to maximise the
    objective computed by a ScoringPolicy.

Key Classes:
    - SelectionStrategy: Abstract strategy interface
    - GreedyStrategy: Deterministic greedy forward selection (default)
    - AnnealingStrategy: Seeded simulated annealing refining the greedy result
    - RandomStrategy: Seeded random baseline
    - SelectionTrace: Items, final score and per-step score history

Key Functions:
    - get_strategy(): Build a strategy by name

Algorithm (greedy):
    1. Until the target size is reached or the pool is empty, score every
       remaining candidate as selection + candidate
    2. Take the strictly highest scorer (first encountered wins ties)
    3. Stop early if no candidate yields a finite score

    Cost is O(target_size × pool_size × constraint_count) with no
    backtracking, so the result is a local optimum.

Used By:
    - assembly.assembler: assemble_test
"""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Type

from assessment_toolkit.core.models import Constraint, Item

from .scoring import ScoringPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionTrace:
    """Output of a strategy run."""

    items: Tuple[Item, ...]
    score: float
    score_history: Tuple[float, ...]


class SelectionStrategy(ABC):
    """Chooses a subset of a pool for a scoring policy."""

    name: str = "strategy"

    @abstractmethod
    def select(
        self,
        pool: Sequence[Item],
        constraints: Sequence[Constraint],
        target_size: int,
        policy: ScoringPolicy,
    ) -> SelectionTrace:
        """
        Select up to `target_size` items from `pool`.

        Args:
            pool: Candidate items (order is the tie-break order)
            constraints: Constraints, already sorted by priority
            target_size: Maximum number of items to select
            policy: Objective to maximise

        Returns:
            SelectionTrace with the selected items in selection order
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class GreedyStrategy(SelectionStrategy):
    """
    Deterministic greedy forward selection.

    Identical pool ordering and constraints always produce the identical
    selection sequence.
    """

    name = "greedy"

    def select(
        self,
        pool: Sequence[Item],
        constraints: Sequence[Constraint],
        target_size: int,
        policy: ScoringPolicy,
    ) -> SelectionTrace:
        selected: List[Item] = []
        remaining: List[Item] = list(pool)
        history: List[float] = []
        score = 0.0

        while len(selected) < target_size and remaining:
            best_index = -1
            best_score = -math.inf

            for index, candidate in enumerate(remaining):
                selected.append(candidate)
                value = policy.score(selected, constraints)
                selected.pop()
                if value > best_score:
                    best_score = value
                    best_index = index

            if best_index < 0:
                logger.debug(f"No candidate improves the objective after {len(selected)} items; stopping")
                break

            chosen = remaining.pop(best_index)
            selected.append(chosen)
            score = best_score
            history.append(score)
            logger.debug(f"Selected {chosen.id}: score {score:.4f} ({len(selected)}/{target_size})")

        return SelectionTrace(items=tuple(selected), score=score, score_history=tuple(history))


class AnnealingStrategy(SelectionStrategy):
    """
    Simulated annealing seeded from the greedy selection.

    Proposes swapping one selected item with one unselected item. Better
    swaps are always accepted, worse ones with probability
    ``exp(delta / temperature)``. The best selection seen is returned, so
    the result is never worse than greedy.

    Attributes:
        seed: Random seed for reproducible runs
        iterations: Number of swap proposals
        initial_temperature: Starting temperature
        cooling_rate: Multiplicative cooling per iteration
    """

    name = "annealing"

    def __init__(
        self,
        seed: int = 42,
        iterations: int = 2000,
        initial_temperature: float = 1.0,
        cooling_rate: float = 0.995,
    ) -> None:
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative: {iterations}")
        if initial_temperature <= 0:
            raise ValueError(f"initial_temperature must be positive: {initial_temperature}")
        if not 0 < cooling_rate < 1:
            raise ValueError(f"cooling_rate must be in (0, 1): {cooling_rate}")
        self.seed = seed
        self.iterations = iterations
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate

    def select(
        self,
        pool: Sequence[Item],
        constraints: Sequence[Constraint],
        target_size: int,
        policy: ScoringPolicy,
    ) -> SelectionTrace:
        start = GreedyStrategy().select(pool, constraints, target_size, policy)
        current = list(start.items)
        chosen_ids = {item.id for item in current}
        outside = [item for item in pool if item.id not in chosen_ids]
        if not current or not outside:
            return start

        rng = random.Random(self.seed)
        current_score = start.score
        best, best_score = list(current), current_score
        history = list(start.score_history)
        temperature = self.initial_temperature

        for _ in range(self.iterations):
            i = rng.randrange(len(current))
            j = rng.randrange(len(outside))
            current[i], outside[j] = outside[j], current[i]
            value = policy.score(current, constraints)
            delta = value - current_score

            if delta >= 0 or rng.random() < math.exp(delta / temperature):
                current_score = value
                if value > best_score:
                    best, best_score = list(current), value
                    history.append(value)
            else:
                # Undo the swap
                current[i], outside[j] = outside[j], current[i]
            temperature = max(temperature * self.cooling_rate, 1e-9)

        if best_score > start.score:
            logger.debug(f"Annealing improved score {start.score:.4f} -> {best_score:.4f}")
        return SelectionTrace(items=tuple(best), score=best_score, score_history=tuple(history))

    def __repr__(self) -> str:
        return f"AnnealingStrategy(seed={self.seed}, iterations={self.iterations})"


class RandomStrategy(SelectionStrategy):
    """Seeded random sample of the pool; a baseline for comparison."""

    name = "random"

    def __init__(self, seed: int = 42) -> None:
        self.seed = seed

    def select(
        self,
        pool: Sequence[Item],
        constraints: Sequence[Constraint],
        target_size: int,
        policy: ScoringPolicy,
    ) -> SelectionTrace:
        rng = random.Random(self.seed)
        items = rng.sample(list(pool), min(target_size, len(pool)))
        history = tuple(policy.score(items[: k + 1], constraints) for k in range(len(items)))
        score = history[-1] if history else 0.0
        return SelectionTrace(items=tuple(items), score=score, score_history=history)

    def __repr__(self) -> str:
        return f"RandomStrategy(seed={self.seed})"


STRATEGIES: Dict[str, Type[SelectionStrategy]] = {
    GreedyStrategy.name: GreedyStrategy,
    AnnealingStrategy.name: AnnealingStrategy,
    RandomStrategy.name: RandomStrategy,
}


def get_strategy(name: str, *, seed: int = 42) -> SelectionStrategy:
    """
    Build a strategy by name.

    Raises:
        ValueError: If the name is unknown

    Example:
        >>> get_strategy("annealing", seed=7)
        AnnealingStrategy(seed=7, iterations=2000)
    """
    key = name.strip().lower()
    if key not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name!r} (expected one of: {', '.join(sorted(STRATEGIES))})")
    if key == GreedyStrategy.name:
        return GreedyStrategy()
    return STRATEGIES[key](seed=seed)
