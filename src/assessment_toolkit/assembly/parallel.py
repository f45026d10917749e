"""
Module: assembly.parallel

Purpose:
    Generate several non-overlapping forms from one shared pool and score
    how equivalent each pair of forms is.

Key Functions:
    - generate_parallel_forms(): Main entry point
    - assemble_next_form(): One step; takes and returns the used-id set
    - compare_forms(): Equivalence of two forms
    - compare_distributions(): Normalised L1 similarity of two count maps
    - form_label(): Letter label (A, B, ..., Z, AA, ...) for a form index

Key Classes:
    - ParallelFormsResult: Sequence of AssemblyResult plus diagnostics
    - FormEquivalence: Equivalence record for one pair of forms

Algorithm:
    1. Keep an explicit set of used item ids (caller may seed it)
    2. For each form, drop used items from the pool; stop if fewer than
       target_size remain
    3. Assemble the form and add its ids to the used set
    4. Score every unordered pair: difficulty counts, cognitive level
       counts and total time, combined as an unweighted mean

    Forms within one call are sequential: each depends on the ids used
    by the previous ones. Equivalence is diagnostic only.

Dependencies:
    - numpy: Count vectors and the pairwise equivalence matrix

Used By:
    - assembly.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import AbstractSet, FrozenSet, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS
from assessment_toolkit.core.models import AssemblyResult, Constraint, Item
from assessment_toolkit.core.models.items import COGNITIVE_LEVELS, DIFFICULTY_LEVELS

from .assembler import Assembler
from .scoring import ScoringPolicy, WeightedSumPolicy
from .strategies import GreedyStrategy, SelectionStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEquivalence:
    """
    Equivalence between two forms.

    Attributes:
        form_a: Index of the first form
        form_b: Index of the second form
        difficulty_similarity: L1 similarity of difficulty counts
        cognitive_similarity: L1 similarity of cognitive level counts
        time_ratio: min(time) / max(time)
        score: Unweighted mean of the three, in [0, 1]
    """

    form_a: int
    form_b: int
    difficulty_similarity: float
    cognitive_similarity: float
    time_ratio: float
    score: float

    def to_dict(self) -> dict:
        return {
            "form_a": self.form_a,
            "form_b": self.form_b,
            "difficulty_similarity": self.difficulty_similarity,
            "cognitive_similarity": self.cognitive_similarity,
            "time_ratio": self.time_ratio,
            "score": self.score,
        }


@dataclass(frozen=True)
class ParallelFormsResult:
    """
    Forms produced by one generate_parallel_forms call.

    Behaves as a sequence of AssemblyResult so callers can compare
    ``len(result)`` with the number of forms requested.

    Attributes:
        forms: Assembled forms in generation order
        equivalence: One record per unordered pair of forms
        used_ids: Ids consumed, including any ids supplied by the caller
        requested_forms: Number of forms asked for
    """

    forms: Tuple[AssemblyResult, ...]
    equivalence: Tuple[FormEquivalence, ...]
    used_ids: FrozenSet[str]
    requested_forms: int

    def __len__(self) -> int:
        return len(self.forms)

    def __iter__(self) -> Iterator[AssemblyResult]:
        return iter(self.forms)

    def __getitem__(self, index: int) -> AssemblyResult:
        return self.forms[index]

    @property
    def is_complete(self) -> bool:
        """True if every requested form was produced."""
        return len(self.forms) >= self.requested_forms

    @property
    def version_labels(self) -> Tuple[str, ...]:
        """Form labels A, B, C, ..."""
        return tuple(form_label(i) for i in range(len(self.forms)))

    def equivalence_matrix(self) -> np.ndarray:
        """
        Symmetric matrix of pairwise equivalence scores.

        The diagonal is 1.0 (a form is equivalent to itself).
        """
        n = len(self.forms)
        matrix = np.eye(n, dtype=float)
        for record in self.equivalence:
            matrix[record.form_a, record.form_b] = record.score
            matrix[record.form_b, record.form_a] = record.score
        return matrix

    def min_equivalence(self) -> float:
        """Lowest pairwise score; 1.0 with fewer than two forms."""
        if not self.equivalence:
            return 1.0
        return min(record.score for record in self.equivalence)

    def equivalence_issues(
        self, max_difficulty_drift: float = DEFAULT_THRESHOLDS.equivalence_difficulty_drift
    ) -> List[str]:
        """
        Describe forms that drift from the first form.

        A form is flagged if its mean difficulty differs from the first
        form's by more than `max_difficulty_drift`, or if it covers a
        different number of topics.
        """
        issues: List[str] = []
        if len(self.forms) < 2:
            return issues
        base = self.forms[0].metrics
        for index, form in enumerate(self.forms[1:], start=1):
            label = form_label(index)
            drift = abs(form.metrics.mean_difficulty - base.mean_difficulty)
            if drift > max_difficulty_drift:
                issues.append(f"Form {label} difficulty varies significantly ({drift:.2f})")
            if len(form.metrics.topic_counts) != len(base.topic_counts):
                issues.append(f"Form {label} has different topic coverage")
        return issues

    def to_dict(self) -> dict:
        return {
            "forms": [
                {"label": label, **form.to_dict()}
                for label, form in zip(self.version_labels, self.forms)
            ],
            "equivalence": [record.to_dict() for record in self.equivalence],
            "used_ids": sorted(self.used_ids),
            "requested_forms": self.requested_forms,
        }


def form_label(index: int) -> str:
    """A, B, ..., Z, AA, AB, ..."""
    label = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        label = chr(65 + rem) + label
    return label


# ─────────────────────────────────────────────────────────────────────────────
# Generation
# ─────────────────────────────────────────────────────────────────────────────

def assemble_next_form(
    pool: Sequence[Item],
    constraints: Sequence[Constraint],
    target_size: int,
    used_ids: AbstractSet[str] = frozenset(),
    *,
    assembler: Optional[Assembler] = None,
) -> Tuple[Optional[AssemblyResult], FrozenSet[str]]:
    """
    Assemble one form from the items not yet used.

    Args:
        pool: Shared item pool
        constraints: Weighted constraints
        target_size: Items per form
        used_ids: Ids already placed on earlier forms

    Returns:
        (form, new_used_ids). form is None, and used_ids unchanged, when
        fewer than target_size unused items remain.
    """
    used = frozenset(used_ids)
    available = [item for item in pool if item.id not in used]
    if len(available) < target_size:
        return None, used
    assembler = assembler or Assembler()
    form = assembler.run(available, constraints, target_size)
    return form, used | set(form.item_ids)


def generate_parallel_forms(
    pool: Sequence[Item],
    constraints: Sequence[Constraint],
    target_size: int,
    number_of_forms: int,
    *,
    used_ids: AbstractSet[str] = frozenset(),
    strategy: Optional[SelectionStrategy] = None,
    policy: Optional[ScoringPolicy] = None,
) -> ParallelFormsResult:
    """
    Generate non-overlapping forms from one pool.

    Args:
        pool: Shared item pool
        constraints: Weighted constraints applied to every form
        target_size: Items per form
        number_of_forms: Forms wanted
        used_ids: Ids to exclude up front (e.g. from an earlier call)
        strategy: Selection strategy (default: GreedyStrategy)
        policy: Scoring policy (default: WeightedSumPolicy)

    Returns:
        ParallelFormsResult; it may hold fewer forms than requested when
        the pool runs out

    Example:
        >>> forms = generate_parallel_forms(pool, constraints, 10, 2)
        >>> set(forms[0].item_ids) & set(forms[1].item_ids)
        set()
    """
    assembler = Assembler(
        strategy=strategy or GreedyStrategy(),
        policy=policy or WeightedSumPolicy(),
    )
    used = frozenset(used_ids)
    forms: List[AssemblyResult] = []

    for index in range(number_of_forms):
        form, used = assemble_next_form(pool, constraints, target_size, used, assembler=assembler)
        if form is None:
            logger.warning(
                f"Not enough items for form {index + 1}: "
                f"{len(pool) - len(used)} unused, {target_size} needed"
            )
            break
        forms.append(form)
        logger.debug(f"Form {form_label(index)} assembled with score {form.score:.3f}")

    equivalence = tuple(
        compare_forms(forms[i], forms[j], i, j) for i, j in combinations(range(len(forms)), 2)
    )
    for record in equivalence:
        logger.info(
            f"Forms {form_label(record.form_a)} and {form_label(record.form_b)} "
            f"equivalence: {record.score:.2f}"
        )

    return ParallelFormsResult(
        forms=tuple(forms),
        equivalence=equivalence,
        used_ids=used,
        requested_forms=number_of_forms,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Equivalence
# ─────────────────────────────────────────────────────────────────────────────

def _count_vectors(
    a: Mapping[str, int], b: Mapping[str, int], categories: Sequence[str]
) -> Tuple[np.ndarray, np.ndarray]:
    keys = list(categories) + sorted((set(a) | set(b)) - set(categories))
    return (
        np.array([a.get(k, 0) for k in keys], dtype=float),
        np.array([b.get(k, 0) for k in keys], dtype=float),
    )


def compare_distributions(
    a: Mapping[str, int], b: Mapping[str, int], categories: Sequence[str] = ()
) -> float:
    """
    Normalised L1 similarity of two count maps.

    ``1 - Σ|a_k - b_k| / (2 × max(total_a, total_b))``; 1.0 when both
    are empty.

    Example:
        >>> compare_distributions({"easy": 2}, {"easy": 1, "difficult": 1})
        0.5
    """
    vec_a, vec_b = _count_vectors(a, b, categories)
    max_total = max(vec_a.sum(), vec_b.sum())
    if max_total == 0:
        return 1.0
    return float(1.0 - np.abs(vec_a - vec_b).sum() / (2.0 * max_total))


def compare_forms(form_a: AssemblyResult, form_b: AssemblyResult, index_a: int = 0, index_b: int = 1) -> FormEquivalence:
    """Score the equivalence of two forms."""
    metrics_a, metrics_b = form_a.metrics, form_b.metrics
    difficulty = compare_distributions(
        metrics_a.difficulty_counts, metrics_b.difficulty_counts, DIFFICULTY_LEVELS
    )
    cognitive = compare_distributions(
        metrics_a.cognitive_level_counts, metrics_b.cognitive_level_counts, COGNITIVE_LEVELS
    )
    longest = max(metrics_a.total_time, metrics_b.total_time)
    time_ratio = 1.0 if longest == 0 else min(metrics_a.total_time, metrics_b.total_time) / longest
    return FormEquivalence(
        form_a=index_a,
        form_b=index_b,
        difficulty_similarity=difficulty,
        cognitive_similarity=cognitive,
        time_ratio=time_ratio,
        score=(difficulty + cognitive + time_ratio) / 3.0,
    )
