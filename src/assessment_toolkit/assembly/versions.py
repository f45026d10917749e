"""
Module: assembly.versions

Purpose:
    Produce scrambled versions (A, B, C, ...) of one assembled form. Every
    version holds the same items in a different seeded order, with at most
    20% of positions matching the previous version.

Key Functions:
    - scramble_versions(): Labelled seeded orders of one form

Key Classes:
    - FormVersion: One labelled order
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS
from assessment_toolkit.core.models import AssemblyResult

from .parallel import form_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormVersion:
    """
    One scrambled version of a form.

    Attributes:
        label: Version letter (A, B, ...)
        item_ids: Item order for this version
        shuffle_seed: Seed string the order was drawn from
        identical_positions: Positions matching the previous version
    """

    label: str
    item_ids: Tuple[str, ...]
    shuffle_seed: str
    identical_positions: int = 0

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "item_ids": list(self.item_ids),
            "shuffle_seed": self.shuffle_seed,
            "identical_positions": self.identical_positions,
        }


def scramble_versions(
    result: AssemblyResult,
    number_of_versions: int,
    *,
    seed: int | str = 42,
    max_identical_ratio: float = DEFAULT_THRESHOLDS.max_identical_position_ratio,
) -> List[FormVersion]:
    """
    Scramble one form into labelled versions.

    Args:
        result: Assembled form
        number_of_versions: Versions wanted
        seed: Base seed; version i uses ``"{seed}-form-{i}"``
        max_identical_ratio: Share of positions allowed to match the
            previous version (floored)

    Returns:
        Versions in label order. A single-item form cannot avoid matching
        positions and is returned as is.

    Example:
        >>> [v.label for v in scramble_versions(form, 3)]
        ['A', 'B', 'C']
    """
    if number_of_versions < 0:
        raise ValueError(f"number_of_versions must be non-negative: {number_of_versions}")

    versions: List[FormVersion] = []
    previous: Tuple[str, ...] = ()
    for index in range(number_of_versions):
        version_seed = f"{seed}-form-{index}"
        rng = random.Random(version_seed)
        order = list(result.item_ids)
        rng.shuffle(order)
        if previous:
            _limit_identical_positions(order, previous, max_identical_ratio, rng)
        identical = _identical_positions(order, previous)
        versions.append(
            FormVersion(
                label=form_label(index),
                item_ids=tuple(order),
                shuffle_seed=version_seed,
                identical_positions=len(identical),
            )
        )
        previous = tuple(order)

    logger.debug(f"Scrambled {len(versions)} versions of {result.item_count} items")
    return versions


def _identical_positions(order: Sequence[str], previous: Sequence[str]) -> List[int]:
    return [i for i, (a, b) in enumerate(zip(order, previous)) if a == b]


def _limit_identical_positions(
    order: List[str], previous: Sequence[str], max_ratio: float, rng: random.Random
) -> None:
    """
    Move items off positions they held in the previous version.

    Rotating the excess items among their own positions never creates a
    new match because ids are unique; a single excess item is swapped
    with any other position.
    """
    if len(order) < 2:
        return
    allowed = math.floor(len(order) * max_ratio)
    excess = _identical_positions(order, previous)[allowed:]
    if not excess:
        return
    if len(excess) == 1:
        position = excess[0]
        other = rng.choice([i for i in range(len(order)) if i != position])
        order[position], order[other] = order[other], order[position]
        return
    moved = [order[i] for i in excess]
    moved = moved[1:] + moved[:1]
    for position, item_id in zip(excess, moved):
        order[position] = item_id
