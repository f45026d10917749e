"""Centralized threshold and magic number configuration.

This module contains the constants used by the assembly engine: the
satisfaction threshold, item defaults, the reliability baseline and the
tolerances used by the diagnostics. Having these in one place makes tuning
easier and documents where each value comes from.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AssemblyThresholds:
    """Thresholds for assembly, length optimization and diagnostics."""

    # Constraint satisfaction
    satisfaction_threshold: float = 0.8  # Satisfaction needed to report a constraint as met

    # Item defaults (applied when a payload omits the field)
    default_item_minutes: float = 2.0
    default_item_points: float = 1.0

    # Difficulty mix used when a difficulty constraint omits a proportion
    default_easy_share: float = 0.3
    default_average_share: float = 0.5
    default_difficult_share: float = 0.2

    # Time limit used when a time constraint omits max_minutes
    default_max_minutes: float = 60.0

    # Spearman-Brown baseline: reliability observed at a reference length
    baseline_reliability: float = 0.7
    baseline_length: int = 20

    # Length optimizer
    min_items_per_topic: int = 3
    shorter_alternative_ratio: float = 0.75
    longer_alternative_ratio: float = 1.25

    # Diagnostics
    balance_tolerance: int = 2  # Count deviation tolerated before recommending a change
    equivalence_difficulty_drift: float = 0.3  # Mean difficulty drift between forms
    max_identical_position_ratio: float = 0.2  # Scrambled versions


DEFAULT_THRESHOLDS = AssemblyThresholds()
