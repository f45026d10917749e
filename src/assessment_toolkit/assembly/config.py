"""
Module: assembly.config

Purpose:
    Configuration dataclass for the assembly pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - AssemblyConfig: Options for one run_assembly call

Dependencies:
    - dataclasses (std)

Used By:
    - assembly.controller: Pipeline orchestration
    - cli: Built from command line flags and an optional JSON file
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

from .strategies import STRATEGIES


@dataclass(frozen=True)
class AssemblyConfig:
    """
    Configuration for an assembly run (immutable).

    Attributes:
        target_size: Items per form; None asks the length optimizer
        number_of_forms: Forms to generate (1 = single form)
        strategy: Selection strategy name (greedy/annealing/random)
        seed: Seed for seeded strategies and scrambled versions
        min_length: Length optimizer lower bound
        max_length: Length optimizer upper bound
        target_reliability: Length optimizer reliability target
        versions: Scrambled versions per form (0 = none)
        check_balance: Whether to run content balance diagnostics

    Example:
        >>> config = AssemblyConfig(target_size=20, number_of_forms=2)
    """

    # Size
    target_size: Optional[int] = None
    number_of_forms: int = 1

    # Selection behavior
    strategy: str = "greedy"
    seed: int = 42

    # Length optimizer (used when target_size is None)
    min_length: int = 10
    max_length: int = 100
    target_reliability: float = 0.8

    # Output
    versions: int = 0
    check_balance: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.target_size is not None and self.target_size < 0:
            raise ValueError(f"target_size must be non-negative: {self.target_size}")
        if self.number_of_forms < 1:
            raise ValueError(f"number_of_forms must be at least 1: {self.number_of_forms}")
        if self.strategy.strip().lower() not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {self.strategy!r}")
        if self.min_length < 0 or self.max_length < self.min_length:
            raise ValueError(f"Invalid length bounds: {self.min_length}..{self.max_length}")
        if not 0 < self.target_reliability < 1:
            raise ValueError(f"target_reliability must be between 0 and 1: {self.target_reliability}")
        if self.versions < 0:
            raise ValueError(f"versions must be non-negative: {self.versions}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssemblyConfig:
        """
        Build a config from a JSON-style dictionary.

        Unknown keys raise ValueError so typos are not silently ignored.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
