"""
Module: constraints

Purpose:
    Provides the Constraint dataclass - a single weighted structural
    requirement against a selection - and the ConstraintKind tag used to
    dispatch it to its evaluator.

Key Classes:
    - ConstraintKind: Tagged variant for the six constraint kinds
    - Constraint: Frozen (kind, config, priority, is_required) record

Config keys per kind:
    - topic_coverage: {"distribution": {topic: target_count}}
    - difficulty_balance: {"easy_percent", "average_percent", "difficult_percent"}
    - cognitive_distribution: {"distribution": {level: target_count}}
    - time_limit: {"max_minutes": float}
    - point_distribution: {"target_points": float}
    - standards_alignment: {"standards": [standard_id, ...]}

Used By:
    - assembly.evaluators: Evaluator dispatch
    - assembly.assembler / assembly.length / assembly.balance
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class ConstraintKind(str, Enum):
    """Kind of structural requirement a constraint expresses."""
    TOPIC_COVERAGE = "topic_coverage"
    DIFFICULTY_BALANCE = "difficulty_balance"
    COGNITIVE_DISTRIBUTION = "cognitive_distribution"
    TIME_LIMIT = "time_limit"
    POINT_DISTRIBUTION = "point_distribution"
    STANDARDS_ALIGNMENT = "standards_alignment"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> ConstraintKind:
        """Parse "topic_coverage", "topicCoverage" or "Topic Coverage"."""
        if isinstance(value, cls):
            return value
        raw = str(value).strip()
        if raw == raw.upper():
            raw = raw.lower()
        # camelCase -> snake_case
        snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in raw).lstrip("_")
        key = snake.replace(" ", "_").replace("-", "_")
        while "__" in key:
            key = key.replace("__", "_")
        if key == "bloom_distribution":
            key = cls.COGNITIVE_DISTRIBUTION.value
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown constraint kind: {value!r}") from None


_CONFIG_ALIASES = {
    "maxTime": "max_minutes",
    "easyPercent": "easy_percent",
    "averagePercent": "average_percent",
    "difficultPercent": "difficult_percent",
    "targetPoints": "target_points",
}


@dataclass(frozen=True)
class Constraint:
    """
    Weighted requirement on a selection (immutable).

    Attributes:
        kind: Which evaluator scores this constraint
        config: Kind-specific parameters (read-only mapping)
        priority: Weight of this constraint's satisfaction in the total
        is_required: Informational flag for callers; never hard-rejects

    Invariants:
        - Constraints carry no cross-constraint state

    Example:
        >>> c = Constraint.topic_coverage({"Algebra": 5}, priority=2)
        >>> c.kind
        <ConstraintKind.TOPIC_COVERAGE: 'topic_coverage'>
    """

    kind: ConstraintKind
    config: Mapping[str, Any] = field(default_factory=dict)
    priority: float = 1.0
    is_required: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ConstraintKind):
            object.__setattr__(self, "kind", ConstraintKind.parse(self.kind))
        if not isinstance(self.config, MappingProxyType):
            object.__setattr__(self, "config", MappingProxyType(dict(self.config)))

    def __hash__(self) -> int:
        return hash((self.kind, self.priority, self.is_required))

    def get(self, key: str, default: Any = None) -> Any:
        """Config lookup treating explicit nulls as absent."""
        value = self.config.get(key)
        return default if value is None else value

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def topic_coverage(cls, distribution: Mapping[str, int], priority: float = 1.0, **kw: Any) -> Constraint:
        return cls(ConstraintKind.TOPIC_COVERAGE, {"distribution": dict(distribution)}, priority, **kw)

    @classmethod
    def difficulty_balance(
        cls,
        easy: Optional[float] = None,
        average: Optional[float] = None,
        difficult: Optional[float] = None,
        priority: float = 1.0,
        **kw: Any,
    ) -> Constraint:
        config = {
            "easy_percent": easy,
            "average_percent": average,
            "difficult_percent": difficult,
        }
        return cls(
            ConstraintKind.DIFFICULTY_BALANCE,
            {k: v for k, v in config.items() if v is not None},
            priority,
            **kw,
        )

    @classmethod
    def cognitive_distribution(cls, distribution: Mapping[str, int], priority: float = 1.0, **kw: Any) -> Constraint:
        return cls(ConstraintKind.COGNITIVE_DISTRIBUTION, {"distribution": dict(distribution)}, priority, **kw)

    @classmethod
    def time_limit(cls, max_minutes: float, priority: float = 1.0, **kw: Any) -> Constraint:
        return cls(ConstraintKind.TIME_LIMIT, {"max_minutes": max_minutes}, priority, **kw)

    @classmethod
    def point_distribution(cls, target_points: Optional[float] = None, priority: float = 1.0, **kw: Any) -> Constraint:
        config = {} if target_points is None else {"target_points": target_points}
        return cls(ConstraintKind.POINT_DISTRIBUTION, config, priority, **kw)

    @classmethod
    def standards_alignment(cls, standards: Optional[list[str]] = None, priority: float = 1.0, **kw: Any) -> Constraint:
        config = {} if standards is None else {"standards": list(standards)}
        return cls(ConstraintKind.STANDARDS_ALIGNMENT, config, priority, **kw)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Constraint:
        """
        Build a Constraint from a payload dictionary.

        Accepts ``kind`` (or ``type``, as emitted by the constraint editor).
        camelCase config keys such as ``maxTime`` are mapped to their
        snake_case names.
        """
        kind = data.get("kind", data.get("type"))
        if kind is None:
            raise KeyError("kind")
        return cls(
            kind=ConstraintKind.parse(kind),
            config={_CONFIG_ALIASES.get(k, k): v for k, v in (data.get("config") or {}).items()},
            priority=float(data.get("priority", 1.0)),
            is_required=bool(data.get("is_required", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "config": _plain(self.config),
            "priority": self.priority,
            "is_required": self.is_required,
        }

    def __repr__(self) -> str:
        return f"Constraint({self.kind.value}, priority={self.priority})"


def _plain(value: Any) -> Any:
    """Convert read-only mappings back into plain dicts for JSON."""
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
