"""
Module: items

Purpose:
    Provides the Item dataclass - an immutable candidate unit (e.g. a test
    question) that can be selected into an assessment - together with the
    categorical enums items are tagged with.

Key Classes:
    - Difficulty: easy / average / difficult
    - CognitiveLevel: Ordered six-level cognitive taxonomy
    - KnowledgeDimension: factual / conceptual / procedural / metacognitive
    - Item: Frozen value object consumed by the assembly engine

Key Functions:
    - Item.from_dict() / Item.to_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - assessment_toolkit.common.taxonomy: Label resolution
    - assessment_toolkit.common.thresholds: Item defaults

Used By:
    - core.models.results.AssemblyResult
    - assembly.evaluators, assembly.assembler, assembly.parallel
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple

from assessment_toolkit.common.taxonomy import (
    resolve_cognitive_level,
    resolve_difficulty,
    resolve_knowledge_dimension,
)
from assessment_toolkit.common.thresholds import DEFAULT_THRESHOLDS


class Difficulty(str, Enum):
    """Item difficulty band."""
    EASY = "easy"
    AVERAGE = "average"
    DIFFICULT = "difficult"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Difficulty:
        """Parse a label such as "Easy", "medium" or "hard"."""
        if isinstance(value, cls):
            return value
        return cls(resolve_difficulty(value))

    @property
    def rank(self) -> int:
        """1 for easy, 2 for average, 3 for difficult."""
        return _DIFFICULTY_ORDER.index(self) + 1


class CognitiveLevel(str, Enum):
    """Cognitive process an item exercises (ordered, lowest first)."""
    REMEMBERING = "remembering"
    UNDERSTANDING = "understanding"
    APPLYING = "applying"
    ANALYZING = "analyzing"
    EVALUATING = "evaluating"
    CREATING = "creating"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> CognitiveLevel:
        """Parse a label such as "Remember" or "analyse"."""
        if isinstance(value, cls):
            return value
        return cls(resolve_cognitive_level(value))

    @property
    def order(self) -> int:
        """Position in the taxonomy, starting at 0."""
        return _COGNITIVE_ORDER.index(self)


class KnowledgeDimension(str, Enum):
    """Kind of knowledge an item targets."""
    FACTUAL = "factual"
    CONCEPTUAL = "conceptual"
    PROCEDURAL = "procedural"
    METACOGNITIVE = "metacognitive"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> KnowledgeDimension:
        if isinstance(value, cls):
            return value
        return cls(resolve_knowledge_dimension(value))


_DIFFICULTY_ORDER: Tuple[Difficulty, ...] = tuple(Difficulty)
_COGNITIVE_ORDER: Tuple[CognitiveLevel, ...] = tuple(CognitiveLevel)

DIFFICULTY_LEVELS: Tuple[str, ...] = tuple(d.value for d in Difficulty)
COGNITIVE_LEVELS: Tuple[str, ...] = tuple(c.value for c in CognitiveLevel)


@dataclass(frozen=True)
class Item:
    """
    Candidate assessment item (immutable).

    The engine never mutates an Item; it only selects references to
    items from the pool it is given.

    Attributes:
        id: Unique identifier within a pool, stable across calls
        topic: Topic label (non-empty)
        cognitive_level: Position in the cognitive taxonomy
        difficulty: Difficulty band
        knowledge_dimension: Optional knowledge dimension tag
        estimated_time_minutes: Expected answering time (positive)
        points: Point value (positive)
        standards_tags: External standard identifiers (not interpreted)

    Invariants:
        - id and topic are non-empty
        - estimated_time_minutes > 0 and points > 0

    Example:
        >>> item = Item("q1", "Algebra", CognitiveLevel.APPLYING, Difficulty.EASY)
        >>> item.estimated_time_minutes
        2.0
    """

    id: str
    topic: str
    cognitive_level: CognitiveLevel
    difficulty: Difficulty
    knowledge_dimension: Optional[KnowledgeDimension] = None
    estimated_time_minutes: float = DEFAULT_THRESHOLDS.default_item_minutes
    points: float = DEFAULT_THRESHOLDS.default_item_points
    standards_tags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate item on construction."""
        if not self.id:
            raise ValueError("Item id must be non-empty")
        if not self.topic or not self.topic.strip():
            raise ValueError(f"Item {self.id}: topic must be non-empty")
        if not isinstance(self.cognitive_level, CognitiveLevel):
            raise ValueError(f"Item {self.id}: invalid cognitive level {self.cognitive_level!r}")
        if not isinstance(self.difficulty, Difficulty):
            raise ValueError(f"Item {self.id}: invalid difficulty {self.difficulty!r}")
        if not self.estimated_time_minutes > 0:
            raise ValueError(
                f"Item {self.id}: estimated_time_minutes must be positive: {self.estimated_time_minutes}"
            )
        if not self.points > 0:
            raise ValueError(f"Item {self.id}: points must be positive: {self.points}")
        if not isinstance(self.standards_tags, frozenset):
            object.__setattr__(self, "standards_tags", frozenset(self.standards_tags))

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        """
        Build an Item from a payload dictionary.

        Labels are resolved case-insensitively; absent or null
        ``estimated_time_minutes`` / ``points`` fall back to 2 and 1.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a label or value is invalid
        """
        knowledge = data.get("knowledge_dimension")
        minutes = data.get("estimated_time_minutes")
        points = data.get("points")
        return cls(
            id=str(data["id"]),
            topic=data["topic"],
            cognitive_level=CognitiveLevel.parse(data["cognitive_level"]),
            difficulty=Difficulty.parse(data["difficulty"]),
            knowledge_dimension=KnowledgeDimension.parse(knowledge) if knowledge else None,
            estimated_time_minutes=(
                float(minutes) if minutes is not None else DEFAULT_THRESHOLDS.default_item_minutes
            ),
            points=float(points) if points is not None else DEFAULT_THRESHOLDS.default_item_points,
            standards_tags=frozenset(data.get("standards_tags") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "topic": self.topic,
            "cognitive_level": self.cognitive_level.value,
            "difficulty": self.difficulty.value,
            "estimated_time_minutes": self.estimated_time_minutes,
            "points": self.points,
        }
        if self.knowledge_dimension is not None:
            data["knowledge_dimension"] = self.knowledge_dimension.value
        if self.standards_tags:
            data["standards_tags"] = sorted(self.standards_tags)
        return data

    def __repr__(self) -> str:
        return (
            f"Item({self.id}, topic={self.topic!r}, "
            f"{self.difficulty.value}/{self.cognitive_level.value})"
        )
