import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import assessment_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from assessment_toolkit.core.models import CognitiveLevel, Difficulty, Item  # noqa: E402


def build_item(
    item_id: str,
    topic: str = "Algebra",
    difficulty: str = "average",
    cognitive_level: str = "applying",
    minutes: float = 2.0,
    points: float = 1.0,
    standards=(),
) -> Item:
    """Build an Item from plain labels."""
    return Item(
        id=item_id,
        topic=topic,
        cognitive_level=CognitiveLevel.parse(cognitive_level),
        difficulty=Difficulty.parse(difficulty),
        estimated_time_minutes=minutes,
        points=points,
        standards_tags=frozenset(standards),
    )


# Common test fixtures
@pytest.fixture
def make_item():
    """Factory for items with sensible defaults."""
    return build_item


@pytest.fixture
def mixed_pool():
    """Thirty items spread over three topics, all difficulties and four levels."""
    topics = ["Algebra", "Geometry", "Statistics"]
    difficulties = ["easy", "average", "difficult"]
    levels = ["remembering", "understanding", "applying", "analyzing"]
    return [
        build_item(
            f"q{i:02d}",
            topic=topics[i % 3],
            difficulty=difficulties[(i // 3) % 3],
            cognitive_level=levels[i % 4],
        )
        for i in range(30)
    ]


@pytest.fixture
def item_payload() -> dict:
    """Valid item payload as found in a pool file."""
    return {
        "id": "alg-001",
        "topic": "Algebra",
        "cognitive_level": "Apply",
        "difficulty": "Medium",
        "knowledge_dimension": "procedural",
        "estimated_time_minutes": 3,
        "points": 2,
        "standards_tags": ["CCSS.8.EE.1"],
    }
