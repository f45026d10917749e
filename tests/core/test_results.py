"""
Unit Tests for Result Models

Tests for AssemblyMetrics, calculate_metrics and AssemblyResult.
"""

import pytest

from assessment_toolkit.core.models.results import (
    AssemblyResult,
    LengthRecommendation,
    calculate_metrics,
)


class TestCalculateMetrics:
    """Tests for calculate_metrics function."""

    def test_metrics_when_selection_empty_then_zero_totals(self):
        """Empty selections aggregate to zeros."""
        metrics = calculate_metrics([])

        assert metrics.total_time == 0.0
        assert metrics.total_points == 0.0
        assert metrics.item_count == 0
        assert metrics.mean_difficulty == 0.0

    def test_metrics_when_items_given_then_counts_and_totals(self, make_item):
        """Counts are per category, totals are sums."""
        # Arrange
        items = [
            make_item("a", topic="Algebra", difficulty="easy", minutes=3, points=2),
            make_item("b", topic="Algebra", difficulty="difficult", cognitive_level="analyzing"),
            make_item("c", topic="Geometry", difficulty="easy"),
        ]

        # Act
        metrics = calculate_metrics(items)

        # Assert
        assert metrics.topic_counts == {"Algebra": 2, "Geometry": 1}
        assert metrics.difficulty_counts == {"easy": 2, "difficult": 1}
        assert metrics.cognitive_level_counts == {"applying": 2, "analyzing": 1}
        assert metrics.total_time == 7.0
        assert metrics.total_points == 4.0
        assert metrics.mean_difficulty == pytest.approx(5 / 3)


class TestAssemblyResult:
    """Tests for AssemblyResult dataclass."""

    def test_init_when_duplicate_items_then_raises_error(self, make_item):
        """An item can appear in a result only once."""
        item = make_item("a")
        with pytest.raises(ValueError, match="Duplicate items"):
            AssemblyResult((item, item), 1.0, {}, calculate_metrics([item, item]), target_size=2)

    def test_properties_when_undersized_then_shortfall_reported(self, make_item):
        """Undersized results report their shortfall."""
        items = (make_item("a"), make_item("b"))
        result = AssemblyResult(
            items, 1.5, {"topic_coverage": True, "time_limit": False}, calculate_metrics(items), target_size=5
        )

        assert result.item_ids == ("a", "b")
        assert result.is_undersized
        assert result.shortfall == 3
        assert result.unmet_constraints == ("time_limit",)
        assert not result.all_constraints_satisfied

    def test_to_dict_when_serialized_then_contains_ids_and_metrics(self, make_item):
        """to_dict exposes ids, satisfaction and metrics."""
        items = (make_item("a"),)
        data = AssemblyResult(items, 1.0, {"time_limit": True}, calculate_metrics(items), target_size=1).to_dict()

        assert data["item_ids"] == ["a"]
        assert data["constraints_satisfied"] == {"time_limit": True}
        assert data["metrics"]["total_time"] == 2.0


class TestLengthRecommendation:
    """Tests for LengthRecommendation serialization."""

    def test_to_dict_when_no_alternatives_then_empty_list(self):
        data = LengthRecommendation(12, ("Final recommended length: 12 items",)).to_dict()
        assert data["recommended_length"] == 12
        assert data["alternatives"] == []
