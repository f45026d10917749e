"""
Unit Tests for Content Balance Diagnostics

Tests for check_content_balance.
"""

from assessment_toolkit.assembly.balance import check_content_balance
from assessment_toolkit.core.models import Constraint


def _difficulty_mix(make_item, easy, average, difficult):
    return (
        [make_item(f"e{i}", difficulty="easy") for i in range(easy)]
        + [make_item(f"a{i}", difficulty="average") for i in range(average)]
        + [make_item(f"d{i}", difficulty="difficult") for i in range(difficult)]
    )


class TestCheckContentBalance:
    """Tests for check_content_balance function."""

    def test_check_when_default_mix_matched_then_balanced(self, make_item):
        """30/50/20 of 10 items is balanced with no recommendations."""
        selection = _difficulty_mix(make_item, 3, 5, 2)

        report = check_content_balance(selection, [])

        assert report.is_balanced
        assert report.recommendations == ()

    def test_check_when_all_easy_then_difficulty_recommendations(self, make_item):
        """Counts more than 2 away from floor(n × share) are reported."""
        # Arrange: targets for 10 items are 3 / 5 / 2
        selection = _difficulty_mix(make_item, 10, 0, 0)

        # Act
        report = check_content_balance(selection, [])

        # Assert
        assert not report.is_balanced
        assert "Easy items: Current 10, Target ~3" in report.recommendations
        assert "Average items: Current 0, Target ~5" in report.recommendations
        # Difficult: |0 - 2| = 2 is within tolerance
        assert not any(r.startswith("Difficult") for r in report.recommendations)

    def test_check_when_constraint_shares_given_then_used_as_targets(self, make_item):
        selection = _difficulty_mix(make_item, 5, 0, 5)

        report = check_content_balance(selection, [Constraint.difficulty_balance(0.5, 0.0, 0.5)])

        assert report.is_balanced

    def test_check_when_cognitive_counts_off_then_reported(self, make_item):
        """Cognitive levels are compared with the constraint's target counts."""
        selection = _difficulty_mix(make_item, 3, 5, 2)  # all "applying"
        constraint = Constraint.cognitive_distribution({"remembering": 4, "applying": 8})

        report = check_content_balance(selection, [constraint])

        assert report.recommendations == ("Cognitive level 'remembering': Current 0, Target 4",)

    def test_check_when_topic_short_then_reported(self, make_item):
        selection = _difficulty_mix(make_item, 3, 5, 2)  # all "Algebra"

        report = check_content_balance(selection, [Constraint.topic_coverage({"Algebra": 10, "Geometry": 5})])

        assert report.recommendations == ("Topic 'Geometry': Current 0, Target 5",)

    def test_check_when_over_time_then_reported(self, make_item):
        selection = _difficulty_mix(make_item, 3, 5, 2)  # 20 minutes

        report = check_content_balance(selection, [Constraint.time_limit(15)])

        assert report.recommendations == ("Total time 20 minutes exceeds the 15 minute limit",)

    def test_check_when_tolerance_raised_then_fewer_recommendations(self, make_item):
        selection = _difficulty_mix(make_item, 6, 3, 1)

        strict = check_content_balance(selection, [], tolerance=0)
        lenient = check_content_balance(selection, [], tolerance=3)

        assert len(strict.recommendations) == 3
        assert lenient.is_balanced
