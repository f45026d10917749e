"""
Unit Tests for Constraint Models

Tests for ConstraintKind parsing, factories and serialization.
"""

import pytest

from assessment_toolkit.core.models.constraints import Constraint, ConstraintKind


class TestConstraintKind:
    """Tests for ConstraintKind.parse."""

    @pytest.mark.parametrize(
        "raw",
        ["topic_coverage", "topicCoverage", "Topic Coverage", "TOPIC_COVERAGE", "topic-coverage"],
    )
    def test_parse_when_spelling_varies_then_returns_kind(self, raw):
        """Snake, camel, spaced and upper case spellings are accepted."""
        assert ConstraintKind.parse(raw) is ConstraintKind.TOPIC_COVERAGE

    def test_parse_when_bloom_distribution_then_maps_to_cognitive(self):
        """The older bloom_distribution name is an alias."""
        assert ConstraintKind.parse("bloomDistribution") is ConstraintKind.COGNITIVE_DISTRIBUTION

    def test_parse_when_unknown_then_raises_value_error(self):
        """Unknown kinds are rejected."""
        with pytest.raises(ValueError, match="Unknown constraint kind"):
            ConstraintKind.parse("reading_level")


class TestConstraint:
    """Tests for Constraint dataclass."""

    def test_init_when_defaults_then_priority_one_and_not_required(self):
        """Priority defaults to 1 and is_required to False."""
        constraint = Constraint(ConstraintKind.TIME_LIMIT, {"max_minutes": 30})

        assert constraint.priority == 1.0
        assert constraint.is_required is False

    def test_init_when_kind_is_string_then_parsed(self):
        """String kinds are parsed on construction."""
        constraint = Constraint("timeLimit", {"max_minutes": 30})
        assert constraint.kind is ConstraintKind.TIME_LIMIT

    def test_config_when_source_dict_mutated_then_constraint_unchanged(self):
        """The config is copied and read-only."""
        # Arrange
        source = {"max_minutes": 30}
        constraint = Constraint(ConstraintKind.TIME_LIMIT, source)

        # Act
        source["max_minutes"] = 90

        # Assert
        assert constraint.config["max_minutes"] == 30
        with pytest.raises(TypeError):
            constraint.config["max_minutes"] = 10

    def test_get_when_value_is_null_then_returns_default(self):
        """Explicit nulls behave as absent keys."""
        constraint = Constraint(ConstraintKind.TIME_LIMIT, {"max_minutes": None})
        assert constraint.get("max_minutes", 60) == 60

    def test_difficulty_factory_when_shares_omitted_then_only_given_keys_stored(self):
        """Omitted shares are left to the evaluator defaults."""
        constraint = Constraint.difficulty_balance(easy=0.5, difficult=0.5, priority=2)

        assert dict(constraint.config) == {"easy_percent": 0.5, "difficult_percent": 0.5}
        assert constraint.priority == 2

    def test_from_dict_when_type_key_used_then_accepted(self):
        """Payloads may use `type` instead of `kind`."""
        constraint = Constraint.from_dict(
            {"type": "topic_coverage", "config": {"distribution": {"X": 5}}, "priority": 3}
        )

        assert constraint.kind is ConstraintKind.TOPIC_COVERAGE
        assert constraint.priority == 3.0
        assert constraint.config["distribution"] == {"X": 5}

    def test_from_dict_when_camel_case_config_keys_then_mapped(self):
        """maxTime and the other camelCase config keys map to snake_case."""
        constraint = Constraint.from_dict(
            {"type": "difficultyBalance", "config": {"easyPercent": 40, "averagePercent": 40, "difficultPercent": 20}}
        )
        time_limit = Constraint.from_dict({"type": "time_limit", "config": {"maxTime": 30}})
        points = Constraint.from_dict({"type": "pointDistribution", "config": {"targetPoints": 12}})

        assert dict(constraint.config) == {"easy_percent": 40, "average_percent": 40, "difficult_percent": 20}
        assert time_limit.get("max_minutes") == 30
        assert points.get("target_points") == 12

    def test_from_dict_when_kind_missing_then_raises_key_error(self):
        """A payload without a kind is rejected."""
        with pytest.raises(KeyError):
            Constraint.from_dict({"config": {}})

    def test_to_dict_when_serialized_then_plain_dicts(self):
        """to_dict returns JSON-compatible plain dictionaries."""
        data = Constraint.standards_alignment(["S1", "S2"], is_required=True).to_dict()

        assert data == {
            "kind": "standards_alignment",
            "config": {"standards": ["S1", "S2"]},
            "priority": 1.0,
            "is_required": True,
        }
