"""
Unit Tests for Input Validation

Tests for the schema checks and collection validators.
"""

import math

import pytest

from assessment_toolkit.core.models.constraints import Constraint
from assessment_toolkit.core.schemas.validator import (
    InvalidInputError,
    validate_constraint_payload,
    validate_constraints,
    validate_form_count,
    validate_item_payload,
    validate_length_bounds,
    validate_pool,
    validate_target_size,
)


class TestValidateItemPayload:
    """Tests for validate_item_payload function."""

    def test_validate_when_valid_data_then_no_error(self, item_payload):
        """Valid item data should pass validation."""
        # Should not raise
        validate_item_payload(item_payload)

    def test_validate_when_missing_topic_then_raises_error(self, item_payload):
        """Missing required field should raise InvalidInputError."""
        del item_payload["topic"]

        with pytest.raises(InvalidInputError, match="topic"):
            validate_item_payload(item_payload)

    def test_validate_when_negative_points_then_error_has_path(self, item_payload):
        """Errors carry the path of the offending field."""
        item_payload["points"] = -1

        with pytest.raises(InvalidInputError) as exc_info:
            validate_item_payload(item_payload)

        assert exc_info.value.path == "points"
        assert exc_info.value.errors

    def test_validate_when_not_a_dict_then_raises_error(self):
        """Non-object payloads are rejected."""
        with pytest.raises(InvalidInputError, match="must be an object"):
            validate_item_payload(["id", "topic"])


class TestValidateConstraintPayload:
    """Tests for validate_constraint_payload function."""

    def test_validate_when_type_key_used_then_no_error(self):
        validate_constraint_payload({"type": "time_limit", "config": {"max_minutes": 30}})

    def test_validate_when_kind_missing_then_raises_error(self):
        """A constraint needs a kind or type."""
        with pytest.raises(InvalidInputError):
            validate_constraint_payload({"priority": 1})

    def test_validate_when_priority_zero_then_raises_error(self):
        """Priority must be strictly positive."""
        with pytest.raises(InvalidInputError):
            validate_constraint_payload({"kind": "time_limit", "priority": 0})

    def test_validate_when_config_key_unknown_then_raises_error(self):
        """Misspelt config keys are reported instead of silently ignored."""
        with pytest.raises(InvalidInputError) as exc_info:
            validate_constraint_payload({"type": "time_limit", "config": {"max_time": 30}})

        assert exc_info.value.path == "config"

    def test_validate_when_camel_case_config_key_then_no_error(self):
        validate_constraint_payload({"type": "timeLimit", "config": {"maxTime": 30}})


class TestCollectionValidators:
    """Tests for pool, constraint and size validators."""

    def test_validate_pool_when_duplicate_ids_then_raises_error(self, make_item):
        """Duplicate ids are rejected before assembly."""
        pool = [make_item("a"), make_item("b"), make_item("a", topic="Geometry")]

        with pytest.raises(InvalidInputError, match="Duplicate item ids") as exc_info:
            validate_pool(pool)

        assert exc_info.value.errors == ["Duplicate id: a"]

    @pytest.mark.parametrize("priority", [0, -1, math.inf, math.nan])
    def test_validate_constraints_when_priority_invalid_then_raises_error(self, priority):
        """Priorities must be finite and positive."""
        with pytest.raises(InvalidInputError, match="invalid priority"):
            validate_constraints([Constraint.time_limit(30, priority=priority)])

    def test_validate_constraints_when_cognitive_level_unknown_then_error_has_path(self):
        # Arrange
        constraints = [
            Constraint.time_limit(30),
            Constraint.cognitive_distribution({"remembering": 2, "bogus": 2}),
        ]

        # Act
        with pytest.raises(InvalidInputError, match="unknown cognitive level") as exc_info:
            validate_constraints(constraints)

        # Assert
        assert exc_info.value.path == "constraints[1].config.distribution"

    def test_validate_constraints_when_cognitive_alias_used_then_no_error(self):
        """Aliases such as "apply" resolve to a known level."""
        validate_constraints([Constraint.cognitive_distribution({"apply": 3, "Remember": 1})])

    @pytest.mark.parametrize("max_minutes", [0, -5, math.nan])
    def test_validate_constraints_when_time_limit_not_positive_then_raises_error(self, max_minutes):
        with pytest.raises(InvalidInputError, match="positive max_minutes") as exc_info:
            validate_constraints([Constraint.time_limit(max_minutes)])

        assert exc_info.value.path == "constraints[0].config.max_minutes"

    @pytest.mark.parametrize("value", [-1, 2.5, "10", True])
    def test_validate_target_size_when_not_non_negative_int_then_raises_error(self, value):
        with pytest.raises(InvalidInputError):
            validate_target_size(value)

    def test_validate_form_count_when_zero_then_no_error(self):
        """Zero forms is a valid (empty) request."""
        validate_form_count(0)

    def test_validate_length_bounds_when_inverted_then_raises_error(self):
        with pytest.raises(InvalidInputError, match="must not exceed"):
            validate_length_bounds(50, 10, 0.8)

    @pytest.mark.parametrize("reliability", [0, 1, 1.5, -0.2])
    def test_validate_length_bounds_when_reliability_out_of_range_then_raises_error(self, reliability):
        with pytest.raises(InvalidInputError, match="target_reliability"):
            validate_length_bounds(10, 100, reliability)
