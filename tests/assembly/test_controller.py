"""
Integration Tests for the Assembly Pipeline

Tests for run_assembly end to end.
"""

import pytest

from assessment_toolkit.assembly.config import AssemblyConfig
from assessment_toolkit.assembly.controller import AssemblyError, run_assembly
from assessment_toolkit.core.models import Constraint


@pytest.fixture
def constraints():
    return [
        Constraint.topic_coverage({"Algebra": 3, "Geometry": 3, "Statistics": 3}, priority=2),
        Constraint.difficulty_balance(),
        Constraint.time_limit(20),
    ]


class TestRunAssembly:
    """Tests for run_assembly function."""

    def test_run_when_target_size_given_then_single_form(self, mixed_pool, constraints):
        report = run_assembly(mixed_pool, constraints, AssemblyConfig(target_size=9))

        assert len(report.forms) == 1
        assert report.forms[0].item_count == 9
        assert report.target_size == 9
        assert report.length_recommendation is None
        assert len(report.balance) == 1

    def test_run_when_no_target_size_then_length_optimizer_decides(self, mixed_pool, constraints):
        """20 minutes at 2 min/item caps the length at 10."""
        report = run_assembly(mixed_pool, constraints, AssemblyConfig())

        assert report.length_recommendation is not None
        assert report.target_size == report.length_recommendation.recommended_length == 10
        assert report.forms[0].item_count == 10

    def test_run_when_several_forms_then_disjoint(self, mixed_pool, constraints):
        report = run_assembly(mixed_pool, constraints, AssemblyConfig(target_size=9, number_of_forms=3))

        ids = [item_id for form in report.forms for item_id in form.item_ids]
        assert len(report.forms) == 3
        assert len(ids) == len(set(ids)) == 27

    def test_run_when_pool_too_small_for_forms_then_warning(self, mixed_pool, constraints):
        report = run_assembly(mixed_pool, constraints, AssemblyConfig(target_size=20, number_of_forms=2))

        assert len(report.forms) == 1
        assert any("Only 1 of 2 forms" in warning for warning in report.warnings)

    def test_run_when_pool_smaller_than_target_then_undersized_form(self, mixed_pool):
        """An undersized single form is an outcome, not an error."""
        report = run_assembly(mixed_pool[:4], [], AssemblyConfig(target_size=10))

        assert report.forms[0].item_count == 4
        assert report.forms[0].is_undersized
        assert any("holds 4 of 10 items" in warning for warning in report.warnings)

    def test_run_when_versions_requested_then_scrambled_per_form(self, mixed_pool, constraints):
        report = run_assembly(
            mixed_pool, constraints, AssemblyConfig(target_size=6, number_of_forms=2, versions=3)
        )

        assert len(report.versions) == 2
        assert [v.label for v in report.versions[0]] == ["A", "B", "C"]

    def test_run_when_duplicate_ids_then_raises_assembly_error(self, make_item):
        pool = [make_item("a"), make_item("a")]

        with pytest.raises(AssemblyError, match="Duplicate item ids"):
            run_assembly(pool, [], AssemblyConfig(target_size=1))

    def test_run_when_priority_invalid_then_raises_assembly_error(self, mixed_pool):
        with pytest.raises(AssemblyError, match="invalid priority"):
            run_assembly(mixed_pool, [Constraint.time_limit(30, priority=-1)], AssemblyConfig(target_size=5))

    def test_to_dict_when_exported_then_contains_forms_and_balance(self, mixed_pool, constraints):
        data = run_assembly(mixed_pool, constraints, AssemblyConfig(target_size=6)).to_dict()

        assert data["target_size"] == 6
        assert data["forms"][0]["label"] == "A"
        assert "balance" in data["forms"][0]
        assert isinstance(data["warnings"], list)
