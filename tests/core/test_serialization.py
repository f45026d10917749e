"""
Unit Tests for Serialization Utilities

Tests for pool and constraint loading and JSON export.
"""

import json

import pytest

from assessment_toolkit.core.models import ConstraintKind, calculate_metrics
from assessment_toolkit.core.models.results import AssemblyResult
from assessment_toolkit.core.schemas.validator import InvalidInputError
from assessment_toolkit.core.utils.serialization import (
    deserialize_item,
    load_constraints,
    load_pool,
    result_to_dict,
    save_pool_jsonl,
    serialize_item,
    write_json,
)


class TestItemSerialization:
    """Tests for item serialization/deserialization."""

    def test_deserialize_when_valid_payload_then_returns_item(self, item_payload):
        item = deserialize_item(item_payload)
        assert item.id == "alg-001"
        assert serialize_item(item)["difficulty"] == "average"

    def test_deserialize_when_unknown_label_then_raises_invalid_input(self, item_payload):
        """Labels passing the schema but unknown to the taxonomy are rejected."""
        item_payload["difficulty"] = "impossible"

        with pytest.raises(InvalidInputError, match="Invalid item 'alg-001'"):
            deserialize_item(item_payload)


class TestLoadPool:
    """Tests for load_pool function."""

    def test_load_when_jsonl_with_blank_lines_then_skips_them(self, tmp_path, item_payload):
        """JSONL pools hold one item per line; blank lines are ignored."""
        # Arrange
        second = dict(item_payload, id="alg-002")
        path = tmp_path / "pool.jsonl"
        path.write_text(json.dumps(item_payload) + "\n\n" + json.dumps(second) + "\n")

        # Act
        items = load_pool(path)

        # Assert
        assert [item.id for item in items] == ["alg-001", "alg-002"]

    def test_load_when_jsonl_line_invalid_then_error_names_line(self, tmp_path, item_payload):
        """Errors point at the offending line."""
        path = tmp_path / "pool.jsonl"
        path.write_text(json.dumps(item_payload) + "\n{not json}\n")

        with pytest.raises(InvalidInputError, match="line 2") as exc_info:
            load_pool(path)

        assert exc_info.value.path == "line 2"

    def test_load_when_json_object_with_items_then_returns_items(self, tmp_path, item_payload):
        path = tmp_path / "pool.json"
        path.write_text(json.dumps({"items": [item_payload]}))

        assert len(load_pool(path)) == 1

    def test_load_when_file_missing_then_raises_invalid_input(self, tmp_path):
        with pytest.raises(InvalidInputError, match="Cannot read"):
            load_pool(tmp_path / "missing.json")

    @pytest.mark.parametrize("name", ["pool.jsonl", "pool.json"])
    def test_load_when_file_not_utf8_then_raises_invalid_input(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b'[{"id": "\xff"}]\n')

        with pytest.raises(InvalidInputError, match=f"{name}: not valid UTF-8"):
            load_pool(path)

    def test_save_when_reloaded_then_same_items(self, tmp_path, mixed_pool):
        """save_pool_jsonl output loads back unchanged."""
        path = tmp_path / "saved.jsonl"

        save_pool_jsonl(mixed_pool, path)

        assert load_pool(path) == mixed_pool


class TestLoadConstraints:
    """Tests for load_constraints function."""

    def test_load_when_wrapped_object_then_returns_constraints(self, tmp_path):
        path = tmp_path / "constraints.json"
        path.write_text(
            json.dumps(
                {
                    "constraints": [
                        {"kind": "topicCoverage", "config": {"distribution": {"X": 5}}, "priority": 2},
                        {"type": "time_limit", "config": {"max_minutes": 20}},
                    ]
                }
            )
        )

        constraints = load_constraints(path)

        assert [c.kind for c in constraints] == [ConstraintKind.TOPIC_COVERAGE, ConstraintKind.TIME_LIMIT]
        assert constraints[0].priority == 2.0

    def test_load_when_record_invalid_then_error_names_index(self, tmp_path):
        path = tmp_path / "constraints.json"
        path.write_text(json.dumps([{"kind": "time_limit"}, {"priority": -1}]))

        with pytest.raises(InvalidInputError, match="constraint 1"):
            load_constraints(path)

    def test_load_when_file_not_utf8_then_raises_invalid_input(self, tmp_path):
        path = tmp_path / "constraints.json"
        path.write_bytes(b'[{"kind": "time_limit\xff"}]')

        with pytest.raises(InvalidInputError, match="not valid UTF-8"):
            load_constraints(path)

    def test_load_when_camel_case_time_limit_then_limit_applied(self, tmp_path):
        # Arrange
        path = tmp_path / "constraints.json"
        path.write_text(json.dumps([{"type": "time_limit", "config": {"maxTime": 30}}]))

        # Act
        constraints = load_constraints(path)

        # Assert
        assert constraints[0].get("max_minutes") == 30


class TestExport:
    """Tests for JSON export helpers."""

    def test_result_to_dict_when_exported_then_includes_item_records(self, tmp_path, make_item):
        # Arrange
        items = (make_item("a"), make_item("b", topic="Geometry"))
        result = AssemblyResult(items, 1.0, {}, calculate_metrics(items), target_size=2)
        path = tmp_path / "out" / "result.json"

        # Act
        write_json(result_to_dict(result), path)

        # Assert
        data = json.loads(path.read_text())
        assert data["item_ids"] == ["a", "b"]
        assert data["items"][1]["topic"] == "Geometry"
