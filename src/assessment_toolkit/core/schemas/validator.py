"""
Input Validation Layer

Validates payloads and model collections before the assembly engine runs.

The engine core is total for well-formed input and never validates; the
checks here sit in front of it and reject malformed input with a
descriptive InvalidInputError:

- `validate_item_payload()` / `validate_constraint_payload()` check raw
  dictionaries against the JSON schemas shipped beside this module
- `validate_pool()` rejects duplicate item ids
- `validate_constraints()` rejects non-positive priorities, unknown
  cognitive levels and non-positive time limits
- `validate_target_size()`, `validate_form_count()` and
  `validate_length_bounds()` reject negative or inverted sizes
"""

from __future__ import annotations

import json
import math
import numbers
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Sequence

import jsonschema

from ..models.constraints import Constraint, ConstraintKind
from ..models.items import CognitiveLevel, Item


_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class InvalidInputError(ValueError):
    """Raised when input to the engine is malformed."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate_against(data: Any, schema_name: str, label: str) -> None:
    if not isinstance(data, dict):
        raise InvalidInputError(f"{label} must be an object, got {type(data).__name__}")
    schema = _load_schema(schema_name)
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        raise InvalidInputError(
            f"{label} failed schema validation: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )


def validate_item_payload(data: dict[str, Any]) -> None:
    """
    Validate an item dictionary against the item schema.

    Raises:
        InvalidInputError: If data is invalid
    """
    _validate_against(data, "item", "Item payload")


def validate_constraint_payload(data: dict[str, Any]) -> None:
    """
    Validate a constraint dictionary against the constraint schema.

    Raises:
        InvalidInputError: If data is invalid
    """
    _validate_against(data, "constraint", "Constraint payload")


def validate_pool(items: Sequence[Item]) -> None:
    """
    Reject pools with duplicate item ids.

    Raises:
        InvalidInputError: If any id appears more than once
    """
    counts = Counter(item.id for item in items)
    duplicates = sorted(item_id for item_id, count in counts.items() if count > 1)
    if duplicates:
        raise InvalidInputError(
            f"Duplicate item ids in pool: {duplicates[:5]}",
            path="pool",
            errors=[f"Duplicate id: {item_id}" for item_id in duplicates],
        )


def validate_constraints(constraints: Iterable[Constraint]) -> None:
    """
    Reject constraints the evaluators cannot score.

    Checks that every priority is a finite positive number, that cognitive
    distribution targets name known levels, and that time limits are
    positive.

    Raises:
        InvalidInputError: If a constraint is invalid
    """
    for index, constraint in enumerate(constraints):
        priority = constraint.priority
        if (
            isinstance(priority, bool)
            or not isinstance(priority, numbers.Real)
            or not math.isfinite(priority)
            or priority <= 0
        ):
            raise InvalidInputError(
                f"Constraint {constraint.kind.value} has invalid priority: {priority!r}",
                path=f"constraints[{index}].priority",
            )

        if constraint.kind is ConstraintKind.COGNITIVE_DISTRIBUTION:
            for level in constraint.get("distribution", {}):
                try:
                    CognitiveLevel.parse(level)
                except ValueError as e:
                    raise InvalidInputError(
                        f"Constraint {constraint.kind.value} has unknown cognitive level: {level!r}",
                        path=f"constraints[{index}].config.distribution",
                        errors=[str(e)],
                    ) from e

        if constraint.kind is ConstraintKind.TIME_LIMIT:
            max_minutes = constraint.get("max_minutes")
            if max_minutes is not None and (
                isinstance(max_minutes, bool)
                or not isinstance(max_minutes, numbers.Real)
                or not max_minutes > 0
            ):
                raise InvalidInputError(
                    f"Constraint {constraint.kind.value} needs a positive max_minutes: {max_minutes!r}",
                    path=f"constraints[{index}].config.max_minutes",
                )


def _validate_non_negative_int(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise InvalidInputError(f"{name} must be a non-negative integer: {value!r}", path=name)


def validate_target_size(target_size: Any) -> None:
    """Reject negative or non-integer target sizes."""
    _validate_non_negative_int(target_size, "target_size")


def validate_form_count(number_of_forms: Any) -> None:
    """Reject negative or non-integer form counts."""
    _validate_non_negative_int(number_of_forms, "number_of_forms")


def validate_length_bounds(min_length: Any, max_length: Any, target_reliability: Any) -> None:
    """
    Reject length optimizer inputs the optimizer cannot reason about.

    Raises:
        InvalidInputError: If bounds are negative or inverted, or the
            reliability target is not strictly between 0 and 1
    """
    _validate_non_negative_int(min_length, "min_length")
    _validate_non_negative_int(max_length, "max_length")
    if min_length > max_length:
        raise InvalidInputError(
            f"min_length ({min_length}) must not exceed max_length ({max_length})",
            path="min_length",
        )
    if (
        isinstance(target_reliability, bool)
        or not isinstance(target_reliability, numbers.Real)
        or not 0 < target_reliability < 1
    ):
        raise InvalidInputError(
            f"target_reliability must be between 0 and 1: {target_reliability!r}",
            path="target_reliability",
        )
