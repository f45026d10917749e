"""
Serialization Utilities

Load item pools and constraint lists from JSON / JSONL files and export
results back to JSON-compatible dictionaries.

Every record is validated against its schema before it becomes a model,
so the engine only ever sees well-formed items and constraints.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List

from ..models.constraints import Constraint
from ..models.items import Item
from ..models.results import AssemblyResult
from ..schemas.validator import (
    InvalidInputError,
    validate_constraint_payload,
    validate_item_payload,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Items
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_item(data: dict[str, Any], *, validate: bool = True) -> Item:
    """
    Build an Item from a dictionary.

    Args:
        data: Item payload
        validate: Whether to validate against the item schema first

    Raises:
        InvalidInputError: If the payload is invalid
    """
    if validate:
        validate_item_payload(data)
    try:
        return Item.from_dict(data)
    except (KeyError, ValueError) as e:
        raise InvalidInputError(f"Invalid item {data.get('id')!r}: {e}", path="item") from e


def serialize_item(item: Item) -> dict[str, Any]:
    return item.to_dict()


def load_pool(path: Path) -> List[Item]:
    """
    Load an item pool from a ``.json`` or ``.jsonl`` file.

    JSON files hold either a list of items or an object with an ``items``
    list. JSONL files hold one item per line; blank lines are skipped.

    Raises:
        InvalidInputError: If the file cannot be parsed or a record is invalid
    """
    path = Path(path)
    if path.suffix.lower() == ".jsonl":
        items = list(_load_pool_jsonl(path))
    else:
        data = _read_json(path)
        records = data.get("items") if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise InvalidInputError(f"{path.name}: expected a list of items", path="items")
        items = []
        for index, record in enumerate(records):
            try:
                items.append(deserialize_item(record))
            except InvalidInputError as e:
                raise InvalidInputError(f"{path.name} item {index}: {e}", path=f"items[{index}]", errors=e.errors) from e
    logger.debug(f"Loaded {len(items)} items from {path}")
    return items


def _load_pool_jsonl(path: Path) -> Iterable[Item]:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise InvalidInputError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidInputError(f"{path.name}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"{path.name} line {line_no}: invalid JSON ({e.msg})", path=f"line {line_no}") from e
        try:
            yield deserialize_item(record)
        except InvalidInputError as e:
            raise InvalidInputError(f"{path.name} line {line_no}: {e}", path=f"line {line_no}", errors=e.errors) from e


def save_pool_jsonl(items: Iterable[Item], path: Path) -> None:
    """Write items to a JSONL file, one item per line."""
    with open(path, "w", encoding="utf-8") as f:
        for item in items:
            f.write(json.dumps(serialize_item(item)) + "\n")


# ─────────────────────────────────────────────────────────────────────────────
# Constraints
# ─────────────────────────────────────────────────────────────────────────────

def deserialize_constraint(data: dict[str, Any], *, validate: bool = True) -> Constraint:
    """
    Build a Constraint from a dictionary.

    Raises:
        InvalidInputError: If the payload is invalid
    """
    if validate:
        validate_constraint_payload(data)
    try:
        return Constraint.from_dict(data)
    except (KeyError, ValueError) as e:
        raise InvalidInputError(f"Invalid constraint: {e}", path="constraint") from e


def load_constraints(path: Path) -> List[Constraint]:
    """
    Load constraints from a JSON file holding a list or ``{"constraints": [...]}``.

    Raises:
        InvalidInputError: If the file cannot be parsed or a record is invalid
    """
    path = Path(path)
    data = _read_json(path)
    records = data.get("constraints") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise InvalidInputError(f"{path.name}: expected a list of constraints", path="constraints")
    constraints = []
    for index, record in enumerate(records):
        try:
            constraints.append(deserialize_constraint(record))
        except InvalidInputError as e:
            raise InvalidInputError(
                f"{path.name} constraint {index}: {e}", path=f"constraints[{index}]", errors=e.errors
            ) from e
    return constraints


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise InvalidInputError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidInputError(f"{path.name}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"{path.name}: invalid JSON ({e.msg} at line {e.lineno})") from e


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────

def result_to_dict(result: AssemblyResult) -> dict[str, Any]:
    """JSON-compatible form of an AssemblyResult, including full item records."""
    data = result.to_dict()
    data["items"] = [serialize_item(item) for item in result.selected_items]
    return data


def report_to_dict(report: Any) -> dict[str, Any]:
    """JSON-compatible form of any report object exposing ``to_dict()``."""
    return report.to_dict()


def write_json(data: Any, path: Path) -> None:
    """Write a JSON document with stable indentation."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    logger.debug(f"Wrote {path}")
