"""
Utils Package

Serialization, loading and export functions.
"""

from .serialization import (
    serialize_item,
    deserialize_item,
    deserialize_constraint,
    load_pool,
    save_pool_jsonl,
    load_constraints,
    result_to_dict,
    report_to_dict,
    write_json,
)

__all__ = [
    "serialize_item",
    "deserialize_item",
    "deserialize_constraint",
    "load_pool",
    "save_pool_jsonl",
    "load_constraints",
    "result_to_dict",
    "report_to_dict",
    "write_json",
]
