"""
Schemas Package

JSON schema definitions and the input validation layer.
"""

from .validator import (
    InvalidInputError,
    validate_item_payload,
    validate_constraint_payload,
    validate_pool,
    validate_constraints,
    validate_target_size,
    validate_form_count,
    validate_length_bounds,
)

__all__ = [
    "InvalidInputError",
    "validate_item_payload",
    "validate_constraint_payload",
    "validate_pool",
    "validate_constraints",
    "validate_target_size",
    "validate_form_count",
    "validate_length_bounds",
]
