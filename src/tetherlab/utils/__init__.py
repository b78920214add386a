"""Utility functions for tetherlab simulations."""

from .validation import (
    validate_non_negative,
    validate_positive,
    validate_segment_count,
    validate_timestep,
    validate_vector3,
)

__all__ = [
    "validate_positive",
    "validate_non_negative",
    "validate_segment_count",
    "validate_vector3",
    "validate_timestep",
]
