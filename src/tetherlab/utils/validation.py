"""
Validation utilities for physical parameters and solver settings.

All validators raise :class:`~tetherlab.exceptions.ConfigurationError`
naming the offending parameter, so problems surface before a solve starts.
"""
from __future__ import annotations

import math
import warnings

import numpy as np
from numpy.typing import NDArray

from tetherlab.exceptions import ConfigurationError


def validate_positive(value: float, name: str, strict: bool = True) -> None:
    """
    Validate that a scalar value is positive and finite.

    Parameters
    ----------
    value : float
        Value to validate
    name : str
        Parameter name for error messages
    strict : bool
        If True, raise ConfigurationError. If False, issue warning.

    Raises
    ------
    ConfigurationError
        If strict=True and value <= 0 or value is not finite
    """
    if not math.isfinite(value):
        raise ConfigurationError(name, value, "must be finite")
    if value <= 0:
        if strict:
            raise ConfigurationError(name, value, "must be positive")
        warnings.warn(f"{name} should be positive, got {value}", RuntimeWarning, stacklevel=2)


def validate_non_negative(value: float, name: str) -> None:
    """Validate that a value is finite and non-negative."""
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(name, value, "must be non-negative")


def validate_segment_count(n: int, name: str = "segments") -> None:
    """Validate that the segment count is an integer >= 1."""
    if isinstance(n, bool) or int(n) != n or n < 1:
        raise ConfigurationError(name, n, "must be an integer >= 1")


def validate_vector3(v: NDArray[np.float64], name: str) -> None:
    """Validate a finite 3-vector."""
    arr = np.asarray(v, dtype=np.float64)
    if arr.shape != (3,):
        raise ConfigurationError(name, v, f"must have shape (3,), not {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ConfigurationError(name, v, "must be finite")


def validate_timestep(dt: float, duration: float) -> None:
    """
    Validate the output sample interval against the simulation duration.

    Parameters
    ----------
    dt : float
        Output sample interval [s]
    duration : float
        Simulation duration [s]

    Raises
    ------
    ConfigurationError
        If dt is not positive
    """
    validate_positive(dt, "dt")
    if dt > duration:
        warnings.warn(
            f"Sample interval dt={dt}s exceeds duration={duration}s; "
            "only the initial state will be sampled.",
            RuntimeWarning,
            stacklevel=2,
        )
