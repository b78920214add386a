"""
Error taxonomy for tether simulations.

Every error raised by the core derives from :class:`TetherLabError` and also
from the closest built-in exception, so callers can catch either.
"""
from __future__ import annotations


class TetherLabError(Exception):
    """Base class for all tetherlab errors."""


class ConfigurationError(TetherLabError, ValueError):
    """
    Invalid simulation parameter, detected before any solving starts.

    Parameters
    ----------
    parameter : str
        Name of the offending parameter.
    value : object
        The rejected value.
    reason : str
        Human-readable explanation.
    """

    def __init__(self, parameter: str, value: object, reason: str) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(f"{parameter} {reason}, got {value!r}")


class DegenerateGeometryError(TetherLabError, ArithmeticError):
    """
    A segment collapsed to zero length or became non-finite.

    Parameters
    ----------
    segment : int
        Segment index (1..n). 0 is used for the whole tether (L(t) <= 0).
    time : float
        Simulation time at which the degenerate state was evaluated [s].
    length : float
        The offending length [m].
    """

    def __init__(self, segment: int, time: float, length: float) -> None:
        self.segment = int(segment)
        self.time = float(time)
        self.length = float(length)
        what = "tether length" if self.segment == 0 else f"segment {self.segment} length"
        super().__init__(f"Degenerate geometry at t={self.time:.6f}s: {what} is {self.length!r}")


class IntegrationFailure(TetherLabError, RuntimeError):
    """
    The adaptive solver could not advance the state.

    Parameters
    ----------
    time : float
        Last time reached by the solver [s].
    step_size : float | None
        Last attempted step size [s], if known.
    message : str
        Diagnostic from the underlying solver.
    """

    def __init__(self, time: float, step_size: float | None, message: str) -> None:
        self.time = float(time)
        self.step_size = None if step_size is None else float(step_size)
        self.message = message
        step = "unknown" if self.step_size is None else f"{self.step_size:.3e}s"
        super().__init__(
            f"Integration failed at t={self.time:.6f}s (step size {step}): {message}"
        )
