"""
Immutable configuration values for tether simulations.

Physical parameters (:class:`TetherSettings`) and numerical parameters
(:class:`SolverSettings`) are resolved and validated before a solve begins;
nothing is read from global state while integrating. Use
``dataclasses.replace`` (or the ``with_`` helper) to derive variants.

Physical units:
- Lengths: meters [m]
- Speeds: meters per second [m/s]
- Densities: kilograms per cubic meter [kg/m³]
- Unit spring constant: Newtons [N] (stiffness of a 1 m piece of tether)
- Unit damping constant: Newton-seconds [N·s]
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace

import numpy as np
from numpy.typing import NDArray

from tetherlab.exceptions import ConfigurationError
from tetherlab.utils.validation import (
    validate_non_negative,
    validate_positive,
    validate_segment_count,
    validate_timestep,
    validate_vector3,
)

G_EARTH = (0.0, 0.0, -9.81)
TENSION_LAWS = ("hard", "softplus")
STIFF_METHODS = ("Radau", "BDF", "LSODA")
EXPLICIT_METHODS = ("RK45", "RK23", "DOP853")


@dataclass(frozen=True)
class TetherSettings:
    """
    Physical description of the tether and its reel-out motion.

    Parameters
    ----------
    gravity : tuple[float, float, float]
        Gravitational acceleration [m/s²]; z is up.
    l0 : float
        Initial total tether length [m].
    v_ro : float
        Reel-out speed [m/s]. Negative values reel in.
    d_tether : float
        Tether diameter [m].
    rho_tether : float
        Tether material density [kg/m³].
    c_spring : float
        Unit-length spring constant [N]. The spring constant of a piece of
        length ``l`` is ``c_spring / l``.
    damping : float
        Unit-length damping constant [N·s].
    segments : int
        Number of segments ``n``; the chain has ``n + 1`` nodes.
    elevation : float
        Initial angle between the tether and the z-axis [rad].
    tension_law : str
        ``"hard"`` for the exact tension-only cutoff, ``"softplus"`` for a
        smooth approximation of it.
    smoothing_length : float
        Width of the softplus transition [m]. Ignored by the hard law.
    """

    gravity: tuple[float, float, float] = G_EARTH
    l0: float = 50.0
    v_ro: float = 0.0
    d_tether: float = 0.004
    rho_tether: float = 724.0
    c_spring: float = 614600.0
    damping: float = 473.0
    segments: int = 5
    elevation: float = math.pi / 10
    tension_law: str = "hard"
    smoothing_length: float = 1e-4

    def __post_init__(self) -> None:
        object.__setattr__(self, "gravity", tuple(float(g) for g in self.gravity))
        self.validate()

    def validate(self) -> None:
        """Check every parameter, raising ConfigurationError on the first bad one."""
        validate_vector3(np.asarray(self.gravity), "gravity")
        validate_segment_count(self.segments)
        validate_positive(self.l0, "l0")
        if not math.isfinite(self.v_ro):
            raise ConfigurationError("v_ro", self.v_ro, "must be finite")
        validate_positive(self.d_tether, "d_tether")
        validate_positive(self.rho_tether, "rho_tether")
        validate_non_negative(self.c_spring, "c_spring")
        validate_non_negative(self.damping, "damping")
        if not math.isfinite(self.elevation):
            raise ConfigurationError("elevation", self.elevation, "must be finite")
        if self.tension_law not in TENSION_LAWS:
            raise ConfigurationError(
                "tension_law", self.tension_law, f"must be one of {TENSION_LAWS}"
            )
        validate_positive(self.smoothing_length, "smoothing_length")

    @property
    def g(self) -> NDArray[np.float64]:
        """Gravity as a float64 array (3,)."""
        return np.asarray(self.gravity, dtype=np.float64)

    @property
    def linear_density(self) -> float:
        """Tether mass per unit length [kg/m]."""
        return math.pi * (self.d_tether / 2.0) ** 2 * self.rho_tether

    def reel_limit(self) -> float | None:
        """Time at which reel-in would shrink the tether to zero, or None."""
        if self.v_ro >= 0:
            return None
        return self.l0 / -self.v_ro

    def with_(self, **changes) -> TetherSettings:
        """Return a validated copy with some fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class SolverSettings:
    """
    Numerical settings for the adaptive integrator.

    Parameters
    ----------
    duration : float
        Simulated time span [s], starting at t=0.
    dt : float
        Output sample interval [s]. Independent of the internal step size.
    method : str
        scipy integrator name. Stiff methods ("Radau", "BDF", "LSODA") are
        recommended; explicit ones are accepted for non-stiff experiments.
    rtol, atol : float
        Relative and absolute local error tolerances.
    max_step : float | None
        Upper bound on the internal step [s]. None means unbounded.
    first_step : float | None
        Initial step guess [s]. None lets the solver choose.
    max_steps : int | None
        Budget of accepted internal steps; exceeding it aborts the solve.
    """

    duration: float = 10.0
    dt: float = 0.02
    method: str = "Radau"
    rtol: float = 1e-6
    atol: float = 1e-6
    max_step: float | None = None
    first_step: float | None = None
    max_steps: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every parameter, raising ConfigurationError on the first bad one."""
        validate_positive(self.duration, "duration")
        validate_timestep(self.dt, self.duration)
        if self.method not in STIFF_METHODS + EXPLICIT_METHODS:
            raise ConfigurationError(
                "method", self.method, f"must be one of {STIFF_METHODS + EXPLICIT_METHODS}"
            )
        validate_positive(self.rtol, "rtol")
        validate_positive(self.atol, "atol")
        if self.max_step is not None:
            validate_positive(self.max_step, "max_step")
        if self.first_step is not None:
            validate_positive(self.first_step, "first_step")
        if self.max_steps is not None:
            validate_segment_count(self.max_steps, "max_steps")

    @property
    def is_stiff(self) -> bool:
        return self.method in STIFF_METHODS

    def sample_grid(self, span: float) -> NDArray[np.float64]:
        """Offsets ``k * dt`` for all ``k * dt <= span``."""
        count = int(math.floor(span / self.dt + 1e-9)) + 1
        return self.dt * np.arange(count, dtype=np.float64)

    @property
    def sample_times(self) -> NDArray[np.float64]:
        """Uniform output grid over ``[0, duration]``."""
        return self.sample_grid(self.duration)

    def with_(self, **changes) -> SolverSettings:
        """Return a validated copy with some fields replaced."""
        return replace(self, **changes)
