"""
Reel-out schedule: time-varying tether length and per-segment parameters.

The total tether length grows (or shrinks) linearly with time. The chain is
re-discretized continuously: every segment keeps the rest length ``L(t)/n``
and the material constants are redistributed so that the whole tether keeps
the stiffness and mass of a continuous line of length ``L(t)``.

Everything here is a pure function of ``t``. Adaptive solvers evaluate the
right-hand side at rejected and retried times, so no value may be cached
between calls.
"""
from __future__ import annotations

from typing import NamedTuple

from tetherlab.config import TetherSettings
from tetherlab.exceptions import DegenerateGeometryError


class SegmentParameters(NamedTuple):
    """
    Material parameters of every segment at one instant.

    Attributes
    ----------
    length : float
        Total tether length L(t) [m]
    rest_length : float
        Rest length of one segment [m]
    spring_constant : float
        Spring constant of one segment [N/m]
    damping : float
        Damping constant of one segment [N·s/m]
    node_mass : float
        Mass lumped on each free node [kg]
    """

    length: float
    rest_length: float
    spring_constant: float
    damping: float
    node_mass: float


class ReelOutSchedule:
    """
    Evaluate the tether length and segment parameters at time ``t``.

    Parameters
    ----------
    settings : TetherSettings
        Tether description (l0, v_ro, material constants, segment count)

    Examples
    --------
    >>> schedule = ReelOutSchedule(TetherSettings(l0=50.0, v_ro=2.0, segments=5))
    >>> schedule(10.0).rest_length
    14.0
    """

    def __init__(self, settings: TetherSettings) -> None:
        self.settings = settings
        self.segments = int(settings.segments)
        self._l0 = float(settings.l0)
        self._v_ro = float(settings.v_ro)
        self._c_spring = float(settings.c_spring)
        self._damping = float(settings.damping)
        self._linear_density = settings.linear_density

    def tether_length(self, t: float) -> float:
        """Total tether length L(t) = l0 + v_ro * t [m]."""
        return self._l0 + self._v_ro * t

    def __call__(self, t: float) -> SegmentParameters:
        length = self.tether_length(t)
        if not length > 0.0:
            raise DegenerateGeometryError(0, t, length)
        rest = length / self.segments
        return SegmentParameters(
            length=length,
            rest_length=rest,
            spring_constant=self._c_spring / rest,
            damping=self._damping / rest,
            node_mass=self._linear_density * rest,
        )

    def total_mass(self, t: float) -> float:
        """Mass carried by all free nodes [kg]; equals linear density * L(t)."""
        return self(t).node_mass * self.segments
