"""
Segment force law and node accelerations.

Each segment is a one-sided spring in parallel with a linear damper:

    F_i = (T(e_i) + c * s_i) * u_i

where ``e_i`` is the extension (length minus rest length), ``s_i`` the
stretching rate, ``u_i`` the unit vector from node i toward node i-1 and
``T`` the tension law. The hard law is ``k * e`` for ``e > 0`` and exactly
zero otherwise: a slack tether carries no compression.

Physical units:
- Forces: Newtons [N]
- Lengths: meters [m]
- Velocities: meters per second [m/s]
- Accelerations: meters per second squared [m/s²]
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from tetherlab.config import TetherSettings
from tetherlab.dynamics.schedule import ReelOutSchedule, SegmentParameters
from tetherlab.exceptions import DegenerateGeometryError

EPSILON_LENGTH = 1e-12  # Shortest segment length treated as non-degenerate [m]


def hard_tension(extension: NDArray[np.float64], spring_constant: float) -> NDArray[np.float64]:
    """Tension-only linear spring: k*e for e > 0, exactly 0 for e <= 0."""
    extension = np.asarray(extension, dtype=np.float64)
    return np.where(extension > 0.0, spring_constant * extension, 0.0)


def softplus_tension(
    extension: NDArray[np.float64],
    spring_constant: float,
    smoothing_length: float,
) -> NDArray[np.float64]:
    """
    Smooth approximation of :func:`hard_tension`.

    ``T(e) = k * w * log(1 + exp(e / w))``

    Notes
    -----
    The result is positive (but tiny) for slack segments; this is a
    deliberate deviation from the hard cutoff that gives stiff solvers a
    continuous Jacobian. It converges to the hard law as ``w -> 0`` and
    overestimates it by at most ``k * w * log(2)`` at ``e = 0``.
    """
    extension = np.asarray(extension, dtype=np.float64)
    w = float(smoothing_length)
    return spring_constant * w * np.logaddexp(0.0, extension / w)


@dataclass
class SegmentForces:
    """
    Per-segment quantities derived from one state snapshot.

    All arrays are indexed by segment 1..n at positions 0..n-1.

    Attributes
    ----------
    lengths : (n,) segment lengths [m]
    unit_vectors : (n, 3) unit vectors from node i toward node i-1
    spring_velocities : (n,) stretching rates [m/s]
    extensions : (n,) length minus rest length [m]
    tensions : (n,) spring tension magnitudes [N]
    forces : (n, 3) force each segment exerts on its outer node i [N]
    """

    lengths: NDArray[np.float64]
    unit_vectors: NDArray[np.float64]
    spring_velocities: NDArray[np.float64]
    extensions: NDArray[np.float64]
    tensions: NDArray[np.float64]
    forces: NDArray[np.float64]


def compute_segment_forces(
    positions: NDArray[np.float64],
    velocities: NDArray[np.float64],
    params: SegmentParameters,
    t: float = 0.0,
    tension_law: str = "hard",
    smoothing_length: float = 1e-4,
) -> SegmentForces:
    """
    Evaluate the force law for every segment.

    Parameters
    ----------
    positions, velocities : NDArray[np.float64]
        Node states (n+1, 3), anchor included
    params : SegmentParameters
        Schedule output for time ``t``
    t : float
        Simulation time [s], only used for error reporting
    tension_law : str
        "hard" or "softplus"
    smoothing_length : float
        Softplus width [m]

    Raises
    ------
    DegenerateGeometryError
        If any segment length is zero or not finite
    """
    displacement = positions[:-1] - positions[1:]
    lengths = np.linalg.norm(displacement, axis=1)

    bad = ~np.isfinite(lengths) | (lengths < EPSILON_LENGTH)
    if np.any(bad):
        i = int(np.argmax(bad))
        raise DegenerateGeometryError(i + 1, t, lengths[i])

    unit_vectors = displacement / lengths[:, None]
    relative_velocity = velocities[1:] - velocities[:-1]
    spring_velocities = -np.einsum("ij,ij->i", unit_vectors, relative_velocity)
    extensions = lengths - params.rest_length

    if tension_law == "hard":
        tensions = hard_tension(extensions, params.spring_constant)
    else:
        tensions = softplus_tension(extensions, params.spring_constant, smoothing_length)

    magnitudes = tensions + params.damping * spring_velocities
    forces = magnitudes[:, None] * unit_vectors
    return SegmentForces(lengths, unit_vectors, spring_velocities, extensions, tensions, forces)


def node_accelerations(
    forces: NDArray[np.float64],
    node_mass: float,
    gravity: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Accelerations of all nodes (n+1, 3) from the segment forces (n, 3).

    Node 0 is fixed and gets zero. Interior node i feels ``F_i - F_{i+1}``;
    the free end n feels ``F_n`` only.
    """
    net = forces.copy()
    net[:-1] -= forces[1:]
    acc = np.zeros((len(forces) + 1, 3), dtype=np.float64)
    acc[1:] = gravity + net / node_mass
    return acc


class TetherForceModel:
    """
    Right-hand side of the tether equations of motion.

    Combines the reel-out schedule with the segment force law. Stateless:
    every call is a pure function of ``(t, positions, velocities)``.

    Parameters
    ----------
    settings : TetherSettings
        Tether description

    Examples
    --------
    >>> from tetherlab.dynamics.topology import straight_tether
    >>> model = TetherForceModel(TetherSettings(segments=3))
    >>> state = straight_tether(model.settings)
    >>> acc = model.accelerations(0.0, state.positions, state.velocities)
    >>> acc.shape
    (4, 3)
    """

    def __init__(self, settings: TetherSettings) -> None:
        self.settings = settings
        self.schedule = ReelOutSchedule(settings)
        self.gravity = settings.g
        self.tension_law = settings.tension_law
        self.smoothing_length = settings.smoothing_length

    def segment_forces(
        self,
        t: float,
        positions: NDArray[np.float64],
        velocities: NDArray[np.float64],
    ) -> SegmentForces:
        """Segment quantities at time ``t``."""
        return compute_segment_forces(
            positions, velocities, self.schedule(t), t,
            tension_law=self.tension_law,
            smoothing_length=self.smoothing_length,
        )

    def accelerations(
        self,
        t: float,
        positions: NDArray[np.float64],
        velocities: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Accelerations of all nodes (n+1, 3); row 0 is always zero."""
        params = self.schedule(t)
        seg = compute_segment_forces(
            positions, velocities, params, t,
            tension_law=self.tension_law,
            smoothing_length=self.smoothing_length,
        )
        return node_accelerations(seg.forces, params.node_mass, self.gravity)
