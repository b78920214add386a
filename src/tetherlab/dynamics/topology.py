"""
Chain topology and initial state.

Node 0 is the anchor at the origin; nodes 1..n are free point masses.
Segment i connects node i-1 and node i.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from tetherlab.config import TetherSettings
from tetherlab.utils.validation import validate_positive, validate_segment_count


@dataclass
class TetherState:
    """
    Positions and velocities of all nodes at time ``t``.

    Attributes
    ----------
    t : float
        Simulation time [s]
    positions : NDArray[np.float64]
        Node positions (n+1, 3) [m]; row 0 is the anchor
    velocities : NDArray[np.float64]
        Node velocities (n+1, 3) [m/s]
    """

    t: float
    positions: NDArray[np.float64]
    velocities: NDArray[np.float64]

    def __post_init__(self) -> None:
        self.positions = np.array(self.positions, dtype=np.float64)
        self.velocities = np.array(self.velocities, dtype=np.float64)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3 or len(self.positions) < 2:
            raise ValueError(f"positions must have shape (n+1, 3), got {self.positions.shape}")
        if self.velocities.shape != self.positions.shape:
            raise ValueError(
                f"velocities shape {self.velocities.shape} does not match "
                f"positions shape {self.positions.shape}"
            )

    @property
    def segments(self) -> int:
        return len(self.positions) - 1

    @property
    def segment_vectors(self) -> NDArray[np.float64]:
        """Vectors from node i to node i-1 for segments 1..n, shape (n, 3)."""
        return self.positions[:-1] - self.positions[1:]

    @property
    def segment_lengths(self) -> NDArray[np.float64]:
        return np.linalg.norm(self.segment_vectors, axis=1)

    @property
    def unit_vectors(self) -> NDArray[np.float64]:
        """Unit vectors pointing from node i toward node i-1, shape (n, 3)."""
        vectors = self.segment_vectors
        return vectors / np.linalg.norm(vectors, axis=1)[:, None]

    def copy(self) -> TetherState:
        return TetherState(self.t, self.positions.copy(), self.velocities.copy())


def straight_tether(settings: TetherSettings) -> TetherState:
    """
    Lay the chain out on a straight line at the initial elevation angle.

    Node i sits at ``(i/n) * l0 * (sin α0, 0, cos α0)``; all velocities are
    zero.

    Parameters
    ----------
    settings : TetherSettings
        Provides l0, elevation and segment count

    Returns
    -------
    TetherState
        State at t=0

    Raises
    ------
    ConfigurationError
        If the segment count is < 1 or l0 <= 0
    """
    n = settings.segments
    validate_segment_count(n)
    validate_positive(settings.l0, "l0")

    direction = np.array([np.sin(settings.elevation), 0.0, np.cos(settings.elevation)])
    fractions = np.arange(n + 1, dtype=np.float64) / n
    positions = settings.l0 * fractions[:, None] * direction[None, :]
    return TetherState(0.0, positions, np.zeros_like(positions))
