"""
Sampled simulation output.

A :class:`Trajectory` holds node positions and velocities on the uniform
output grid. It is what renderers, exporters and tests consume; the
diagnostics below recompute derived quantities from the same pure force
law used during integration.
"""
from __future__ import annotations

from collections.abc import Iterator
from typing import NamedTuple

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy.special import spence

from tetherlab.config import TetherSettings
from tetherlab.dynamics.forces import TetherForceModel
from tetherlab.dynamics.topology import TetherState

AXES = ("x", "y", "z")
SOFTPLUS_ASYMPTOTE = 30.0  # Beyond this e/w the dilogarithm uses its asymptote


class TrajectorySample(NamedTuple):
    """One output sample: time, positions (n+1, 3) and velocities (n+1, 3)."""

    t: float
    positions: NDArray[np.float64]
    velocities: NDArray[np.float64]


class Trajectory:
    """
    Ordered time series of tether states.

    Parameters
    ----------
    t : NDArray[np.float64]
        Sample times (N,) [s], strictly increasing
    positions : NDArray[np.float64]
        Node positions (N, n+1, 3) [m]
    velocities : NDArray[np.float64]
        Node velocities (N, n+1, 3) [m/s]
    settings : TetherSettings | None
        Tether description, needed for force and energy diagnostics

    Examples
    --------
    >>> traj = solver.integrate(settings)
    >>> traj.free_end_positions[:, 2]    # height of the free end
    >>> traj.to_dataframe().to_csv("run.csv", index=False)
    """

    def __init__(
        self,
        t: NDArray[np.float64],
        positions: NDArray[np.float64],
        velocities: NDArray[np.float64],
        settings: TetherSettings | None = None,
    ) -> None:
        self.t = np.asarray(t, dtype=np.float64)
        self.positions = np.asarray(positions, dtype=np.float64)
        self.velocities = np.asarray(velocities, dtype=np.float64)
        self.settings = settings

        if self.positions.ndim != 3 or self.positions.shape[2] != 3:
            raise ValueError(f"positions must have shape (N, n+1, 3), got {self.positions.shape}")
        if self.velocities.shape != self.positions.shape:
            raise ValueError("positions and velocities must have the same shape")
        if len(self.t) != len(self.positions):
            raise ValueError(
                f"{len(self.t)} sample times for {len(self.positions)} samples"
            )

    def __len__(self) -> int:
        return len(self.t)

    def __iter__(self) -> Iterator[TrajectorySample]:
        for k in range(len(self.t)):
            yield self[k]

    def __getitem__(self, k: int) -> TrajectorySample:
        return TrajectorySample(float(self.t[k]), self.positions[k], self.velocities[k])

    @property
    def segments(self) -> int:
        return self.positions.shape[1] - 1

    @property
    def free_end_positions(self) -> NDArray[np.float64]:
        return self.positions[:, -1, :]

    @property
    def free_end_velocities(self) -> NDArray[np.float64]:
        return self.velocities[:, -1, :]

    def state(self, k: int) -> TetherState:
        """Sample ``k`` as a TetherState (copies), e.g. to restart a solve."""
        return TetherState(float(self.t[k]), self.positions[k].copy(), self.velocities[k].copy())

    def segment_lengths(self) -> NDArray[np.float64]:
        """Instantaneous segment lengths (N, n) [m]."""
        return np.linalg.norm(self.positions[:, :-1] - self.positions[:, 1:], axis=2)

    # --- Diagnostics requiring the tether settings ---

    def _model(self) -> TetherForceModel:
        if self.settings is None:
            raise RuntimeError("Trajectory has no TetherSettings; diagnostics unavailable.")
        return TetherForceModel(self.settings)

    def tether_length(self) -> NDArray[np.float64]:
        """Scheduled total tether length L(t) at every sample (N,) [m]."""
        schedule = self._model().schedule
        return np.array([schedule.tether_length(tk) for tk in self.t])

    def tensions(self) -> NDArray[np.float64]:
        """Spring tension of every segment at every sample (N, n) [N]."""
        model = self._model()
        return np.array([
            model.segment_forces(s.t, s.positions, s.velocities).tensions for s in self
        ])

    def energy(self) -> dict[str, NDArray[np.float64]]:
        """
        Mechanical energy of the free nodes at every sample.

        Returns
        -------
        dict[str, NDArray[np.float64]]
            Keys 'kinetic', 'potential' (gravity, zero at the anchor height),
            'elastic' (stored in stretched segments) and 'total', each (N,) [J]

        Notes
        -----
        The elastic term integrates the active tension law, so it is exact
        for the hard law and uses the softplus antiderivative otherwise.
        Under reel-out the node masses change with time and the total is
        not expected to be conserved.
        """
        model = self._model()
        g = model.gravity
        kinetic = np.empty(len(self))
        potential = np.empty(len(self))
        elastic = np.empty(len(self))
        for k, s in enumerate(self):
            params = model.schedule(s.t)
            m = params.node_mass
            free_pos = s.positions[1:]
            free_vel = s.velocities[1:]
            kinetic[k] = 0.5 * m * float(np.sum(free_vel * free_vel))
            potential[k] = -m * float(np.sum(free_pos @ g))
            ext = np.linalg.norm(s.positions[:-1] - s.positions[1:], axis=1) - params.rest_length
            elastic[k] = _elastic_energy(ext, params.spring_constant, model)
        return {
            "kinetic": kinetic,
            "potential": potential,
            "elastic": elastic,
            "total": kinetic + potential + elastic,
        }

    # --- Export ---

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten into a DataFrame with columns ``t``, ``node{i}.p_x`` ...
        ``node{i}.v_z``, matching the CSVLogger layout.
        """
        data: dict[str, NDArray[np.float64]] = {"t": self.t}
        for i in range(self.segments + 1):
            for field, arr in (("p", self.positions), ("v", self.velocities)):
                for a, axis in enumerate(AXES):
                    data[f"node{i}.{field}_{axis}"] = arr[:, i, a]
        return pd.DataFrame(data)

    @classmethod
    def from_dataframe(
        cls, df: pd.DataFrame, settings: TetherSettings | None = None
    ) -> Trajectory:
        """Inverse of :meth:`to_dataframe`."""
        node_count = 0
        while f"node{node_count}.p_x" in df.columns:
            node_count += 1
        if node_count < 2:
            raise ValueError("DataFrame holds fewer than two nodes")
        n_samples = len(df)
        positions = np.empty((n_samples, node_count, 3))
        velocities = np.empty((n_samples, node_count, 3))
        for i in range(node_count):
            for a, axis in enumerate(AXES):
                positions[:, i, a] = df[f"node{i}.p_{axis}"].to_numpy()
                velocities[:, i, a] = df[f"node{i}.v_{axis}"].to_numpy()
        return cls(df["t"].to_numpy(), positions, velocities, settings)


def _elastic_energy(extensions: NDArray[np.float64], k: float, model: TetherForceModel) -> float:
    if model.tension_law == "hard":
        stretched = np.clip(extensions, 0.0, None)
        return 0.5 * k * float(np.sum(stretched * stretched))
    # Potential of k*w*softplus(e/w) measured from a fully slack segment:
    # k*w^2 * -Li2(-exp(u)), u = e/w, with Li2(z) = spence(1 - z).
    w = model.smoothing_length
    u = np.asarray(extensions, dtype=np.float64) / w
    capped = np.minimum(u, SOFTPLUS_ASYMPTOTE)
    dilog = np.where(
        u > SOFTPLUS_ASYMPTOTE,
        0.5 * u * u + np.pi ** 2 / 6.0,
        -spence(1.0 + np.exp(capped)),
    )
    return float(k * w * w * np.sum(dilog))
