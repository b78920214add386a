from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.integrate import BDF, DOP853, LSODA, RK23, RK45, Radau

from tetherlab.config import SolverSettings, TetherSettings
from tetherlab.dynamics.forces import TetherForceModel
from tetherlab.dynamics.topology import TetherState, straight_tether
from tetherlab.exceptions import ConfigurationError, IntegrationFailure
from tetherlab.trajectory import Trajectory


METHODS = {
    "Radau": Radau,
    "BDF": BDF,
    "LSODA": LSODA,
    "RK45": RK45,
    "RK23": RK23,
    "DOP853": DOP853,
}

SOLVER_PRESETS = {
    "default": {"method": "Radau", "rtol": 1e-6, "atol": 1e-6},
    "fast": {"method": "BDF", "rtol": 1e-4, "atol": 1e-5},
    "accurate": {"method": "Radau", "rtol": 1e-9, "atol": 1e-10},
    "stiff": {"method": "Radau", "rtol": 1e-6, "atol": 1e-8},
}


def _step_size(ode) -> float | None:
    # Radau, BDF and the RK family track the next trial step; LSODA only the last one.
    h = getattr(ode, "h_abs", None)
    return float(h) if h is not None else ode.step_size


def pack_state(
    positions: NDArray[np.float64], velocities: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Free-node state vector y = [p_1..p_n (3n), v_1..v_n (3n)]; anchor excluded."""
    return np.concatenate([positions[1:].ravel(), velocities[1:].ravel()])


def unpack_state(
    y: NDArray[np.float64],
    anchor_position: NDArray[np.float64],
    anchor_velocity: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Rebuild (n+1, 3) position and velocity arrays with the anchor in row 0."""
    half = len(y) // 2
    positions = np.vstack([anchor_position, y[:half].reshape(-1, 3)])
    velocities = np.vstack([anchor_velocity, y[half:].reshape(-1, 3)])
    return positions, velocities


class TetherIVPSolver:
    """
    Variable-step stiff integrator for the tether chain (scipy Radau/BDF).

    State: [p(3n), v(3n)] for the free nodes. The anchor row is a boundary
    value held fixed by the solver and re-inserted before every force
    evaluation. Output is reconstructed from the solver's dense output on
    the uniform grid ``SolverSettings.sample_times`` (``sample_grid`` for an
    explicit ``t_end``), independent of the accepted internal steps.

    Raises IntegrationFailure when scipy reports a step-size collapse or
    the accepted-step budget ``max_steps`` is exhausted.
    DegenerateGeometryError from the force law propagates unchanged.
    """
    def __init__(self, settings: SolverSettings | None = None, verbose: bool = False) -> None:
        self.settings = settings if settings is not None else SolverSettings()
        self.verbose = bool(verbose)
        self.n_steps = 0
        self.nfev = 0

    @classmethod
    def from_preset(cls, preset: str = "default", verbose: bool = False, **overrides) -> TetherIVPSolver:
        if preset not in SOLVER_PRESETS:
            raise ConfigurationError("preset", preset, f"must be one of {tuple(SOLVER_PRESETS)}")
        params = {**SOLVER_PRESETS[preset], **overrides}
        return cls(SolverSettings(**params), verbose=verbose)

    def rhs_function(
        self,
        model: TetherForceModel,
        anchor_position: NDArray[np.float64],
        anchor_velocity: NDArray[np.float64],
    ):
        """Build ``f(t, y) -> ydot`` for scipy; pure in (t, y)."""
        def rhs(t: float, y: NDArray[np.float64]) -> NDArray[np.float64]:
            self.nfev += 1
            positions, velocities = unpack_state(y, anchor_position, anchor_velocity)
            acc = model.accelerations(t, positions, velocities)
            return np.concatenate([velocities[1:].ravel(), acc[1:].ravel()])
        return rhs

    def integrate(
        self,
        tether: TetherSettings,
        initial_state: TetherState | None = None,
        t_end: float | None = None,
    ) -> Trajectory:
        """
        Integrate from the initial state to ``t_end`` and sample uniformly.

        Parameters
        ----------
        tether : TetherSettings
            Physical description of the tether
        initial_state : TetherState | None
            Starting state. Defaults to the straight layout at the initial
            elevation angle, at rest, t=0.
        t_end : float | None
            Final time [s]. Defaults to ``initial_state.t + duration``.

        Returns
        -------
        Trajectory
            Samples at ``t0 + k*dt`` for every ``k*dt <= t_end - t0``
        """
        cfg = self.settings
        state = initial_state if initial_state is not None else straight_tether(tether)
        if state.segments != tether.segments:
            raise ConfigurationError(
                "initial_state", state.segments,
                f"has a different segment count than the tether ({tether.segments})",
            )
        if np.any(state.velocities[0] != 0.0):
            raise ConfigurationError(
                "initial_state", tuple(state.velocities[0]), "must have a motionless anchor (node 0)"
            )
        t0 = float(state.t)
        default_span = t_end is None
        t_end = t0 + cfg.duration if default_span else float(t_end)
        if not t_end > t0:
            raise ConfigurationError("t_end", t_end, f"must be greater than the start time {t0}")
        limit = tether.reel_limit()
        if limit is not None and t_end >= limit:
            raise ConfigurationError(
                "v_ro", tether.v_ro, f"reels the whole tether in before t_end={t_end}s"
            )

        model = TetherForceModel(tether)
        anchor_p = state.positions[0].copy()
        anchor_v = state.velocities[0].copy()
        rhs = self.rhs_function(model, anchor_p, anchor_v)

        grid = cfg.sample_times if default_span else cfg.sample_grid(t_end - t0)
        t_samples = np.minimum(t0 + grid, t_end)
        count = len(t_samples)

        options = dict(rtol=cfg.rtol, atol=cfg.atol)
        if cfg.max_step is not None:
            options["max_step"] = cfg.max_step
        if cfg.first_step is not None:
            options["first_step"] = cfg.first_step

        y0 = pack_state(state.positions, state.velocities)
        ode = METHODS[cfg.method](rhs, t0, y0, t_end, **options)

        samples = np.empty((count, len(y0)), dtype=np.float64)
        samples[0] = y0
        k = 1
        self.n_steps = 0
        self.nfev = 0

        if self.verbose:
            print(f"[Solver] {cfg.method} on {tether.segments} segments, "
                  f"t=[{t0:.3f}, {t_end:.3f}]s, rtol={cfg.rtol:.1e}, atol={cfg.atol:.1e}")
            if not cfg.is_stiff:
                print(f"[Solver] Warning: {cfg.method} is explicit; expect tiny steps on stiff tethers")

        while ode.status == "running":
            t_prev = ode.t
            message = ode.step()
            if ode.status == "failed":
                raise IntegrationFailure(ode.t, _step_size(ode), str(message))
            self.n_steps += 1
            if cfg.max_steps is not None and self.n_steps >= cfg.max_steps and ode.status == "running":
                raise IntegrationFailure(
                    ode.t, _step_size(ode), f"step budget of {cfg.max_steps} accepted steps exhausted"
                )

            # Dense output for every sample time covered by this step
            stop = k
            while stop < count and t_samples[stop] <= ode.t:
                stop += 1
            if stop > k:
                interpolant = ode.dense_output()
                samples[k:stop] = interpolant(t_samples[k:stop]).T
                k = stop

            if self.verbose and int(t_prev / 1.0) != int(ode.t / 1.0):
                print(f"[Solver] t={ode.t:7.3f}s | h={ode.step_size:.2e}s | steps={self.n_steps}")

        if k < count:
            raise IntegrationFailure(ode.t, _step_size(ode), "solver stopped before the last sample")

        half = len(y0) // 2
        n = tether.segments
        positions = np.empty((count, n + 1, 3))
        velocities = np.empty((count, n + 1, 3))
        positions[:, 0] = anchor_p
        velocities[:, 0] = anchor_v
        positions[:, 1:] = samples[:, :half].reshape(count, n, 3)
        velocities[:, 1:] = samples[:, half:].reshape(count, n, 3)

        if self.verbose:
            print(f"[Solver] Done: {self.n_steps} steps, {self.nfev} RHS evaluations")

        return Trajectory(t_samples, positions, velocities, settings=tether)
