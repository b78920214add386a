"""
Scenario API: Fluent interface for defining and running tether simulations.
"""
from __future__ import annotations

from pathlib import Path

from tetherlab.config import SolverSettings, TetherSettings
from tetherlab.core.simulation import Simulation
from tetherlab.core.solver import SOLVER_PRESETS, TetherIVPSolver
from tetherlab.exceptions import ConfigurationError
from tetherlab.trajectory import Trajectory


class Scenario:
    """
    Collects tether and solver parameters step by step, then runs.

    Nothing is validated until :meth:`build` (or :meth:`run`), where the
    immutable settings objects are created.

    Examples
    --------
    >>> traj = (Scenario("reel_out")
    ...         .tether(l0=50.0, segments=5)
    ...         .reel(2.0)
    ...         .configure_solver("stiff")
    ...         .run(duration=10.0))
    """

    def __init__(self, name: str, output_dir: str | Path = "output", log: bool = False,
                 verbose: bool = False):
        self.name = name
        self.output_dir = Path(output_dir)
        self.log = log
        self.verbose = verbose
        self._tether_params: dict = {}
        self._solver_params: dict = dict(SOLVER_PRESETS["default"])
        self.simulation: Simulation | None = None

    def tether(self, **params) -> 'Scenario':
        """Set TetherSettings fields (l0, d_tether, c_spring, ...)."""
        self._tether_params.update(params)
        return self

    def reel(self, v_ro: float) -> 'Scenario':
        """Reel-out speed [m/s]; negative reels in."""
        self._tether_params["v_ro"] = float(v_ro)
        return self

    def discretize(self, segments: int) -> 'Scenario':
        self._tether_params["segments"] = segments
        return self

    def launch_angle(self, elevation: float) -> 'Scenario':
        """Initial angle from the z-axis [rad]."""
        self._tether_params["elevation"] = float(elevation)
        return self

    def configure_solver(self, preset: str = "default", **kwargs) -> 'Scenario':
        """
        Configure the solver with a preset or custom overrides.

        Presets: 'default', 'fast', 'accurate', 'stiff'
        Kwargs: any SolverSettings field (method, rtol, atol, max_step, max_steps, ...)
        """
        if preset not in SOLVER_PRESETS:
            raise ConfigurationError("preset", preset, f"must be one of {tuple(SOLVER_PRESETS)}")
        self._solver_params = dict(SOLVER_PRESETS[preset])
        self._solver_params.update(kwargs)
        return self

    def build(self, duration: float = 10.0, dt: float = 0.02) -> Simulation:
        """Validate all parameters and create the Simulation."""
        tether = TetherSettings(**self._tether_params)
        solver_settings = SolverSettings(**{"duration": duration, "dt": dt, **self._solver_params})
        self.simulation = Simulation(
            tether=tether,
            solver=TetherIVPSolver(solver_settings, verbose=self.verbose),
            simulation_name=self.name if self.log else None,
            output_dir=self.output_dir,
            verbose=self.verbose,
        )
        return self.simulation

    def run(self, duration: float = 10.0, dt: float = 0.02) -> Trajectory:
        if self.verbose:
            print(f"Running Scenario: {self.name}")
        return self.build(duration, dt).run()
