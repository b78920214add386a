"""
Simulation orchestrator for the reeling tether.

Couples the tether description, the stiff integrator and optional CSV
logging with automatic output organization.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

import numpy as np

from tetherlab.config import SolverSettings, TetherSettings
from tetherlab.dynamics.forces import TetherForceModel
from tetherlab.dynamics.topology import TetherState, straight_tether
from tetherlab.logger import CSVLogger
from tetherlab.trajectory import Trajectory

from .solver import TetherIVPSolver

DEFAULT_OUTPUT_DIR = Path("output")


class Simulation:
    """
    Container and driver for one tether simulation.

    Parameters
    ----------
    tether : TetherSettings
        Physical description of the tether.
    solver : TetherIVPSolver | SolverSettings | None
        Integrator, or settings to build one. Defaults to Radau with the
        default SolverSettings.
    simulation_name : str | None
        Name for this simulation. Used to organize output files. If None,
        logging is disabled by default. Use enable_logging() to activate.
    output_dir : Path | str | None
        Base directory for all simulation outputs. Defaults to "./output".
        Final structure: output_dir/simulation_name_timestamp/logs/ and /plots/
    auto_timestamp : bool
        If True, append timestamp to simulation folder name to prevent overwrites.
    auto_save_plots : bool
        If True, automatically generate and save plots when the run completes.
        Only works if logging is enabled.
    verbose : bool
        Print progress messages.

    Attributes
    ----------
    trajectory : Trajectory | None
        Result of the last run, or None before the first run
    logger : CSVLogger | None
        Data logger instance, or None if logging disabled
    output_path : Path | None
        Path to simulation output directory

    Examples
    --------
    >>> sim = Simulation(TetherSettings(v_ro=2.0), SolverSettings(duration=10.0))
    >>> traj = sim.run()
    >>> traj.tether_length()[-1]
    70.0
    """

    def __init__(
        self,
        tether: TetherSettings | None = None,
        solver: TetherIVPSolver | SolverSettings | None = None,
        simulation_name: str | None = None,
        output_dir: Path | str | None = None,
        auto_timestamp: bool = True,
        auto_save_plots: bool = False,
        verbose: bool = True,
    ) -> None:
        self.tether = tether if tether is not None else TetherSettings()
        if isinstance(solver, TetherIVPSolver):
            self.solver = solver
        else:
            self.solver = TetherIVPSolver(solver, verbose=verbose)
        self.verbose = bool(verbose)
        self.trajectory: Trajectory | None = None

        self._simulation_name = simulation_name
        self._output_dir = Path(output_dir) if output_dir else DEFAULT_OUTPUT_DIR
        self._auto_timestamp = auto_timestamp
        self._auto_save_plots = auto_save_plots
        self.output_path: Path | None = None
        self.logger: CSVLogger | None = None

        if simulation_name is not None:
            self.enable_logging(simulation_name)

    @classmethod
    def with_logging(
        cls,
        name: str,
        tether: TetherSettings | None = None,
        solver: TetherIVPSolver | SolverSettings | None = None,
        output_dir: Path | str | None = None,
        auto_save_plots: bool = True,
        verbose: bool = True,
    ) -> Simulation:
        """Convenience factory to create a Simulation with logging pre-enabled."""
        return cls(
            tether=tether,
            solver=solver,
            simulation_name=name,
            output_dir=output_dir,
            auto_timestamp=True,
            auto_save_plots=auto_save_plots,
            verbose=verbose,
        )

    def _say(self, msg: str) -> None:
        if self.verbose:
            print(f"[Simulation] {msg}")

    # --- Logging Configuration ---

    def enable_logging(self, name: str | None = None) -> Path:
        """
        Enable CSV logging with automatic output organization.

        Parameters
        ----------
        name : str | None
            Simulation name. Falls back to the name given at construction.

        Returns
        -------
        Path
            Path to simulation output directory

        Raises
        ------
        ValueError
            If no name is available
        """
        if name is not None:
            self._simulation_name = name
        if self._simulation_name is None:
            raise ValueError("Simulation name required to enable logging.")

        folder_name = self._simulation_name
        if self._auto_timestamp:
            folder_name = f"{folder_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.output_path = self._output_dir / folder_name

        logs_dir = self.output_path / "logs"
        plots_dir = self.output_path / "plots"
        logs_dir.mkdir(parents=True, exist_ok=True)
        plots_dir.mkdir(parents=True, exist_ok=True)

        self.logger = CSVLogger(logs_dir / "simulation.csv")
        self._say(f"Logging enabled: {self.output_path}")
        return self.output_path

    def disable_logging(self) -> None:
        """Disable logging and close any open log files."""
        if self.logger is not None:
            self.logger.close()
            self.logger = None
            self._say("Logging disabled")

    # --- Running ---

    def initial_state(self) -> TetherState:
        """Straight chain at the initial elevation angle, at rest."""
        return straight_tether(self.tether)

    def run(self, initial_state: TetherState | None = None) -> Trajectory:
        """
        Integrate over the configured duration.

        Parameters
        ----------
        initial_state : TetherState | None
            Starting state; defaults to :meth:`initial_state`.

        Returns
        -------
        Trajectory
            Uniformly sampled result, also stored on ``self.trajectory``.
            With logging enabled the CSV log is rewritten with this run.

        Raises
        ------
        ConfigurationError, DegenerateGeometryError, IntegrationFailure
            Propagated from the solver; nothing is retried.
        """
        state = initial_state if initial_state is not None else self.initial_state()
        cfg = self.solver.settings
        self._say(
            f"Starting {cfg.method} integration: {self.tether.segments} segments, "
            f"{cfg.duration}s duration, samples every {cfg.dt}s"
        )

        traj = self.solver.integrate(self.tether, state)

        self.trajectory = traj
        self._say(
            f"Finished at t={traj.t[-1]:.3f}s after {self.solver.n_steps} steps "
            f"({self.solver.nfev} RHS evaluations)"
        )

        if self.logger is not None:
            self._log_trajectory(traj)
            self.logger.close()

        if self._auto_save_plots and self.logger is not None:
            self._say("Auto-generating plots...")
            self.save_plots()

        return traj

    def _log_trajectory(self, traj: Trajectory) -> None:
        model = TetherForceModel(self.tether)
        for s in traj:
            tensions = None
            if self.logger.logs_tension:
                tensions = model.segment_forces(s.t, s.positions, s.velocities).tensions
            self.logger.log(s.t, s.positions, s.velocities, tensions)

    # --- Plotting and Analysis ---

    def save_plots(self, show: bool = False) -> None:
        """
        Generate and save the standard plots for the last run.

        Raises
        ------
        RuntimeError
            If logging is not enabled or nothing has been run yet
        """
        if self.output_path is None:
            raise RuntimeError(
                "Logging must be enabled to save plots. "
                "Call enable_logging() or use Simulation.with_logging()."
            )
        if self.trajectory is None:
            raise RuntimeError("No trajectory available. Has the simulation been run yet?")

        import matplotlib.pyplot as plt

        from tetherlab.visualization.plotting import (
            plot_free_end,
            plot_tensions,
            plot_tether_snapshots,
        )

        plots_dir = self.output_path / "plots"
        figures = [
            plot_free_end(self.trajectory, save_path=str(plots_dir / "free_end.png"), show=show),
            plot_tether_snapshots(self.trajectory, save_path=str(plots_dir / "snapshots.png"), show=show),
            plot_tensions(self.trajectory, save_path=str(plots_dir / "tensions.png"), show=show),
        ]
        for fig in figures:
            plt.close(fig)
        self._say(f"Plots saved to: {plots_dir}")

    def get_energy(self) -> dict[str, float]:
        """
        Mechanical energy at the last sample of the last run.

        Returns
        -------
        dict[str, float]
            'kinetic', 'potential', 'elastic' and 'total' [J]
        """
        if self.trajectory is None:
            raise RuntimeError("No trajectory available. Has the simulation been run yet?")
        energy = self.trajectory.energy()
        return {key: float(np.asarray(val)[-1]) for key, val in energy.items()}
