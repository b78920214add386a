"""
tetherlab - Transient dynamics of a reeling, tension-only tether.

The tether is a chain of point masses joined by spring-damper segments that
carry no compression. Node 0 is a fixed anchor; the rest length of every
segment follows a reel-out schedule. A stiff implicit integrator advances the
free nodes and samples the motion on a uniform time grid.

Core Components
---------------
TetherSettings, SolverSettings : Immutable configuration
straight_tether : Initial straight layout (StateInit)
ReelOutSchedule : Time-varying length and segment parameters
TetherForceModel : Tension-only spring-damper force law
TetherIVPSolver : Radau/BDF integrator with uniform sampling
Trajectory : Sampled output
Simulation : Orchestrator with CSV logging and plots

Examples
--------
>>> from tetherlab import Simulation, SolverSettings, TetherSettings
>>> traj = Simulation(TetherSettings(v_ro=2.0), SolverSettings(duration=10.0)).run()
"""

__version__ = "0.1.0"

from tetherlab.config import SolverSettings, TetherSettings
from tetherlab.exceptions import (
    ConfigurationError,
    DegenerateGeometryError,
    IntegrationFailure,
    TetherLabError,
)
from tetherlab.dynamics.forces import TetherForceModel, compute_segment_forces
from tetherlab.dynamics.schedule import ReelOutSchedule, SegmentParameters
from tetherlab.dynamics.topology import TetherState, straight_tether
from tetherlab.core.simulation import Simulation
from tetherlab.core.solver import SOLVER_PRESETS, TetherIVPSolver
from tetherlab.trajectory import Trajectory, TrajectorySample

# Logging
from tetherlab.logger import CSVLogger
from tetherlab.api.scenario import Scenario

__all__ = [
    "__version__",
    # Configuration
    "TetherSettings",
    "SolverSettings",
    # Errors
    "TetherLabError",
    "ConfigurationError",
    "DegenerateGeometryError",
    "IntegrationFailure",
    # Dynamics
    "TetherState",
    "straight_tether",
    "ReelOutSchedule",
    "SegmentParameters",
    "TetherForceModel",
    "compute_segment_forces",
    # Integration
    "TetherIVPSolver",
    "SOLVER_PRESETS",
    "Simulation",
    "Trajectory",
    "TrajectorySample",
    # Logging
    "CSVLogger",
    # API
    "Scenario",
]
