from .simulation import Simulation
from .solver import SOLVER_PRESETS, TetherIVPSolver, pack_state, unpack_state
