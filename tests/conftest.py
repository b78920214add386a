import os
import sys

import matplotlib
import pytest

matplotlib.use("Agg")  # Non-interactive backend for testing

# Get the path to the project root (one level up from 'tests')
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(project_root, 'src')

# Add 'src' to sys.path
sys.path.insert(0, src_path)

from tetherlab.config import SolverSettings, TetherSettings  # noqa: E402


@pytest.fixture
def small_tether():
    """Three-segment, moderately stiff tether hanging at 30° from the vertical."""
    return TetherSettings(l0=30.0, segments=3, c_spring=1.0e4, damping=50.0, elevation=0.5)


@pytest.fixture
def short_run():
    """Half a second of Radau at default tolerances, sampled every 10 ms."""
    return SolverSettings(duration=0.5, dt=0.01)
