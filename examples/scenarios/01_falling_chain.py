"""
Example 01: Falling chain using the Scenario API.

A 50 m tether, initially straight at 18 degrees from vertical, falls
under gravity while held at the anchor.
"""
import sys
from pathlib import Path

import numpy as np

# Setup path for local development (not needed if installed via pip)
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from tetherlab.api.scenario import Scenario
from tetherlab.visualization.plotting import plot_free_end, plot_tether_snapshots


def run_example():
    traj = Scenario(name="01_falling_chain", verbose=True) \
        .tether(l0=50.0) \
        .discretize(5) \
        .launch_angle(np.pi / 10) \
        .configure_solver("default") \
        .run(duration=10.0, dt=0.02)

    plot_free_end(traj, show=False)
    plot_tether_snapshots(traj, show=True)

if __name__ == "__main__":
    run_example()
