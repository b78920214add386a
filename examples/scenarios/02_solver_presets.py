"""
Example 02: Comparing solver presets and tension laws.

Runs the same reeling tether with the hard tension-only law and with the
softplus-smoothed law, on stiff and explicit integrators.
"""
import sys
import time
from pathlib import Path

import numpy as np

# Setup path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from tetherlab.api.scenario import Scenario
from tetherlab.exceptions import IntegrationFailure

CASES = [
    ("hard", "default", {}),
    ("hard", "fast", {}),
    ("softplus", "default", {}),
    ("hard", "default", {"method": "RK45", "max_steps": 20000}),
]


def run_example():
    reference = None
    for law, preset, overrides in CASES:
        scenario = Scenario(name=f"02_{law}_{preset}") \
            .tether(l0=50.0, segments=5, tension_law=law) \
            .reel(2.0) \
            .configure_solver(preset, **overrides)

        start = time.time()
        try:
            traj = scenario.run(duration=5.0)
        except IntegrationFailure as e:
            print(f"{law:>8} {preset:>8} {overrides}: failed ({e})")
            continue
        elapsed = time.time() - start

        end = traj.free_end_positions[-1]
        if reference is None:
            reference = end
        drift = np.linalg.norm(end - reference)
        steps = scenario.simulation.solver.n_steps
        print(f"{law:>8} {preset:>8} {overrides}: {steps:6d} steps, "
              f"{elapsed:6.2f} s, free-end offset {drift:.2e} m")


if __name__ == "__main__":
    run_example()
