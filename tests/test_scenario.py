import numpy as np
import pytest

from tetherlab.api.scenario import Scenario
from tetherlab.exceptions import ConfigurationError


def test_build_collects_parameters():
    sim = (Scenario("reel")
           .tether(l0=40.0, c_spring=1.0e4)
           .discretize(4)
           .reel(1.5)
           .launch_angle(0.2)
           .configure_solver("accurate", max_step=0.05)
           .build(duration=2.0, dt=0.1))

    assert sim.tether.l0 == 40.0
    assert sim.tether.segments == 4
    assert sim.tether.v_ro == 1.5
    assert sim.tether.elevation == 0.2
    assert sim.solver.settings.rtol == 1e-9
    assert sim.solver.settings.max_step == 0.05
    assert sim.solver.settings.duration == 2.0
    assert sim.logger is None


def test_unknown_preset():
    with pytest.raises(ConfigurationError):
        Scenario("x").configure_solver("turbo")


def test_invalid_parameters_surface_on_build():
    scenario = Scenario("bad").discretize(0)
    with pytest.raises(ConfigurationError, match="segments"):
        scenario.build()


def test_run_with_logging(tmp_path):
    traj = (Scenario("logged", output_dir=tmp_path, log=True)
            .tether(l0=20.0, c_spring=1.0e4, damping=20.0)
            .discretize(2)
            .run(duration=0.2, dt=0.05))
    assert len(traj) == 5
    assert np.array_equal(traj.positions[:, 0], np.zeros((5, 3)))
    assert any(tmp_path.iterdir())
