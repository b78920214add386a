"""
Tests for the Trajectory container, its diagnostics and CSV export.
"""
import numpy as np
import pytest

from tetherlab.config import TetherSettings
from tetherlab.dynamics.topology import straight_tether
from tetherlab.trajectory import Trajectory
from tetherlab.utils.io import load_trajectory, save_trajectory


@pytest.fixture
def static_traj():
    """Three identical samples of a hanging, uniformly stretched 2-segment chain."""
    tether = TetherSettings(l0=20.0, segments=2, c_spring=1000.0, elevation=np.pi)
    state = straight_tether(tether)
    pos = np.repeat(state.positions[None] * 1.01, 3, axis=0)
    vel = np.zeros_like(pos)
    vel[:, 1:, 0] = 2.0
    return Trajectory(np.array([0.0, 0.1, 0.2]), pos, vel, settings=tether)


def test_shape_validation():
    with pytest.raises(ValueError, match="sample times"):
        Trajectory(np.zeros(2), np.zeros((3, 2, 3)), np.zeros((3, 2, 3)))
    with pytest.raises(ValueError, match="same shape"):
        Trajectory(np.zeros(3), np.zeros((3, 2, 3)), np.zeros((3, 3, 3)))


def test_iteration_and_indexing(static_traj):
    samples = list(static_traj)
    assert len(samples) == 3
    assert samples[1].t == 0.1
    assert samples[2].positions.shape == (3, 3)
    assert static_traj.segments == 2
    assert static_traj.free_end_positions.shape == (3, 3)


def test_segment_lengths_and_tensions(static_traj):
    lengths = static_traj.segment_lengths()
    assert np.allclose(lengths, 10.1)
    # k_seg = 1000 / 10 = 100 N/m, extension 0.1 m
    assert np.allclose(static_traj.tensions(), 10.0)


def test_energy_components(static_traj):
    tether = static_traj.settings
    m = tether.linear_density * 10.0
    energy = static_traj.energy()

    assert set(energy) == {"kinetic", "potential", "elastic", "total"}
    assert np.allclose(energy["kinetic"], 0.5 * m * 2 * 2.0**2)
    # Nodes at z = -10.1 and -20.2 under g = -9.81 z
    assert np.allclose(energy["potential"], -m * 9.81 * (10.1 + 20.2))
    assert np.allclose(energy["elastic"], 2 * 0.5 * 100.0 * 0.1**2)
    assert np.allclose(energy["total"], energy["kinetic"] + energy["potential"] + energy["elastic"])


def test_softplus_elastic_energy_at_rest_length():
    w = 1e-3
    tether = TetherSettings(l0=10.0, segments=1, c_spring=1000.0, elevation=np.pi,
                            tension_law="softplus", smoothing_length=w)
    state = straight_tether(tether)
    traj = Trajectory(np.zeros(1), state.positions[None], state.velocities[None], tether)
    # Potential of k*w*softplus(e/w) at e=0 is k*w^2*pi^2/12
    assert np.isclose(traj.energy()["elastic"][0], 100.0 * w**2 * np.pi**2 / 12, rtol=1e-6)


def test_tether_length_follows_schedule():
    tether = TetherSettings(l0=50.0, v_ro=2.0, segments=1)
    pos = np.zeros((2, 2, 3))
    pos[:, 1, 2] = 50.0
    traj = Trajectory(np.array([0.0, 10.0]), pos, np.zeros_like(pos), tether)
    assert np.allclose(traj.tether_length(), [50.0, 70.0])


def test_diagnostics_need_settings():
    traj = Trajectory(np.zeros(1), np.ones((1, 2, 3)), np.zeros((1, 2, 3)))
    with pytest.raises(RuntimeError, match="TetherSettings"):
        traj.energy()


def test_dataframe_layout(static_traj):
    df = static_traj.to_dataframe()
    assert list(df.columns[:7]) == [
        "t", "node0.p_x", "node0.p_y", "node0.p_z", "node0.v_x", "node0.v_y", "node0.v_z",
    ]
    assert len(df) == 3
    assert len(df.columns) == 1 + 3 * 6

    back = Trajectory.from_dataframe(df, static_traj.settings)
    assert np.array_equal(back.positions, static_traj.positions)
    assert np.array_equal(back.velocities, static_traj.velocities)


def test_csv_export(tmp_path, static_traj):
    path = save_trajectory(static_traj, tmp_path / "runs" / "traj.csv")
    assert path.exists()

    loaded = load_trajectory(path)
    assert np.allclose(loaded.t, static_traj.t)
    assert np.allclose(loaded.positions, static_traj.positions, rtol=1e-9)
    assert loaded.settings is None
