"""
Tests for the initial straight layout.
"""
import numpy as np
import pytest

from tetherlab.config import TetherSettings
from tetherlab.dynamics.topology import TetherState, straight_tether


def test_nodes_equally_spaced_along_elevation():
    alpha = np.pi / 10
    state = straight_tether(TetherSettings(l0=50.0, segments=5, elevation=alpha))

    assert state.t == 0.0
    assert state.positions.shape == (6, 3)
    direction = np.array([np.sin(alpha), 0.0, np.cos(alpha)])
    for i in range(6):
        assert np.allclose(state.positions[i], 10.0 * i * direction)
    assert np.array_equal(state.positions[0], np.zeros(3))


def test_initially_at_rest():
    state = straight_tether(TetherSettings())
    assert np.array_equal(state.velocities, np.zeros((6, 3)))


def test_segment_vectors_consistent():
    alpha = 0.3
    state = straight_tether(TetherSettings(l0=12.0, segments=4, elevation=alpha))

    assert state.segment_vectors.shape == (4, 3)
    assert np.allclose(state.segment_lengths, 3.0)
    # Unit vectors point from node i back toward node i-1, i.e. toward the anchor
    expected = -np.array([np.sin(alpha), 0.0, np.cos(alpha)])
    assert np.allclose(state.unit_vectors, expected)


def test_single_segment():
    state = straight_tether(TetherSettings(l0=10.0, segments=1, elevation=np.pi))
    assert state.segments == 1
    assert np.allclose(state.positions[1], [0.0, 0.0, -10.0])


def test_state_shape_validation():
    with pytest.raises(ValueError, match="shape"):
        TetherState(0.0, np.zeros((1, 3)), np.zeros((1, 3)))
    with pytest.raises(ValueError, match="does not match"):
        TetherState(0.0, np.zeros((3, 3)), np.zeros((2, 3)))


def test_copy_is_independent():
    state = straight_tether(TetherSettings(segments=2))
    clone = state.copy()
    clone.positions[1] += 1.0
    assert not np.allclose(clone.positions, state.positions)
