"""
Tests for the immutable configuration values.
"""
import dataclasses
import math

import numpy as np
import pytest

from tetherlab.config import SolverSettings, TetherSettings
from tetherlab.exceptions import ConfigurationError


def test_defaults_are_valid():
    tether = TetherSettings()
    solver = SolverSettings()
    assert tether.segments == 5
    assert tether.l0 == 50.0
    assert np.allclose(tether.g, [0.0, 0.0, -9.81])
    assert solver.method == "Radau"
    assert solver.is_stiff


def test_linear_density():
    tether = TetherSettings(d_tether=0.004, rho_tether=724.0)
    assert math.isclose(tether.linear_density, math.pi * 0.002**2 * 724.0)


@pytest.mark.parametrize("field, value", [
    ("segments", 0),
    ("segments", 2.5),
    ("l0", 0.0),
    ("l0", -1.0),
    ("d_tether", 0.0),
    ("c_spring", -1.0),
    ("damping", -0.1),
    ("tension_law", "quadratic"),
    ("gravity", (0.0, -9.81)),
])
def test_invalid_tether_parameters(field, value):
    with pytest.raises(ConfigurationError) as err:
        TetherSettings(**{field: value})
    assert err.value.parameter == field


@pytest.mark.parametrize("field, value", [
    ("duration", 0.0),
    ("duration", -10.0),
    ("dt", 0.0),
    ("rtol", 0.0),
    ("method", "Euler"),
    ("max_steps", 0),
])
def test_invalid_solver_parameters(field, value):
    with pytest.raises(ConfigurationError) as err:
        SolverSettings(**{field: value})
    assert err.value.parameter == field


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError, match="segments"):
        TetherSettings(segments=0)


def test_settings_are_frozen():
    tether = TetherSettings()
    with pytest.raises(dataclasses.FrozenInstanceError):
        tether.l0 = 10.0


def test_with_revalidates():
    tether = TetherSettings()
    assert tether.with_(v_ro=2.0).v_ro == 2.0
    with pytest.raises(ConfigurationError):
        tether.with_(l0=-5.0)


def test_sample_times_uniform():
    solver = SolverSettings(duration=10.0, dt=0.02)
    ts = solver.sample_times
    assert len(ts) == 501
    assert ts[0] == 0.0
    assert np.isclose(ts[-1], 10.0)
    assert np.allclose(np.diff(ts), 0.02)


def test_sample_grid_for_other_spans():
    solver = SolverSettings(duration=1.0, dt=0.3)
    assert np.allclose(solver.sample_times, [0.0, 0.3, 0.6, 0.9])
    assert np.allclose(solver.sample_grid(0.6), [0.0, 0.3, 0.6])
    assert len(solver.sample_grid(0.29)) == 1


def test_coarse_sample_interval_warns():
    with pytest.warns(RuntimeWarning, match="exceeds duration"):
        SolverSettings(duration=0.1, dt=0.5)


def test_reel_limit():
    assert TetherSettings(v_ro=1.0).reel_limit() is None
    assert TetherSettings(l0=50.0, v_ro=-5.0).reel_limit() == 10.0
