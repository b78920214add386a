"""
Verification Test Suite for tetherlab.

These tests compare simulation results against closed-form solutions and
physical invariants to validate the force law and the integrator.

Test Categories:
- Oscillation: single spring-mass period and amplitude
- Energy: conservation without damping, dissipation with damping
- Scenarios: falling chain, reel-out, reproducibility
"""

import pytest

from tetherlab.config import SolverSettings


@pytest.fixture
def accurate_solver():
    """Tight-tolerance Radau settings for analytical comparisons."""
    def make(duration: float, dt: float) -> SolverSettings:
        return SolverSettings(duration=duration, dt=dt, method="Radau", rtol=1e-10, atol=1e-10)
    return make
