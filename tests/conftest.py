"""Shared fixtures for the orbit_guard test suite."""

import math

import numpy as np
import pytest

from orbit_guard.core.config import PHYSICS_CFG
from orbit_guard.core.model import Body
from orbit_guard.data.scenarios import make_central_body, make_orbiting_satellite


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def earth():
    return make_central_body()


@pytest.fixture
def make_satellite():
    def factory(body_id="SAT-1", position=(200.0, 0.0), velocity=(0.0, 5.0), mass=None, radius=None):
        return Body(
            id=body_id,
            position=np.array(position, dtype=float),
            velocity=np.array(velocity, dtype=float),
            mass=PHYSICS_CFG.satellite_mass if mass is None else mass,
            radius=PHYSICS_CFG.satellite_radius if radius is None else radius,
        )

    return factory


@pytest.fixture
def lone_orbit(earth):
    """Central body plus one satellite on a circular orbit at r = 200."""

    return [earth, make_orbiting_satellite("SAT-1", earth, 200.0, 0.0)]


@pytest.fixture
def binary_bodies():
    """Two equal masses on an eccentric mutual orbit, released at apoapsis."""

    mass = 1000.0
    separation = 100.0
    v_circ = math.sqrt(PHYSICS_CFG.gravitational_constant * mass / (2.0 * separation))
    v = 0.8 * v_circ
    return [
        Body(id="A", position=(-separation / 2, 0.0), velocity=(0.0, -v), mass=mass, radius=5.0),
        Body(id="B", position=(separation / 2, 0.0), velocity=(0.0, v), mass=mass, radius=5.0),
    ]
