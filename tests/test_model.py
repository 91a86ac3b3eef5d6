"""Tests for bodies, snapshots and the live registry."""

import numpy as np
import pytest

from orbit_guard.core.config import PHYSICS_CFG
from orbit_guard.core.model import Body, BodyRegistry, Snapshot, first_fixed
from orbit_guard.core.physics import rk4_step


class TestBody:
    def test_rejects_non_positive_mass(self):
        with pytest.raises(ValueError):
            Body(id="X", position=(0, 0), velocity=(0, 0), mass=0.0, radius=1.0)

    def test_rejects_non_positive_radius(self):
        with pytest.raises(ValueError):
            Body(id="X", position=(0, 0), velocity=(0, 0), mass=1.0, radius=-2.0)

    def test_vectors_are_float_arrays(self):
        body = Body(id="X", position=(1, 2), velocity=[3, 4], mass=1, radius=1)
        assert body.position.dtype == float
        assert body.position.shape == (2,)
        assert body.speed == pytest.approx(5.0)

    def test_trail_drops_oldest_points(self, make_satellite):
        sat = make_satellite()
        for i in range(PHYSICS_CFG.trail_length + 50):
            sat.position = np.array([float(i), 0.0])
            sat.add_trail_point()
        assert len(sat.trail) == PHYSICS_CFG.trail_length
        assert sat.trail[0] == (50.0, 0.0)

    def test_clone_is_deep_and_resets_trail(self, make_satellite):
        sat = make_satellite()
        sat.add_trail_point()
        copy = sat.clone()
        copy.position[0] += 10.0
        copy.velocity[1] = -1.0
        assert sat.position[0] == 200.0
        assert sat.velocity[1] == 5.0
        assert len(copy.trail) == 0
        assert copy.trail.maxlen == sat.trail.maxlen


class TestSnapshot:
    def test_advancing_a_clone_leaves_original_untouched(self, lone_orbit, make_satellite):
        original = Snapshot(bodies=lone_orbit + [make_satellite("SAT-2", (0.0, 250.0), (-4.5, 0.0))], time=3.0)
        reference = [body.clone() for body in original.bodies]

        ghost = original.clone()
        for _ in range(25):
            rk4_step(ghost.bodies, 0.4)
        del ghost

        assert original.time == 3.0
        assert len(original) == len(reference)
        for body, expected in zip(original, reference):
            assert body.same_state(expected)

    def test_find(self, lone_orbit):
        snap = Snapshot(bodies=lone_orbit)
        assert snap.find("SAT-1") is lone_orbit[1]
        assert snap.find("missing") is None
        assert first_fixed(snap.bodies) is lone_orbit[0]


class TestBodyRegistry:
    def test_duplicate_ids_rejected(self, make_satellite):
        registry = BodyRegistry([make_satellite("SAT-1")])
        with pytest.raises(ValueError):
            registry.add(make_satellite("SAT-1"))

    def test_next_id_skips_existing(self, make_satellite):
        registry = BodyRegistry([make_satellite("SAT-1"), make_satellite("SAT-2")])
        assert registry.next_id() == "SAT-3"
        assert registry.next_id() == "SAT-4"

    def test_remove_last_keeps_fixed_body(self, earth, make_satellite):
        registry = BodyRegistry([earth, make_satellite("SAT-1"), make_satellite("SAT-2")])
        assert registry.remove_last().id == "SAT-2"
        assert registry.remove_last().id == "SAT-1"
        assert registry.remove_last() is None
        assert [body.id for body in registry] == [earth.id]

    def test_snapshot_is_detached(self, earth, make_satellite):
        registry = BodyRegistry([earth, make_satellite("SAT-1")])
        snap = registry.snapshot(time=1.5)
        snap.bodies[1].position[0] = -1.0
        assert registry.get("SAT-1").position[0] == 200.0
        assert snap.time == 1.5

    def test_fixed_and_satellite_views(self, earth, make_satellite):
        registry = BodyRegistry([earth, make_satellite("SAT-1")])
        assert registry.fixed_bodies() == [earth]
        assert [body.id for body in registry.satellites()] == ["SAT-1"]
        assert "SAT-1" in registry
        assert registry.remove("SAT-1") is not None
        assert registry.remove("SAT-1") is None
