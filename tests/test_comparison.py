"""Tests for the integrator comparison harness."""

from orbit_guard.analysis.comparison import run_comparison
from orbit_guard.core.model import clone_bodies
from orbit_guard.core.physics import Integrator


def test_samples_every_fifth_step(binary_bodies):
    series = run_comparison(binary_bodies)
    assert len(series) == 60
    assert series.steps[0] == 0
    assert series.steps[-1] == 295
    assert len(series.euler) == len(series.rk4) == len(series.verlet) == 60


def test_symplectic_verlet_beats_euler(binary_bodies):
    series = run_comparison(binary_bodies)
    assert max(series.euler) > max(series.verlet)
    assert series.final(Integrator.VERLET) < 5.0
    assert all(value >= 0.0 for value in series.rk4)


def test_needs_two_bodies(make_satellite):
    series = run_comparison([make_satellite()])
    assert len(series) == 0
    assert series.final(Integrator.EULER) is None


def test_custom_horizon_and_rows(binary_bodies):
    series = run_comparison(binary_bodies, steps=20, sample_every=10)
    assert series.steps == [0, 10]
    rows = series.as_rows()
    assert [row["step"] for row in rows] == [0, 10]
    assert set(rows[0]) == {"step", "euler", "rk4", "verlet"}


def test_leaves_input_untouched(binary_bodies):
    before = clone_bodies(binary_bodies)
    run_comparison(binary_bodies, steps=10)
    assert all(a.same_state(b) for a, b in zip(binary_bodies, before))
