"""Tests for collision-risk prediction."""

import math

import pytest

from orbit_guard.analysis.risk import RiskLevel, predict_risk, risk_level, risk_score
from orbit_guard.core.config import ANALYSIS_CFG
from orbit_guard.core.model import BodyRegistry, clone_bodies
from orbit_guard.data.scenarios import SCENARIOS, make_orbiting_satellite


def test_head_on_pair_is_certain_collision():
    registry = SCENARIOS["collision_course"].populate(BodyRegistry())
    report = predict_risk(registry.bodies)

    assert report.score == 100.0
    assert report.collision_predicted
    assert report.min_ratio <= ANALYSIS_CFG.collision_ratio
    assert report.steps < ANALYSIS_CFG.prediction_steps
    assert report.first_collider == "SAT-1"
    assert report.pairs[0].body_ids == ("SAT-1", "SAT-2")
    assert report.pairs[0].label == "SAT-1 - SAT-2"


def test_single_satellite_has_no_risk(lone_orbit):
    report = predict_risk(lone_orbit)
    assert report.score == 0.0
    assert report.pairs == []
    assert report.first_collider is None
    assert math.isinf(report.min_ratio)


def test_far_apart_pair_runs_full_horizon(earth):
    bodies = [
        earth,
        make_orbiting_satellite("SAT-1", earth, 200.0, 0.0),
        make_orbiting_satellite("SAT-2", earth, 200.0, math.pi),
    ]
    report = predict_risk(bodies)
    assert report.score == 0.0
    assert report.steps == ANALYSIS_CFG.prediction_steps
    assert report.pairs == []


def test_reported_pairs_are_capped(earth):
    bodies = [earth] + [
        make_orbiting_satellite(f"SAT-{i + 1}", earth, 200.0, 0.1 * i) for i in range(4)
    ]
    report = predict_risk(bodies)
    assert len(report.pairs) == ANALYSIS_CFG.max_reported_pairs
    assert report.first_collider == "SAT-1"
    assert report.score > 0.0
    assert len({pair.body_ids for pair in report.pairs}) == len(report.pairs)


def test_input_not_mutated():
    registry = SCENARIOS["collision_course"].populate(BodyRegistry())
    before = clone_bodies(registry.bodies)
    predict_risk(registry.bodies, use_drag=True)
    assert all(a.same_state(b) for a, b in zip(registry.bodies, before))


@pytest.mark.parametrize(
    "ratio, expected",
    [(0.5, 100.0), (1.0, 100.0), (4.5, 50.0), (8.0, 0.0), (20.0, 0.0), (math.inf, 0.0)],
)
def test_risk_score_mapping(ratio, expected):
    assert risk_score(ratio) == pytest.approx(expected)


def test_risk_levels():
    assert risk_level(1.0) is RiskLevel.CRITICAL
    assert risk_level(1.2) is RiskLevel.CRITICAL
    assert risk_level(2.0) is RiskLevel.HIGH
    assert risk_level(3.0) is RiskLevel.MEDIUM
