"""Tests for energy drift, accuracy score and the energy monitor."""

import numpy as np
import pytest

from orbit_guard.analysis.energy import (
    AccuracyStatus,
    EnergyMonitor,
    accuracy_score,
    accuracy_status,
    drift_percent,
)
from orbit_guard.core.physics import total_energy


def test_drift_percent():
    assert drift_percent(110.0, 100.0) == pytest.approx(10.0)
    assert drift_percent(-90.0, -100.0) == pytest.approx(10.0)
    assert drift_percent(5.0, 0.0) == 0.0


@pytest.mark.parametrize("drift, score", [(0.0, 100.0), (2.0, 80.0), (10.0, 0.0), (25.0, 0.0)])
def test_accuracy_score(drift, score):
    assert accuracy_score(drift) == pytest.approx(score)


def test_accuracy_status_bands():
    assert accuracy_status(100.0) is AccuracyStatus.STABLE
    assert accuracy_status(85.0) is AccuracyStatus.STABLE
    assert accuracy_status(84.9) is AccuracyStatus.UNSTABLE
    assert accuracy_status(50.0) is AccuracyStatus.UNSTABLE
    assert accuracy_status(49.9) is AccuracyStatus.CRITICAL


class TestEnergyMonitor:
    def test_first_sample_is_reference(self, lone_orbit):
        monitor = EnergyMonitor()
        assert monitor.current is None
        assert monitor.drift == 0.0
        energy = monitor.sample(lone_orbit)
        assert monitor.initial == energy == pytest.approx(total_energy(lone_orbit))
        assert monitor.accuracy == 100.0
        assert monitor.status() is AccuracyStatus.STABLE

    def test_drift_after_perturbation(self, lone_orbit):
        monitor = EnergyMonitor()
        monitor.sample(lone_orbit)
        lone_orbit[1].velocity = np.array([0.0, 6.0])
        monitor.sample(lone_orbit)
        assert monitor.drift > 0.0
        assert monitor.accuracy < 100.0

    def test_history_is_bounded_and_resettable(self, lone_orbit):
        monitor = EnergyMonitor(capacity=3)
        for _ in range(5):
            monitor.sample(lone_orbit)
        assert len(monitor.history) == 3
        monitor.reset()
        assert monitor.initial is None
        assert len(monitor.history) == 0
