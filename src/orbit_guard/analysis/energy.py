"""Energy drift diagnostics."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from ..core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from ..core.model import Body
from ..core.physics import clamp, total_energy


class AccuracyStatus(str, Enum):
    STABLE = "stable"
    UNSTABLE = "unstable"
    CRITICAL = "critical"


def drift_percent(energy: float, initial: float) -> float:
    """Relative energy change in percent; zero when the reference is zero."""

    if initial == 0.0:
        return 0.0
    return abs((energy - initial) / initial) * 100.0


def accuracy_score(drift: float) -> float:
    return clamp(100.0 - drift * 10.0, 0.0, 100.0)


def accuracy_status(score: float, cfg: AnalysisCfg = ANALYSIS_CFG) -> AccuracyStatus:
    if score < cfg.unstable_accuracy:
        return AccuracyStatus.CRITICAL
    if score < cfg.stable_accuracy:
        return AccuracyStatus.UNSTABLE
    return AccuracyStatus.STABLE


@dataclass
class EnergyMonitor:
    """Tracks total energy samples taken on the live simulation."""

    capacity: int = ANALYSIS_CFG.energy_history
    initial: Optional[float] = None
    history: deque = field(init=False)

    def __post_init__(self) -> None:
        self.history = deque(maxlen=self.capacity)

    def sample(self, bodies: Sequence[Body], cfg: PhysicsCfg = PHYSICS_CFG) -> float:
        energy = total_energy(bodies, cfg)
        if self.initial is None:
            self.initial = energy
        self.history.append(energy)
        return energy

    @property
    def current(self) -> Optional[float]:
        return self.history[-1] if self.history else None

    @property
    def drift(self) -> float:
        if self.initial is None or not self.history:
            return 0.0
        return drift_percent(self.history[-1], self.initial)

    @property
    def accuracy(self) -> float:
        return accuracy_score(self.drift)

    def status(self, cfg: AnalysisCfg = ANALYSIS_CFG) -> AccuracyStatus:
        return accuracy_status(self.accuracy, cfg)

    def reset(self) -> None:
        self.initial = None
        self.history.clear()


__all__ = [
    "AccuracyStatus",
    "EnergyMonitor",
    "accuracy_score",
    "accuracy_status",
    "drift_percent",
    "total_energy",
]
