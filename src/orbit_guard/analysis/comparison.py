"""Side-by-side energy drift of the three integrators."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from ..core.model import Body, clone_bodies
from ..core.physics import Integrator, STEPPERS, total_energy
from .energy import drift_percent


@dataclass
class DriftSeries:
    steps: list[int] = field(default_factory=list)
    euler: list[float] = field(default_factory=list)
    rk4: list[float] = field(default_factory=list)
    verlet: list[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def series(self, kind: Integrator) -> list[float]:
        return {
            Integrator.EULER: self.euler,
            Integrator.RK4: self.rk4,
            Integrator.VERLET: self.verlet,
        }[kind]

    def final(self, kind: Integrator) -> Optional[float]:
        values = self.series(kind)
        return values[-1] if values else None

    def as_rows(self) -> list[dict]:
        return [
            {"step": s, "euler": e, "rk4": r, "verlet": v}
            for s, e, r, v in zip(self.steps, self.euler, self.rk4, self.verlet)
        ]


def run_comparison(
    bodies: Sequence[Body],
    dt: float = PHYSICS_CFG.dt,
    cfg: PhysicsCfg = PHYSICS_CFG,
    analysis: AnalysisCfg = ANALYSIS_CFG,
    steps: Optional[int] = None,
    sample_every: Optional[int] = None,
) -> DriftSeries:
    """Run Euler, RK4 and Verlet on clones and sample their energy drift."""

    steps = analysis.comparison_steps if steps is None else steps
    sample_every = analysis.comparison_sample_every if sample_every is None else sample_every
    result = DriftSeries()
    if len(bodies) < 2:
        return result

    e0 = total_energy(bodies, cfg)
    runs = {kind: clone_bodies(bodies) for kind in (Integrator.EULER, Integrator.RK4, Integrator.VERLET)}

    for i in range(steps):
        drifts = {}
        for kind, ghosts in runs.items():
            STEPPERS[kind](ghosts, dt, False, cfg)
            drifts[kind] = drift_percent(total_energy(ghosts, cfg), e0)
        if i % sample_every == 0:
            result.steps.append(i)
            result.euler.append(drifts[Integrator.EULER])
            result.rk4.append(drifts[Integrator.RK4])
            result.verlet.append(drifts[Integrator.VERLET])
    return result


__all__ = ["DriftSeries", "run_comparison"]
