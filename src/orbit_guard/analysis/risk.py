"""Collision-risk prediction by forward projection of a cloned snapshot."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from ..core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from ..core.model import Body, clone_bodies
from ..core.physics import verlet_step


class RiskLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class RiskPair:
    body_ids: tuple[str, str]
    distance: float
    ratio: float
    level: RiskLevel
    step: int

    @property
    def label(self) -> str:
        return f"{self.body_ids[0]} - {self.body_ids[1]}"


@dataclass
class RiskReport:
    score: float = 0.0
    pairs: list[RiskPair] = field(default_factory=list)
    min_ratio: float = math.inf
    first_collider: Optional[str] = None
    steps: int = 0

    @property
    def collision_predicted(self) -> bool:
        return self.score >= 100.0


def risk_level(ratio: float, cfg: AnalysisCfg = ANALYSIS_CFG) -> RiskLevel:
    if ratio <= cfg.critical_ratio:
        return RiskLevel.CRITICAL
    if ratio <= cfg.high_ratio:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


def risk_score(min_ratio: float, cfg: AnalysisCfg = ANALYSIS_CFG) -> float:
    """Map the closest projected approach onto a 0-100 score."""

    if min_ratio <= cfg.collision_ratio:
        return 100.0
    if min_ratio > cfg.safe_ratio:
        return 0.0
    span = cfg.safe_ratio - cfg.collision_ratio
    return 100.0 * (cfg.safe_ratio - min_ratio) / span


def predict_risk(
    bodies: Sequence[Body],
    dt: float = PHYSICS_CFG.dt,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
    analysis: AnalysisCfg = ANALYSIS_CFG,
) -> RiskReport:
    """Project the bodies forward with Verlet and report the closest approaches.

    Works on a private clone; *bodies* is never modified.
    """

    ghosts = clone_bodies(bodies)
    report = RiskReport()
    movers = [index for index, body in enumerate(ghosts) if not body.fixed]
    if len(movers) < 2:
        return report

    first, second = np.triu_indices(len(movers), k=1)
    i_idx = np.asarray(movers)[first]
    j_idx = np.asarray(movers)[second]
    radii = np.array([body.radius for body in ghosts])
    limits = radii[i_idx] + radii[j_idx]
    seen: set[tuple[int, int]] = set()
    step_dt = dt * analysis.projection_dt_factor

    for step in range(analysis.prediction_steps):
        verlet_step(ghosts, step_dt, use_drag, cfg)
        report.steps = step + 1

        positions = np.array([body.position for body in ghosts])
        delta = positions[j_idx] - positions[i_idx]
        distances = np.hypot(delta[:, 0], delta[:, 1])
        ratios = distances / limits
        report.min_ratio = min(report.min_ratio, float(ratios.min()))

        for k in np.flatnonzero(ratios < analysis.watch_ratio):
            ratio = float(ratios[k])
            if report.first_collider is None and ratio <= analysis.collider_ratio:
                report.first_collider = ghosts[i_idx[k]].id
            key = (int(i_idx[k]), int(j_idx[k]))
            if key in seen:
                continue
            seen.add(key)
            report.pairs.append(
                RiskPair(
                    body_ids=(ghosts[key[0]].id, ghosts[key[1]].id),
                    distance=float(distances[k]),
                    ratio=ratio,
                    level=risk_level(ratio, analysis),
                    step=step,
                )
            )

        if report.min_ratio <= analysis.collision_ratio:
            break

    report.score = risk_score(report.min_ratio, analysis)
    report.pairs = report.pairs[: analysis.max_reported_pairs]
    return report


__all__ = ["RiskLevel", "RiskPair", "RiskReport", "predict_risk", "risk_level", "risk_score"]
