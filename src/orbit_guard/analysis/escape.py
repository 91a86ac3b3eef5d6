"""Automatic escape-trajectory planning.

A grid of small speed and heading changes is scored by forward-simulating
each candidate on a cloned snapshot. Candidates that pass too close to any
other body are disqualified; the rest trade clearance against how far the
orbit strays from its current radius.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from ..core.config import ANALYSIS_CFG, PHYSICS_CFG, AnalysisCfg, PhysicsCfg
from ..core.model import Body, clone_bodies, find_body, first_fixed
from ..core.physics import escape_speed, rk4_step


@dataclass(frozen=True)
class ManeuverCandidate:
    velocity: tuple[float, float]
    speed_factor: float
    heading_offset: float


@dataclass(frozen=True)
class EscapeManeuver:
    body_id: str
    velocity: tuple[float, float]
    original_velocity: tuple[float, float]
    score: float
    min_distance: float
    max_deviation: float
    speed_factor: float
    heading_offset: float
    evaluated: int

    @property
    def delta_v(self) -> float:
        return math.hypot(
            self.velocity[0] - self.original_velocity[0],
            self.velocity[1] - self.original_velocity[1],
        )


@dataclass(frozen=True)
class NoSafeManeuver:
    body_id: str
    evaluated: int
    reason: str = "every candidate collides or leaves the bound regime"


PlanResult = Union[EscapeManeuver, NoSafeManeuver]


def candidate_grid(
    velocity: Sequence[float],
    v_escape: float,
    analysis: AnalysisCfg = ANALYSIS_CFG,
) -> list[ManeuverCandidate]:
    speed = math.hypot(velocity[0], velocity[1])
    heading = math.atan2(velocity[1], velocity[0])
    limit = v_escape * analysis.escape_bound_fraction
    candidates = []
    for factor in analysis.escape_speed_factors:
        new_speed = speed * factor
        if new_speed > limit:
            continue
        for offset in analysis.escape_heading_offsets:
            angle = heading + offset
            candidates.append(
                ManeuverCandidate(
                    velocity=(math.cos(angle) * new_speed, math.sin(angle) * new_speed),
                    speed_factor=factor,
                    heading_offset=offset,
                )
            )
    return candidates


def evaluate_candidate(
    bodies: Sequence[Body],
    body_id: str,
    candidate: ManeuverCandidate,
    dt: float,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
    analysis: AnalysisCfg = ANALYSIS_CFG,
) -> Optional[tuple[float, float, float]]:
    """Return ``(score, min_distance, max_deviation)`` or ``None`` on a close pass."""

    ghosts = clone_bodies(bodies)
    target = find_body(ghosts, body_id)
    center = first_fixed(ghosts)
    target.velocity = np.array(candidate.velocity, dtype=float)

    others = [body for body in ghosts if body is not target]
    clearance = np.array([target.radius + other.radius + analysis.escape_margin for other in others])
    r0 = target.distance_to(center)
    step_dt = dt * analysis.projection_dt_factor

    min_distance = math.inf
    max_deviation = 0.0
    for _ in range(analysis.escape_steps):
        rk4_step(ghosts, step_dt, use_drag, cfg)
        if others:
            positions = np.array([other.position for other in others])
            delta = positions - target.position
            distances = np.hypot(delta[:, 0], delta[:, 1])
            if np.any(distances < clearance):
                return None
            min_distance = min(min_distance, float(distances.min()))
        max_deviation = max(max_deviation, abs(target.distance_to(center) - r0))

    score = analysis.distance_weight * min_distance - analysis.deviation_weight * max_deviation
    return score, min_distance, max_deviation


def plan_escape(
    bodies: Sequence[Body],
    body_id: str,
    dt: float = PHYSICS_CFG.dt,
    use_drag: bool = False,
    cfg: PhysicsCfg = PHYSICS_CFG,
    analysis: AnalysisCfg = ANALYSIS_CFG,
) -> Optional[PlanResult]:
    """Pick the safest velocity change for *body_id*.

    Returns ``None`` when the body is unknown, fixed, or there is no fixed
    body to orbit; :class:`NoSafeManeuver` when every candidate fails.
    """

    body = find_body(bodies, body_id)
    center = first_fixed(bodies)
    if body is None or center is None or body.fixed:
        return None
    r = body.distance_to(center)
    if r == 0.0:
        return None

    v_escape = escape_speed(cfg.gravitational_constant * center.mass, r)
    candidates = candidate_grid(body.velocity, v_escape, analysis)

    best: Optional[EscapeManeuver] = None
    original = (float(body.velocity[0]), float(body.velocity[1]))
    for candidate in candidates:
        outcome = evaluate_candidate(bodies, body_id, candidate, dt, use_drag, cfg, analysis)
        if outcome is None:
            continue
        score, min_distance, max_deviation = outcome
        if best is None or score > best.score:
            best = EscapeManeuver(
                body_id=body_id,
                velocity=candidate.velocity,
                original_velocity=original,
                score=score,
                min_distance=min_distance,
                max_deviation=max_deviation,
                speed_factor=candidate.speed_factor,
                heading_offset=candidate.heading_offset,
                evaluated=len(candidates),
            )

    if best is None:
        return NoSafeManeuver(body_id=body_id, evaluated=len(candidates))
    return best


__all__ = [
    "EscapeManeuver",
    "ManeuverCandidate",
    "NoSafeManeuver",
    "PlanResult",
    "candidate_grid",
    "evaluate_candidate",
    "plan_escape",
]
